"""Pod: a reusable, containerized computational unit."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from orcapod.models.base import Record


class StreamInfo(BaseModel):
    """A named stream: where its file(s) live and how to match them."""

    model_config = ConfigDict(frozen=True)

    path: str
    match_pattern: str  # glob or regex


class GPUVendor(str, Enum):
    NVIDIA = "nvidia"
    AMD = "amd"


class GPUModel(BaseModel):
    """GPU model specification, e.g. ``nvidia`` / ``A100``."""

    model_config = ConfigDict(frozen=True)

    vendor: GPUVendor
    name: str


class GPURequirement(BaseModel):
    """GPU requirements for running a pod."""

    model_config = ConfigDict(frozen=True)

    model: GPUModel
    recommended_memory: int = Field(ge=0)  # bytes
    count: int = Field(default=1, ge=1)


class Pod(Record):
    """Container image, command and stream layout of a computation.

    Everything except ``hash`` and ``annotation`` affects reproducibility
    and therefore the hash.
    """

    source_commit_url: str = ""
    image: str
    command: str
    input_stream_map: dict[str, StreamInfo] = {}
    output_dir: str = "/output"
    output_stream_map: dict[str, StreamInfo] = {}
    recommended_cpus: float = Field(gt=0)
    recommended_memory: int = Field(ge=0)  # bytes
    required_gpu: GPURequirement | None = None
