"""PodJob: one execution request of a Pod with concrete inputs and limits."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from orcapod.errors import InvalidPathError
from orcapod.models.base import Record
from orcapod.models.pod import Pod

if TYPE_CHECKING:
    from orcapod.core.file_store import FileStore


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------


class NoRetry(BaseModel):
    """Never retry a failed job."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["no_retry"] = "no_retry"


class RetryTimeWindow(BaseModel):
    """Retry up to ``max_retries`` times within ``window_seconds``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["retry_time_window"] = "retry_time_window"
    max_retries: int = Field(ge=0)
    window_seconds: int = Field(ge=0)


RetryPolicy = Annotated[NoRetry | RetryTimeWindow, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Input / output mappings
# ---------------------------------------------------------------------------


class _StoredInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    store_name: str | None = None
    content_check_sum: str = ""

    @classmethod
    def from_store(
        cls,
        store: FileStore,
        path: Path | str,
        *,
        store_name: str | None = None,
    ) -> _StoredInput:
        """Reference ``path`` in ``store``, freezing its current checksum.

        The checksum is captured once, at registration; it is not
        re-verified when the job is loaded later.
        """
        target = store.file_path(path)
        if target.exists() and target.is_dir() != cls._is_directory():
            kind = "directory" if target.is_dir() else "file"
            raise InvalidPathError(path, f"is a {kind}, cannot register it as {cls.__name__}")
        return cls(
            path=str(path),
            store_name=store_name if store_name is not None else store.uri,
            content_check_sum=store.checksum(path),
        )

    @classmethod
    def _is_directory(cls) -> bool:
        return False


class InputFile(_StoredInput):
    """A single file input."""

    kind: Literal["file"] = "file"


class InputFolder(_StoredInput):
    """A directory input, checksummed as a Merkle tree."""

    kind: Literal["folder"] = "folder"

    @classmethod
    def _is_directory(cls) -> bool:
        return True


InputData = Annotated[InputFile | InputFolder, Field(discriminator="kind")]


class OutputStore(BaseModel):
    """Where a job's outputs are written."""

    model_config = ConfigDict(frozen=True)

    path: str
    store_name: str | None = None


# ---------------------------------------------------------------------------
# PodJob
# ---------------------------------------------------------------------------


class PodJob(Record):
    """A Pod bound to inputs, an output location and resource limits.

    The embedded pod is stored by reference: the spec carries
    ``pod_hash`` and loading resolves it back into a ``Pod``.
    """

    pod: Pod
    input_store_mapping: dict[str, InputData] = {}
    output_store_mapping: OutputStore
    cpu_limit: float = Field(gt=0)
    mem_limit: int = Field(ge=0)  # bytes
    retry_policy: RetryPolicy = NoRetry()

    @model_validator(mode="before")
    @classmethod
    def _resolve_pod_hash(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "pod_hash" not in data:
            return data
        data = dict(data)
        pod_hash = data.pop("pod_hash")
        pod = data.get("pod")
        if pod is None:
            raise ValueError(f"pod_hash `{pod_hash}` was not resolved to a Pod.")
        resolved = pod.hash if isinstance(pod, Pod) else pod.get("hash")
        if resolved != pod_hash:
            raise ValueError(
                f"Resolved pod hash `{resolved}` does not match pod_hash `{pod_hash}`."
            )
        return data

    def storable(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"hash", "annotation", "pod"})
        data["pod_hash"] = self.pod.hash
        return data
