"""Shared test fixtures for orcapod."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from orcapod.core.local_store import LocalStore
from orcapod.models import (
    Annotation,
    InputFile,
    OutputStore,
    Pod,
    PodJob,
    RetryTimeWindow,
    StorePointer,
    StreamInfo,
)


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def store(tmp_dir: Path) -> LocalStore:
    """Provide a fresh LocalStore in a temp directory."""
    return LocalStore(tmp_dir / "store")


# ---------------------------------------------------------------------------
# Record factories shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_pod() -> Callable[..., Pod]:
    """Factory fixture: build the style-transfer Pod, unannotated by default."""

    def _factory(**overrides: Any) -> Pod:
        defaults: dict[str, Any] = {
            "source_commit_url": "https://github.com/zenml-io/zenml/tree/0.67.0",
            "image": "zenmldocker/zenml-server:0.67.0",
            "command": "tail -f /dev/null",
            "input_stream_map": {
                "painting": StreamInfo(
                    path="/input/painting.png", match_pattern="/input/painting.png"
                ),
                "image": StreamInfo(
                    path="/input/image.png", match_pattern="/input/image.png"
                ),
            },
            "output_dir": "/output",
            "output_stream_map": {
                "styled": StreamInfo(path="./styled.png", match_pattern="./styled.png"),
            },
            "recommended_cpus": 0.25,
            "recommended_memory": 2 * (1 << 30),
            "required_gpu": None,
        }
        defaults.update(overrides)
        return Pod(**defaults)

    return _factory


@pytest.fixture
def pod(make_pod: Callable[..., Pod]) -> Pod:
    """The style-transfer Pod without an annotation."""
    return make_pod()


@pytest.fixture
def style_annotation() -> Annotation:
    return Annotation(
        name="style-transfer",
        version="0.67.0",
        description="This is an example pod.",
    )


@pytest.fixture
def annotated_pod(make_pod: Callable[..., Pod], style_annotation: Annotation) -> Pod:
    return make_pod(annotation=style_annotation)


@pytest.fixture
def make_pod_job(pod: Pod) -> Callable[..., PodJob]:
    """Factory fixture: build a PodJob around the unannotated style-transfer Pod."""

    def _factory(**overrides: Any) -> PodJob:
        defaults: dict[str, Any] = {
            "pod": pod,
            "input_store_mapping": {
                "painting": InputFile(path="style.png", content_check_sum=""),
                "image": InputFile(path="image.png", content_check_sum=""),
            },
            "output_store_mapping": OutputStore(path="stylized_image"),
            "cpu_limit": 2.0,
            "mem_limit": 4 * (1 << 30),
            "retry_policy": RetryTimeWindow(max_retries=3, window_seconds=600),
            "annotation": Annotation(name="style-run", version="1.0.0"),
        }
        defaults.update(overrides)
        return PodJob(**defaults)

    return _factory


@pytest.fixture
def pod_job(make_pod_job: Callable[..., PodJob]) -> PodJob:
    return make_pod_job()


@pytest.fixture
def store_pointer(store: LocalStore) -> StorePointer:
    return StorePointer(
        uri=store.uri,
        annotation=Annotation(name="local", version="0.1.0"),
    )
