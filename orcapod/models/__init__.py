"""orcapod data models: all Pydantic v2, all frozen (immutable)."""

from orcapod.models.base import (
    Annotation,
    AnnotationID,
    HashID,
    ModelID,
    ModelInfo,
    Record,
)
from orcapod.models.pod import GPUModel, GPURequirement, GPUVendor, Pod, StreamInfo
from orcapod.models.pod_job import (
    InputData,
    InputFile,
    InputFolder,
    NoRetry,
    OutputStore,
    PodJob,
    RetryPolicy,
    RetryTimeWindow,
)
from orcapod.models.store_pointer import StorePointer

# Closed set of storable record types: type tag -> class
RECORD_TYPES: dict[str, type[Record]] = {
    record_type.type_tag(): record_type for record_type in (Pod, PodJob, StorePointer)
}

__all__ = [
    # base
    "Annotation",
    "AnnotationID",
    "HashID",
    "ModelID",
    "ModelInfo",
    "Record",
    "RECORD_TYPES",
    # pod
    "GPUModel",
    "GPURequirement",
    "GPUVendor",
    "Pod",
    "StreamInfo",
    # pod job
    "InputData",
    "InputFile",
    "InputFolder",
    "NoRetry",
    "OutputStore",
    "PodJob",
    "RetryPolicy",
    "RetryTimeWindow",
    # store pointer
    "StorePointer",
]
