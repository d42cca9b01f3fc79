"""orcapod: content-addressed store for reproducible pod and pod job specs.

Records (Pod, PodJob, StorePointer) are persisted as canonical YAML keyed
by the SHA-256 of their payload, with any number of (name, version)
annotations aliasing each hash. Job inputs live in a write-once file
store and are fingerprinted with a BLAKE3 Merkle checksum.
"""

__version__ = "0.1.0"
__description__ = (
    "Content-addressed metadata store for reproducible pod definitions and pod jobs"
)

from orcapod.core.local_store import LocalStore, store_from_uri
from orcapod.models import (
    Annotation,
    AnnotationID,
    HashID,
    ModelInfo,
    Pod,
    PodJob,
    StorePointer,
)

__all__ = [
    "LocalStore",
    "store_from_uri",
    "Annotation",
    "AnnotationID",
    "HashID",
    "ModelInfo",
    "Pod",
    "PodJob",
    "StorePointer",
    "__version__",
]
