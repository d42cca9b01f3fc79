"""Content-addressed record store on a local filesystem directory.

Storage layout::

    {directory}/{type_tag}/{hash}/spec.yaml
    {directory}/{type_tag}/{hash}/annotation/{name}-{version}.yaml
    {directory}/file_store/{path}

The hash directory is the record's identity. Any number of annotation
markers may alias the same hash. Saving is idempotent for the spec and
strict for annotations; deleting a record removes its whole hash
directory, every alias included, but never the records it references.

No locking: concurrent writers to the same hash directory race at the
filesystem level.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TypeVar

from orcapod.config import OrcapodSettings, settings
from orcapod.core import codec
from orcapod.core.annotation_index import (
    ANNOTATION_DIRNAME,
    AnnotationIndex,
    annotation_filename,
)
from orcapod.core.file_store import FileStore, read_file, write_file
from orcapod.errors import (
    DecodeError,
    DeletingLastAnnotationError,
    NotFoundError,
    StoreIOError,
    UnsupportedBackendError,
)
from orcapod.models.base import Annotation, AnnotationID, HashID, ModelID, ModelInfo, Record
from orcapod.models.pod import Pod
from orcapod.models.pod_job import PodJob
from orcapod.models.store_pointer import StorePointer

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

URI_SEPARATOR = "::"


class LocalStore(FileStore):
    """Save, load, list and delete records under a local directory.

    Parameters
    ----------
    directory:
        Root directory of the store. Created lazily on first write.
    """

    SPEC_FILENAME = "spec.yaml"

    def __init__(self, directory: Path | str) -> None:
        super().__init__(directory)
        self._index = AnnotationIndex(self._base)

    def __repr__(self) -> str:
        return f"LocalStore({str(self._base)!r})"

    @classmethod
    def from_config(cls, config: OrcapodSettings | None = None) -> LocalStore:
        """Open the store configured by ``ORCAPOD_STORE_DIRECTORY``."""
        return cls((config or settings).store_directory)

    @classmethod
    def from_uri(cls, uri: str) -> LocalStore:
        """Reconstruct a store from its ``LocalStore::<directory>`` URI."""
        backend, sep, directory = uri.partition(URI_SEPARATOR)
        if not sep or backend != cls.__name__ or not directory:
            raise UnsupportedBackendError(uri)
        return cls(directory)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @staticmethod
    def annotation_relpath(name: str, version: str) -> Path:
        """Marker location relative to a hash directory."""
        return Path(ANNOTATION_DIRNAME) / annotation_filename(name, version)

    def model_path(self, record_type: type[Record]) -> Path:
        return self._base / record_type.type_tag()

    def hash_path(self, record_type: type[Record], hash: str) -> Path:
        return self.model_path(record_type) / hash

    def spec_path(self, record_type: type[Record], hash: str) -> Path:
        return self.hash_path(record_type, hash) / self.SPEC_FILENAME

    def annotation_path(
        self, record_type: type[Record], hash: str, name: str, version: str
    ) -> Path:
        return self.hash_path(record_type, hash) / self.annotation_relpath(name, version)

    # ------------------------------------------------------------------
    # Generic record operations
    # ------------------------------------------------------------------

    def _resolve_hash(self, record_type: type[Record], model_id: ModelID) -> str:
        if isinstance(model_id, HashID):
            return model_id.hash
        return self._index.lookup(record_type.type_tag(), model_id.name, model_id.version)

    def save_model(self, record: Record) -> None:
        """Persist ``record`` and, if present, its annotation.

        The annotation marker is written first and must not exist yet.
        The spec file is written only if absent, so the same payload can
        be saved again under a new annotation. A PodJob saves its
        embedded Pod first when that Pod is not stored yet.

        Raises
        ------
        AlreadyExistsError
            If the record's exact name/version marker already exists.
        """
        record_type = type(record)

        if isinstance(record, PodJob) and not self.spec_path(Pod, record.pod.hash).exists():
            self.save_model(record.pod)

        if record.annotation is not None:
            marker = self.annotation_path(
                record_type, record.hash, record.annotation.name, record.annotation.version
            )
            write_file(
                marker,
                codec.encode_annotation(record.annotation).encode("utf-8"),
                fail_if_exists=True,
            )
            logger.debug("Wrote annotation marker `%s`.", marker)

        written = write_file(
            self.spec_path(record_type, record.hash),
            codec.encode(record).encode("utf-8"),
            fail_if_exists=False,
        )
        if written:
            logger.debug("Stored %s %s.", record_type.type_tag(), record.hash)

    def load_model(self, record_type: type[R], model_id: ModelID) -> R:
        """Load a record by hash or by annotation.

        Loading by annotation re-attaches that annotation; loading by
        hash leaves ``annotation`` unset.

        Raises
        ------
        NotFoundError
            If the annotation does not resolve or the spec file is missing.
        DecodeError
            If the stored documents do not decode.
        """
        hash = self._resolve_hash(record_type, model_id)

        annotation_text = None
        if isinstance(model_id, AnnotationID):
            annotation_text = self._read_text(
                self.annotation_path(record_type, hash, model_id.name, model_id.version)
            )
        spec_text = self._read_text(self.spec_path(record_type, hash))

        references = {}
        if record_type is PodJob:
            references["pod"] = self._load_referenced_pod(spec_text)

        return codec.decode(
            spec_text,
            hash,
            annotation_text,
            record_type=record_type,
            **references,
        )

    def _load_referenced_pod(self, spec_text: str) -> Pod:
        pod_hash = codec.parse_spec(spec_text).get("pod_hash")
        if not isinstance(pod_hash, str):
            raise DecodeError(f"PodJob spec has no valid pod_hash: {pod_hash!r}")
        return self.load_model(Pod, HashID(hash=pod_hash))

    def list_model(self, record_type: type[Record]) -> list[ModelInfo]:
        """One entry per annotation plus one per annotation-less hash."""
        return self._index.list(record_type.type_tag())

    def delete_model(self, record_type: type[Record], model_id: ModelID) -> None:
        """Remove the record's whole hash directory, every alias included.

        Referenced records (a PodJob's Pod) are left in place.
        """
        hash = self._resolve_hash(record_type, model_id)
        hash_dir = self.hash_path(record_type, hash)
        if not hash_dir.is_dir():
            raise NotFoundError(f"No {record_type.type_tag()} stored under hash {hash}.")
        try:
            shutil.rmtree(hash_dir)
        except OSError as exc:
            raise StoreIOError(f"Failed to delete `{hash_dir}`: {exc}") from exc
        logger.debug("Deleted %s %s.", record_type.type_tag(), hash)

    def delete_annotation(self, record_type: type[Record], name: str, version: str) -> None:
        """Remove one annotation marker, leaving the spec and other aliases.

        Raises
        ------
        DeletingLastAnnotationError
            If it is the only annotation left for its hash.
        """
        type_tag = record_type.type_tag()
        hash = self._index.lookup(type_tag, name, version)
        if len(self._index.annotations_for(type_tag, hash)) <= 1:
            raise DeletingLastAnnotationError(type_tag, name, version)

        marker = self.annotation_path(record_type, hash, name, version)
        try:
            marker.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(f"Annotation marker `{marker}` vanished.") from exc
        except OSError as exc:
            raise StoreIOError(f"Failed to delete `{marker}`: {exc}") from exc
        logger.debug("Deleted annotation `%s:%s` of %s %s.", name, version, type_tag, hash)

    def load_annotation(self, record_type: type[Record], name: str, version: str) -> Annotation:
        """Read a single annotation marker without loading the spec."""
        hash = self._index.lookup(record_type.type_tag(), name, version)
        return codec.decode_annotation(
            self._read_text(self.annotation_path(record_type, hash, name, version))
        )

    @staticmethod
    def _read_text(path: Path) -> str:
        return read_file(path).decode("utf-8")

    # ------------------------------------------------------------------
    # Pod
    # ------------------------------------------------------------------

    def save_pod(self, pod: Pod) -> None:
        self.save_model(pod)

    def load_pod(self, model_id: ModelID) -> Pod:
        return self.load_model(Pod, model_id)

    def list_pod(self) -> list[ModelInfo]:
        return self.list_model(Pod)

    def delete_pod(self, model_id: ModelID) -> None:
        self.delete_model(Pod, model_id)

    # ------------------------------------------------------------------
    # PodJob
    # ------------------------------------------------------------------

    def save_pod_job(self, pod_job: PodJob) -> None:
        self.save_model(pod_job)

    def load_pod_job(self, model_id: ModelID) -> PodJob:
        return self.load_model(PodJob, model_id)

    def list_pod_job(self) -> list[ModelInfo]:
        return self.list_model(PodJob)

    def delete_pod_job(self, model_id: ModelID) -> None:
        self.delete_model(PodJob, model_id)

    # ------------------------------------------------------------------
    # StorePointer
    # ------------------------------------------------------------------

    def save_store_pointer(self, store_pointer: StorePointer) -> None:
        self.save_model(store_pointer)

    def load_store_pointer(self, model_id: ModelID) -> StorePointer:
        return self.load_model(StorePointer, model_id)

    def list_store_pointer(self) -> list[ModelInfo]:
        return self.list_model(StorePointer)

    def delete_store_pointer(self, model_id: ModelID) -> None:
        self.delete_model(StorePointer, model_id)


# ---------------------------------------------------------------------------
# Backend registry: URI class name -> store class
# ---------------------------------------------------------------------------

STORE_BACKENDS: dict[str, type[LocalStore]] = {
    "LocalStore": LocalStore,
}


def store_from_uri(uri: str) -> LocalStore:
    """Reconstruct a store handle from ``<BackendClass>::<directory>``.

    Raises
    ------
    UnsupportedBackendError
        If the class name is not a known backend or the URI is malformed.
    """
    backend, _, _ = uri.partition(URI_SEPARATOR)
    if backend not in STORE_BACKENDS:
        raise UnsupportedBackendError(uri)
    return STORE_BACKENDS[backend].from_uri(uri)
