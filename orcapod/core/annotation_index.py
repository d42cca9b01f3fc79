"""Annotation index derived from marker files on disk.

There is no persisted index: the tree of annotation markers *is* the
index, and every query rescans it. Lookups always reflect the current
disk state at O(objects of that type) per call.

Marker layout: {root}/{type_tag}/{hash}/annotation/{name}-{version}.yaml
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from orcapod.errors import AnnotationNotFoundError, StoreIOError
from orcapod.models.base import ModelInfo

logger = logging.getLogger(__name__)

ANNOTATION_DIRNAME = "annotation"
ANNOTATION_SUFFIX = ".yaml"

_HASH_RE = re.compile(r"^[0-9a-f]+$")
_MARKER_RE = re.compile(
    r"^(?P<name>[0-9a-zA-Z\-]+)-(?P<version>[0-9]+\.[0-9]+\.[0-9]+)\.yaml$"
)


def annotation_filename(name: str, version: str) -> str:
    return f"{name}-{version}{ANNOTATION_SUFFIX}"


class AnnotationIndex:
    """Resolves ``(type, name, version)`` to hashes by scanning markers.

    Parameters
    ----------
    root:
        Store root holding one directory per record type tag.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def _type_dir(self, type_tag: str) -> Path:
        return self._root / type_tag

    def _hash_dirs(self, type_tag: str) -> Iterator[Path]:
        type_dir = self._type_dir(type_tag)
        if not type_dir.is_dir():
            return
        for path in type_dir.iterdir():
            if path.is_dir() and _HASH_RE.match(path.name):
                yield path

    def _markers(self, hash_dir: Path) -> Iterator[ModelInfo]:
        for marker in (hash_dir / ANNOTATION_DIRNAME).glob(f"*{ANNOTATION_SUFFIX}"):
            match = _MARKER_RE.match(marker.name)
            if match is None:
                logger.debug("Ignoring unrecognised annotation file `%s`.", marker)
                continue
            yield ModelInfo(
                name=match["name"],
                version=match["version"],
                hash=hash_dir.name,
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def annotations(self, type_tag: str) -> list[ModelInfo]:
        """Every annotation of a type, sorted by name then version."""
        try:
            infos = [
                info
                for hash_dir in self._hash_dirs(type_tag)
                for info in self._markers(hash_dir)
            ]
        except OSError as exc:
            raise StoreIOError(f"Failed to scan `{self._type_dir(type_tag)}`: {exc}") from exc
        return sorted(infos, key=lambda info: (info.name, info.version, info.hash))

    def annotations_for(self, type_tag: str, hash: str) -> list[ModelInfo]:
        """Annotations pointing at a single hash."""
        hash_dir = self._type_dir(type_tag) / hash
        try:
            return sorted(self._markers(hash_dir), key=lambda info: (info.name, info.version))
        except OSError as exc:
            raise StoreIOError(f"Failed to scan `{hash_dir}`: {exc}") from exc

    def lookup(self, type_tag: str, name: str, version: str) -> str:
        """Resolve an annotation to its hash.

        Raises
        ------
        AnnotationNotFoundError
            If no marker matches.
        """
        for info in self.annotations(type_tag):
            if info.name == name and info.version == version:
                return info.hash
        raise AnnotationNotFoundError(type_tag, name, version)

    def list(self, type_tag: str) -> list[ModelInfo]:
        """One entry per annotation, then one per annotation-less hash.

        Annotation-less entries carry empty name/version and come last,
        sorted by hash.
        """
        annotated = self.annotations(type_tag)
        seen = {info.hash for info in annotated}
        try:
            bare = sorted(
                hash_dir.name
                for hash_dir in self._hash_dirs(type_tag)
                if hash_dir.name not in seen
            )
        except OSError as exc:
            raise StoreIOError(f"Failed to scan `{self._type_dir(type_tag)}`: {exc}") from exc
        return annotated + [ModelInfo(hash=hash) for hash in bare]
