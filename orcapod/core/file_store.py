"""Bulk file storage for job inputs and outputs.

Layout: {directory}/file_store/{path}

Files are write-once: saving over an existing path is an error.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from orcapod.core.hasher import checksum_path
from orcapod.errors import (
    AlreadyExistsError,
    InvalidPathError,
    NotFoundError,
    PathHasNoParentError,
    StoreIOError,
)

logger = logging.getLogger(__name__)


def write_file(path: Path, content: bytes, *, fail_if_exists: bool) -> bool:
    """Write ``content`` to ``path``, creating parent directories.

    Returns ``True`` if the file was written and ``False`` if an existing
    file was left untouched (only possible with ``fail_if_exists=False``).

    Raises
    ------
    AlreadyExistsError
        If the file exists and ``fail_if_exists`` is set.
    PathHasNoParentError
        If ``path`` is a filesystem root.
    StoreIOError
        On any other filesystem failure.
    """
    if path.parent == path:
        raise PathHasNoParentError(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if fail_if_exists:
            with path.open("xb") as fh:
                fh.write(content)
            return True
        if path.exists():
            logger.info("Skip saving `%s` since it is already stored.", path)
            return False
        path.write_bytes(content)
        return True
    except FileExistsError as exc:
        raise AlreadyExistsError(path) from exc
    except OSError as exc:
        raise StoreIOError(f"Failed to write `{path}`: {exc}") from exc


def read_file(path: Path) -> bytes:
    """Read ``path``; a missing file is ``NotFoundError``."""
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError(f"File `{path}` not found.") from exc
    except OSError as exc:
        raise StoreIOError(f"Failed to read `{path}`: {exc}") from exc


class FileStore:
    """Write-once file storage rooted under ``{directory}/file_store``.

    Parameters
    ----------
    directory:
        Root directory of the store. Nothing is created until the first
        write.
    """

    FILE_STORE_DIRNAME = "file_store"

    def __init__(self, directory: Path | str) -> None:
        self._base = Path(directory)

    @property
    def directory(self) -> Path:
        return self._base

    @property
    def uri(self) -> str:
        """``<BackendClass>::<directory>``, parseable by ``from_uri``."""
        return f"{type(self).__name__}::{self._base}"

    def file_path(self, path: Path | str) -> Path:
        """Absolute location of a file-store relative ``path``."""
        relpath = Path(path)
        if relpath.is_absolute() or ".." in relpath.parts:
            raise InvalidPathError(path, "must be relative and inside the store")
        return self._base / self.FILE_STORE_DIRNAME / relpath

    def save_file(self, path: Path | str, content: bytes) -> None:
        """Store ``content`` at ``path``; existing files are never overwritten."""
        target = self.file_path(path)
        write_file(target, content, fail_if_exists=True)
        logger.debug("Saved %d bytes to file store at `%s`.", len(content), target)

    def load_file(self, path: Path | str) -> bytes:
        return read_file(self.file_path(path))

    def checksum(self, path: Path | str) -> str:
        """BLAKE3 Merkle checksum of a stored file or directory."""
        return checksum_path(self.file_path(path))

    def wipe(self) -> None:
        """Remove the whole store root, records included."""
        try:
            shutil.rmtree(self._base)
        except FileNotFoundError:
            logger.debug("Store root `%s` already absent; nothing to wipe.", self._base)
        except OSError as exc:
            raise StoreIOError(f"Failed to wipe `{self._base}`: {exc}") from exc
        else:
            logger.info("Wiped store at `%s`.", self._base)
