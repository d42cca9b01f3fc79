"""Content hashing for record identity and file integrity.

Two independent digests:

- Record identity: SHA-256 over the UTF-8 bytes of a record's canonical
  encoding, rendered as lowercase hex.
- File checksum: a BLAKE3 Merkle digest over a file or directory tree.
  Directory digests include the names of their entries, so a rename
  changes the checksum.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from blake3 import blake3

from orcapod.errors import NotFoundError, StoreIOError

_CHUNK_SIZE = 1 << 20

# Node-kind prefixes keep an empty file and an empty directory apart
_FILE_NODE = b"f"
_DIR_NODE = b"d"


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def hash_record(canonical_text: str) -> str:
    """Identity hash of a record from its canonical encoding."""
    return sha256_hex(canonical_text.encode("utf-8"))


def _file_digest(path: Path) -> bytes:
    hasher = blake3()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.digest()


def _node_digest(path: Path) -> bytes:
    if not path.is_dir():
        return _file_digest(path)

    hasher = blake3()
    for child in sorted(path.iterdir(), key=lambda p: p.name):
        hasher.update(_DIR_NODE if child.is_dir() else _FILE_NODE)
        hasher.update(child.name.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(_node_digest(child))
    return hasher.digest()


def checksum_path(path: Path | str) -> str:
    """BLAKE3 Merkle checksum of a file or a directory tree.

    A file hashes to the digest of its content. A directory hashes, for
    each entry in name order, the entry kind, its name and its digest.
    The root's own name is not part of the input, so the same tree
    stored under a different root directory yields the same checksum.

    Raises
    ------
    NotFoundError
        If ``path`` does not exist.
    StoreIOError
        If the tree cannot be read.
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"Cannot checksum missing path `{path}`.")
    try:
        return _node_digest(path).hex()
    except OSError as exc:
        raise StoreIOError(f"Failed to checksum `{path}`: {exc}") from exc
