"""Error taxonomy shared by the codec, the index and the stores.

Every failure surfaced to callers is a subclass of ``OrcaError``.
Business-rule violations get their own type so callers can tell a
duplicate annotation from a missing one without parsing messages.
"""

from __future__ import annotations

from pathlib import Path


class OrcaError(RuntimeError):
    """Base class for all orcapod errors."""


class NotFoundError(OrcaError):
    """Raised when an annotation, spec file or stored file does not exist."""


class AnnotationNotFoundError(NotFoundError):
    """Raised when no marker matches a ``(type, name, version)`` triple."""

    def __init__(self, type_tag: str, name: str, version: str) -> None:
        self.type_tag = type_tag
        self.name = name
        self.version = version
        super().__init__(f"No annotation found for `{name}:{version}` {type_tag}.")


class AlreadyExistsError(OrcaError):
    """Raised when writing a file that must not be overwritten."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File `{path}` already exists.")


class DeletingLastAnnotationError(OrcaError):
    """Raised when deleting the only annotation left for a hash."""

    def __init__(self, type_tag: str, name: str, version: str) -> None:
        self.type_tag = type_tag
        self.name = name
        self.version = version
        super().__init__(
            f"Refusing to delete `{name}:{version}` {type_tag}: "
            "it is the last annotation for its hash."
        )


class PathHasNoParentError(OrcaError):
    """Raised when a computed storage path has no parent directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File `{path}` has no parent.")


class InvalidPathError(OrcaError, ValueError):
    """Raised when a file-store path escapes the store or has the wrong kind."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid file store path `{path}`: {reason}.")


class DecodeError(OrcaError):
    """Raised when a spec or annotation document cannot be decoded."""


class SerializeError(OrcaError):
    """Raised when a record cannot be rendered to its canonical form."""


class StoreIOError(OrcaError):
    """Raised when the underlying filesystem operation fails."""


class UnsupportedBackendError(OrcaError):
    """Raised when a store URI names an unknown backend class."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unsupported store backend in URI `{uri}`.")
