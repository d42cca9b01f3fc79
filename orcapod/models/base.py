"""Record base model, annotations and lookup keys.

A record's identity is the SHA-256 of its canonical encoding, which
covers every field except ``hash`` and ``annotation``. The hash is always
computed at construction; a caller-supplied ``hash`` must match it. Only
the codec may inject a stored hash, through the ``stored_hash`` validation
context, when a record is decoded from storage.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from orcapod.core import codec
from orcapod.core.hasher import hash_record

NAME_PATTERN = r"^[0-9a-zA-Z\-]+$"
VERSION_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+$"
HASH_PATTERN = r"^[0-9a-f]+$"

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """``PodJob`` -> ``pod_job``."""
    return _WORD_BOUNDARY.sub("_", name).lower()


class Annotation(BaseModel):
    """Human-assigned alias for a record hash.

    ``name`` + ``version`` identify the alias within a record type;
    ``description`` is free text and not part of identity.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=NAME_PATTERN)
    version: str = Field(pattern=VERSION_PATTERN)
    description: str = ""


class Record(BaseModel):
    """A typed, content-addressed stored artifact."""

    model_config = ConfigDict(frozen=True)

    annotation: Annotation | None = None
    hash: str = Field(default="", pattern=r"^[0-9a-f]*$")

    @classmethod
    def type_tag(cls) -> str:
        """Directory name and ``class`` tag for this record type."""
        return to_snake_case(cls.__name__)

    def storable(self) -> dict[str, Any]:
        """Storage projection: every field except ``hash`` and ``annotation``."""
        return self.model_dump(mode="json", exclude={"hash", "annotation"})

    @model_validator(mode="after")
    def _seal_hash(self, info: ValidationInfo) -> Record:
        context = info.context or {}
        if context.get("record_type") is type(self) and context.get("stored_hash"):
            sealed = context["stored_hash"]
        else:
            sealed = hash_record(codec.encode(self))
            if self.hash and self.hash != sealed:
                raise ValueError(
                    f"hash `{self.hash}` does not match the computed hash `{sealed}`"
                )
        # frozen: bypass the pydantic setattr guard while sealing
        object.__setattr__(self, "hash", sealed)
        return self


class HashID(BaseModel):
    """Look a record up by its hash."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(pattern=HASH_PATTERN)


class AnnotationID(BaseModel):
    """Look a record up by one of its ``(name, version)`` annotations."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


ModelID = HashID | AnnotationID


class ModelInfo(BaseModel):
    """One listing entry. Annotation-less hashes carry empty name/version."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    version: str = ""
    hash: str

    @property
    def is_annotated(self) -> bool:
        return bool(self.name)
