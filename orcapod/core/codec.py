"""Canonical YAML codec for records.

A record is stored as its storage projection (every field except ``hash``
and ``annotation``) dumped with recursively sorted keys, preceded by a
``class: <type_tag>`` line. The same text is the input of the identity
hash, so two records with equal payloads always encode to identical bytes
no matter how they were constructed.

Decoding reverses this. The spec text is parsed, the parsed annotation
and resolved references (a PodJob's ``pod``) are merged in, and the
result is validated into the record type. The stored ``hash`` reaches the
model only as validation context; it is never part of the mapping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from orcapod.errors import DecodeError, SerializeError

if TYPE_CHECKING:
    from orcapod.models.base import Annotation, Record

CLASS_KEY = "class"


def _dump(data: Any) -> str:
    try:
        return yaml.safe_dump(
            data,
            sort_keys=True,
            default_flow_style=False,
            allow_unicode=True,
            width=float("inf"),
        )
    except yaml.YAMLError as exc:
        raise SerializeError(f"Failed to serialize to YAML: {exc}") from exc


def _load_mapping(text: str, what: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DecodeError(f"Malformed {what} YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a mapping in {what} YAML, got {type(data).__name__}."
        )
    return data


def encode(record: Record) -> str:
    """Render the canonical spec text of ``record``."""
    return f"{CLASS_KEY}: {record.type_tag()}\n{_dump(record.storable())}"


def encode_annotation(annotation: Annotation) -> str:
    """Render the marker file content of an annotation."""
    return _dump(annotation.model_dump(mode="json"))


def decode_annotation(text: str) -> Annotation:
    """Parse marker file content back into an ``Annotation``."""
    from orcapod.models.base import Annotation

    try:
        return Annotation.model_validate(_load_mapping(text, "annotation"))
    except ValidationError as exc:
        raise DecodeError(f"Invalid annotation: {exc}") from exc


def parse_spec(text: str) -> dict[str, Any]:
    """Parse spec text into its raw mapping, ``class`` key included."""
    return _load_mapping(text, "spec")


def decode(
    text: str,
    hash: str,
    annotation_text: str | None = None,
    *,
    record_type: type[Record] | None = None,
    **references: Any,
) -> Record:
    """Rebuild a record from its spec text and externally supplied identity.

    Parameters
    ----------
    text:
        Canonical spec text as produced by ``encode``.
    hash:
        The record hash, taken from the storage path.
    annotation_text:
        Marker file content; ``None`` leaves ``annotation`` unset.
    record_type:
        Expected record class. When omitted the ``class`` line selects
        one from ``orcapod.models.RECORD_TYPES``.
    references:
        Already-loaded referents merged into the mapping before
        validation, e.g. ``pod=`` for a PodJob.

    Raises
    ------
    DecodeError
        On malformed YAML, a missing or mismatched ``class`` tag, or a
        mapping that does not validate into the record type.
    """
    mapping = parse_spec(text)
    type_tag = mapping.pop(CLASS_KEY, None)

    if record_type is None:
        from orcapod.models import RECORD_TYPES

        if type_tag not in RECORD_TYPES:
            raise DecodeError(f"Unknown record class `{type_tag}`.")
        record_type = RECORD_TYPES[type_tag]
    elif type_tag != record_type.type_tag():
        raise DecodeError(
            f"Spec declares class `{type_tag}`, expected `{record_type.type_tag()}`."
        )

    if annotation_text is not None:
        mapping["annotation"] = _load_mapping(annotation_text, "annotation")
    mapping.update(references)

    try:
        return record_type.model_validate(
            mapping, context={"record_type": record_type, "stored_hash": hash}
        )
    except ValidationError as exc:
        raise DecodeError(
            f"Invalid {record_type.type_tag()} spec for hash {hash}: {exc}"
        ) from exc
