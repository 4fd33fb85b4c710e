"""Request projection — turn a decoded document into normalized FileSpecs.

The ``files`` field may be an array of spec objects or an object mapping
arbitrary keys to spec objects. Both shapes normalize to the same ordered
``list[FileSpec]``; nothing downstream sees which one was used.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from filestate.codec.decoder import DEFAULT_MAX_DEPTH, decode_request
from filestate.codec.values import Value, ValueKind
from filestate.errors import InputError
from filestate.models import FileSpec

SPEC_FIELDS = ("path", "mode", "owner", "group", "content", "content_source")


@dataclass
class Request:
    check_only: bool = False
    files: list[FileSpec] = field(default_factory=list)


def parse_request(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Request:
    """Decode and project a request document.

    Raises:
        InputError: If the document is malformed or has an unsupported shape.
    """
    document = decode_request(text, max_depth=max_depth)
    return project_request(document)


def project_request(document: Value) -> Request:
    return Request(
        check_only=_project_check_only(document.get("check_only")),
        files=[
            _project_spec(entry, label)
            for label, entry in _file_entries(document.get("files"))
        ],
    )


def _project_check_only(value: Value | None) -> bool:
    if value is None or value.is_null:
        return False
    if value.kind == ValueKind.BOOLEAN:
        return value.data
    if value.kind == ValueKind.INTEGER:
        return value.data != 0
    raise InputError(f"'check_only' must be a boolean, got {value.kind.value}")


def _file_entries(value: Value | None) -> list[tuple[str, Value]]:
    """Flatten either accepted ``files`` shape into (label, entry) pairs."""
    if value is None or value.is_null:
        return []
    if value.kind == ValueKind.ARRAY:
        return [(f"files[{i}]", entry) for i, entry in enumerate(value.data)]
    if value.kind == ValueKind.OBJECT:
        return [(f"files.{key}", entry) for key, entry in value.data.items()]
    raise InputError(f"'files' must be an array or an object, got {value.kind.value}")


def _project_spec(entry: Value, label: str) -> FileSpec:
    if entry.kind != ValueKind.OBJECT:
        raise InputError(f"{label}: file spec must be an object, got {entry.kind.value}")

    fields = {name: _scalar_text(entry.get(name), f"{label}.{name}") for name in SPEC_FIELDS}
    return FileSpec(**fields)


def _scalar_text(value: Value | None, label: str) -> str:
    """Coerce a spec property to text. Integers keep their decimal form."""
    if value is None or value.is_null:
        return ""
    if value.kind == ValueKind.STRING:
        return value.data
    if value.kind == ValueKind.INTEGER:
        return str(value.data)
    raise InputError(f"{label}: expected a string, got {value.kind.value}")
