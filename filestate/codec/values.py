"""Tagged value tree shared by the decoder and encoder.

Every node carries an explicit ValueKind, so a boolean is never confused with
a small integer and an empty object is never confused with an empty array.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Value:
    """A single node of a decoded (or to-be-encoded) document.

    ``data`` holds a ``dict[str, Value]`` for objects, a ``list[Value]`` for
    arrays, and the plain Python scalar otherwise.
    """

    kind: ValueKind
    data: Any = None

    # --- Constructors ---

    @classmethod
    def object(cls, members: dict[str, Value] | None = None) -> Value:
        return cls(ValueKind.OBJECT, dict(members or {}))

    @classmethod
    def array(cls, items: list[Value] | None = None) -> Value:
        return cls(ValueKind.ARRAY, list(items or []))

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STRING, text)

    @classmethod
    def integer(cls, number: int) -> Value:
        return cls(ValueKind.INTEGER, int(number))

    @classmethod
    def boolean(cls, flag: bool) -> Value:
        return cls(ValueKind.BOOLEAN, bool(flag))

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    # --- Accessors ---

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL

    def get(self, key: str) -> Value | None:
        """Look up an object member. Returns None for missing keys or non-objects."""
        if self.kind != ValueKind.OBJECT:
            return None
        return self.data.get(key)

    def to_python(self) -> Any:
        """Strip the tags and return plain dicts, lists and scalars."""
        if self.kind == ValueKind.OBJECT:
            return {k: v.to_python() for k, v in self.data.items()}
        if self.kind == ValueKind.ARRAY:
            return [v.to_python() for v in self.data]
        return self.data


def to_value(obj: Any) -> Value:
    """Build a tagged tree from plain Python data.

    ``bool`` is tested before ``int`` since it is an ``int`` subclass.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Value.null()
    if isinstance(obj, bool):
        return Value.boolean(obj)
    if isinstance(obj, int):
        return Value.integer(obj)
    if isinstance(obj, str):
        return Value.string(obj)
    if isinstance(obj, dict):
        return Value.object({str(k): to_value(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return Value.array([to_value(v) for v in obj])
    raise TypeError(f"Cannot encode value of type {type(obj).__name__}")
