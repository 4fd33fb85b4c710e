"""Encoder — deterministic serialization of a tagged value tree.

Object keys are always emitted in sorted order so two runs over the same
result produce byte-identical output.

Control characters without a short escape are written as ``\\u00XX`` so the
output is always well-formed. The decoder does not read those back; request
strings can never contain them, only text taken from the system (error
messages, user and group names) can.
"""

from __future__ import annotations

from typing import Any

from filestate.codec.values import Value, ValueKind, to_value

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def encode(value: Value | Any) -> str:
    """Serialize a Value (or plain Python data, tagged via ``to_value``)."""
    return _encode_node(to_value(value))


def encode_string(text: str) -> str:
    return '"' + "".join(_escape_char(ch) for ch in text) + '"'


def _escape_char(ch: str) -> str:
    if ch in _STRING_ESCAPES:
        return _STRING_ESCAPES[ch]
    if ord(ch) < 0x20:
        return f"\\u{ord(ch):04x}"
    return ch


def _encode_node(value: Value) -> str:
    kind = value.kind
    if kind == ValueKind.OBJECT:
        pairs = [
            f"{encode_string(key)}: {_encode_node(value.data[key])}"
            for key in sorted(value.data)
        ]
        return "{" + ", ".join(pairs) + "}"
    if kind == ValueKind.ARRAY:
        return "[" + ", ".join(_encode_node(item) for item in value.data) + "]"
    if kind == ValueKind.STRING:
        return encode_string(value.data)
    if kind == ValueKind.BOOLEAN:
        return "true" if value.data else "false"
    if kind == ValueKind.INTEGER:
        return str(value.data)
    return "null"
