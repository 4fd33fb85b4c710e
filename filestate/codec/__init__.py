"""Self-contained codec for the request/response documents.

- values: the tagged value tree (object/array/string/integer/boolean/null)
- decoder: tokenizer + recursive-descent parser producing that tree
- encoder: deterministic serializer with sorted object keys
"""

from filestate.codec.decoder import decode, decode_request
from filestate.codec.encoder import encode
from filestate.codec.values import Value, ValueKind, to_value

__all__ = [
    "decode",
    "decode_request",
    "encode",
    "Value",
    "ValueKind",
    "to_value",
]
