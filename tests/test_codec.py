"""Tests for the request/response codec (decoder, encoder, value tree)."""

import pytest

from filestate.codec import Value, ValueKind, decode, decode_request, encode, to_value
from filestate.errors import InputError


# --- Decoder Tests ---


def test_decode_scalars():
    doc = decode('{"s": "x", "i": 42, "n": -7, "t": true, "f": false, "z": null}')
    assert doc.kind == ValueKind.OBJECT
    assert doc.get("s") == Value.string("x")
    assert doc.get("i") == Value.integer(42)
    assert doc.get("n") == Value.integer(-7)
    assert doc.get("t") == Value.boolean(True)
    assert doc.get("f") == Value.boolean(False)
    assert doc.get("z").is_null


def test_decode_preserves_key_order():
    doc = decode('{"b": 1, "a": 2, "c": 3}')
    assert list(doc.data) == ["b", "a", "c"]


def test_decode_duplicate_key_keeps_last():
    doc = decode('{"a": 1, "a": 2}')
    assert doc.get("a") == Value.integer(2)


def test_decode_nested_structures():
    doc = decode('{"files": [{"path": "/a", "meta": {"deep": [1, 2]}}], "empty": {}, "none": []}')
    files = doc.get("files")
    assert files.kind == ValueKind.ARRAY
    assert files.data[0].get("meta").get("deep").to_python() == [1, 2]
    assert doc.get("empty").to_python() == {}
    assert doc.get("none").to_python() == []


def test_decode_string_escapes():
    doc = decode(r'{"s": "a\"b\\c\/d\ne\rf\tg\bh\fi"}')
    assert doc.get("s").data == 'a"b\\c/d\ne\rf\tg\bh\fi'


def test_decode_whitespace_everywhere():
    doc = decode(' \n\t{ "a" :\r\n [ 1 , 2 ] } \n')
    assert doc.to_python() == {"a": [1, 2]}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "{",
        '{"a": 1',
        '{"a": 1}}',
        '{"a": 1} {"b": 2}',
        '{"a" 1}',
        '{"a": 1,}',
        "{a: 1}",
        '{"a": tru}',
        '{"a": "unterminated}',
        '{"a": 1.5}',
        '{"a": 1e3}',
        '{"a": 007}',
        '{"a": -}',
        '{"a": "\\u0041"}',
        '{"a": "\\x"}',
        '{"a": "line\nbreak"}',
        '{"a": [1, 2}',
        "{'a': 1}",
    ],
)
def test_decode_rejects_malformed(text):
    with pytest.raises(InputError):
        decode(text)


def test_decode_rejects_oversized_integer():
    with pytest.raises(InputError, match="Integer too large") as exc_info:
        decode('{"check_only": ' + "1" * 5000 + "}")
    assert exc_info.value.offset == 15


def test_decode_error_carries_offset():
    with pytest.raises(InputError) as exc_info:
        decode('{"a": 1.5}')
    assert exc_info.value.offset == 6
    assert "Floating-point" in str(exc_info.value)


def test_decode_max_depth():
    nested = '{"a": ' * 5 + "1" + "}" * 5
    assert decode(nested, max_depth=5).kind == ValueKind.OBJECT
    with pytest.raises(InputError, match="Nesting"):
        decode(nested, max_depth=4)


def test_decode_request_requires_object():
    with pytest.raises(InputError, match="must be an object"):
        decode_request("[1, 2]")
    with pytest.raises(InputError, match="must be an object"):
        decode_request('"just a string"')
    assert decode_request("{}").kind == ValueKind.OBJECT


# --- Encoder Tests ---


def test_encode_sorts_keys():
    first = encode({"b": 1, "a": 2, "c": {"z": True, "y": None}})
    second = encode({"c": {"y": None, "z": True}, "a": 2, "b": 1})
    assert first == second
    assert first == '{"a": 2, "b": 1, "c": {"y": null, "z": true}}'


def test_encode_booleans_and_integers_are_distinct():
    doc = Value.object(
        {
            "count_zero": Value.integer(0),
            "count_one": Value.integer(1),
            "flag_false": Value.boolean(False),
            "flag_true": Value.boolean(True),
        }
    )
    assert encode(doc) == (
        '{"count_one": 1, "count_zero": 0, "flag_false": false, "flag_true": true}'
    )


def test_to_value_tags_bool_before_int():
    assert to_value(True).kind == ValueKind.BOOLEAN
    assert to_value(1).kind == ValueKind.INTEGER
    assert to_value(0).kind == ValueKind.INTEGER


def test_to_value_rejects_unsupported_types():
    with pytest.raises(TypeError):
        to_value(1.5)


def test_encode_escapes_strings():
    assert encode('a"b\\c\nd\re\tf') == r'"a\"b\\c\nd\re\tf"'


def test_encode_escapes_other_control_characters():
    assert encode("a\x1bb\x00") == r'"a\u001bb\u0000"'


def test_encode_arrays():
    assert encode(["x", 1, False, [], {}]) == '["x", 1, false, [], {}]'


def test_roundtrip_response_shape():
    original = {
        "status": "partial_failure",
        "files_checked": 2,
        "files_fixed": 1,
        "compliance_issues": ["file_missing", 'odd "quoted"\tissue'],
        "details": [
            {"path": "/tmp/a", "compliant": False, "issues": ["file_missing"]},
            {"path": "/tmp/b", "compliant": True, "issues": []},
        ],
    }
    assert decode(encode(original)).to_python() == original
