"""Decoder — tokenizer and recursive-descent parser for the request format.

Accepts the JSON subset filestate needs: objects, arrays, strings, integers,
booleans and null. Floats, exponents and ``\\u`` escapes are rejected rather
than half-supported. Every failure is an InputError carrying the character
offset where parsing stopped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from filestate.codec.values import Value, ValueKind
from filestate.errors import InputError

DEFAULT_MAX_DEPTH = 32

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_WHITESPACE = " \t\r\n"
_DIGITS = "0123456789"
_LITERALS = {"true": True, "false": False, "null": None}


class TokenType(Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    STRING = "string"
    INTEGER = "integer"
    LITERAL = "literal"  # true / false / null
    EOF = "eof"


_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: object
    offset: int


# --- Tokenizer ---


def tokenize(text: str) -> Iterator[Token]:
    """Yield tokens from ``text``, ending with a single EOF token."""
    pos = 0
    length = len(text)

    while True:
        while pos < length and text[pos] in _WHITESPACE:
            pos += 1
        if pos >= length:
            yield Token(TokenType.EOF, None, pos)
            return

        ch = text[pos]
        if ch in _PUNCTUATION:
            yield Token(_PUNCTUATION[ch], ch, pos)
            pos += 1
        elif ch == '"':
            value, end = _scan_string(text, pos)
            yield Token(TokenType.STRING, value, pos)
            pos = end
        elif ch == "-" or ch in _DIGITS:
            value, end = _scan_integer(text, pos)
            yield Token(TokenType.INTEGER, value, pos)
            pos = end
        elif ch.isalpha():
            end = pos
            while end < length and text[end].isalpha():
                end += 1
            word = text[pos:end]
            if word not in _LITERALS:
                raise InputError(f"Unexpected bare word '{word}'", pos)
            yield Token(TokenType.LITERAL, _LITERALS[word], pos)
            pos = end
        else:
            raise InputError(f"Unexpected character {ch!r}", pos)


def _scan_string(text: str, start: int) -> tuple[str, int]:
    """Scan a quoted string starting at the opening quote."""
    chunks: list[str] = []
    pos = start + 1
    length = len(text)

    while pos < length:
        ch = text[pos]
        if ch == '"':
            return "".join(chunks), pos + 1
        if ch == "\\":
            if pos + 1 >= length:
                break
            esc = text[pos + 1]
            if esc == "u":
                raise InputError("Unicode escapes are not supported", pos)
            if esc not in _ESCAPES:
                raise InputError(f"Invalid escape sequence '\\{esc}'", pos)
            chunks.append(_ESCAPES[esc])
            pos += 2
            continue
        if ord(ch) < 0x20:
            raise InputError("Unescaped control character in string", pos)
        chunks.append(ch)
        pos += 1

    raise InputError("Unterminated string", start)


def _scan_integer(text: str, start: int) -> tuple[int, int]:
    pos = start
    length = len(text)
    if text[pos] == "-":
        pos += 1
    digits_start = pos
    while pos < length and text[pos] in _DIGITS:
        pos += 1

    digits = text[digits_start:pos]
    if not digits:
        raise InputError("Expected digits after '-'", start)
    if len(digits) > 1 and digits[0] == "0":
        raise InputError("Leading zeros are not allowed in numbers", start)
    if pos < length and text[pos] in ".eE":
        raise InputError("Floating-point numbers are not supported", start)

    try:
        return int(text[start:pos]), pos
    except ValueError as e:
        raise InputError("Integer too large", start) from e


# --- Parser ---


class _Parser:
    """Recursive-descent parser over the token stream."""

    def __init__(self, text: str, max_depth: int):
        self._tokens = tokenize(text)
        self._current = next(self._tokens)
        self._max_depth = max_depth

    def _advance(self) -> Token:
        token = self._current
        if token.type != TokenType.EOF:
            self._current = next(self._tokens)
        return token

    def _expect(self, token_type: TokenType) -> Token:
        if self._current.type != token_type:
            raise InputError(
                f"Expected '{token_type.value}', found '{self._describe(self._current)}'",
                self._current.offset,
            )
        return self._advance()

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        if token.type in (TokenType.STRING, TokenType.INTEGER, TokenType.LITERAL):
            return token.type.value
        return str(token.value)

    def parse_document(self) -> Value:
        value = self.parse_value(depth=0)
        if self._current.type != TokenType.EOF:
            raise InputError("Trailing data after document", self._current.offset)
        return value

    def parse_value(self, depth: int) -> Value:
        token = self._current
        if token.type == TokenType.LBRACE:
            return self._parse_object(depth + 1)
        if token.type == TokenType.LBRACKET:
            return self._parse_array(depth + 1)
        if token.type == TokenType.STRING:
            self._advance()
            return Value.string(token.value)
        if token.type == TokenType.INTEGER:
            self._advance()
            return Value.integer(token.value)
        if token.type == TokenType.LITERAL:
            self._advance()
            if token.value is None:
                return Value.null()
            return Value.boolean(token.value)
        raise InputError(f"Unexpected '{self._describe(token)}'", token.offset)

    def _check_depth(self, depth: int, offset: int) -> None:
        if depth > self._max_depth:
            raise InputError(f"Nesting deeper than {self._max_depth} levels", offset)

    def _parse_object(self, depth: int) -> Value:
        start = self._expect(TokenType.LBRACE)
        self._check_depth(depth, start.offset)
        members: dict[str, Value] = {}

        if self._current.type == TokenType.RBRACE:
            self._advance()
            return Value.object(members)

        while True:
            key = self._expect(TokenType.STRING)
            self._expect(TokenType.COLON)
            members[key.value] = self.parse_value(depth)
            if self._current.type == TokenType.COMMA:
                self._advance()
                continue
            self._expect(TokenType.RBRACE)
            return Value.object(members)

    def _parse_array(self, depth: int) -> Value:
        start = self._expect(TokenType.LBRACKET)
        self._check_depth(depth, start.offset)
        items: list[Value] = []

        if self._current.type == TokenType.RBRACKET:
            self._advance()
            return Value.array(items)

        while True:
            items.append(self.parse_value(depth))
            if self._current.type == TokenType.COMMA:
                self._advance()
                continue
            self._expect(TokenType.RBRACKET)
            return Value.array(items)


def decode(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Decode a complete document into a tagged value tree.

    Args:
        text: The full document.
        max_depth: Maximum nesting of objects/arrays before the input is rejected.

    Raises:
        InputError: On any syntax error or unsupported construct.
    """
    if not text or not text.strip():
        raise InputError("No input provided")
    return _Parser(text, max_depth).parse_document()


def decode_request(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Decode a request document, which must be a single top-level object."""
    value = decode(text, max_depth=max_depth)
    if value.kind != ValueKind.OBJECT:
        raise InputError(f"Request must be an object, got {value.kind.value}")
    return value
