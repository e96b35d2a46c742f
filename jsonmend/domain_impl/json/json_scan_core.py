"""Display tokenizer for raw JSON text.

The scanner never validates: it classifies every character of the input into
a token so a highlighter can color it, and the token texts always join back
into the original text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class TokenKind(str, Enum):
    WHITESPACE = "whitespace"
    KEY = "key"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    PUNCTUATION = "punctuation"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str


_WHITESPACE = " \t\n\r"
_NUMBER_START = "-0123456789"
_NUMBER_BODY = "-0123456789.eE+"
_PUNCTUATION = "{}[],:"
_LITERALS = (
    ("true", TokenKind.BOOLEAN),
    ("false", TokenKind.BOOLEAN),
    ("null", TokenKind.NULL),
)


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string opened at `start`."""
    escape = False
    idx = start + 1
    size = len(text)
    while idx < size:
        ch = text[idx]
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif ch == '"':
            return idx + 1
        idx += 1
    # Unterminated strings run to end of input.
    return size


def _followed_by_colon(text: str, index: int) -> bool:
    idx = index
    size = len(text)
    while idx < size and text[idx] in _WHITESPACE:
        idx += 1
    return idx < size and text[idx] == ":"


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield classified tokens for `text` in one left-to-right pass."""
    source = str(text or "")
    size = len(source)
    pos = 0
    while pos < size:
        ch = source[pos]
        if ch in _WHITESPACE:
            end = pos + 1
            while end < size and source[end] in _WHITESPACE:
                end += 1
            yield Token(TokenKind.WHITESPACE, source[pos:end])
            pos = end
            continue
        if ch == '"':
            end = _string_end(source, pos)
            kind = TokenKind.KEY if _followed_by_colon(source, end) else TokenKind.STRING
            yield Token(kind, source[pos:end])
            pos = end
            continue
        if ch in _NUMBER_START:
            end = pos + 1
            while end < size and source[end] in _NUMBER_BODY:
                end += 1
            yield Token(TokenKind.NUMBER, source[pos:end])
            pos = end
            continue
        literal_kind = None
        for literal, kind in _LITERALS:
            if source.startswith(literal, pos):
                literal_kind = kind
                yield Token(kind, literal)
                pos += len(literal)
                break
        if literal_kind is not None:
            continue
        if ch in _PUNCTUATION:
            yield Token(TokenKind.PUNCTUATION, ch)
        else:
            yield Token(TokenKind.OTHER, ch)
        pos += 1


def scan(text: str) -> list[Token]:
    """Materialize `iter_tokens`; concatenated texts equal `text`."""
    return list(iter_tokens(text))


def line_count(text: str) -> int:
    """Number of display lines, for sizing a line-number gutter."""
    return str(text or "").count("\n") + 1


__all__ = ["Token", "TokenKind", "iter_tokens", "line_count", "scan"]
