"""Tolerant re-parser that rebuilds malformed JSON text.

Repairs happen while tokenizing and parsing, never as text substitutions, so
string contents that merely look like broken syntax are left alone. Each
recovery that fires is recorded as a `RepairRule`.

The result is re-checked with the strict parser. When the rebuild cannot
complete, or the rebuilt text still fails strict parsing, the original text
comes back unchanged.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jsonmend import constants as app_constants
from jsonmend.domain_impl.json import json_parse_core
from jsonmend.exceptions import EXPECTED_ERRORS

_LOG = logging.getLogger(__name__)


class RepairRule(str, Enum):
    STRIP_FENCE = "strip_fence"
    STRIP_COMMENTS = "strip_comments"
    QUOTE_KEY = "quote_key"
    SINGLE_QUOTES = "single_quotes"
    ESCAPE_CONTROL = "escape_control"
    CLOSE_STRING = "close_string"
    CONCAT_STRINGS = "concat_strings"
    LITERAL_ALIAS = "literal_alias"
    QUOTE_BARE_VALUE = "quote_bare_value"
    NORMALIZE_NUMBER = "normalize_number"
    MISSING_COLON = "missing_colon"
    MISSING_COMMA = "missing_comma"
    TRAILING_COMMA = "trailing_comma"
    MISMATCHED_CLOSER = "mismatched_closer"
    STRAY_CLOSER = "stray_closer"
    CLOSE_BRACKETS = "close_brackets"


@dataclass(frozen=True, slots=True)
class RepairReport:
    text: str
    changed: bool
    rules: tuple[RepairRule, ...] = ()


class _RepairAbort(ValueError):
    """No safe rebuild exists for the input."""


class _Kind(Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    PLUS = "+"
    STRING = "string"
    NUMBER = "number"
    WORD = "word"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class _Tok:
    kind: _Kind
    value: str
    pos: int


_PUNCT_KINDS = {
    "{": _Kind.LBRACE,
    "}": _Kind.RBRACE,
    "[": _Kind.LBRACKET,
    "]": _Kind.RBRACKET,
    ":": _Kind.COLON,
    ",": _Kind.COMMA,
}
_SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_HEX_DIGITS = set("0123456789abcdefABCDEF")
_NUMBER_START = set("0123456789+-.")
_NUMBER_CHARS = set("0123456789+-.eE")
_STRICT_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?\Z")
_FENCE_RE = re.compile(r"\A\s*```[\w-]*[ \t]*\r?\n(?P<body>.*?)\r?\n?[ \t]*```\s*\Z", re.DOTALL)
_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")
_VALUE_START_KINDS = (_Kind.LBRACE, _Kind.LBRACKET, _Kind.STRING, _Kind.NUMBER, _Kind.WORD)
# Non-finite names are not guessed into strings or nulls.
_REFUSED_WORDS = ("NaN", "Infinity")


def _read_unicode_escape(text: str, idx: int) -> Optional[int]:
    digits = text[idx + 2 : idx + 6]
    if len(digits) == 4 and all(ch in _HEX_DIGITS for ch in digits):
        return int(digits, 16)
    return None


def _lex_string(text: str, start: int, rules: set) -> tuple[str, int]:
    """Decode the string opened at `start`; returns (value, end index)."""
    quote = text[start]
    if quote == "'":
        rules.add(RepairRule.SINGLE_QUOTES)
    size = len(text)
    chars = []
    idx = start + 1
    while idx < size:
        ch = text[idx]
        if ch == quote:
            return "".join(chars), idx + 1
        if ch == "\\" and idx + 1 < size:
            nxt = text[idx + 1]
            if nxt in _SIMPLE_ESCAPES:
                chars.append(_SIMPLE_ESCAPES[nxt])
                idx += 2
                continue
            if nxt == "u":
                code = _read_unicode_escape(text, idx)
                if code is not None:
                    idx += 6
                    if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", idx):
                        low = _read_unicode_escape(text, idx)
                        if low is not None and 0xDC00 <= low <= 0xDFFF:
                            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                            idx += 6
                    chars.append(chr(code))
                    continue
            # Unknown escape: keep the backslash as a literal character.
            chars.append("\\")
            idx += 1
            continue
        if ord(ch) < 0x20:
            rules.add(RepairRule.ESCAPE_CONTROL)
        chars.append(ch)
        idx += 1
    rules.add(RepairRule.CLOSE_STRING)
    return "".join(chars), size


def _lex_number(text: str, start: int) -> tuple[str, int]:
    idx = start
    size = len(text)
    while idx < size and text[idx] in _NUMBER_CHARS:
        idx += 1
    if idx < size and (text[idx].isalnum() or text[idx] == "_"):
        # 0x1F, 12px and friends are not numbers we can vouch for.
        raise _RepairAbort(f"malformed number at {start}")
    return text[start:idx], idx


def _lex_word(text: str, start: int) -> tuple[str, int]:
    idx = start + 1
    size = len(text)
    while idx < size and (text[idx].isalnum() or text[idx] in "_$-."):
        idx += 1
    return text[start:idx], idx


def _tokenize(text: str, rules: set) -> list[_Tok]:
    tokens = []
    size = len(text)
    pos = 0
    while pos < size:
        ch = text[pos]
        nxt = text[pos + 1] if pos + 1 < size else ""
        if ch.isspace() or ch == "\ufeff":
            pos += 1
            continue
        if (ch == "/" and nxt == "/") or ch == "#":
            rules.add(RepairRule.STRIP_COMMENTS)
            end = text.find("\n", pos)
            pos = size if end < 0 else end + 1
            continue
        if ch == "/" and nxt == "*":
            rules.add(RepairRule.STRIP_COMMENTS)
            end = text.find("*/", pos + 2)
            pos = size if end < 0 else end + 2
            continue
        if ch in _PUNCT_KINDS:
            tokens.append(_Tok(_PUNCT_KINDS[ch], ch, pos))
            pos += 1
            continue
        if ch == "+" and not (nxt.isdigit() or nxt == "."):
            tokens.append(_Tok(_Kind.PLUS, ch, pos))
            pos += 1
            continue
        if ch in "\"'":
            value, end = _lex_string(text, pos, rules)
            tokens.append(_Tok(_Kind.STRING, value, pos))
            pos = end
            continue
        if ch in _NUMBER_START:
            raw, end = _lex_number(text, pos)
            tokens.append(_Tok(_Kind.NUMBER, raw, pos))
            pos = end
            continue
        if ch.isalpha() or ch in "_$":
            word, end = _lex_word(text, pos)
            tokens.append(_Tok(_Kind.WORD, word, pos))
            pos = end
            continue
        raise _RepairAbort(f"unexpected character {ch!r} at {pos}")
    tokens.append(_Tok(_Kind.EOF, "", size))
    return tokens


def normalize_number(raw: str) -> Optional[str]:
    """Return a strict JSON spelling of a lax number literal, or None."""
    if _STRICT_NUMBER_RE.match(raw):
        return raw
    body = raw
    sign = ""
    if body[:1] in ("+", "-"):
        sign = "-" if body[0] == "-" else ""
        body = body[1:]
    mantissa, exp_mark, exponent = body, "", ""
    exp_match = re.search(r"[eE]", body)
    if exp_match:
        mantissa, exp_mark, exponent = body[: exp_match.start()], "e", body[exp_match.end() :]
    int_part, dot, frac = mantissa.partition(".")
    if not any(ch.isdigit() for ch in int_part + frac):
        return None
    candidate = sign + (int_part.lstrip("0") or "0")
    if dot:
        candidate += "." + (frac or "0")
    if exp_mark:
        candidate += exp_mark + exponent
    return candidate if _STRICT_NUMBER_RE.match(candidate) else None


def _escape_surrogate(match: re.Match) -> str:
    return "\\u%04x" % ord(match.group())


class _Rebuilder:
    """Recursive-descent pass that emits compact JSON as it goes."""

    def __init__(self, tokens: list[_Tok], rules: set):
        self.tokens = tokens
        self.index = 0
        self.rules = rules
        self.out = []

    def peek(self, offset: int = 0) -> _Tok:
        idx = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> _Tok:
        tok = self.tokens[self.index]
        if tok.kind is not _Kind.EOF:
            self.index += 1
        return tok

    def emit(self, fragment: str) -> None:
        self.out.append(fragment)

    def emit_string(self, value: str) -> None:
        # Lone surrogates cannot be written as UTF-8; keep them as escapes.
        encoded = json.dumps(value, ensure_ascii=False)
        self.out.append(_SURROGATE_RE.sub(_escape_surrogate, encoded))

    def document(self) -> str:
        if self.peek().kind is _Kind.EOF:
            raise _RepairAbort("no content")
        self.value(join_adjacent=True)
        while True:
            kind = self.peek().kind
            if kind in (_Kind.RBRACE, _Kind.RBRACKET):
                self.rules.add(RepairRule.STRAY_CLOSER)
            elif kind is _Kind.COMMA:
                self.rules.add(RepairRule.TRAILING_COMMA)
            else:
                break
            self.advance()
        if self.peek().kind is not _Kind.EOF:
            raise _RepairAbort(f"trailing content at {self.peek().pos}")
        return "".join(self.out)

    def value(self, join_adjacent: bool = False) -> None:
        tok = self.peek()
        if tok.kind is _Kind.LBRACE:
            self.object()
        elif tok.kind is _Kind.LBRACKET:
            self.array()
        elif tok.kind is _Kind.STRING:
            self.string_value(join_adjacent)
        elif tok.kind is _Kind.NUMBER:
            self.advance()
            normalized = normalize_number(tok.value)
            if normalized is None:
                raise _RepairAbort(f"malformed number {tok.value!r} at {tok.pos}")
            if normalized != tok.value:
                self.rules.add(RepairRule.NORMALIZE_NUMBER)
            self.emit(normalized)
        elif tok.kind is _Kind.WORD:
            self.advance()
            self.word_value(tok)
        else:
            raise _RepairAbort(f"expected value at {tok.pos}")

    def word_value(self, tok: _Tok) -> None:
        alias = app_constants.REPAIR_LITERAL_ALIASES.get(tok.value)
        if alias is not None:
            if alias != tok.value:
                self.rules.add(RepairRule.LITERAL_ALIAS)
            self.emit(alias)
            return
        if tok.value in _REFUSED_WORDS:
            raise _RepairAbort(f"non-finite number {tok.value!r} at {tok.pos}")
        self.rules.add(RepairRule.QUOTE_BARE_VALUE)
        self.emit_string(tok.value)

    def string_value(self, join_adjacent: bool = False) -> None:
        parts = [self.advance().value]
        while True:
            if self.peek().kind is _Kind.PLUS and self.peek(1).kind is _Kind.STRING:
                self.advance()
            elif not (join_adjacent and self.peek().kind is _Kind.STRING and self.peek(1).kind is not _Kind.COLON):
                # Inside arrays, or before a key, adjacent strings are a missing comma.
                break
            parts.append(self.advance().value)
            self.rules.add(RepairRule.CONCAT_STRINGS)
        self.emit_string("".join(parts))

    def key(self) -> None:
        tok = self.peek()
        if tok.kind is _Kind.STRING:
            self.advance()
            self.emit_string(tok.value)
        elif tok.kind in (_Kind.WORD, _Kind.NUMBER):
            self.advance()
            self.rules.add(RepairRule.QUOTE_KEY)
            self.emit_string(tok.value)
        else:
            raise _RepairAbort(f"expected key at {tok.pos}")

    def colon(self) -> None:
        tok = self.peek()
        if tok.kind is _Kind.COLON:
            self.advance()
        elif tok.kind in _VALUE_START_KINDS:
            self.rules.add(RepairRule.MISSING_COLON)
        else:
            raise _RepairAbort(f"expected ':' at {tok.pos}")
        self.emit(":")

    def container(self, closer: _Kind, other_closer: _Kind, member) -> None:
        self.advance()
        self.emit("[" if closer is _Kind.RBRACKET else "{")
        count = 0
        comma_pending = False
        while True:
            tok = self.peek()
            if tok.kind is closer:
                self.advance()
                break
            if tok.kind is _Kind.EOF:
                self.rules.add(RepairRule.CLOSE_BRACKETS)
                break
            if tok.kind is other_closer:
                # Close this container and let the enclosing one take the token.
                self.rules.add(RepairRule.MISMATCHED_CLOSER)
                break
            if tok.kind is _Kind.COMMA:
                self.advance()
                if comma_pending or not count:
                    self.rules.add(RepairRule.TRAILING_COMMA)
                comma_pending = True
                continue
            if count:
                if not comma_pending:
                    self.rules.add(RepairRule.MISSING_COMMA)
                self.emit(",")
            member()
            count += 1
            comma_pending = False
        if comma_pending and count:
            self.rules.add(RepairRule.TRAILING_COMMA)
        self.emit("]" if closer is _Kind.RBRACKET else "}")

    def object(self) -> None:
        self.container(_Kind.RBRACE, _Kind.RBRACKET, self.member)

    def member(self) -> None:
        self.key()
        self.colon()
        self.value(join_adjacent=True)

    def array(self) -> None:
        self.container(_Kind.RBRACKET, _Kind.RBRACE, self.value)


def _rebuild(text: str) -> tuple[str, set]:
    rules = set()
    fenced = _FENCE_RE.match(text)
    if fenced:
        rules.add(RepairRule.STRIP_FENCE)
        text = fenced.group("body")
    tokens = _tokenize(text, rules)
    return _Rebuilder(tokens, rules).document(), rules


def repair_with_report(text: str) -> RepairReport:
    """Repair `text` and report which recovery rules were applied."""
    source = "" if text is None else str(text)
    unchanged = RepairReport(source, False, ())
    if json_parse_core.is_blank(source) or json_parse_core.parse(source).is_valid:
        return unchanged
    try:
        candidate, rules = _rebuild(source)
    except _RepairAbort as exc:
        _LOG.debug("json_repair.fail_closed", extra={"stage": "rebuild", "reason": str(exc)})
        return unchanged
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return unchanged
    result = json_parse_core.parse(candidate)
    if not result.is_valid:
        _LOG.debug(
            "json_repair.fail_closed",
            extra={"stage": "revalidate", "reason": result.error.message},
        )
        return unchanged
    applied = tuple(rule for rule in RepairRule if rule in rules)
    _LOG.debug("json_repair.applied", extra={"rules": [rule.value for rule in applied]})
    return RepairReport(candidate, candidate != source, applied)


def repair(text: str) -> str:
    """Return repaired JSON text, or `text` unchanged when no safe repair exists."""
    return repair_with_report(text).text


__all__ = ["RepairReport", "RepairRule", "normalize_number", "repair", "repair_with_report"]
