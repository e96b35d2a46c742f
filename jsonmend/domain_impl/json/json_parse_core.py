"""Strict JSON validation on top of the standard library decoder."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from jsonmend.domain_impl.json import json_diagnostics_core as diag_core
from jsonmend.domain_impl.json.json_diagnostics_core import JsonError
from jsonmend.domain_impl.json.json_scan_core import TokenKind, iter_tokens

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseValid:
    value: Any

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ParseInvalid:
    error: JsonError

    @property
    def is_valid(self) -> bool:
        return False


ParseResult = Union[ParseValid, ParseInvalid]


class _NonStandardConstant(ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(name)


def _parse_float(literal: str) -> Union[float, Decimal]:
    value = float(literal)
    if math.isfinite(value):
        return value
    # Out-of-range literals such as 1e400 keep their exact text.
    return Decimal(literal)


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


_DECODER = json.JSONDecoder(parse_float=_parse_float, parse_constant=_reject_constant, strict=True)


def is_blank(text: str) -> bool:
    """True for the "no input" state; callers check this before `parse`."""
    return not str(text or "").strip()


def _constant_offset(text: str, name: str) -> int:
    """Offset of the first `name` literal outside string tokens."""
    offset = 0
    for token in iter_tokens(text):
        if token.kind not in (TokenKind.STRING, TokenKind.KEY) and text.startswith(name, offset):
            return offset
        offset += len(token.text)
    return 0


def _decode(text: str) -> Any:
    if text.startswith("\ufeff"):
        raise json.JSONDecodeError("Unexpected UTF-8 BOM (decode using utf-8-sig)", text, 0)
    return _DECODER.decode(text)


def parse(text: str, adapter: diag_core.StdlibJsonAdapter = diag_core.DEFAULT_ADAPTER) -> ParseResult:
    """Strictly parse `text`; malformed input is returned as `ParseInvalid`."""
    source = str(text or "")
    try:
        return ParseValid(_decode(source))
    except json.JSONDecodeError as exc:
        return ParseInvalid(adapter.describe_exception(exc))
    except _NonStandardConstant as exc:
        offset = _constant_offset(source, exc.name)
        pos = diag_core.resolve_position(source, offset)
        message = f"Expecting value: line {pos.line} column {pos.column} (char {offset})"
        return ParseInvalid(adapter.describe(message, offset))
    except ValueError as exc:
        # Integer literals past the interpreter's digit limit.
        _LOG.debug("json_parse.value_error", exc_info=exc)
        return ParseInvalid(adapter.describe(str(exc)))
    except RecursionError as exc:
        _LOG.debug("json_parse.nesting_too_deep", exc_info=exc)
        return ParseInvalid(JsonError(f"Nesting too deep: {exc}"))


__all__ = ["ParseInvalid", "ParseResult", "ParseValid", "is_blank", "parse"]
