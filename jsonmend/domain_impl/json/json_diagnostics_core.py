"""Position mapping and parse-error normalization for the JSON core.

Parser engines phrase their failures differently. Each engine gets a small
adapter that turns its raw message (and offset, when it has one) into the
shared `JsonError` shape; everything downstream only sees `JsonError`.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from jsonmend import constants as app_constants


_LINE_COLUMN_RE = re.compile(r"line\s+(\d+)\s*,?\s*column\s+(\d+)", re.IGNORECASE)
_POSITION_RE = re.compile(r"\bposition\s+(\d+)", re.IGNORECASE)
_CHAR_RE = re.compile(r"\(char\s+(\d+)\)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class JsonError:
    """Normalized parse failure.

    `line`/`column` are 1-based and win over `position` (0-based character
    offset) when both are present. Only `message` is guaranteed.
    """

    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    position: Optional[int] = None

    @property
    def has_line_column(self) -> bool:
        return self.line is not None and self.column is not None


def resolve_position(text: str, offset: int) -> Position:
    """Map a 0-based character offset to a 1-based line/column pair."""
    source = str(text or "")
    if not source:
        return Position(1, 1)
    try:
        offset = int(offset)
    except (TypeError, ValueError):
        offset = 0
    offset = max(0, min(offset, len(source) - 1))
    line = source.count("\n", 0, offset) + 1
    column = offset - source.rfind("\n", 0, offset)
    return Position(line, column)


def classify_error(raw_message: str) -> JsonError:
    """Extract line/column/position hints from a free-text parser message.

    The message itself is kept verbatim. A bare position is not converted to
    line/column here; `locate_error` does that against the current text.
    """
    message = str(raw_message or "").strip() or "Invalid JSON"
    line = column = position = None
    match = _LINE_COLUMN_RE.search(message)
    if match:
        line, column = int(match.group(1)), int(match.group(2))
    match = _CHAR_RE.search(message) or _POSITION_RE.search(message)
    if match:
        position = int(match.group(1))
    return JsonError(message, line=line, column=column, position=position)


class DiagnosticAdapter(Protocol):
    name: str

    def describe(self, raw_message: str, offset: Optional[int] = None) -> JsonError:
        ...


class MessagePatternAdapter:
    """Generic adapter for engines that only report free text.

    Covers ECMAScript-style phrasing (`Unexpected token } in JSON at
    position 5`) as well as anything carrying `line N column M`.
    """

    name = "message-pattern"

    def describe(self, raw_message: str, offset: Optional[int] = None) -> JsonError:
        error = classify_error(raw_message)
        if error.position is None and offset is not None:
            return JsonError(error.message, error.line, error.column, max(0, int(offset)))
        return error


class StdlibJsonAdapter:
    """Adapter for Python's `json` module (`... line 1 column 6 (char 5)`)."""

    name = "stdlib-json"

    def describe(self, raw_message: str, offset: Optional[int] = None) -> JsonError:
        error = classify_error(raw_message)
        if offset is None:
            return error
        # The decoder's own offset is authoritative over the parsed text.
        return JsonError(error.message, error.line, error.column, max(0, int(offset)))

    def describe_exception(self, exc: json.JSONDecodeError) -> JsonError:
        return JsonError(
            str(exc),
            line=getattr(exc, "lineno", None),
            column=getattr(exc, "colno", None),
            position=getattr(exc, "pos", None),
        )


DEFAULT_ADAPTER = StdlibJsonAdapter()


def locate_error(error: JsonError, text: Optional[str] = None) -> Optional[Position]:
    """Return the display position of `error`, deriving it on demand."""
    if error.has_line_column:
        return Position(int(error.line), int(error.column))
    if error.position is not None and text is not None:
        return resolve_position(text, error.position)
    return None


def format_error(error: JsonError, text: Optional[str] = None) -> str:
    """User-facing error text: message plus the best location available."""
    located = locate_error(error, text)
    if located is not None:
        return f"{error.message} [line {located.line}, column {located.column}]"
    if error.position is not None:
        return f"{error.message} [position {error.position}]"
    return error.message


def error_context_lines(text: str, line: int, radius: int = app_constants.ERROR_CONTEXT_RADIUS) -> list[str]:
    """Numbered source lines around `line`, as `"N: text"` entries."""
    lines = str(text or "").split("\n")
    try:
        target = max(1, int(line))
    except (TypeError, ValueError):
        target = 1
    radius = max(0, int(radius))
    start = max(target - radius, 1)
    end = min(target + radius, len(lines))
    return [f"{ln}: {lines[ln - 1].rstrip()}" for ln in range(start, end + 1)]


__all__ = [
    "DEFAULT_ADAPTER",
    "DiagnosticAdapter",
    "JsonError",
    "MessagePatternAdapter",
    "Position",
    "StdlibJsonAdapter",
    "classify_error",
    "error_context_lines",
    "format_error",
    "locate_error",
    "resolve_position",
]
