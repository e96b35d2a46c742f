"""Tolerant JSON validation, diagnostics, repair and formatting."""

from __future__ import annotations

from jsonmend.constants import APP_VERSION as __version__
from jsonmend.domain_impl.json.json_diagnostics_core import (
    JsonError,
    Position,
    classify_error,
    format_error,
    locate_error,
    resolve_position,
)
from jsonmend.domain_impl.json.json_format_core import minify, pretty_print
from jsonmend.domain_impl.json.json_parse_core import ParseInvalid, ParseResult, ParseValid, is_blank, parse
from jsonmend.domain_impl.json.json_repair_core import RepairReport, RepairRule, repair, repair_with_report
from jsonmend.domain_impl.json.json_scan_core import Token, TokenKind, scan

__all__ = [
    "JsonError",
    "ParseInvalid",
    "ParseResult",
    "ParseValid",
    "Position",
    "RepairReport",
    "RepairRule",
    "Token",
    "TokenKind",
    "__version__",
    "classify_error",
    "format_error",
    "is_blank",
    "locate_error",
    "minify",
    "parse",
    "pretty_print",
    "repair",
    "repair_with_report",
    "resolve_position",
    "scan",
]
