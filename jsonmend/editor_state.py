"""Immutable input/result state threaded through the formatter flow.

The core keeps nothing between calls. A front end holds one `FormatterState`
and replaces it wholesale on every edit, beautify, minify or repair.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from jsonmend import constants as app_constants
from jsonmend.domain_impl.json import json_diagnostics_core
from jsonmend.domain_impl.json import json_format_core
from jsonmend.domain_impl.json import json_parse_core
from jsonmend.domain_impl.json import json_repair_core
from jsonmend.domain_impl.json.json_parse_core import ParseInvalid, ParseResult, ParseValid


@dataclass(frozen=True, slots=True)
class FormatterState:
    """Current input text, its parse result and the rendered output."""

    input: str = ""
    result: Optional[ParseResult] = None
    output: str = ""
    repaired: bool = False

    @property
    def status(self) -> str:
        if self.result is None:
            return app_constants.STATUS_EMPTY
        if isinstance(self.result, ParseValid):
            return app_constants.STATUS_VALID
        return app_constants.STATUS_INVALID

    @property
    def error(self) -> Optional[json_diagnostics_core.JsonError]:
        if isinstance(self.result, ParseInvalid):
            return self.result.error
        return None

    def message(self) -> str:
        """Status line text: neutral, valid, or the located error."""
        if self.result is None:
            return app_constants.NO_INPUT_MESSAGE
        if self.error is None:
            return app_constants.VALID_MESSAGE
        return json_diagnostics_core.format_error(self.error, self.input)


def evaluate(text: str) -> FormatterState:
    """Validate `text` and auto-format it when valid."""
    source = str(text or "")
    if json_parse_core.is_blank(source):
        return FormatterState(input=source)
    result = json_parse_core.parse(source)
    if isinstance(result, ParseValid):
        return FormatterState(source, result, json_format_core.pretty_print(result.value))
    return FormatterState(source, result, "")


def beautify(state: FormatterState) -> FormatterState:
    if not isinstance(state.result, ParseValid):
        return state
    return replace(state, output=json_format_core.pretty_print(state.result.value))


def minify(state: FormatterState) -> FormatterState:
    if not isinstance(state.result, ParseValid):
        return state
    return replace(state, output=json_format_core.minify(state.result.value))


def apply_repair(state: FormatterState) -> FormatterState:
    """Repair the input and re-run validation on the returned text."""
    if state.status != app_constants.STATUS_INVALID:
        return state
    repaired_text = json_repair_core.repair(state.input)
    if repaired_text == state.input:
        # No safe repair; the original error stays on screen.
        return state
    return replace(evaluate(repaired_text), repaired=True)


__all__ = ["FormatterState", "apply_repair", "beautify", "evaluate", "minify"]
