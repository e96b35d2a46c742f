"""Command line front end: validate, format, minify, repair and scan JSON."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from jsonmend import constants as app_constants
from jsonmend import editor_state
from jsonmend.domain_impl.json import json_diagnostics_core
from jsonmend.domain_impl.json import json_io_core
from jsonmend.domain_impl.json import json_repair_core
from jsonmend.domain_impl.json import json_scan_core
from jsonmend.exceptions import EXPECTED_ERRORS, UnsupportedUploadError

_LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_INPUT_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else str(os.environ.get(app_constants.LOG_LEVEL_ENV, "WARNING") or "WARNING")
    level = getattr(logging, level_name.strip().upper(), logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return json_io_core.load_document_text(path)


def _emit(text: str, output_path: Optional[str]) -> None:
    if output_path:
        written = json_io_core.write_document_text(text, output_path)
        print(f"Wrote {written}", file=sys.stderr)
        return
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def _print_error(state: editor_state.FormatterState) -> None:
    print(f"Invalid JSON: {state.message()}", file=sys.stderr)
    located = json_diagnostics_core.locate_error(state.error, state.input)
    if located is None:
        return
    for line in json_diagnostics_core.error_context_lines(state.input, located.line):
        print(f"  {line}", file=sys.stderr)


def _cmd_validate(args, text: str) -> int:
    state = editor_state.evaluate(text)
    if state.status == app_constants.STATUS_INVALID:
        _print_error(state)
        return EXIT_INVALID
    print(state.message())
    return EXIT_OK


def _cmd_render(args, text: str) -> int:
    state = editor_state.evaluate(text)
    if state.status == app_constants.STATUS_EMPTY:
        print(state.message())
        return EXIT_OK
    if state.status == app_constants.STATUS_INVALID:
        _print_error(state)
        return EXIT_INVALID
    if args.command == "minify":
        state = editor_state.minify(state)
    _emit(state.output, args.output)
    return EXIT_OK


def _cmd_repair(args, text: str) -> int:
    state = editor_state.evaluate(text)
    if state.status == app_constants.STATUS_EMPTY:
        print(state.message())
        return EXIT_OK
    report = json_repair_core.repair_with_report(text)
    if args.report:
        names = ", ".join(rule.value for rule in report.rules) or "none"
        print(f"Applied rules: {names}", file=sys.stderr)
    if state.status == app_constants.STATUS_INVALID and not report.changed:
        print("No safe repair found; input left unchanged.", file=sys.stderr)
        _print_error(state)
        return EXIT_INVALID
    _emit(report.text, args.output)
    return EXIT_OK


def _cmd_scan(args, text: str) -> int:
    for token in json_scan_core.iter_tokens(text):
        print(f"{token.kind.value}\t{token.text!r}")
    return EXIT_OK


_COMMANDS = {
    "validate": _cmd_validate,
    "format": _cmd_render,
    "minify": _cmd_render,
    "repair": _cmd_repair,
    "scan": _cmd_scan,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=app_constants.APP_NAME,
        description="Validate, format, minify and repair JSON documents.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {app_constants.APP_VERSION}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("validate", "Check that the input is valid JSON."),
        ("format", "Pretty-print valid JSON with 2-space indentation."),
        ("minify", "Print valid JSON without insignificant whitespace."),
        ("repair", "Rebuild malformed JSON when a safe repair exists."),
        ("scan", "List the display tokens of the input."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("path", nargs="?", default="-", help="Input .json file, or - for stdin.")
        if name in ("format", "minify", "repair"):
            cmd.add_argument(
                "--output",
                "-o",
                nargs="?",
                const=app_constants.DOWNLOAD_FILENAME,
                default=None,
                help=f"Write the result to a file (default name: {app_constants.DOWNLOAD_FILENAME}).",
            )
        if name == "repair":
            cmd.add_argument("--report", action="store_true", help="List the repair rules that were applied.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        text = _read_source(args.path)
    except UnsupportedUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        print(f"ERROR: failed to read input: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    ok, reason = json_io_core.check_input_payload(text)
    if not ok:
        print(f"ERROR: {reason}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    handler = _COMMANDS[args.command]
    try:
        return handler(args, text)
    except EXPECTED_ERRORS as exc:
        # Output side failures only; malformed JSON never raises.
        _LOG.debug("expected_error", exc_info=exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
