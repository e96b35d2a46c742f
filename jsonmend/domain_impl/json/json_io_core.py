"""Consolidated JSON domain pillar: json_io_core.

Document read/write helpers and the input payload gate used before text is
handed to the parser.
"""

import logging
import os
from pathlib import Path
from typing import Any

from jsonmend import constants as app_constants
from jsonmend.exceptions import AppRuntimeError, UnsupportedUploadError

_LOG = logging.getLogger(__name__)


def is_supported_document(path: Any) -> bool:
    suffix = Path(str(path or "")).suffix.lower()
    return suffix in app_constants.ACCEPTED_UPLOAD_SUFFIXES


def load_document_text(path: Any) -> str:
    """Load a whole JSON document into memory as text."""
    use_path = str(path or "")
    if not is_supported_document(use_path):
        raise UnsupportedUploadError(use_path, Path(use_path).suffix)
    # utf-8-sig drops a leading BOM that the strict parser would reject.
    with open(use_path, "r", encoding="utf-8-sig") as handle:
        return handle.read()


def write_document_text(text: Any, destination_path: Any = None) -> str:
    """Write output text to `destination_path` (default download name)."""
    use_destination = str(destination_path or app_constants.DOWNLOAD_FILENAME)
    payload = str(text or "")
    if not payload:
        raise ValueError("Nothing to write; output is empty.")
    directory = os.path.dirname(os.path.abspath(use_destination))
    os.makedirs(directory, exist_ok=True)
    with open(use_destination, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(payload)
        if not payload.endswith("\n"):
            handle.write("\n")
    if not os.path.isfile(use_destination) or os.path.getsize(use_destination) <= 0:
        raise AppRuntimeError(f"Written document is empty: {use_destination}")
    _LOG.debug("json_io.written", extra={"path": use_destination, "chars": len(payload)})
    return use_destination


# --- Input payload gate ---


def _contains_binary_controls(text: str) -> bool:
    # NUL never shows up in real JSON text; other controls are a repair target.
    return "\x00" in text


def _contains_utf16_surrogate(text: str) -> bool:
    for char in text:
        code = ord(char)
        if 0xD800 <= code <= 0xDFFF:
            return True
    return False


def check_input_payload(payload: Any) -> tuple[bool, str]:
    """Validate a text payload before it is parsed or repaired."""
    text = str(payload or "")
    if not text:
        return True, ""
    limit = int(app_constants.INPUT_MAX_CHARS)
    if len(text) >= limit:
        return False, f"Input exceeds safety limit ({limit:,} characters)."
    if _contains_utf16_surrogate(text):
        return False, "Input contains non-UTF text code points."
    if _contains_binary_controls(text):
        return False, "Input contains unsupported binary control bytes."
    return True, ""

__all__ = [name for name in globals() if not name.startswith("__")]
