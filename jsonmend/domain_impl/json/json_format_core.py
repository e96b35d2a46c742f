"""Canonical pretty and minified serialization of parsed JSON values.

Containers are walked with an explicit stack, so any document the strict
parser accepts can be rendered regardless of nesting depth.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Iterator, Optional

from jsonmend import constants as app_constants


def _scalar(value: Any) -> str:
    if isinstance(value, Decimal):
        # Only produced for literals outside float range; str() is valid JSON.
        return str(value)
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def _key(key: Any) -> str:
    return json.dumps(str(key), ensure_ascii=False)


def _iter_fragments(value: Any, indent: Optional[int]) -> Iterator[str]:
    """Yield output fragments; `indent=None` selects the minified form."""
    # Entries are either literal fragments (str) or (node, depth) pairs.
    stack: list = [(value, 0)]
    while stack:
        entry = stack.pop()
        if isinstance(entry, str):
            yield entry
            continue
        node, depth = entry
        if isinstance(node, dict):
            pairs = [(_key(key), item) for key, item in node.items()]
            opener, closer = "{", "}"
        elif isinstance(node, (list, tuple)):
            pairs = [("", item) for item in node]
            opener, closer = "[", "]"
        else:
            yield _scalar(node)
            continue
        if not pairs:
            yield opener + closer
            continue
        if indent is None:
            separator = app_constants.MINIFY_ITEM_SEPARATOR
            key_separator = app_constants.MINIFY_KEY_SEPARATOR
            inner = ""
            tail = closer
        else:
            separator = ",\n"
            key_separator = app_constants.PRETTY_KEY_SEPARATOR
            inner = " " * (indent * (depth + 1))
            tail = "\n" + " " * (indent * depth) + closer
            opener += "\n"
        pending = []
        for idx, (key_text, item) in enumerate(pairs):
            prefix = (separator if idx else "") + inner
            if key_text:
                prefix += key_text + key_separator
            pending.append(prefix)
            pending.append((item, depth + 1))
        pending.append(tail)
        yield opener
        stack.extend(reversed(pending))


def pretty_print(value: Any, indent: int = app_constants.PRETTY_INDENT) -> str:
    """Render `value` with one member per line and `indent` spaces per level."""
    return "".join(_iter_fragments(value, max(0, int(indent))))


def minify(value: Any) -> str:
    """Render `value` without insignificant whitespace."""
    return "".join(_iter_fragments(value, None))


__all__ = ["minify", "pretty_print"]
