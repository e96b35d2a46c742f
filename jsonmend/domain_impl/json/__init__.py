"""JSON domain package exports."""

from __future__ import annotations

from . import json_diagnostics_core
from . import json_format_core
from . import json_io_core
from . import json_parse_core
from . import json_repair_core
from . import json_scan_core

__all__ = [
    "json_diagnostics_core",
    "json_format_core",
    "json_io_core",
    "json_parse_core",
    "json_repair_core",
    "json_scan_core",
]
