APP_NAME = "jsonmend"
APP_VERSION = "0.4.0"

LOG_LEVEL_ENV = "JSONMEND_LOG_LEVEL"

PRETTY_INDENT = 2
# Separators for the canonical minified form.
MINIFY_ITEM_SEPARATOR = ","
MINIFY_KEY_SEPARATOR = ":"
PRETTY_KEY_SEPARATOR = ": "

INPUT_MAX_CHARS = 50_000_000
ACCEPTED_UPLOAD_SUFFIXES = (".json",)
DOWNLOAD_FILENAME = "formatted.json"

ERROR_CONTEXT_RADIUS = 2

STATUS_EMPTY = "empty"
STATUS_VALID = "valid"
STATUS_INVALID = "invalid"
NO_INPUT_MESSAGE = "No input"
VALID_MESSAGE = "Valid JSON"

# Bare words mapped to JSON literals during repair.
REPAIR_LITERAL_ALIASES = {
    "true": "true",
    "false": "false",
    "null": "null",
    "True": "true",
    "False": "false",
    "None": "null",
    "undefined": "null",
}

PERF_SYNTHETIC_RECORDS_DEFAULT = 1200
PERF_MAX_PARSE_MS = 300.0
PERF_MAX_REPAIR_MS = 1500.0
PERF_MAX_TOTAL_MS = 2500.0
