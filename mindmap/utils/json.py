"""JSON parsing helpers for storage blobs.

Both helpers return None instead of raising, so callers decide how to
recover from bad data.
"""

import json
from typing import Any


def parse_json_or_none(raw: str | bytes | dict | list | None) -> dict | list | None:
    """Parse a JSON string or return a structured value as-is, None on failure.

    Returns None for: None, empty string, invalid or too deeply nested JSON,
    JSON scalars.
    """
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        return raw
    if isinstance(raw, (str, bytes)):
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except (ValueError, TypeError, RecursionError):
            return None
        if isinstance(parsed, (dict, list)):
            return parsed
    return None


def parse_json_list(raw: str | bytes | list | None) -> list[Any] | None:
    """Like parse_json_or_none, but only a JSON array counts as success."""
    parsed = parse_json_or_none(raw)
    if isinstance(parsed, list):
        return parsed
    return None
