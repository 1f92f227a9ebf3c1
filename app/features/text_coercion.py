"""Best-effort JSON extraction from free-form model output.

Language models asked for "JSON only" still wrap answers in prose or code
fences. ``coerce_json`` tries a fixed ladder of cheap extractions and never
raises; callers validate the shape of whatever comes back.
"""

from __future__ import annotations

import json
import re
from typing import Any

_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")

RAW_KEY = "raw"


def _parse_span(pattern: re.Pattern[str], text: str) -> tuple[bool, Any]:
    match = pattern.search(text)
    if not match:
        return False, None
    try:
        return True, json.loads(match.group(0))
    except (ValueError, RecursionError):
        return False, None


def coerce_json(text: Any) -> Any:
    """Parse ``text`` as JSON, falling back to the first ``{..}`` then ``[..]`` span.

    Spans are greedy (first opening bracket to last closing one); nested
    balance is not checked. When nothing parses the result is ``{"raw": text}``.
    """
    if not text or not isinstance(text, str):
        return {RAW_KEY: text}

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass

    for pattern in (_OBJECT_SPAN, _ARRAY_SPAN):
        found, value = _parse_span(pattern, text)
        if found:
            return value

    return {RAW_KEY: text}


def extract_json_array(text: Any) -> list[Any] | None:
    if not text or not isinstance(text, str):
        return None
    found, value = _parse_span(_ARRAY_SPAN, text)
    if found and isinstance(value, list):
        return value
    return None
