"""Pull the JSON page state that server-rendered pages embed in a script tag."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from anisub.constants import NEXT_DATA_MARKER, NEXT_DATA_PREFIX_LENGTH, SCRIPT_END_MARKER

log = logging.getLogger("anisub.state_extractor")


def trim_between(html: str, start: str, end: str) -> str:
    """Return ``html`` from the first ``start`` up to the next ``end``.

    Empty string when either marker is missing.
    """
    start_index = html.find(start)
    if start_index == -1:
        log.debug("Start marker %r not found", start)
        return ""
    end_index = html.find(end, start_index)
    if end_index == -1:
        log.debug("End marker %r not found after start marker", end)
        return ""
    return html[start_index:end_index]


def extract_embedded_state(
    html: Optional[str],
    start_marker: str = NEXT_DATA_MARKER,
    end_marker: str = SCRIPT_END_MARKER,
    prefix_length: int = NEXT_DATA_PREFIX_LENGTH,
) -> Optional[Any]:
    """Parse the JSON between ``start_marker`` and ``end_marker``.

    ``prefix_length`` characters are dropped from the isolated slice; for
    ``__NEXT_DATA__`` that is the rest of the opening tag. Returns ``None``
    instead of raising on a missing marker or malformed JSON.
    """
    if not html or not isinstance(html, str):
        log.debug("No HTML to extract state from")
        return None

    trimmed = trim_between(html, start_marker, end_marker)
    if not trimmed:
        log.warning("Could not find %s in HTML", start_marker)
        return None

    payload = trimmed[prefix_length:]
    if not payload.strip():
        log.warning("Empty state payload after %s", start_marker)
        return None

    try:
        return json.loads(payload)
    except ValueError as exc:
        log.warning("Malformed %s JSON: %s", start_marker, exc)
        return None


def dig(payload: Any, *keys: str) -> Optional[Any]:
    """Walk nested dicts, returning ``None`` at the first missing key."""
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def parse_int(raw: Any) -> Optional[int]:
    """Integer from an int, an integral float or a string of decimal digits."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    text = str(raw).strip()
    # isdigit() also accepts superscripts and circled digits, which int() rejects
    if not text.isdecimal():
        return None
    return int(text)


__all__ = ["extract_embedded_state", "trim_between", "dig", "parse_int"]
