"""Parsing helpers for LLM responses."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def parse_verdict(response: str) -> bool:
    """Parse a single-word ACCEPT/REJECT verdict.

    Only an exact ACCEPT (ignoring case, surrounding whitespace, quotes and
    trailing punctuation) counts as acceptance. Anything else, including
    chatty answers such as "I would ACCEPT this", is a rejection.

    Examples:
        >>> parse_verdict("ACCEPT")
        True
        >>> parse_verdict(" accept. ")
        True
        >>> parse_verdict("REJECT")
        False
    """
    cleaned = response.strip().strip("\"'`").rstrip(".!").strip()
    return cleaned.upper() == "ACCEPT"


def extract_json_payload(response: str) -> Any | None:
    """Decode a JSON document from a model response.

    Handles bare JSON, JSON wrapped in a markdown code fence, and JSON
    embedded in surrounding prose (first ``{`` or ``[`` to the matching last
    bracket).

    Returns:
        The decoded value, or None if nothing parseable was found
    """
    text = response.strip()
    fence = _FENCE_RE.match(text)
    if fence:
        text = fence.group(1)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("{", "}"), ("[", "]")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue
    return None


def extract_item_list(payload: Any, preferred_keys: tuple[str, ...] = ("words", "result")) -> list[Any]:
    """Find the list of items in a decoded JSON payload.

    Accepts a bare list, a dict with one of ``preferred_keys`` holding a list,
    or failing that the first list value in the dict.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    for key in preferred_keys:
        value = payload.get(key)
        if isinstance(value, list):
            return value
    for value in payload.values():
        if isinstance(value, list):
            return value
    return []
