"""
Best-effort recovery of a JSON payload from free-form model output.

Models routinely wrap JSON in prose or markdown code fences. ``coerce_json``
never raises: it returns either ``Parsed(value)`` or ``Unparseable(reason)``
and leaves it to the caller to record the failure.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class Parsed:
    """A JSON object or array recovered from model output."""

    value: Any


@dataclass(frozen=True)
class Unparseable:
    """No JSON object or array could be recovered."""

    reason: str


CoercionResult = Parsed | Unparseable


def _find_matching_close(text: str, start: int) -> int | None:
    """
    Return the index of the bracket closing ``text[start]``.

    Brackets inside JSON strings are ignored. Returns None when a closer
    does not match, and ``len(text)`` when the structure runs off the end
    of the text.
    """
    stack: list[str] = []
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]"):
            if not stack or stack[-1] != ch:
                return None
            stack.pop()
            if not stack:
                return i
    return len(text)


def _loads(candidate: str) -> Any | None:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, (dict, list)) else None


def coerce_json(text: str | None) -> CoercionResult:
    """
    Locate and parse the first JSON object or array in ``text``.

    Scans from each ``{`` or ``[`` to its matching closing bracket and
    returns the first span that parses. As a last resort the greedy span
    from the first opener to the last matching closer is tried.

    Args:
        text: Raw completion text.

    Returns:
        Parsed(value) on success, Unparseable(reason) otherwise.
    """
    if not text or not text.strip():
        return Unparseable("empty response")

    openers = [i for i, ch in enumerate(text) if ch in _CLOSERS]
    if not openers:
        return Unparseable("no JSON object or array found in response")

    position = 0
    for start in openers:
        if start < position:
            # Inside a span that was already rejected
            continue
        end = _find_matching_close(text, start)
        if end is None:
            continue
        if end == len(text):
            # The rest of the text lies inside this unterminated span
            break
        value = _loads(text[start : end + 1])
        if value is not None:
            return Parsed(value)
        position = end + 1

    first = openers[0]
    last_close = text.rfind(_CLOSERS[text[first]])
    if last_close > first:
        value = _loads(text[first : last_close + 1])
        if value is not None:
            return Parsed(value)

    logger.warning("Could not parse JSON from model output: %s", text[:200])
    return Unparseable("response contained malformed JSON")
