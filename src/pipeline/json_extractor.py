# src/pipeline/json_extractor.py — v1
"""Recover JSON data from free-form model output.

Strategies are tried in order; each is total (returns parsed data or None,
never raises) and the first success wins:

  1. ```json fenced block
  2. plain ``` fenced block
  3. largest {...} span (first '{' to last '}')
  4. largest [...] span (first '[' to last ']')
  5. the whole text

A literal JSON null counts as "no structured data".
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from contentflow.core.errors import ExtractionFailed

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_PLAIN_FENCE = re.compile(r"```\s*([\s\S]*?)```")

Strategy = Callable[[str], Any]


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate.strip())
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None


def _from_json_fence(text: str) -> Any:
    match = _JSON_FENCE.search(text)
    return _loads(match.group(1)) if match else None


def _from_plain_fence(text: str) -> Any:
    match = _PLAIN_FENCE.search(text)
    return _loads(match.group(1)) if match else None


def _span(text: str, opening: str, closing: str) -> Any:
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end <= start:
        return None
    return _loads(text[start:end + 1])


def _from_object_span(text: str) -> Any:
    return _span(text, "{", "}")


def _from_array_span(text: str) -> Any:
    return _span(text, "[", "]")


def _from_whole_text(text: str) -> Any:
    return _loads(text)


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("json_fence", _from_json_fence),
    ("plain_fence", _from_plain_fence),
    ("object_span", _from_object_span),
    ("array_span", _from_array_span),
    ("whole_text", _from_whole_text),
)


def extract_json(text: str) -> Any:
    """Return the first structured value any strategy recovers from text.

    Raises:
        ExtractionFailed: If no strategy yields a non-null JSON value. The
            exception carries a preview of at most 500 characters.
    """
    for name, strategy in STRATEGIES:
        result = strategy(text)
        if result is not None:
            logger.debug("JSON extracted via %s strategy", name)
            return result
    raise ExtractionFailed(text)
