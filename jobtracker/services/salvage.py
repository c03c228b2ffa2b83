"""Recover a JSON object from free-form model output.

Models asked for "JSON only" still wrap it in prose, code fences or
comments. The salvage pipeline tries, in order:

1. the whole string as JSON
2. the first fenced code block
3. the span from the first ``{`` to the last ``}``

Every candidate is retried once with ``/* */`` and ``//`` comments
removed. The first candidate that decodes to an object wins.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")
_BRACE_SPAN_RE = re.compile(r"\{[\s\S]*\}")
_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
# Line comments only after whitespace or structural characters, so that
# "https://..." inside string values survives.
_LINE_COMMENT_RE = re.compile(r"(^|[\s,{\[])//[^\n]*", re.MULTILINE)


def strip_comments(text: str) -> str:
    text = _BLOCK_COMMENT_RE.sub("", text)
    return _LINE_COMMENT_RE.sub(lambda m: m.group(1), text)


def _loads_object(candidate: str) -> Optional[dict]:
    for attempt in (candidate, strip_comments(candidate)):
        try:
            value = json.loads(attempt)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(value, dict):
            return value
    return None


def parse_whole(text: str) -> Optional[dict]:
    return _loads_object(text.strip())


def parse_fenced(text: str) -> Optional[dict]:
    match = _FENCE_RE.search(text)
    if not match:
        return None
    return _loads_object(match.group(1).strip())


def parse_brace_span(text: str) -> Optional[dict]:
    match = _BRACE_SPAN_RE.search(text)
    if not match:
        return None
    return _loads_object(match.group(0))


STRATEGIES: tuple[tuple[str, Callable[[str], Optional[dict]]], ...] = (
    ("whole", parse_whole),
    ("fenced", parse_fenced),
    ("brace_span", parse_brace_span),
)


def extract_json(text: Optional[str]) -> Optional[dict]:
    """Return the first JSON object recoverable from ``text``, else None."""
    if not isinstance(text, str) or not text.strip():
        logger.debug("Empty or non-text model response, nothing to salvage")
        return None

    for name, strategy in STRATEGIES:
        result = strategy(text)
        if result is not None:
            logger.debug("Recovered JSON with strategy=%s", name)
            return result

    logger.info("No JSON object recoverable from %d chars of model output", len(text))
    return None
