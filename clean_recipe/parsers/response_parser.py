"""
Model Response Parser.

Language models are asked for pure JSON but frequently wrap it in markdown
code fences or surround it with prose. This module recovers the JSON value.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..exceptions import ExtractionParseError

_LOGGER = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'```(?:json|JSON)?\s*([\s\S]*?)```')


def strip_code_fences(text: str) -> str:
    """Return the content of the first markdown code block, or the text itself."""
    match = _FENCE_RE.search(text)
    return match.group(1) if match else text


def _outer_span(text: str, opening: str, closing: str) -> str | None:
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def extract_json_value(text: str) -> Any:
    """Extract and parse the JSON payload of a model response.

    The outermost ``{...}`` span is preferred; a bare ``[...]`` array is
    accepted when no object is present.

    Args:
        text: Raw response text

    Returns:
        The parsed JSON value

    Raises:
        ExtractionParseError: If no JSON value can be parsed
    """
    if not isinstance(text, str) or not text.strip():
        raise ExtractionParseError("empty response")

    candidate = strip_code_fences(text).strip()

    try:
        return json.loads(candidate)
    except ValueError:
        pass

    spans = [_outer_span(candidate, '{', '}'), _outer_span(candidate, '[', ']')]
    for span in spans:
        if span is None:
            continue
        try:
            return json.loads(span)
        except ValueError as err:
            _LOGGER.debug("Candidate JSON span failed to parse: %s", err)

    _LOGGER.debug("No JSON found in response: %.200s", text)
    raise ExtractionParseError("response does not contain JSON")
