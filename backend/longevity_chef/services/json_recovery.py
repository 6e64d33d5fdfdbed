"""
JSON recovery for model output.

The model is asked for JSON but replies are token-capped and occasionally wrapped in
markdown fences or preceded by commentary. Large arrays (a batch of recipes, a full
shopping list) are often cut off mid-element; losing the last, incomplete element is
better than discarding the whole batch, so arrays are repaired by cutting back to the
last element that closed cleanly. A truncated object has no safe closing point and is
never repaired.
"""

import json
import logging
import re
from enum import Enum

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")


class Shape(str, Enum):
    OBJECT = "object"
    ARRAY = "array"


class MalformedResponse(ValueError):
    """Model text could not be parsed as the expected shape, even after recovery."""


def strip_code_fence(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    if "```" in text:
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text


def _matches(value, shape: Shape) -> bool:
    if shape is Shape.ARRAY:
        return isinstance(value, list)
    return isinstance(value, dict)


def _scan_array(text: str) -> tuple[int | None, int | None]:
    """
    Walk an array literal starting at text[0] and find safe cut points.

    Returns (last_element_end, array_end): the index just past the last element
    object that closed at the array's top level, and the index just past the
    array's own closing bracket. Either is None when not found. Brackets inside
    string values (including escaped quotes) are ignored.
    """
    if not text.startswith("["):
        return None, None

    depth = 0
    in_string = False
    escaped = False
    last_element_end = None

    for i, ch in enumerate(text):
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
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
            if depth == 0:
                return last_element_end, i + 1
            if depth < 0:
                break
            if depth == 1 and ch == "}":
                last_element_end = i + 1

    return last_element_end, None


def _recover_truncated_array(text: str) -> list:
    element_end, array_end = _scan_array(text)

    candidates = []
    if array_end is not None:
        candidates.append(text[:array_end])
    if element_end is not None:
        candidates.append(text[:element_end] + "]")

    if not candidates:
        raise MalformedResponse("Could not recover JSON: no complete array elements found")

    last_error = None
    for candidate in candidates:
        try:
            recovered = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        logger.warning(f"Recovered {len(recovered)} items from malformed or truncated JSON array")
        return recovered

    raise MalformedResponse(f"JSON recovery failed: {last_error}") from last_error


def recover_json(raw_text: str | None, shape: Shape):
    """
    Extract a best-effort JSON value of the given shape from model text.

    Only syntactic validity is guaranteed; callers validate the fields.
    Raises MalformedResponse when nothing usable can be extracted.
    """
    text = strip_code_fence(raw_text or "")

    opener = "[" if shape is Shape.ARRAY else "{"
    start = text.find(opener)
    if start != -1:
        text = text[start:]

    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        error = str(e)
    else:
        if _matches(value, shape):
            return value
        error = f"expected a JSON {shape.value}, got {type(value).__name__}"

    if shape is Shape.OBJECT:
        raise MalformedResponse(f"Could not parse JSON object: {error}")

    logger.info(f"JSON parse failed ({error}), attempting recovery from truncation")
    return _recover_truncated_array(text)
