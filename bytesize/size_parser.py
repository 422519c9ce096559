from __future__ import annotations

import logging
import math
import re

from bytesize.errors import InvalidSize, InvalidSizeSuffix
from bytesize.units import UNIT_MULTIPLIERS, wrap_int64

LOGGER = logging.getLogger(__name__)

# Whole-string match only; unit letters are validated after the match.
_SIZE_PATTERN = re.compile(r"(?P<num>[0-9]+(?:\.[0-9]+)?)[ \t\n\r\f\v]*(?P<unit>[A-Za-z]*)")


def parse_size(text: str) -> int:
    """
    Parse a human-readable size and return bytes.

    Accepted examples: "1234", "1024B", "1K", "1.5 KB", "0.5gb", "2 MB".
    Units are binary multiples of 1024; the trailing "B" of a unit is optional
    and letters are case-insensitive. Fractional results are truncated toward zero.

    Raises InvalidSize when the text does not match the grammar and
    InvalidSizeSuffix when the unit is not recognized.
    """
    match = _SIZE_PATTERN.fullmatch(text)
    if not match:
        LOGGER.debug("Size grammar mismatch text=%r", text, extra={"category": "PARSE"})
        raise InvalidSize(text)
    try:
        number = float(match.group("num"))
    except ValueError as exc:
        raise InvalidSize(text) from exc
    if not math.isfinite(number):
        LOGGER.debug("Size number out of float range text=%r", text, extra={"category": "PARSE"})
        raise InvalidSize(text)

    suffix = match.group("unit")
    multiplier = UNIT_MULTIPLIERS.get(suffix.upper())
    if multiplier is None:
        LOGGER.debug("Unknown size suffix text=%r suffix=%r", text, suffix, extra={"category": "PARSE"})
        raise InvalidSizeSuffix(suffix, text)

    product = number * multiplier
    if not math.isfinite(product):
        raise InvalidSize(text)
    value = wrap_int64(int(product))
    LOGGER.debug("Parsed size text=%r bytes=%s", text, value, extra={"category": "PARSE"})
    return value


def parse_size_bytes(raw: str | None, default: int) -> int:
    """
    Parse a human-readable size and return bytes.

    Returns default for empty/invalid/non-positive inputs.
    """
    text = (raw or "").strip()
    if not text:
        return default
    try:
        value = parse_size(text)
    except InvalidSize:
        return default
    if value <= 0:
        return default
    return value
