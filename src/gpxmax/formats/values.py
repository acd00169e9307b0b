# gpxmax/formats/values.py
"""
Culture-invariant text <-> value helpers for GPX simple types.

GPX numbers are xsd:decimal: an optional sign, digits and an optional
decimal point. No exponent, no "inf"/"nan", no digit separators. Python's
float() accepts all of those, so text is checked against a strict pattern
before it is converted.

All parse_* helpers follow the same contract:
  - None in  -> None out (the element/attribute is absent)
  - bad text -> SchemaViolationError
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Optional
from urllib.parse import urlsplit

from gpxmax.errors import RangeViolationError, SchemaViolationError

_DECIMAL_RE = re.compile(r"^\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_YEAR_RE = re.compile(
    r"^(?P<year>-?(?:[1-9][0-9]{3,}|0[0-9]{3}))"
    r"(?:Z|[+-](?:(?:0[0-9]|1[0-3]):[0-5][0-9]|14:00))?$"
)

UINT_MAX = 2**32 - 1


def parse_double(text: Optional[str], *, what: str = "decimal") -> Optional[float]:
    """
    Parse an xsd:decimal into a finite float.
    """
    if text is None:
        return None
    if not _DECIMAL_RE.match(text):
        raise SchemaViolationError(f"{what} must be formatted properly: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        # e.g. 400 digits before the decimal point
        raise SchemaViolationError(f"{what} must be a finite number: {text!r}")
    return value


def format_double(value: float) -> str:
    """
    Format a finite float as the shortest plain decimal that parses back to
    exactly the same value.

    repr() already gives the shortest round-trip digits, but switches to
    exponent notation for very small/large magnitudes, which GPX cannot parse.
    Those cases are re-expanded through Decimal, which keeps the same digits.
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite value {value!r}")

    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def parse_uint(text: Optional[str], *, what: str = "nonNegativeInteger") -> Optional[int]:
    if text is None:
        return None
    if not _INTEGER_RE.match(text):
        raise SchemaViolationError(f"{what} must be formatted properly: {text!r}")
    value = int(text)
    if not 0 <= value <= UINT_MAX:
        raise RangeViolationError(f"{what} must be between 0 and {UINT_MAX}, inclusive: {text!r}")
    return value


def format_uint(value: int) -> str:
    return str(int(value))


def parse_gregorian_year(text: Optional[str]) -> Optional[int]:
    """
    Parse an xsd:gYear ("2024", "-0044", "1999Z", "2001+02:00").

    Any time-zone suffix is validated and then dropped.
    """
    if text is None:
        return None
    m = _YEAR_RE.match(text.strip())
    if not m:
        raise SchemaViolationError(f"year element must be formatted properly: {text!r}")
    return int(m.group("year"))


def format_gregorian_year(year: int) -> str:
    sign = "-" if year < 0 else ""
    return f"{sign}{abs(year):04d}"


def parse_uri(text: Optional[str], *, what: str = "uri") -> Optional[str]:
    """
    Validate a URI reference and return it unchanged.

    The original text is kept (not a normalized form) so it round-trips.
    """
    if text is None:
        return None
    try:
        urlsplit(text)
    except ValueError as e:
        raise SchemaViolationError(f"{what} must be formatted properly: {text!r}") from e
    if any(ch in text for ch in "\r\n\t"):
        raise SchemaViolationError(f"{what} must not contain control whitespace: {text!r}")
    return text
