# gpxmax/model/scalars.py
"""
Range-constrained GPX scalar values.

Each type wraps one number, rejects anything outside its legal interval at
construction time (RangeViolationError), and compares/hashes by value.
Wrap-around is never applied: 181 degrees of longitude is an error, not -179.

parse() is the only way text becomes a value, format() the only way back,
and parse(format(v)) == v for every legal v.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import ClassVar, Optional

from gpxmax.errors import RangeViolationError, SchemaViolationError
from gpxmax.formats.values import format_double, parse_double

_INTEGER_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")

@dataclass(frozen=True, order=True)
class _BoundedDegrees:
    value: float

    LOWER: ClassVar[float]
    UPPER: ClassVar[float]
    UPPER_INCLUSIVE: ClassVar[bool] = True
    LABEL: ClassVar[str] = "value"

    def __post_init__(self) -> None:
        v = self.value
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise TypeError(f"{self.LABEL} must be a number, not {type(v).__name__}")
        try:
            v = float(v)
        except OverflowError:
            raise RangeViolationError(f"{self.LABEL} outside {self._interval()}: too large") from None
        in_range = self.LOWER <= v <= self.UPPER if self.UPPER_INCLUSIVE else self.LOWER <= v < self.UPPER
        if math.isnan(v) or not in_range:
            raise RangeViolationError(f"{self.LABEL} {v!r} outside {self._interval()}")
        object.__setattr__(self, "value", v)

    @classmethod
    def _interval(cls) -> str:
        close = "]" if cls.UPPER_INCLUSIVE else ")"
        return f"[{format_double(cls.LOWER)}, {format_double(cls.UPPER)}{close}"

    @classmethod
    def parse(cls, text: Optional[str]):
        """None -> None; malformed -> SchemaViolationError; out of range -> RangeViolationError."""
        value = parse_double(text, what=cls.LABEL)
        if value is None:
            return None
        return cls(value)

    def format(self) -> str:
        return format_double(self.value)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return self.format()


class Longitude(_BoundedDegrees):
    """WGS-84 longitude in degrees, -180 <= value <= 180."""

    LOWER = -180.0
    UPPER = 180.0
    LABEL = "longitude"


class Latitude(_BoundedDegrees):
    """WGS-84 latitude in degrees, -90 <= value <= 90."""

    LOWER = -90.0
    UPPER = 90.0
    LABEL = "latitude"


class Degrees(_BoundedDegrees):
    """Bearing/magnetic variation in degrees, 0 <= value < 360."""

    LOWER = 0.0
    UPPER = 360.0
    UPPER_INCLUSIVE = False
    LABEL = "degrees"


Longitude.MIN_VALUE = Longitude(Longitude.LOWER)
Longitude.MAX_VALUE = Longitude(Longitude.UPPER)
Latitude.MIN_VALUE = Latitude(Latitude.LOWER)
Latitude.MAX_VALUE = Latitude(Latitude.UPPER)
Degrees.MIN_VALUE = Degrees(0.0)
# largest double below 360
Degrees.MAX_VALUE = Degrees(math.nextafter(360.0, 0.0))


@dataclass(frozen=True, order=True)
class DgpsStationId:
    """ID of a differential GPS station, 0 <= value <= 1023."""

    value: int

    def __post_init__(self) -> None:
        v = self.value
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"DGPS station ID must be an int, not {type(v).__name__}")
        if not 0 <= v <= 1023:
            raise RangeViolationError(f"DGPS station ID {v} outside [0, 1023]")

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["DgpsStationId"]:
        if text is None:
            return None
        if not _INTEGER_RE.match(text):
            raise SchemaViolationError(f"DGPS station ID must be formatted properly: {text!r}")
        return cls(int(text))

    def format(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.format()


DgpsStationId.MIN_VALUE = DgpsStationId(0)
DgpsStationId.MAX_VALUE = DgpsStationId(1023)


class FixKind(enum.Enum):
    """Type of GPS fix; the enum value is the GPX wire text."""

    NONE = "none"
    TWO_DIMENSIONAL = "2d"
    THREE_DIMENSIONAL = "3d"
    DGPS = "dgps"
    PPS = "pps"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["FixKind"]:
        if text is None:
            return None
        try:
            return cls(text)
        except ValueError:
            raise SchemaViolationError(
                "fix must be either 'none', '2d', '3d', 'dgps', or 'pps'"
            ) from None

    def format(self) -> str:
        return self.value
