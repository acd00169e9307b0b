# gpxmax/extensions/garmin.py
"""
Garmin TrackPointExtension/v1 support.

Garmin devices put sensor data on each <trkpt> like so:

  <extensions>
    <gpxtpx:TrackPointExtension>
      <gpxtpx:atemp>21.5</gpxtpx:atemp>
      <gpxtpx:hr>142</gpxtpx:hr>
      <gpxtpx:cad>88</gpxtpx:cad>
    </gpxtpx:TrackPointExtension>
  </extensions>

GarminTrackPointExtensionReader turns exactly that shape into a typed
TrackPointExtension value. Any other extensions content (other vendors,
extra siblings, unknown children) is kept as a RawFragment instead, so
nothing is lost.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import (
    ExtensionPayload,
    ExtensionReader,
    ExtensionWriter,
    PayloadKind,
    TypedPayload,
)
from gpxmax.formats.gpx import element_value, local_name, namespace_of
from gpxmax.formats.values import format_double, parse_double
from gpxmax.model.base import Described

logger = logging.getLogger(__name__)

GARMIN_TPX_NS = "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"
GARMIN_TPX_PREFIX = "gpxtpx"

_DOUBLE_FIELDS = ("atemp", "wtemp", "depth")
_BYTE_FIELDS = ("hr", "cad")
_FIELD_ORDER = ("atemp", "wtemp", "depth", "hr", "cad")


def _tpx(tag: str) -> str:
    return f"{{{GARMIN_TPX_NS}}}{tag}"


@dataclass(frozen=True)
class TrackPointExtension(Described):
    """
    Sensor readings for one track point.

    atemp/wtemp are air/water temperature in degrees Celsius, depth is in
    meters, hr is heart rate (beats per minute) and cad is cadence (rpm).
    """

    atemp: Optional[float] = None
    wtemp: Optional[float] = None
    depth: Optional[float] = None
    hr: Optional[int] = None
    cad: Optional[int] = None

    def __post_init__(self) -> None:
        if self.hr is not None and not 1 <= self.hr <= 255:
            raise ValueError(f"hr must be between 1 and 255, got {self.hr}")
        if self.cad is not None and not 0 <= self.cad <= 254:
            raise ValueError(f"cad must be between 0 and 254, got {self.cad}")


def _parse_byte(text: str, tag: str) -> int:
    value = parse_double(text, what=tag)
    if value != int(value):
        raise ValueError(f"{tag} must be a whole number: {text!r}")
    return int(value)


class GarminTrackPointExtensionReader(ExtensionReader):
    def convert_track_point_extension(self, elements: Sequence[ET.Element]) -> Optional[ExtensionPayload]:
        if len(elements) != 1 or elements[0].tag != _tpx("TrackPointExtension") or elements[0].attrib:
            logger.debug("track point extensions are not a lone TrackPointExtension; keeping raw XML")
            return self.from_elements(elements)

        block = elements[0]
        values = {}
        for child in block:
            local = local_name(child.tag)
            if namespace_of(child.tag) != GARMIN_TPX_NS or local not in _FIELD_ORDER or local in values:
                logger.debug("unrecognized TrackPointExtension child %s; keeping raw XML", child.tag)
                return self.from_elements(elements)
            text = element_value(child)
            if local in _DOUBLE_FIELDS:
                values[local] = parse_double(text, what=local)
            else:
                values[local] = _parse_byte(text, local)

        return TypedPayload(TrackPointExtension(**values))


class GarminTrackPointExtensionWriter(ExtensionWriter):
    def convert_track_point_extension(self, payload: ExtensionPayload) -> Optional[list[ET.Element]]:
        if payload.kind is PayloadKind.RAW or not isinstance(payload.value, TrackPointExtension):
            return self.to_elements(payload)

        ext = payload.value
        block = ET.Element(_tpx("TrackPointExtension"))
        for name in _FIELD_ORDER:
            value = getattr(ext, name)
            if value is None:
                continue
            child = ET.SubElement(block, _tpx(name))
            child.text = format_double(value) if name in _DOUBLE_FIELDS else str(value)
        return [block]
