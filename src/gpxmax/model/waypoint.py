# gpxmax/model/waypoint.py
"""
Waypoint entity, shared by <wpt>, <rtept> and <trkpt>.

The three elements have the same content model; only the extension hook
differs, so load()/save() take the hook as an argument.
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import ExtensionPayload, load_extensions, save_extensions
from gpxmax.formats.gpx import (
    add_gpx_entities,
    add_gpx_text,
    format_gpx_time,
    gpx_children,
    gpx_text,
    parse_gpx_time,
    require_attribute,
)
from gpxmax.formats.values import format_double, format_uint, parse_double, parse_uint
from gpxmax.model.base import Described
from gpxmax.model.links import WebLink
from gpxmax.model.scalars import Degrees, DgpsStationId, FixKind, Latitude, Longitude


def _opt_double(value: Optional[float]) -> Optional[str]:
    return None if value is None else format_double(value)


@dataclass(frozen=True)
class Waypoint(Described):
    longitude: Longitude
    latitude: Latitude
    elevation: Optional[float] = None
    timestamp: Optional[_dt.datetime] = None
    magnetic_variation: Optional[Degrees] = None
    geoid_height: Optional[float] = None
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: tuple[WebLink, ...] = ()
    symbol: Optional[str] = None
    classification: Optional[str] = None
    fix_kind: Optional[FixKind] = None
    satellites: Optional[int] = None
    hdop: Optional[float] = None
    vdop: Optional[float] = None
    pdop: Optional[float] = None
    dgps_age: Optional[float] = None
    dgps_station_id: Optional[DgpsStationId] = None
    extensions: Optional[ExtensionPayload] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "links", tuple(self.links))
        for name in ("elevation", "geoid_height", "hdop", "vdop", "pdop", "dgps_age"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
        t = self.timestamp
        if t is not None and (t.tzinfo is None or t.utcoffset()):
            raise ValueError(f"timestamp must be timezone-aware UTC, got {t!r}")
        if self.satellites is not None and self.satellites < 0:
            raise ValueError(f"satellites must not be negative, got {self.satellites}")

    @classmethod
    def load(cls, element: Optional[ET.Element], settings, hook) -> Optional["Waypoint"]:
        """
        Build a Waypoint from a wpt/rtept/trkpt element.

        `hook` is the extension reader method for this element's role.
        """
        if element is None:
            return None
        return cls(
            longitude=Longitude.parse(require_attribute(element, "lon")),
            latitude=Latitude.parse(require_attribute(element, "lat")),
            elevation=parse_double(gpx_text(element, "ele"), what="ele"),
            timestamp=parse_gpx_time(
                gpx_text(element, "time"),
                settings.time_zone,
                ignore_bad=settings.ignore_bad_datetime,
            ),
            magnetic_variation=Degrees.parse(gpx_text(element, "magvar")),
            geoid_height=parse_double(gpx_text(element, "geoidheight"), what="geoidheight"),
            name=gpx_text(element, "name"),
            comment=gpx_text(element, "cmt"),
            description=gpx_text(element, "desc"),
            source=gpx_text(element, "src"),
            links=tuple(WebLink.load(el) for el in gpx_children(element, "link")),
            symbol=gpx_text(element, "sym"),
            classification=gpx_text(element, "type"),
            fix_kind=FixKind.parse(gpx_text(element, "fix")),
            satellites=parse_uint(gpx_text(element, "sat"), what="sat"),
            hdop=parse_double(gpx_text(element, "hdop"), what="hdop"),
            vdop=parse_double(gpx_text(element, "vdop"), what="vdop"),
            pdop=parse_double(gpx_text(element, "pdop"), what="pdop"),
            dgps_age=parse_double(gpx_text(element, "ageofdgpsdata"), what="ageofdgpsdata"),
            dgps_station_id=DgpsStationId.parse(gpx_text(element, "dgpsid")),
            extensions=load_extensions(element, hook),
        )

    def save(self, element: ET.Element, settings, hook) -> None:
        element.set("lat", self.latitude.format())
        element.set("lon", self.longitude.format())

        add_gpx_text(element, "ele", _opt_double(self.elevation))
        if self.timestamp is not None:
            add_gpx_text(element, "time", format_gpx_time(self.timestamp, settings.time_zone))
        if self.magnetic_variation is not None:
            add_gpx_text(element, "magvar", self.magnetic_variation.format())
        add_gpx_text(element, "geoidheight", _opt_double(self.geoid_height))
        add_gpx_text(element, "name", self.name)
        add_gpx_text(element, "cmt", self.comment)
        add_gpx_text(element, "desc", self.description)
        add_gpx_text(element, "src", self.source)
        add_gpx_entities(element, "link", self.links)
        add_gpx_text(element, "sym", self.symbol)
        add_gpx_text(element, "type", self.classification)
        if self.fix_kind is not None:
            add_gpx_text(element, "fix", self.fix_kind.format())
        if self.satellites is not None:
            add_gpx_text(element, "sat", format_uint(self.satellites))
        add_gpx_text(element, "hdop", _opt_double(self.hdop))
        add_gpx_text(element, "vdop", _opt_double(self.vdop))
        add_gpx_text(element, "pdop", _opt_double(self.pdop))
        add_gpx_text(element, "ageofdgpsdata", _opt_double(self.dgps_age))
        if self.dgps_station_id is not None:
            add_gpx_text(element, "dgpsid", self.dgps_station_id.format())
        save_extensions(element, self.extensions, hook)
