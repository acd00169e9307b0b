# gpxmax/model/bounds.py
"""
<bounds> entity.

min <= max is deliberately not checked: the schema does not require it, and
reordering the values would change what a (malformed) document said.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional
from xml.etree import ElementTree as ET

from gpxmax.formats.gpx import require_attribute
from gpxmax.model.base import Described
from gpxmax.model.scalars import Latitude, Longitude


@dataclass(frozen=True)
class BoundingBox(Described):
    min_longitude: Longitude
    min_latitude: Latitude
    max_longitude: Longitude
    max_latitude: Latitude

    WORLD: ClassVar["BoundingBox"]

    @classmethod
    def load(cls, element: Optional[ET.Element]) -> Optional["BoundingBox"]:
        """All four of minlat/minlon/maxlat/maxlon are mandatory."""
        if element is None:
            return None
        return cls(
            min_longitude=Longitude.parse(require_attribute(element, "minlon")),
            min_latitude=Latitude.parse(require_attribute(element, "minlat")),
            max_longitude=Longitude.parse(require_attribute(element, "maxlon")),
            max_latitude=Latitude.parse(require_attribute(element, "maxlat")),
        )

    def save(self, element: ET.Element) -> None:
        element.set("minlat", self.min_latitude.format())
        element.set("minlon", self.min_longitude.format())
        element.set("maxlat", self.max_latitude.format())
        element.set("maxlon", self.max_longitude.format())


BoundingBox.WORLD = BoundingBox(
    min_longitude=Longitude.MIN_VALUE,
    min_latitude=Latitude.MIN_VALUE,
    max_longitude=Longitude.MAX_VALUE,
    max_latitude=Latitude.MAX_VALUE,
)
