# gpxmax/model/route.py
"""
<rte>: an ordered list of route points leading to a destination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import ExtensionPayload, load_extensions, save_extensions
from gpxmax.formats.gpx import add_gpx_element, gpx_children
from gpxmax.model.base import Described
from gpxmax.model.header import load_header, save_header
from gpxmax.model.links import WebLink
from gpxmax.model.waypoint import Waypoint


@dataclass(frozen=True)
class Route(Described):
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: tuple[WebLink, ...] = ()
    number: Optional[int] = None
    classification: Optional[str] = None
    extensions: Optional[ExtensionPayload] = None
    waypoints: tuple[Waypoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "links", tuple(self.links))
        object.__setattr__(self, "waypoints", tuple(self.waypoints))

    @classmethod
    def load(cls, element: Optional[ET.Element], settings) -> Optional["Route"]:
        if element is None:
            return None
        reader = settings.extension_reader
        return cls(
            **load_header(element),
            extensions=load_extensions(element, reader.convert_route_extension),
            waypoints=tuple(
                Waypoint.load(el, settings, reader.convert_route_point_extension)
                for el in gpx_children(element, "rtept")
            ),
        )

    def save(self, element: ET.Element, settings) -> None:
        writer = settings.extension_writer
        save_header(element, self)
        save_extensions(element, self.extensions, writer.convert_route_extension)
        for waypoint in self.waypoints:
            waypoint.save(add_gpx_element(element, "rtept"), settings, writer.convert_route_point_extension)
