# gpxmax/model/track.py
"""
<trk> and <trkseg>.

A track is an ordered list of segments; each segment is a run of track
points that belong together (a new segment starts after signal loss, etc).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import ExtensionPayload, load_extensions, save_extensions
from gpxmax.formats.gpx import add_gpx_element, add_gpx_entities, gpx_children
from gpxmax.model.base import Described
from gpxmax.model.header import load_header, save_header
from gpxmax.model.links import WebLink
from gpxmax.model.waypoint import Waypoint


@dataclass(frozen=True)
class TrackSegment(Described):
    waypoints: tuple[Waypoint, ...] = ()
    extensions: Optional[ExtensionPayload] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "waypoints", tuple(self.waypoints))

    @classmethod
    def load(cls, element: Optional[ET.Element], settings) -> Optional["TrackSegment"]:
        if element is None:
            return None
        reader = settings.extension_reader
        return cls(
            waypoints=tuple(
                Waypoint.load(el, settings, reader.convert_track_point_extension)
                for el in gpx_children(element, "trkpt")
            ),
            extensions=load_extensions(element, reader.convert_track_segment_extension),
        )

    def save(self, element: ET.Element, settings) -> None:
        writer = settings.extension_writer
        for waypoint in self.waypoints:
            waypoint.save(add_gpx_element(element, "trkpt"), settings, writer.convert_track_point_extension)
        save_extensions(element, self.extensions, writer.convert_track_segment_extension)


@dataclass(frozen=True)
class Track(Described):
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: tuple[WebLink, ...] = ()
    number: Optional[int] = None
    classification: Optional[str] = None
    extensions: Optional[ExtensionPayload] = None
    segments: tuple[TrackSegment, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "links", tuple(self.links))
        object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def points(self) -> list[Waypoint]:
        """All track points, segment after segment."""
        return [p for seg in self.segments for p in seg.waypoints]

    @classmethod
    def load(cls, element: Optional[ET.Element], settings) -> Optional["Track"]:
        if element is None:
            return None
        return cls(
            **load_header(element),
            extensions=load_extensions(element, settings.extension_reader.convert_track_extension),
            segments=tuple(TrackSegment.load(el, settings) for el in gpx_children(element, "trkseg")),
        )

    def save(self, element: ET.Element, settings) -> None:
        save_header(element, self)
        save_extensions(element, self.extensions, settings.extension_writer.convert_track_extension)
        add_gpx_entities(element, "trkseg", self.segments, settings)
