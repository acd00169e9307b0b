# gpxmax/model/document.py
"""
GpxFile: a whole GPX document held in memory.

Unlike the entities it contains, GpxFile is a mutable container: append to
its lists or replace its metadata, then write it back out.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Union

from gpxmax.extensions.base import ExtensionPayload
from gpxmax.io import reader, writer
from gpxmax.model.metadata import Metadata
from gpxmax.model.route import Route
from gpxmax.model.track import Track
from gpxmax.model.waypoint import Waypoint
from gpxmax.settings import ReaderSettings, WriterSettings

DEFAULT_CREATOR = "gpxmax"


class _FileBuilder(reader.GpxVisitor):
    def __init__(self, target: "GpxFile"):
        self.target = target

    def visit_metadata(self, metadata):
        self.target.metadata = metadata

    def visit_waypoint(self, waypoint):
        self.target.waypoints.append(waypoint)

    def visit_route(self, route):
        self.target.routes.append(route)

    def visit_track(self, track):
        self.target.tracks.append(track)

    def visit_extensions(self, extensions):
        self.target.extensions = extensions


@dataclass
class GpxFile:
    metadata: Metadata = field(default_factory=lambda: Metadata(creator=DEFAULT_CREATOR))
    waypoints: list[Waypoint] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    extensions: Optional[ExtensionPayload] = None

    @classmethod
    def read_from(
            cls,
            source: Union[str, Path, BinaryIO],
            settings: Optional[ReaderSettings] = None,
    ) -> "GpxFile":
        result = cls()
        reader.read(source, settings, _FileBuilder(result))
        return result

    @classmethod
    def parse(cls, text: str, settings: Optional[ReaderSettings] = None) -> "GpxFile":
        """
        Read a document held in a str.

        The text is already decoded, so an encoding="..." in its XML
        declaration is ignored.
        """
        return cls.read_from(io.StringIO(text), settings)

    def write_to(
            self,
            out: Union[str, Path, BinaryIO],
            settings: Optional[WriterSettings] = None,
    ) -> None:
        writer.write(
            out,
            settings,
            self.metadata,
            self.waypoints,
            self.routes,
            self.tracks,
            self.extensions,
        )

    def to_string(self, settings: Optional[WriterSettings] = None) -> str:
        buf = io.BytesIO()
        self.write_to(buf, settings)
        return buf.getvalue().decode("utf-8")
