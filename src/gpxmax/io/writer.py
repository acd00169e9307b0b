# gpxmax/io/writer.py
"""
GPX document writer.

Builds the <gpx> tree from model objects and serializes it with
gpxmax.formats.gpx.write_gpx. Output layout:

  <?xml version='1.0' encoding='utf-8'?>
  <gpx version="1.1" creator="...">
    <metadata>   (only when there is more than a creator)
    <wpt>*  <rte>*  <trk>*
    <extensions> (optional)
  </gpx>
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import ExtensionPayload, save_extensions
from gpxmax.formats.gpx import GPX_VERSION, add_gpx_element, qn, write_gpx
from gpxmax.model.metadata import Metadata
from gpxmax.model.route import Route
from gpxmax.model.track import Track
from gpxmax.model.waypoint import Waypoint
from gpxmax.settings import WriterSettings


def _each(items: Optional[Iterable], what: str):
    for item in items or ():
        if item is None:
            raise ValueError(f"all {what} must be non-None")
        yield item


def build_tree(
        settings: WriterSettings,
        metadata: Metadata,
        waypoints: Optional[Iterable[Waypoint]] = None,
        routes: Optional[Iterable[Route]] = None,
        tracks: Optional[Iterable[Track]] = None,
        extensions: Optional[ExtensionPayload] = None,
) -> ET.Element:
    if metadata is None:
        raise ValueError("metadata is required (it carries the creator)")

    root = ET.Element(qn("gpx"), {"version": GPX_VERSION, "creator": metadata.creator})

    if not metadata.is_trivial:
        metadata.save(add_gpx_element(root, "metadata"), settings)

    hook = settings.extension_writer.convert_waypoint_extension
    for waypoint in _each(waypoints, "waypoints"):
        waypoint.save(add_gpx_element(root, "wpt"), settings, hook)
    for route in _each(routes, "routes"):
        route.save(add_gpx_element(root, "rte"), settings)
    for track in _each(tracks, "tracks"):
        track.save(add_gpx_element(root, "trk"), settings)

    save_extensions(root, extensions, settings.extension_writer.convert_gpx_extension)
    return root


def write(
        out: Union[str, Path, BinaryIO],
        settings: Optional[WriterSettings],
        metadata: Metadata,
        waypoints: Optional[Iterable[Waypoint]] = None,
        routes: Optional[Iterable[Route]] = None,
        tracks: Optional[Iterable[Track]] = None,
        extensions: Optional[ExtensionPayload] = None,
) -> None:
    """
    Write a complete GPX 1.1 document to a path or binary stream.

    settings=None means a fresh WriterSettings() for this call.
    """
    if settings is None:
        settings = WriterSettings()
    root = build_tree(settings, metadata, waypoints, routes, tracks, extensions)
    write_gpx(root, out, pretty=settings.pretty, namespaces_by_prefix=settings.namespaces_by_prefix)
