# gpxmax/io/reader.py
"""
Streaming GPX document reader.

The document is walked with ElementTree.iterparse, one top-level child of
<gpx> at a time: each <metadata>/<wpt>/<rte>/<trk>/<extensions> subtree is
loaded into a model object, handed to a GpxVisitor, and then dropped from
the tree. Memory use therefore tracks the largest single child, not the
whole file.

Errors:
  ET.ParseError          malformed XML (propagated unchanged)
  SchemaViolationError   document-level rules (root, version, creator, order)
  GpxFormatError         whatever the entity loaders raise
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union
from xml.etree import ElementTree as ET

from gpxmax.errors import SchemaViolationError
from gpxmax.extensions.base import ExtensionPayload, convert_extensions_element
from gpxmax.formats.gpx import GPX_NS, GPX_VERSION, local_name, namespace_of, qn
from gpxmax.model.metadata import Metadata
from gpxmax.model.route import Route
from gpxmax.model.track import Track
from gpxmax.model.waypoint import Waypoint
from gpxmax.settings import ReaderSettings

logger = logging.getLogger(__name__)


class GpxVisitor:
    """
    Receives the top-level contents of a GPX document in document order.

    visit_metadata is called exactly once per document, before anything
    else; a document without <metadata> yields a trivial Metadata that
    only carries the creator. Override what you need; the rest are no-ops.
    """

    def visit_metadata(self, metadata: Metadata) -> None:
        pass

    def visit_waypoint(self, waypoint: Waypoint) -> None:
        pass

    def visit_route(self, route: Route) -> None:
        pass

    def visit_track(self, track: Track) -> None:
        pass

    def visit_extensions(self, extensions: ExtensionPayload) -> None:
        pass


class _TopLevel:
    """Dispatch state for the children of one <gpx> root."""

    def __init__(self, settings: ReaderSettings, visitor: GpxVisitor, creator: str):
        self.settings = settings
        self.visitor = visitor
        self.creator = creator
        self.expecting_metadata = True
        self.expecting_extensions = True

    def _unexpected(self, element: ET.Element) -> None:
        if not self.settings.ignore_unexpected_children:
            raise SchemaViolationError(f"unexpected element <{local_name(element.tag)}> in <gpx>")
        logger.debug("skipping unexpected top-level element %s", element.tag)

    def finish_metadata(self) -> None:
        if self.expecting_metadata:
            self.expecting_metadata = False
            self.visitor.visit_metadata(Metadata(creator=self.creator))

    def dispatch(self, element: ET.Element) -> None:
        settings = self.settings
        name = local_name(element.tag) if namespace_of(element.tag) == GPX_NS["gpx"] else None

        if self.expecting_metadata and name == "metadata":
            self.expecting_metadata = False
            self.visitor.visit_metadata(Metadata.load(element, settings, self.creator))
            return
        self.finish_metadata()

        if name == "wpt":
            hook = settings.extension_reader.convert_waypoint_extension
            self.visitor.visit_waypoint(Waypoint.load(element, settings, hook))
        elif name == "rte":
            self.visitor.visit_route(Route.load(element, settings))
        elif name == "trk":
            self.visitor.visit_track(Track.load(element, settings))
        elif name == "extensions" and self.expecting_extensions:
            self.expecting_extensions = False
            payload = convert_extensions_element(element, settings.extension_reader.convert_gpx_extension)
            if payload is not None:
                self.visitor.visit_extensions(payload)
        else:
            self._unexpected(element)


def _check_root(root: ET.Element, settings: ReaderSettings) -> str:
    """Validate the <gpx> root and return the effective creator."""
    if root.tag != qn("gpx"):
        raise SchemaViolationError(f"root element must be gpx in {GPX_NS['gpx']}, found {root.tag}")

    version = root.get("version")
    if version != GPX_VERSION and not settings.ignore_version_attribute:
        raise SchemaViolationError(f"'version' must be '{GPX_VERSION}', found {version!r}")

    creator = root.get("creator", settings.default_creator_if_missing)
    if creator is None:
        raise SchemaViolationError("'creator' must be specified")
    return creator


def read(
        source: Union[str, Path, BinaryIO],
        settings: Optional[ReaderSettings],
        visitor: GpxVisitor,
) -> None:
    """
    Read a GPX 1.1 document from a path or binary stream into `visitor`.

    settings=None means a fresh ReaderSettings() for this call.
    """
    if settings is None:
        settings = ReaderSettings()

    root = None
    top = None
    depth = 0
    for event, element in ET.iterparse(source, events=("start", "end")):
        if event == "start":
            depth += 1
            if depth == 1:
                root = element
                top = _TopLevel(settings, visitor, _check_root(root, settings))
            continue

        depth -= 1
        if depth == 1:
            top.dispatch(element)
            root.remove(element)

    top.finish_metadata()
