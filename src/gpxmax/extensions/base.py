# gpxmax/extensions/base.py
"""
Pluggable conversion of GPX <extensions> blocks.

GPX lets any element carry an <extensions> child full of third-party XML
(Garmin, Cluetrust, OsmAnd, ...). The core model never interprets it: the
owning entity stores whatever the configured ExtensionReader returns, and
the ExtensionWriter turns it back into elements when saving.

A payload is one of two variants, told apart by its `kind` tag:
  - RawFragment:  the captured XML, re-emitted unchanged
  - TypedPayload: a value produced by a custom reader

ExtensionReader / ExtensionWriter are plain classes with one hook per entity
role (waypoint, track point, route, ...) that all funnel into
from_elements / to_elements. Subclass and override only what you need.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union
from xml.etree import ElementTree as ET

from gpxmax.errors import ExtensionConversionError, GPXmaxError
from gpxmax.formats.gpx import add_gpx_element, gpx_child

logger = logging.getLogger(__name__)


class PayloadKind(enum.Enum):
    RAW = "raw"
    TYPED = "typed"


def _blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def _freeze(elem: ET.Element) -> tuple:
    """
    Snapshot an element as nested tuples: (tag, attributes, text, tail, children).

    Formatting-only whitespace (text of elements that have children, blank
    tails) is dropped so pretty-printing does not change the value. Leaf text
    is kept exactly.
    """
    children = list(elem)
    text = elem.text
    if children and _blank(text):
        text = None
    tail = None if _blank(elem.tail) else elem.tail
    return (
        elem.tag,
        tuple(elem.attrib.items()),
        text,
        tail,
        tuple(_freeze(child) for child in children),
    )


def _thaw(node: tuple) -> ET.Element:
    tag, attrib, text, tail, children = node
    elem = ET.Element(tag, dict(attrib))
    elem.text = text
    elem.tail = tail
    for child in children:
        elem.append(_thaw(child))
    return elem


@dataclass(frozen=True)
class RawFragment:
    """
    Opaque capture of the children of an <extensions> element.

    The XML is held as nested tuples so the payload is immutable, hashable,
    and compares by structure (namespace URIs, not prefixes). elements()
    hands out fresh ElementTree copies every time.
    """

    nodes: tuple[tuple, ...]
    kind: PayloadKind = field(default=PayloadKind.RAW, init=False, compare=False)

    @classmethod
    def from_elements(cls, elements: Sequence[ET.Element]) -> "RawFragment":
        nodes = []
        for element in elements:
            tag, attrib, text, _tail, children = _freeze(element)
            nodes.append((tag, attrib, text, None, children))
        return cls(nodes=tuple(nodes))

    def elements(self) -> list[ET.Element]:
        return [_thaw(node) for node in self.nodes]

    def __len__(self) -> int:
        return len(self.nodes)

    def __str__(self) -> str:
        return "".join(ET.tostring(el, encoding="unicode") for el in self.elements())


@dataclass(frozen=True)
class TypedPayload:
    """A value a custom ExtensionReader built out of an <extensions> block."""

    value: Any
    kind: PayloadKind = field(default=PayloadKind.TYPED, init=False, compare=False)


ExtensionPayload = Union[RawFragment, TypedPayload]


def _convert(fn, arg, direction: str):
    try:
        return fn(arg)
    except GPXmaxError:
        raise
    except Exception as e:
        raise ExtensionConversionError(f"extension {direction} failed: {e}") from e


class ExtensionReader:
    """
    Default strategy: capture every extensions block as a RawFragment.
    """

    def from_elements(self, elements: Sequence[ET.Element]) -> Optional[ExtensionPayload]:
        return RawFragment.from_elements(elements)

    def convert_gpx_extension(self, elements):
        return self.from_elements(elements)

    def convert_metadata_extension(self, elements):
        return self.from_elements(elements)

    def convert_waypoint_extension(self, elements):
        return self.from_elements(elements)

    def convert_route_extension(self, elements):
        return self.from_elements(elements)

    def convert_route_point_extension(self, elements):
        return self.from_elements(elements)

    def convert_track_extension(self, elements):
        return self.from_elements(elements)

    def convert_track_segment_extension(self, elements):
        return self.from_elements(elements)

    def convert_track_point_extension(self, elements):
        return self.from_elements(elements)


class ExtensionWriter:
    """
    Default strategy: re-emit RawFragment payloads as-is.

    TypedPayload values are only writable by a subclass that knows their
    type; the base class reports them as a conversion error rather than
    dropping them.
    """

    def to_elements(self, payload: ExtensionPayload) -> Optional[list[ET.Element]]:
        if payload.kind is PayloadKind.RAW:
            return payload.elements()
        raise ExtensionConversionError(
            f"{type(self).__name__} cannot write typed extension payload "
            f"{type(payload.value).__name__}"
        )

    def convert_gpx_extension(self, payload):
        return self.to_elements(payload)

    def convert_metadata_extension(self, payload):
        return self.to_elements(payload)

    def convert_waypoint_extension(self, payload):
        return self.to_elements(payload)

    def convert_route_extension(self, payload):
        return self.to_elements(payload)

    def convert_route_point_extension(self, payload):
        return self.to_elements(payload)

    def convert_track_extension(self, payload):
        return self.to_elements(payload)

    def convert_track_segment_extension(self, payload):
        return self.to_elements(payload)

    def convert_track_point_extension(self, payload):
        return self.to_elements(payload)


def convert_extensions_element(ext: ET.Element, hook) -> Optional[ExtensionPayload]:
    """Run a reader hook over the children of an <extensions> element."""
    return _convert(hook, list(ext), "read")


def load_extensions(element: ET.Element, hook) -> Optional[ExtensionPayload]:
    """
    Hand the children of `element`'s GPX <extensions> child (if any) to `hook`.

    Missing <extensions> yields None without calling the hook.
    """
    ext = gpx_child(element, "extensions")
    if ext is None:
        return None
    return convert_extensions_element(ext, hook)


def save_extensions(parent: ET.Element, payload: Optional[ExtensionPayload], hook) -> None:
    """
    Append <extensions> holding whatever `hook` makes of `payload`.

    Nothing is written when there is no payload or the hook returns None.
    """
    if payload is None:
        return
    elements = _convert(hook, payload, "write")
    if elements is None:
        logger.debug("extension writer returned nothing for %r; omitting <extensions>", payload)
        return
    ext = add_gpx_element(parent, "extensions")
    for element in elements:
        ext.append(element)
