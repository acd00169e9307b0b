# gpxmax/model/header.py
"""
The descriptive children shared by <rte> and <trk>:
  name cmt desc src link* number type
"""

from __future__ import annotations

from typing import Any
from xml.etree import ElementTree as ET

from gpxmax.formats.gpx import add_gpx_entities, add_gpx_text, gpx_children, gpx_text
from gpxmax.formats.values import format_uint, parse_uint
from gpxmax.model.links import WebLink


def load_header(element: ET.Element) -> dict[str, Any]:
    """Keyword arguments for the Route/Track constructor."""
    return {
        "name": gpx_text(element, "name"),
        "comment": gpx_text(element, "cmt"),
        "description": gpx_text(element, "desc"),
        "source": gpx_text(element, "src"),
        "links": tuple(WebLink.load(el) for el in gpx_children(element, "link")),
        "number": parse_uint(gpx_text(element, "number"), what="number"),
        "classification": gpx_text(element, "type"),
    }


def save_header(element: ET.Element, entity) -> None:
    add_gpx_text(element, "name", entity.name)
    add_gpx_text(element, "cmt", entity.comment)
    add_gpx_text(element, "desc", entity.description)
    add_gpx_text(element, "src", entity.source)
    add_gpx_entities(element, "link", entity.links)
    if entity.number is not None:
        add_gpx_text(element, "number", format_uint(entity.number))
    add_gpx_text(element, "type", entity.classification)
