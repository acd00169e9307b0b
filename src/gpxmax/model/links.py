# gpxmax/model/links.py
"""
<email> and <link> entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree as ET

from gpxmax.formats.gpx import add_gpx_text, gpx_text, require_attribute
from gpxmax.formats.values import parse_uri
from gpxmax.model.base import Described


@dataclass(frozen=True)
class Email(Described):
    """An e-mail address split as <email id="jane" domain="example.com"/>."""

    id: str
    domain: str

    @classmethod
    def load(cls, element: Optional[ET.Element]) -> Optional["Email"]:
        if element is None:
            return None
        return cls(
            id=require_attribute(element, "id"),
            domain=require_attribute(element, "domain"),
        )

    def save(self, element: ET.Element) -> None:
        element.set("id", self.id)
        element.set("domain", self.domain)


@dataclass(frozen=True)
class WebLink(Described):
    """
    A hyperlink: mandatory href attribute, optional <text> and <type> (MIME type).

    href is validated as a URI reference but kept exactly as written.
    """

    href: str
    text: Optional[str] = None
    content_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.href is None:
            raise TypeError("href is required")
        parse_uri(self.href, what="link href")

    @classmethod
    def load(cls, element: Optional[ET.Element]) -> Optional["WebLink"]:
        if element is None:
            return None
        return cls(
            href=require_attribute(element, "href"),
            text=gpx_text(element, "text"),
            content_type=gpx_text(element, "type"),
        )

    def save(self, element: ET.Element) -> None:
        element.set("href", self.href)
        add_gpx_text(element, "text", self.text)
        add_gpx_text(element, "type", self.content_type)
