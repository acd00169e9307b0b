# gpxmax/model/metadata.py
"""
<metadata> and the authorship entities it is built from (<author>, <copyright>).
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree as ET

from gpxmax.extensions.base import ExtensionPayload, load_extensions, save_extensions
from gpxmax.formats.gpx import (
    add_gpx_entities,
    add_gpx_entity,
    add_gpx_text,
    format_gpx_time,
    gpx_child,
    gpx_children,
    gpx_text,
    parse_gpx_time,
    require_attribute,
)
from gpxmax.formats.values import format_gregorian_year, parse_gregorian_year, parse_uri
from gpxmax.model.base import Described
from gpxmax.model.bounds import BoundingBox
from gpxmax.model.links import Email, WebLink


@dataclass(frozen=True)
class Person(Described):
    """A person or organization; every part is optional."""

    name: Optional[str] = None
    email: Optional[Email] = None
    link: Optional[WebLink] = None

    @classmethod
    def load(cls, element: Optional[ET.Element]) -> Optional["Person"]:
        if element is None:
            return None
        return cls(
            name=gpx_text(element, "name"),
            email=Email.load(gpx_child(element, "email")),
            link=WebLink.load(gpx_child(element, "link")),
        )

    def save(self, element: ET.Element) -> None:
        add_gpx_text(element, "name", self.name)
        add_gpx_entity(element, "email", self.email)
        add_gpx_entity(element, "link", self.link)


@dataclass(frozen=True)
class Copyright(Described):
    """Copyright holder, with an optional year and license URI."""

    author: str
    year: Optional[int] = None
    license: Optional[str] = None

    def __post_init__(self) -> None:
        if self.author is None:
            raise TypeError("copyright author is required")
        if self.license is not None:
            parse_uri(self.license, what="copyright license")

    @classmethod
    def load(cls, element: Optional[ET.Element]) -> Optional["Copyright"]:
        if element is None:
            return None
        return cls(
            author=require_attribute(element, "author"),
            year=parse_gregorian_year(gpx_text(element, "year")),
            license=parse_uri(gpx_text(element, "license"), what="copyright license"),
        )

    def save(self, element: ET.Element) -> None:
        element.set("author", self.author)
        if self.year is not None:
            add_gpx_text(element, "year", format_gregorian_year(self.year))
        add_gpx_text(element, "license", self.license)


@dataclass(frozen=True)
class Metadata(Described):
    """
    Document-level information.

    `creator` lives on the root <gpx> element, not inside <metadata>; the
    document reader/writer moves it across. Everything else maps to a child
    of <metadata>.
    """

    creator: str
    name: Optional[str] = None
    description: Optional[str] = None
    author: Optional[Person] = None
    copyright: Optional[Copyright] = None
    links: tuple[WebLink, ...] = ()
    creation_time: Optional[_dt.datetime] = None
    keywords: Optional[str] = None
    bounds: Optional[BoundingBox] = None
    extensions: Optional[ExtensionPayload] = None

    def __post_init__(self) -> None:
        if self.creator is None:
            raise TypeError("creator is required")
        object.__setattr__(self, "links", tuple(self.links))
        t = self.creation_time
        if t is not None:
            if t.tzinfo is None or t.utcoffset():
                raise ValueError(f"creation_time must be timezone-aware UTC, got {t!r}")

    @property
    def is_trivial(self) -> bool:
        """True when nothing but the creator is set (no <metadata> needs writing)."""
        return (
            self.name is None
            and self.description is None
            and self.author is None
            and self.copyright is None
            and not self.links
            and self.creation_time is None
            and self.keywords is None
            and self.bounds is None
            and self.extensions is None
        )

    @classmethod
    def load(cls, element: Optional[ET.Element], settings, creator: str) -> Optional["Metadata"]:
        if element is None:
            return None
        return cls(
            creator=creator,
            name=gpx_text(element, "name"),
            description=gpx_text(element, "desc"),
            author=Person.load(gpx_child(element, "author")),
            copyright=Copyright.load(gpx_child(element, "copyright")),
            links=tuple(WebLink.load(el) for el in gpx_children(element, "link")),
            creation_time=parse_gpx_time(
                gpx_text(element, "time"),
                settings.time_zone,
                ignore_bad=settings.ignore_bad_datetime,
            ),
            keywords=gpx_text(element, "keywords"),
            bounds=BoundingBox.load(gpx_child(element, "bounds")),
            extensions=load_extensions(element, settings.extension_reader.convert_metadata_extension),
        )

    def save(self, element: ET.Element, settings) -> None:
        # creator is written by the caller, as an attribute of <gpx>
        add_gpx_text(element, "name", self.name)
        add_gpx_text(element, "desc", self.description)
        add_gpx_entity(element, "author", self.author)
        add_gpx_entity(element, "copyright", self.copyright)
        add_gpx_entities(element, "link", self.links)
        if self.creation_time is not None:
            add_gpx_text(element, "time", format_gpx_time(self.creation_time, settings.time_zone))
        add_gpx_text(element, "keywords", self.keywords)
        add_gpx_entity(element, "bounds", self.bounds)
        save_extensions(element, self.extensions, settings.extension_writer.convert_metadata_extension)
