# gpxmax/formats/gpx.py
"""
GPX XML helpers for GPXmax

This module is intentionally format-focused:
- GPX namespace handling
- looking up GPX children by local name (ignoring everything else)
- appending GPX children when saving
- reading and formatting GPX <time> values under a time-zone policy
- safely writing an ElementTree to disk or a stream, GPX as default namespace

Key design principle:
  Keep entity semantics (what a waypoint or a bounds element *means*) in
  gpxmax.model, separate from the XML plumbing here.
"""

from __future__ import annotations

import datetime as _dt
import re
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union
from xml.etree import ElementTree as ET

from gpxmax.errors import SchemaViolationError

# GPX 1.1 default namespace
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}

GPX_VERSION = "1.1"

_TIME_RE = re.compile(
    r"^(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})T(?P<hms>[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.(?P<frac>[0-9]+))?"
    r"(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})?$"
)


def qn(tag: str) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{GPX_NS['gpx']}}}{tag}"


def local_name(tag: str) -> str:
    """Strip the "{namespace}" part from an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def namespace_of(tag: str) -> Optional[str]:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


# ---------------------------------------------------------------------------
# Reading children
# ---------------------------------------------------------------------------
def gpx_child(element: ET.Element, tag: str) -> Optional[ET.Element]:
    """First direct child in the GPX namespace with this local name, if any."""
    return element.find(qn(tag))


def gpx_children(element: ET.Element, tag: str) -> list[ET.Element]:
    return element.findall(qn(tag))


def element_value(element: ET.Element) -> str:
    """
    All character data of an element, in document order.

    An element that is present but empty yields "" (never None), so that
    <name/> and a missing <name> stay distinguishable.
    """
    return "".join(element.itertext())


def gpx_text(element: ET.Element, tag: str) -> Optional[str]:
    child = gpx_child(element, tag)
    if child is None:
        return None
    return element_value(child)


def require_attribute(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise SchemaViolationError(
            f"{local_name(element.tag)} element must have {name} attribute"
        )
    return value


# ---------------------------------------------------------------------------
# Writing children
# ---------------------------------------------------------------------------
def add_gpx_element(parent: ET.Element, tag: str) -> ET.Element:
    return ET.SubElement(parent, qn(tag))


def add_gpx_text(parent: ET.Element, tag: str, value: Optional[str]) -> None:
    """Append <tag>value</tag>, or nothing at all when value is None."""
    if value is None:
        return
    child = add_gpx_element(parent, tag)
    child.text = value


def add_gpx_entity(parent: ET.Element, tag: str, entity, *args) -> None:
    """Append <tag/> and let `entity.save` fill it in; nothing if entity is None."""
    if entity is None:
        return
    entity.save(add_gpx_element(parent, tag), *args)


def add_gpx_entities(parent: ET.Element, tag: str, entities: Iterable, *args) -> None:
    for entity in entities:
        entity.save(add_gpx_element(parent, tag), *args)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------
def _parse_offset(text: str) -> _dt.tzinfo:
    if text == "Z":
        return _dt.timezone.utc
    sign = -1 if text[0] == "-" else 1
    hours, minutes = int(text[1:3]), int(text[4:6])
    return _dt.timezone(sign * _dt.timedelta(hours=hours, minutes=minutes))


def parse_gpx_time(
        text: Optional[str],
        time_zone: _dt.tzinfo = _dt.timezone.utc,
        *,
        ignore_bad: bool = False,
) -> Optional[_dt.datetime]:
    """
    Parse an xsd:dateTime found in GPX <time> nodes into a tz-aware UTC datetime.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
      - "2026-01-02T21:14:44"        (interpreted in `time_zone`)

    Fractional seconds beyond microsecond resolution are truncated.

    Raises:
      SchemaViolationError if text is present but malformed, unless
      ignore_bad is set (then None is returned).
    """
    if text is None:
        return None

    s = text.strip()
    m = _TIME_RE.match(s)
    dt = None
    if m:
        try:
            dt = _dt.datetime.fromisoformat(f"{m.group('date')}T{m.group('hms')}")
            if m.group("tz"):
                dt = dt.replace(tzinfo=_parse_offset(m.group("tz")))
        except ValueError:
            dt = None

    if dt is None:
        if ignore_bad:
            return None
        raise SchemaViolationError(f"time element must be formatted properly: {text!r}")

    frac = m.group("frac")
    if frac:
        dt = dt.replace(microsecond=int(frac[:6].ljust(6, "0")))

    # Naive timestamps are interpreted in the configured zone.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=time_zone)

    return dt.astimezone(_dt.timezone.utc)


def format_gpx_time(dt: _dt.datetime, time_zone: _dt.tzinfo = _dt.timezone.utc) -> str:
    """
    Format a tz-aware datetime as GPX time in `time_zone`.

    A zero offset is written as "Z", anything else as "+HH:MM".
    Offsets that are not whole minutes (e.g. local mean time of historical
    zones) cannot be written as +HH:MM, so such instants are written in UTC.
    Fractional seconds are kept, without trailing zeros.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    local = dt.astimezone(time_zone)
    if (local.utcoffset() or _dt.timedelta(0)) % _dt.timedelta(minutes=1):
        local = dt.astimezone(_dt.timezone.utc)

    text = (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d}"
        f"T{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
    )
    if local.microsecond:
        text += "." + f"{local.microsecond:06d}".rstrip("0")

    offset = local.utcoffset() or _dt.timedelta(0)
    if not offset:
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


# ---------------------------------------------------------------------------
# Writing documents
# ---------------------------------------------------------------------------
def _indent(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
    """
    In-place pretty-printer for ElementTree output. Eliminates double blank-line
    issues by explicitly controlling .text/.tail.

    Only whitespace is touched: leaf text is never rewritten.
    """
    i = "\n" + level * indent

    children = list(elem)
    if children:
        if elem.text is None or not elem.text.strip():
            elem.text = i + indent
        for child in children:
            _indent(child, level + 1, indent=indent)
            if child.tail is None or not child.tail.strip():
                child.tail = i + indent
        if not children[-1].tail.strip():
            children[-1].tail = i
    if level == 0 and (elem.tail is None or not elem.tail.strip()):
        elem.tail = "\n"


_XML_NS = "http://www.w3.org/XML/1998/namespace"


class _Prefixes:
    """
    Prefix assignment for one serialization.

    Configured prefixes win; any other namespace gets ns0, ns1, ... Only
    namespaces that actually occur are declared.
    """

    def __init__(self, namespaces_by_prefix: dict[str, str]):
        self.by_uri: dict[str, str] = {}
        for prefix, uri in namespaces_by_prefix.items():
            if not prefix:
                raise ValueError(f"empty prefix is reserved for {GPX_NS['gpx']}, cannot map it to {uri!r}")
            if prefix in ("xml", "xmlns") or ":" in prefix:
                raise ValueError(f"invalid namespace prefix {prefix!r}")
            self.by_uri[uri] = prefix
        self.declared: dict[str, str] = {}

    def prefix_for(self, uri: str) -> str:
        if uri == _XML_NS:
            return "xml"
        prefix = self.declared.get(uri)
        if prefix is not None:
            return prefix

        taken = set(self.declared.values())
        prefix = self.by_uri.get(uri)
        if prefix is None or prefix in taken:
            reserved = taken | set(self.by_uri.values())
            n = len(self.declared)
            while f"ns{n}" in reserved:
                n += 1
            prefix = f"ns{n}"
        self.declared[uri] = prefix
        return prefix


def _qualified_copy(elem: ET.Element, prefixes: _Prefixes, default_ns: str) -> ET.Element:
    """
    Copy `elem` with every "{uri}name" rewritten to a literal "prefix:name".

    GPX stays the default namespace. xmlns="" (or xmlns=GPX) is added where
    an element's namespace differs from the default in effect at that point,
    so unqualified extension elements are not read back as GPX elements.
    """
    tag = elem.tag
    attrib = {}
    if isinstance(tag, str):
        ns = namespace_of(tag)
        if ns is None or ns == GPX_NS["gpx"]:
            wanted = ns or ""
            if wanted != default_ns:
                attrib["xmlns"] = wanted
                default_ns = wanted
            tag = local_name(tag)
        else:
            tag = f"{prefixes.prefix_for(ns)}:{local_name(tag)}"

    for key, value in elem.attrib.items():
        ns = namespace_of(key)
        if ns is not None:
            key = f"{prefixes.prefix_for(ns)}:{local_name(key)}"
        attrib[key] = value

    copy = ET.Element(tag, attrib)
    copy.text = elem.text
    copy.tail = elem.tail
    for child in elem:
        copy.append(_qualified_copy(child, prefixes, default_ns))
    return copy


def write_gpx(
        root: ET.Element,
        out: Union[str, Path, BinaryIO], *,
        pretty: bool = True,
        namespaces_by_prefix: Optional[dict[str, str]] = None,
) -> None:
    """
    Write a GPX XML tree to a path or a binary stream.

    - pretty=True applies indentation for human readability
    - writes UTF-8 with XML declaration
    - GPX is the default namespace (no prefix)
    - namespaces_by_prefix picks prefixes for foreign namespaces in this
      document only; ElementTree's global prefix registry is not touched

    `root` itself is left unchanged.
    """
    prefixes = _Prefixes(namespaces_by_prefix or {})
    doc = _qualified_copy(root, prefixes, "")
    # namespace declarations go right after xmlns on the root
    declarations = {f"xmlns:{prefix}": uri for uri, prefix in prefixes.declared.items()}
    doc.attrib = {
        **{k: v for k, v in doc.attrib.items() if k == "xmlns"},
        **declarations,
        **{k: v for k, v in doc.attrib.items() if k != "xmlns"},
    }
    if pretty:
        _indent(doc)

    if isinstance(out, (str, Path)):
        out = Path(out)
        out.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(doc)
    tree.write(out, encoding="utf-8", xml_declaration=True)
