# gpxmax/settings.py
"""
Per-call reader/writer policy.

A settings object is built once per read or write and handed explicitly to
every load()/save() call underneath it. Nothing here is global: passing None
to the document-level functions builds a fresh default each time.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Optional

from gpxmax.extensions.base import ExtensionReader, ExtensionWriter


@dataclass(frozen=True)
class ReaderSettings:
    # zone for <time> values that carry no offset
    time_zone: _dt.tzinfo = _dt.timezone.utc
    extension_reader: ExtensionReader = field(default_factory=ExtensionReader)

    # used when the root <gpx> has no creator attribute (None = required)
    default_creator_if_missing: Optional[str] = None
    ignore_version_attribute: bool = False
    ignore_bad_datetime: bool = False
    ignore_unexpected_children: bool = False


@dataclass(frozen=True)
class WriterSettings:
    time_zone: _dt.tzinfo = _dt.timezone.utc
    extension_writer: ExtensionWriter = field(default_factory=ExtensionWriter)

    # prefix -> namespace URI for foreign (extension) elements
    namespaces_by_prefix: dict[str, str] = field(default_factory=dict)
    pretty: bool = True
