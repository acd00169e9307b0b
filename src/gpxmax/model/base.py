# gpxmax/model/base.py
"""
Shared bits for the GPX entity dataclasses.
"""

from __future__ import annotations

from dataclasses import fields


def _show(value) -> str:
    if isinstance(value, tuple):
        return "[" + ", ".join(str(v) for v in value) + "]"
    return str(value)


def describe(entity) -> str:
    """
    Diagnostic text from an entity's fields: "[name: Jane, email: ...]".

    Absent (None) fields and empty tuples are left out.
    """
    parts = []
    for f in fields(entity):
        if not f.compare:
            continue
        value = getattr(entity, f.name)
        if value is None or value == ():
            continue
        parts.append(f"{f.name}: {_show(value)}")
    return "[" + ", ".join(parts) + "]"


class Described:
    """Mixin giving dataclass entities the describe() form as their str()."""

    def __str__(self) -> str:
        return describe(self)
