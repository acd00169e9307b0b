"""
GPXmax configuration loader

This module centralizes *all* configuration handling for GPXmax. Its output
is a pair of ready-to-use ReaderSettings / WriterSettings objects; library
code never reads configuration on its own, it only receives settings.

Design goals:
- CLI flags override everything (handled by each command).
- Sensible defaults if no config exists (UTC, raw extension passthrough).
- Per-machine config without committing personal preferences:
    ~/.config/gpxmax/config.toml
- Repo-local config:
    <repo_root>/config/config.toml
- Environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by each script)
2) Environment variables (GPXMAX_*)
3) User config: ~/.config/gpxmax/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Recognized TOML layout:

    [reader]
    time_zone = "UTC"                 # IANA name, "UTC", or "+HH:MM"
    extensions = "raw"                # "raw" or "garmin"
    default_creator_if_missing = "unknown"
    ignore_version_attribute = false
    ignore_bad_datetime = false
    ignore_unexpected_children = false

    [writer]
    time_zone = "UTC"
    extensions = "raw"
    pretty = true

    [writer.namespaces]
    gpxtpx = "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"

IMPORTANT PHILOSOPHY NOTE:
--------------------------
This file is intentionally verbose and explicit. Every value that can be
configured is listed once in _KEYS below, together with its environment
variable; adding a new option means adding a row there and reading it in
load_config().
"""

from __future__ import annotations

import datetime as _dt
import os
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gpxmax.errors import ConfigError
from gpxmax.extensions.base import ExtensionReader, ExtensionWriter
from gpxmax.extensions.garmin import (
    GarminTrackPointExtensionReader,
    GarminTrackPointExtensionWriter,
)
from gpxmax.settings import ReaderSettings, WriterSettings

_OFFSET_RE = re.compile(r"^(?P<sign>[+-])(?P<hours>[0-9]{2}):(?P<minutes>[0-9]{2})$")


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.

    Rationale:
    - Missing config files are normal and expected.
    - Malformed config files indicate user intent and should fail loudly.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        # Wrap parsing errors with file context for usability
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "reader.time_zone")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_bool(v: Any, default: bool) -> bool:
    """
    Coerce loosely-typed config values into booleans.

    Accepts common truthy / falsy representations so that TOML values and
    environment variables behave the same way.
    """
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    return default


def _as_str(v: Any, default: Optional[str]) -> Optional[str]:
    """
    Coerce config values into strings.

    Never raises.
    """
    if v is None:
        return default
    return str(v)


def parse_time_zone(text: str) -> _dt.tzinfo:
    """
    Interpret a configured time zone.

    Accepted forms:
    - "UTC" / "Z"
    - fixed offsets: "+02:00", "-05:30"
    - IANA names: "Europe/Berlin"
    """
    s = text.strip()
    if s.upper() in ("UTC", "Z"):
        return _dt.timezone.utc
    m = _OFFSET_RE.match(s)
    if m:
        delta = _dt.timedelta(hours=int(m.group("hours")), minutes=int(m.group("minutes")))
        if delta >= _dt.timedelta(hours=24):
            raise ConfigError(f"time zone offset out of range: {text!r}")
        return _dt.timezone(-delta if m.group("sign") == "-" else delta)
    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown time zone: {text!r}") from e


_READERS = {
    "raw": ExtensionReader,
    "garmin": GarminTrackPointExtensionReader,
}
_WRITERS = {
    "raw": ExtensionWriter,
    "garmin": GarminTrackPointExtensionWriter,
}


def _pick(table: dict[str, type], name: str, key: str):
    try:
        return table[name.strip().lower()]()
    except KeyError:
        raise ConfigError(
            f"{key} must be one of {', '.join(sorted(table))}, not {name!r}"
        ) from None


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the GPXmax repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_user_config_path() -> Path:
    return Path.home() / ".config" / "gpxmax" / "config.toml"


# ---------------------------------------------------------------------------
# Typed config
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class GPXmaxConfig:
    """
    Fully merged GPXmax configuration.

    Attributes:
    - reader: settings for reading documents
    - writer: settings for writing documents
    - source: provenance map showing where each value came from
    """

    reader: ReaderSettings
    writer: WriterSettings
    source: dict[str, str]


# dotted TOML key -> environment variable
_KEYS = {
    "reader.time_zone": "GPXMAX_READER_TIME_ZONE",
    "reader.extensions": "GPXMAX_READER_EXTENSIONS",
    "reader.default_creator_if_missing": "GPXMAX_DEFAULT_CREATOR",
    "reader.ignore_version_attribute": "GPXMAX_IGNORE_VERSION_ATTRIBUTE",
    "reader.ignore_bad_datetime": "GPXMAX_IGNORE_BAD_DATETIME",
    "reader.ignore_unexpected_children": "GPXMAX_IGNORE_UNEXPECTED_CHILDREN",
    "writer.time_zone": "GPXMAX_WRITER_TIME_ZONE",
    "writer.extensions": "GPXMAX_WRITER_EXTENSIONS",
    "writer.pretty": "GPXMAX_PRETTY",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GPXmaxConfig:
    """
    Load, merge, and type-check all GPXmax configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = default_user_config_path()

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    # ------------------------------------------------------------------
    # Scalar values: repo -> user -> env, tracking provenance
    # ------------------------------------------------------------------
    raw: dict[str, Any] = {}
    src = {key: "default" for key in _KEYS}

    for key, env_var in _KEYS.items():
        v = _deep_get(repo_cfg, key)
        if v is not None:
            raw[key] = v
            src[key] = f"repo:{repo_config_path}"

        v = _deep_get(user_cfg, key)
        if v is not None:
            raw[key] = v
            src[key] = f"user:{user_config_path}"

        v = os.environ.get(env_var)
        if v:
            raw[key] = v
            src[key] = f"env:{env_var}"

    # ------------------------------------------------------------------
    # Namespace prefixes merge per prefix (user entries win)
    # ------------------------------------------------------------------
    namespaces: dict[str, str] = {}
    src["writer.namespaces"] = "default"
    for label, cfg, path in (("repo", repo_cfg, repo_config_path), ("user", user_cfg, user_config_path)):
        table = _deep_get(cfg, "writer.namespaces")
        if table is None:
            continue
        if not isinstance(table, dict):
            raise ConfigError(f"[writer.namespaces] must be a table in {path}")
        namespaces.update({str(k): str(v) for k, v in table.items()})
        src["writer.namespaces"] = f"{label}:{path}"

    # ------------------------------------------------------------------
    # Build typed settings
    # ------------------------------------------------------------------
    reader = ReaderSettings(
        time_zone=parse_time_zone(_as_str(raw.get("reader.time_zone"), "UTC")),
        extension_reader=_pick(_READERS, _as_str(raw.get("reader.extensions"), "raw"), "reader.extensions"),
        default_creator_if_missing=_as_str(raw.get("reader.default_creator_if_missing"), None),
        ignore_version_attribute=_as_bool(raw.get("reader.ignore_version_attribute"), False),
        ignore_bad_datetime=_as_bool(raw.get("reader.ignore_bad_datetime"), False),
        ignore_unexpected_children=_as_bool(raw.get("reader.ignore_unexpected_children"), False),
    )
    writer = WriterSettings(
        time_zone=parse_time_zone(_as_str(raw.get("writer.time_zone"), "UTC")),
        extension_writer=_pick(_WRITERS, _as_str(raw.get("writer.extensions"), "raw"), "writer.extensions"),
        namespaces_by_prefix=namespaces,
        pretty=_as_bool(raw.get("writer.pretty"), True),
    )

    return GPXmaxConfig(reader=reader, writer=writer, source=src)
