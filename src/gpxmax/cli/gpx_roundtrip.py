#!/usr/bin/env python3
"""
gpx_roundtrip.py: read GPX files through the GPXmax object model and write them back

Purpose
-------
Every input file is parsed into a GpxFile (metadata, waypoints, routes,
tracks, extensions) and written to the output directory under the same
file name. The result is a normalized copy: consistent namespace prefixes,
indentation, number formatting and time-zone suffixes, with the same
content.

A per-file summary (counts of waypoints/routes/tracks/track points) is
printed. A file that cannot be read or written is reported and skipped;
the exit status is 1 if any file failed.

Configuration
-------------
Reader/writer settings come from gpxmax.config (env > user config > repo
config > defaults); the flags below override them.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from xml.etree import ElementTree as ET

from gpxmax.config import load_config, parse_time_zone
from gpxmax.errors import ConfigError, GpxFormatError
from gpxmax.extensions.garmin import (
    GARMIN_TPX_NS,
    GARMIN_TPX_PREFIX,
    GarminTrackPointExtensionReader,
    GarminTrackPointExtensionWriter,
)
from gpxmax.model.document import GpxFile
from gpxmax.util.logging import enable_debug_logging, log, utc_now_iso


def summarize(gpx: GpxFile) -> str:
    points = sum(len(trk.points) for trk in gpx.tracks)
    return (
        f"{len(gpx.waypoints)} waypoints, {len(gpx.routes)} routes, "
        f"{len(gpx.tracks)} tracks ({points} track points)"
    )


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="GPXmax: read GPX files and write normalized copies.")
    ap.add_argument("gpx", nargs="+", help="One or more GPX files.")
    ap.add_argument("--out-dir", required=True, help="Directory for the rewritten files.")
    ap.add_argument("--reader-time-zone", default=None, help="Zone for timestamps without offset (e.g. UTC, +02:00, Europe/Berlin).")
    ap.add_argument("--writer-time-zone", default=None, help="Zone to write timestamps in.")
    ap.add_argument("--garmin", action="store_true", help="Decode Garmin TrackPointExtension blocks (and re-encode them).")
    ap.add_argument("--ignore-bad-datetime", action="store_true", help="Drop unparseable <time> values instead of failing.")
    ap.add_argument("--ignore-unexpected", action="store_true", help="Skip unknown top-level elements instead of failing.")
    ap.add_argument("--compact", action="store_true", help="Write without indentation.")
    ap.add_argument("--verbose", action="store_true", help="More logging.")
    args = ap.parse_args(sys.argv[1:] if argv is None else argv)

    if args.verbose:
        enable_debug_logging()

    try:
        cfg = load_config()
        reader_settings = cfg.reader
        writer_settings = cfg.writer

        # CLI > config
        if args.reader_time_zone:
            reader_settings = dataclasses.replace(reader_settings, time_zone=parse_time_zone(args.reader_time_zone))
        if args.writer_time_zone:
            writer_settings = dataclasses.replace(writer_settings, time_zone=parse_time_zone(args.writer_time_zone))
    except ConfigError as e:
        log(f"Configuration error: {e}")
        return 2

    if args.garmin:
        reader_settings = dataclasses.replace(reader_settings, extension_reader=GarminTrackPointExtensionReader())
        writer_settings = dataclasses.replace(
            writer_settings,
            extension_writer=GarminTrackPointExtensionWriter(),
            namespaces_by_prefix={GARMIN_TPX_PREFIX: GARMIN_TPX_NS, **writer_settings.namespaces_by_prefix},
        )
    if args.ignore_bad_datetime:
        reader_settings = dataclasses.replace(reader_settings, ignore_bad_datetime=True)
    if args.ignore_unexpected:
        reader_settings = dataclasses.replace(reader_settings, ignore_unexpected_children=True)
    if args.compact:
        writer_settings = dataclasses.replace(writer_settings, pretty=False)

    out_dir = Path(args.out_dir).expanduser()
    if args.verbose:
        log(f"Run started {utc_now_iso()}; writing to {out_dir}")
        for key, origin in sorted(cfg.source.items()):
            log(f"  {key}: {origin}")

    failures = 0
    for src in (Path(p).expanduser() for p in args.gpx):
        if not src.is_file():
            log(f"'{src}' is not a file: Skipping")
            failures += 1
            continue
        try:
            gpx = GpxFile.read_from(src, reader_settings)
        except (GpxFormatError, ET.ParseError) as e:
            log(f"{src.name}: cannot read: {e}")
            failures += 1
            continue

        dest = out_dir / src.name
        try:
            gpx.write_to(dest, writer_settings)
        except (GpxFormatError, OSError) as e:
            log(f"{src.name}: cannot write {dest}: {e}")
            failures += 1
            continue
        log(f"{src.name}: {summarize(gpx)} -> {dest}")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
