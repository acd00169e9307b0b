# gpxmax/util/logging.py
from __future__ import annotations

import datetime
import logging


def utc_now_iso() -> str:
    """Return current UTC timestamp as ISO-8601 string."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def log(msg: str) -> None:
    """Print a timestamped log line (local time with timezone)."""
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  {msg}")


def enable_debug_logging() -> None:
    """Send the library's debug messages (skipped elements, raw fallbacks) to stderr."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s  %(name)s: %(message)s"))
    lib = logging.getLogger("gpxmax")
    lib.addHandler(handler)
    lib.setLevel(logging.DEBUG)
