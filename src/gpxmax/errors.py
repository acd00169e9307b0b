# gpxmax/errors

"""
gpxmax.errors

Central exception hierarchy for GPXmax.

Rationale:
  - Model and I/O code raise specific, meaningful errors.
  - Callers can catch GPXmaxError (broad) or specific subclasses (narrow).
  - A malformed element aborts its containing entity; the top-level caller
    decides how much of a document to salvage.
"""


class GPXmaxError(RuntimeError):
    """Base class for all GPXmax runtime errors."""


# ---- Document format errors --------------------

class GpxFormatError(GPXmaxError):
    """A GPX document (or fragment of one) could not be turned into model objects."""

class SchemaViolationError(GpxFormatError):
    """A mandatory attribute/element is missing, or a value is not formatted properly."""

class RangeViolationError(GpxFormatError, ValueError):
    """A numeric value parsed fine but lies outside its type's legal interval."""

class ExtensionConversionError(GpxFormatError):
    """The configured extension reader/writer could not convert an extensions block."""


# ---- Configuration errors ----------------------

class ConfigError(GPXmaxError):
    """A configuration file exists but could not be parsed or interpreted."""
