# fleettrack/errors

"""
fleettrack.errors

Central exception hierarchy for fleettrack.

The analysis engine returns typed negative results (invalid ValidationResult,
zeroed statistics, empty lists) for bad data. Exceptions are reserved for
contract violations by the caller.

Callers can catch FleetTrackError (broad) or specific subclasses (narrow).
"""


class FleetTrackError(RuntimeError):
    """Base class for all fleettrack runtime errors."""


# ---- Analysis engine errors --------------------

class AnalysisError(FleetTrackError):
    """Errors raised by the trajectory-analysis engine."""

class InvalidPointError(AnalysisError, ValueError):
    """A point carries non-finite values or a record could not be turned into a point."""

class InvalidParameterError(AnalysisError, ValueError):
    """An analysis parameter (duration, tolerance, radius) is outside its contract."""


# ---- Configuration errors ----------------------

class ConfigError(FleetTrackError):
    """Config file could not be parsed or holds unusable values."""


# ---- Format errors -----------------------------

class InvalidGpxError(FleetTrackError):
    """GPX file could not be parsed or did not contain expected data structures."""
