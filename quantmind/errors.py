"""QuantMind error taxonomy.

Pure analytics functions raise these at their input boundary.  The bundle
assembler and the API layer decide which ones degrade and which ones
surface to the user.
"""


class QuantMindError(Exception):
    """Base class for all QuantMind errors."""


class InsufficientData(QuantMindError, ValueError):
    """Fewer price points than a computation's minimum window."""


class InvalidParameter(QuantMindError, ValueError):
    """Non-positive price, negative investment, horizon out of range, etc."""


class UpstreamUnavailable(QuantMindError, RuntimeError):
    """The Market Data Provider could not be reached or sent bad data."""
