"""
Exception types for the event extraction pipeline.

Only two failures ever escape a parse:
- InputError: the document reader could not produce pages.
- FatalHashError: the fingerprint hash primitive is unavailable.

Layout anomalies (header mismatches, noise rows) are absorbed by the row
assembler and reported as counts, never raised.
"""


class EventScanError(RuntimeError):
    """Base class for fatal pipeline errors."""


class InputError(EventScanError):
    """Raised when the source document cannot be read into positioned tokens."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read text from {source}: {reason}")


class FatalHashError(EventScanError):
    """Raised when the fingerprint hash algorithm cannot be instantiated."""
