"""Error taxonomy. Every error here is recoverable by the caller."""

from __future__ import annotations


class TrainerError(Exception):
    """Base class for chart trainer errors."""


class MalformedInput(TrainerError, ValueError):
    """Market data payload could not be parsed into the expected shape."""


class EmptySeries(MalformedInput):
    """No usable bars remain (after ingestion filtering, or on load)."""


class InvalidCommand(TrainerError):
    """Command issued in a state that cannot satisfy its precondition."""


class DateOutOfRange(InvalidCommand):
    """Replay start date is after the last bar of the series."""


class DataFetchError(TrainerError):
    """Remote market data could not be downloaded."""
