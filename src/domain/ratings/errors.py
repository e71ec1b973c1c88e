"""Error types raised by the rating engine and its stores."""

from __future__ import annotations


class MalformedRecordError(ValueError):
    """A fixture or statistic record is missing or has an unparseable field."""


class StoreUnavailableError(RuntimeError):
    """The rating store could not be read or written."""


class RatingsAlreadyNormalizedError(RuntimeError):
    """Cross-dimension normalization was already applied to a rating system."""


__all__ = [
    "MalformedRecordError",
    "RatingsAlreadyNormalizedError",
    "StoreUnavailableError",
]
