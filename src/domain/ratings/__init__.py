"""Rating-system domain modules."""

from domain.ratings.common import FixtureResult, StatisticObservation, index_statistics
from domain.ratings.errors import (
    MalformedRecordError,
    RatingsAlreadyNormalizedError,
    StoreUnavailableError,
)
from domain.ratings.protocol import (
    RATED_DIMENSIONS,
    Dimension,
    DrawPolicy,
    Metric,
    RatingStore,
)
from domain.ratings.store import InMemoryRatingStore

__all__ = [
    "Dimension",
    "DrawPolicy",
    "FixtureResult",
    "InMemoryRatingStore",
    "MalformedRecordError",
    "Metric",
    "RATED_DIMENSIONS",
    "RatingStore",
    "RatingsAlreadyNormalizedError",
    "StatisticObservation",
    "StoreUnavailableError",
    "index_statistics",
]
