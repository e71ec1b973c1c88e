"""Rating persistence helpers."""

from repositories.ratings.store import DIMENSION_COLUMNS, SqlRatingStore
from repositories.ratings.system import (
    count_tracked_teams,
    fetch_top_team_ratings,
    get_rating_system,
    mark_rating_system_normalized,
    reset_team_ratings,
    upsert_rating_system,
)

__all__ = [
    "DIMENSION_COLUMNS",
    "SqlRatingStore",
    "count_tracked_teams",
    "fetch_top_team_ratings",
    "get_rating_system",
    "mark_rating_system_normalized",
    "reset_team_ratings",
    "upsert_rating_system",
]
