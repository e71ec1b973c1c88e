"""Database repository helpers."""

from repositories.fixtures import (
    ensure_football_schema,
    fetch_fixture_results,
    fetch_statistic_observations,
    record_fixture,
    record_fixtures,
    record_statistic,
    record_statistics,
)
from repositories.ratings import (
    SqlRatingStore,
    count_tracked_teams,
    fetch_top_team_ratings,
    get_rating_system,
    mark_rating_system_normalized,
    reset_team_ratings,
    upsert_rating_system,
)

__all__ = [
    "SqlRatingStore",
    "count_tracked_teams",
    "ensure_football_schema",
    "fetch_fixture_results",
    "fetch_statistic_observations",
    "fetch_top_team_ratings",
    "get_rating_system",
    "mark_rating_system_normalized",
    "record_fixture",
    "record_fixtures",
    "record_statistic",
    "record_statistics",
    "reset_team_ratings",
    "upsert_rating_system",
]
