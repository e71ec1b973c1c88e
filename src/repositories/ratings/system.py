"""Persistence helpers for rating-system metadata and the ratings table."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.ratings.protocol import Dimension
from models import RatingSystem, TeamRating
from repositories.ratings.store import DIMENSION_COLUMNS


def get_rating_system(session: Session, name: str) -> RatingSystem | None:
    return session.execute(select(RatingSystem).where(RatingSystem.name == name)).scalar_one_or_none()


def upsert_rating_system(
    session: Session,
    *,
    name: str,
    description: str | None,
    config_json: dict[str, Any],
) -> RatingSystem:
    """Create or update the system metadata row; a rewrite clears the normalized flag."""
    system = get_rating_system(session, name)
    if system is None:
        system = RatingSystem(
            name=name,
            description=description,
            config_json=config_json,
            normalized=False,
            processed_fixtures=0,
        )
        session.add(system)
    else:
        system.description = description
        system.config_json = config_json
        system.normalized = False
        system.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()
    return system


def mark_rating_system_normalized(session: Session, system: RatingSystem, *, processed_fixtures: int | None = None) -> None:
    system.normalized = True
    if processed_fixtures is not None:
        system.processed_fixtures = processed_fixtures
    system.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()


def reset_team_ratings(session: Session, rating_system_id: int) -> None:
    """Delete one system's rating rows before a full deterministic recompute."""
    session.execute(delete(TeamRating).where(TeamRating.rating_system_id == rating_system_id))


def count_tracked_teams(session: Session, *, rating_system_id: int | None = None) -> int:
    statement = select(func.count(TeamRating.team_id))
    if rating_system_id is not None:
        statement = statement.where(TeamRating.rating_system_id == rating_system_id)
    result = session.scalar(statement)
    return int(result or 0)


def fetch_top_team_ratings(
    session: Session,
    *,
    rating_system_id: int,
    dimension: Dimension,
    top_n: int,
) -> list[tuple[int, float]]:
    """Return (team_id, rating) pairs for one system ordered by one dimension, highest first."""
    column = DIMENSION_COLUMNS[dimension]
    statement = (
        select(TeamRating.team_id, column)
        .where(TeamRating.rating_system_id == rating_system_id)
        .order_by(column.desc(), TeamRating.team_id)
        .limit(top_n)
    )
    return [(int(team_id), float(rating)) for team_id, rating in session.execute(statement)]


__all__ = [
    "count_tracked_teams",
    "fetch_top_team_ratings",
    "get_rating_system",
    "mark_rating_system_normalized",
    "reset_team_ratings",
    "upsert_rating_system",
]
