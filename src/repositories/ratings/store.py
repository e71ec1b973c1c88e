"""SQLAlchemy-backed rating store (one team_ratings row per team per system)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, Session

from domain.ratings.errors import StoreUnavailableError
from domain.ratings.protocol import Dimension
from models import TeamRating

DIMENSION_COLUMNS: dict[Dimension, InstrumentedAttribute[float]] = {
    Dimension.GOAL: TeamRating.goal_elo,
    Dimension.WINNER: TeamRating.winner_elo,
    Dimension.SHOTS: TeamRating.total_shots_elo,
    Dimension.POSSESSION: TeamRating.ball_possession_elo,
    Dimension.COMPOSITE: TeamRating.composite_elo,
}


class SqlRatingStore:
    """Rating store over a session, scoped to one rating system.

    Reads of unseen teams persist the default row.
    """

    def __init__(self, session: Session, *, rating_system_id: int, initial_rating: float = 1000.0) -> None:
        self.session = session
        self.rating_system_id = rating_system_id
        self.initial_rating = initial_rating

    def _row(self, team_id: int) -> TeamRating:
        row = self.session.get(TeamRating, (self.rating_system_id, team_id))
        if row is None:
            row = TeamRating(
                rating_system_id=self.rating_system_id,
                team_id=team_id,
                **{column.key: self.initial_rating for column in DIMENSION_COLUMNS.values()},
            )
            self.session.add(row)
            self.session.flush()
        return row

    def get_rating(self, team_id: int, dimension: Dimension) -> float:
        try:
            row = self._row(team_id)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"failed to read {dimension.value} for "
                f"rating_system_id={self.rating_system_id} team_id={team_id}"
            ) from exc
        return float(getattr(row, DIMENSION_COLUMNS[dimension].key))

    def set_rating(self, team_id: int, dimension: Dimension, value: float) -> None:
        try:
            row = self._row(team_id)
            setattr(row, DIMENSION_COLUMNS[dimension].key, value)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"failed to write {dimension.value} for "
                f"rating_system_id={self.rating_system_id} team_id={team_id}"
            ) from exc

    def team_ids(self) -> list[int]:
        statement = (
            select(TeamRating.team_id)
            .where(TeamRating.rating_system_id == self.rating_system_id)
            .order_by(TeamRating.team_id)
        )
        try:
            return list(self.session.scalars(statement))
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"failed to list rated teams for rating_system_id={self.rating_system_id}"
            ) from exc


__all__ = ["DIMENSION_COLUMNS", "SqlRatingStore"]
