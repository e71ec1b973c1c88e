"""In-process rating store used for dry runs and unit tests."""

from __future__ import annotations

from domain.ratings.protocol import Dimension


class InMemoryRatingStore:
    """Dictionary-backed store with first-read materialization of defaults."""

    def __init__(self, initial_rating: float = 1000.0) -> None:
        self.initial_rating = initial_rating
        self._ratings: dict[int, dict[Dimension, float]] = {}

    def _row(self, team_id: int) -> dict[Dimension, float]:
        row = self._ratings.get(team_id)
        if row is None:
            row = {dimension: self.initial_rating for dimension in Dimension}
            self._ratings[team_id] = row
        return row

    def get_rating(self, team_id: int, dimension: Dimension) -> float:
        return self._row(team_id)[dimension]

    def set_rating(self, team_id: int, dimension: Dimension, value: float) -> None:
        self._row(team_id)[dimension] = value

    def team_ids(self) -> list[int]:
        return sorted(self._ratings)

    def tracked_team_count(self) -> int:
        return len(self._ratings)


__all__ = ["InMemoryRatingStore"]
