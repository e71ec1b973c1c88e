"""Shared protocols and enums for the football rating engine."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class Dimension(str, Enum):
    """Independent rating dimensions tracked per team."""

    GOAL = "goalElo"
    WINNER = "winnerElo"
    SHOTS = "totalShotsElo"
    POSSESSION = "ballPossessionElo"
    COMPOSITE = "compositeElo"


# Dimensions updated by the fixture fold; COMPOSITE is derived from these.
RATED_DIMENSIONS: tuple[Dimension, ...] = (
    Dimension.GOAL,
    Dimension.WINNER,
    Dimension.SHOTS,
    Dimension.POSSESSION,
)


class Metric(str, Enum):
    """In-match statistics recorded per fixture and team."""

    TOTAL_SHOTS = "totalShots"
    BALL_POSSESSION = "ballPossession"


DIMENSION_METRICS: dict[Dimension, Metric] = {
    Dimension.SHOTS: Metric.TOTAL_SHOTS,
    Dimension.POSSESSION: Metric.BALL_POSSESSION,
}


class DrawPolicy(str, Enum):
    """How a level score line is scored on the winner dimension."""

    SPLIT = "split"
    AWAY = "away"


@runtime_checkable
class RatingStore(Protocol):
    """Key-value access to per-team, per-dimension ratings."""

    def get_rating(self, team_id: int, dimension: Dimension) -> float: ...

    def set_rating(self, team_id: int, dimension: Dimension, value: float) -> None: ...

    def team_ids(self) -> list[int]: ...


__all__ = [
    "DIMENSION_METRICS",
    "Dimension",
    "DrawPolicy",
    "Metric",
    "RATED_DIMENSIONS",
    "RatingStore",
]
