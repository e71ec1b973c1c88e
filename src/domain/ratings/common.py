"""Shared record types consumed by the rating engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from domain.ratings.protocol import Metric


@dataclass(frozen=True)
class FixtureResult:
    """Canonical completed-fixture payload used by rating calculators."""

    fixture_id: int
    event_time: datetime
    home_team_id: int
    away_team_id: int
    home_score: int | None = None
    away_score: int | None = None


@dataclass(frozen=True)
class StatisticObservation:
    """One in-match statistic for one side of a fixture."""

    fixture_id: int
    team_id: int
    metric: Metric
    value: float | None = None


StatisticKey = tuple[int, int, Metric]


def index_statistics(
    observations: Iterable[StatisticObservation],
) -> dict[StatisticKey, float | None]:
    """Key observations by (fixture_id, team_id, metric); later rows win."""
    return {
        (observation.fixture_id, observation.team_id, observation.metric): observation.value
        for observation in observations
    }


def statistic_value(
    statistics: Mapping[StatisticKey, float | None],
    *,
    fixture_id: int,
    team_id: int,
    metric: Metric,
) -> float | None:
    return statistics.get((fixture_id, team_id, metric))


__all__ = [
    "FixtureResult",
    "StatisticKey",
    "StatisticObservation",
    "index_statistics",
    "statistic_value",
]
