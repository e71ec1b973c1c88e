"""Persistence helpers for fixtures and per-metric statistic observations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from domain.ratings.common import FixtureResult, StatisticObservation
from domain.ratings.protocol import Metric
from models import BallPossession, Base, Fixture, RatingSystem, TeamRating, TotalShots

logger = logging.getLogger(__name__)

_METRIC_MODELS: dict[Metric, type[TotalShots] | type[BallPossession]] = {
    Metric.TOTAL_SHOTS: TotalShots,
    Metric.BALL_POSSESSION: BallPossession,
}


def ensure_football_schema(engine: Engine) -> None:
    """Create fixture, statistic and rating tables if they do not exist."""
    Base.metadata.create_all(
        bind=engine,
        tables=[
            Fixture.__table__,
            TotalShots.__table__,
            BallPossession.__table__,
            TeamRating.__table__,
            RatingSystem.__table__,
        ],
    )


def _build_cutoff_time(lookback_days: int | None) -> datetime | None:
    if lookback_days is None or lookback_days <= 0:
        return None
    return datetime.now(UTC).replace(tzinfo=None) - timedelta(days=lookback_days)


def record_fixture(session: Session, fixture: FixtureResult) -> bool:
    """Insert one fixture unless its id is already recorded."""
    if session.get(Fixture, fixture.fixture_id) is not None:
        return False

    session.add(
        Fixture(
            id=fixture.fixture_id,
            home_team_id=fixture.home_team_id,
            away_team_id=fixture.away_team_id,
            home_score=fixture.home_score,
            away_score=fixture.away_score,
            event_time=fixture.event_time,
        )
    )
    session.flush()
    return True


def record_statistic(session: Session, observation: StatisticObservation) -> bool:
    """Insert one observation unless (fixture, team, metric) is already recorded."""
    if session.get(Fixture, observation.fixture_id) is None:
        logger.warning(
            "skipping %s for unknown fixture_id=%s team_id=%s",
            observation.metric.value,
            observation.fixture_id,
            observation.team_id,
        )
        return False

    model = _METRIC_MODELS[observation.metric]
    if session.get(model, (observation.fixture_id, observation.team_id)) is not None:
        return False

    session.add(
        model(
            fixture_id=observation.fixture_id,
            team_id=observation.team_id,
            value=observation.value,
        )
    )
    session.flush()
    return True


def record_fixtures(session: Session, fixtures: Iterable[FixtureResult]) -> int:
    return sum(1 for fixture in fixtures if record_fixture(session, fixture))


def record_statistics(session: Session, observations: Iterable[StatisticObservation]) -> int:
    return sum(1 for observation in observations if record_statistic(session, observation))


def fetch_fixture_results(session: Session, lookback_days: int | None = None) -> list[FixtureResult]:
    """Fetch recorded fixtures in ascending fixture id order."""
    statement = select(Fixture).order_by(Fixture.id)
    cutoff_time = _build_cutoff_time(lookback_days)
    if cutoff_time is not None:
        statement = statement.where(Fixture.event_time >= cutoff_time)

    return [
        FixtureResult(
            fixture_id=row.id,
            event_time=row.event_time,
            home_team_id=row.home_team_id,
            away_team_id=row.away_team_id,
            home_score=row.home_score,
            away_score=row.away_score,
        )
        for row in session.scalars(statement)
    ]


def fetch_statistic_observations(session: Session) -> list[StatisticObservation]:
    """Fetch every recorded observation for every tracked metric."""
    observations: list[StatisticObservation] = []
    for metric, model in _METRIC_MODELS.items():
        statement = select(model).order_by(model.fixture_id, model.team_id)
        for row in session.scalars(statement):
            observations.append(
                StatisticObservation(
                    fixture_id=row.fixture_id,
                    team_id=row.team_id,
                    metric=metric,
                    value=None if row.value is None else float(row.value),
                )
            )
    return observations


__all__ = [
    "ensure_football_schema",
    "fetch_fixture_results",
    "fetch_statistic_observations",
    "record_fixture",
    "record_fixtures",
    "record_statistic",
    "record_statistics",
]
