"""Full recompute, normalization and prediction entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.ratings.common import FixtureResult, StatisticObservation, index_statistics
from domain.ratings.elo.calculator import (
    DimensionSkip,
    DimensionUpdate,
    MultiFactorEloCalculator,
    compute_dimension_bounds,
)
from domain.ratings.elo.config import FootballEloSystemConfig
from domain.ratings.elo.normalization import normalize_dimensions
from domain.ratings.elo.predictor import MatchPrediction, predict_match
from domain.ratings.errors import RatingsAlreadyNormalizedError, StoreUnavailableError
from domain.ratings.protocol import RatingStore
from domain.ratings.store import InMemoryRatingStore
from models import RatingSystem
from repositories.fixtures import fetch_fixture_results, fetch_statistic_observations
from repositories.ratings.store import SqlRatingStore
from repositories.ratings.system import (
    count_tracked_teams,
    get_rating_system,
    mark_rating_system_normalized,
    reset_team_ratings,
    upsert_rating_system,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoldSummary:
    processed_fixtures: int
    applied_updates: int
    skipped_updates: int


@dataclass(frozen=True)
class RecomputeSummary:
    """Outcome for one recomputed system config."""

    system_name: str
    config_file: str
    system_id: int | None
    processed_fixtures: int
    applied_updates: int
    skipped_updates: int
    tracked_teams: int
    normalized: bool
    dry_run: bool


def fold_fixtures(
    *,
    store: RatingStore,
    system_config: FootballEloSystemConfig,
    fixtures: Sequence[FixtureResult],
    observations: Sequence[StatisticObservation],
    echo: Callable[[str], None] | None = None,
) -> FoldSummary:
    """Run every fixture through the dimension aggregator in the given order.

    Observations for fixtures outside ``fixtures`` are ignored, so every
    dimension is normalized over the same population.
    """
    fixture_ids = {fixture.fixture_id for fixture in fixtures}
    observations = [observation for observation in observations if observation.fixture_id in fixture_ids]
    calculator = MultiFactorEloCalculator(
        system_config.parameters,
        store,
        bounds=compute_dimension_bounds(fixtures, observations),
        statistics=index_statistics(observations),
    )

    applied_updates = 0
    skipped_updates = 0
    total_fixtures = len(fixtures)
    for index, fixture in enumerate(fixtures, start=1):
        for outcome in calculator.process_fixture(fixture):
            if isinstance(outcome, DimensionUpdate):
                applied_updates += 1
            elif isinstance(outcome, DimensionSkip):
                skipped_updates += 1

        if echo is not None and index % 1_000 == 0:
            echo(f"system={system_config.name} processed_fixtures={index}/{total_fixtures}")

    return FoldSummary(
        processed_fixtures=total_fixtures,
        applied_updates=applied_updates,
        skipped_updates=skipped_updates,
    )


def _normalize_store(store: RatingStore, system_config: FootballEloSystemConfig) -> None:
    normalize_dimensions(
        store,
        weights=system_config.weights,
        floor=system_config.parameters.rescale_floor,
        span=system_config.parameters.rescale_span,
    )


def _upsert_system_from_config(session: Session, system_config: FootballEloSystemConfig) -> RatingSystem:
    return upsert_rating_system(
        session,
        name=system_config.name,
        description=system_config.description,
        config_json=system_config.as_config_json(),
    )


def run_full_recompute(
    *,
    session_factory,
    system_config: FootballEloSystemConfig,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> RecomputeSummary:
    """Fold every recorded fixture from scratch, then rescale every dimension once."""
    initial_rating = system_config.parameters.initial_rating

    with session_factory() as session:
        try:
            fixtures = fetch_fixture_results(session, system_config.lookback_days)
            observations = fetch_statistic_observations(session)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("failed to load fixtures and statistics") from exc

        logger.info(
            "recompute start system=%s fixtures=%d observations=%d dry_run=%s",
            system_config.name,
            len(fixtures),
            len(observations),
            dry_run,
        )

        if dry_run:
            memory_store = InMemoryRatingStore(initial_rating=initial_rating)
            fold = fold_fixtures(
                store=memory_store,
                system_config=system_config,
                fixtures=fixtures,
                observations=observations,
                echo=echo,
            )
            _normalize_store(memory_store, system_config)
            session.rollback()
            summary = RecomputeSummary(
                system_name=system_config.name,
                config_file=system_config.file_path.name,
                system_id=None,
                processed_fixtures=fold.processed_fixtures,
                applied_updates=fold.applied_updates,
                skipped_updates=fold.skipped_updates,
                tracked_teams=memory_store.tracked_team_count(),
                normalized=True,
                dry_run=True,
            )
            if echo is not None:
                echo(
                    f"[dry-run] config={summary.config_file} "
                    f"system={summary.system_name} "
                    f"processed_fixtures={summary.processed_fixtures} "
                    f"applied_updates={summary.applied_updates} "
                    f"skipped_updates={summary.skipped_updates} "
                    f"tracked_teams={summary.tracked_teams}"
                )
            return summary

        try:
            system = _upsert_system_from_config(session, system_config)
            reset_team_ratings(session, system.id)

            store = SqlRatingStore(session, rating_system_id=system.id, initial_rating=initial_rating)
            fold = fold_fixtures(
                store=store,
                system_config=system_config,
                fixtures=fixtures,
                observations=observations,
                echo=echo,
            )
            _normalize_store(store, system_config)
            mark_rating_system_normalized(session, system, processed_fixtures=fold.processed_fixtures)
            tracked_teams = count_tracked_teams(session, rating_system_id=system.id)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreUnavailableError(f"recompute failed for system={system_config.name}") from exc
        except Exception:
            session.rollback()
            raise

        summary = RecomputeSummary(
            system_name=system_config.name,
            config_file=system_config.file_path.name,
            system_id=int(system.id),
            processed_fixtures=fold.processed_fixtures,
            applied_updates=fold.applied_updates,
            skipped_updates=fold.skipped_updates,
            tracked_teams=tracked_teams,
            normalized=True,
            dry_run=False,
        )
        logger.info(
            "recompute done system=%s applied=%d skipped=%d tracked_teams=%d",
            summary.system_name,
            summary.applied_updates,
            summary.skipped_updates,
            summary.tracked_teams,
        )
        if echo is not None:
            echo(
                "completed "
                f"config={summary.config_file} "
                f"system={summary.system_name} "
                f"system_id={summary.system_id} "
                f"processed_fixtures={summary.processed_fixtures} "
                f"applied_updates={summary.applied_updates} "
                f"skipped_updates={summary.skipped_updates} "
                f"tracked_teams={summary.tracked_teams}"
            )
        return summary


def normalize_stored_ratings(
    *,
    session_factory,
    system_config: FootballEloSystemConfig,
    force: bool = False,
) -> int:
    """Apply the cross-dimension rescale to stored ratings; returns the team count.

    Refuses a second pass on a system already marked normalized unless forced.
    """
    with session_factory() as session:
        try:
            system = get_rating_system(session, system_config.name)
            if system is not None and system.normalized and not force:
                raise RatingsAlreadyNormalizedError(
                    f"system={system_config.name} is already normalized; "
                    "run a full recompute or pass force"
                )
            if system is None:
                system = _upsert_system_from_config(session, system_config)

            store = SqlRatingStore(
                session,
                rating_system_id=system.id,
                initial_rating=system_config.parameters.initial_rating,
            )
            _normalize_store(store, system_config)
            mark_rating_system_normalized(session, system)
            tracked_teams = count_tracked_teams(session, rating_system_id=system.id)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreUnavailableError(f"normalization failed for system={system_config.name}") from exc
        except Exception:
            session.rollback()
            raise

    logger.info("normalized system=%s tracked_teams=%d forced=%s", system_config.name, tracked_teams, force)
    return tracked_teams


def predict_stored_match(
    *,
    session_factory,
    system_config: FootballEloSystemConfig,
    team1_id: int,
    team2_id: int,
) -> MatchPrediction:
    """Predict one matchup from one system's stored ratings.

    Unseen teams are materialized at the default rating.
    """
    with session_factory() as session:
        try:
            system = get_rating_system(session, system_config.name)
            if system is None:
                system = _upsert_system_from_config(session, system_config)
            store = SqlRatingStore(
                session,
                rating_system_id=system.id,
                initial_rating=system_config.parameters.initial_rating,
            )
            prediction = predict_match(
                store,
                team1_id,
                team2_id,
                weights=system_config.weights,
                scale_factor=system_config.parameters.scale_factor,
            )
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreUnavailableError("failed to read ratings for prediction") from exc
        except StoreUnavailableError:
            session.rollback()
            raise
    return prediction


__all__ = [
    "FoldSummary",
    "RecomputeSummary",
    "fold_fixtures",
    "normalize_stored_ratings",
    "predict_stored_match",
    "run_full_recompute",
]
