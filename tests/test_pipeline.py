"""End-to-end tests for recompute, normalization and prediction over SQLite."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from domain.pipeline import fold_fixtures, normalize_stored_ratings, predict_stored_match, run_full_recompute
from domain.ratings.common import FixtureResult, StatisticObservation
from domain.ratings.errors import RatingsAlreadyNormalizedError
from domain.ratings.elo.calculator import EloParameters
from domain.ratings.protocol import Dimension, DrawPolicy, Metric
from domain.ratings.store import InMemoryRatingStore
from models import RatingSystem, TeamRating
from repositories.fixtures import (
    fetch_fixture_results,
    fetch_statistic_observations,
    record_fixture,
    record_fixtures,
    record_statistic,
    record_statistics,
)
from repositories.ratings.system import count_tracked_teams, get_rating_system

TEAM_A = 1013
TEAM_B = 551
TEAM_C = 565


def _fixture(fixture_id: int, home: int, away: int, home_score: int | None, away_score: int | None) -> FixtureResult:
    return FixtureResult(
        fixture_id=fixture_id,
        event_time=datetime(2024, 8, fixture_id, 18, 0, 0),
        home_team_id=home,
        away_team_id=away,
        home_score=home_score,
        away_score=away_score,
    )


def _stats(fixture_id: int, home: int, away: int, shots: tuple[float, float], possession: tuple[float, float]):
    return [
        StatisticObservation(fixture_id, home, Metric.TOTAL_SHOTS, shots[0]),
        StatisticObservation(fixture_id, away, Metric.TOTAL_SHOTS, shots[1]),
        StatisticObservation(fixture_id, home, Metric.BALL_POSSESSION, possession[0]),
        StatisticObservation(fixture_id, away, Metric.BALL_POSSESSION, possession[1]),
    ]


def _seed(session_factory, fixtures, observations) -> None:
    with session_factory() as session:
        with session.begin():
            record_fixtures(session, fixtures)
            record_statistics(session, observations)


def _ratings(session_factory) -> dict[int, TeamRating]:
    with session_factory() as session:
        return {row.team_id: row for row in session.query(TeamRating).all()}


def test_record_fixture_is_idempotent_per_fixture_id(session_factory) -> None:
    fixture = _fixture(1, TEAM_A, TEAM_B, 3, 1)
    with session_factory() as session:
        assert record_fixture(session, fixture) is True
        assert record_fixture(session, fixture) is False
        assert record_statistic(session, StatisticObservation(1, TEAM_A, Metric.TOTAL_SHOTS, 10.0)) is True
        assert record_statistic(session, StatisticObservation(1, TEAM_A, Metric.TOTAL_SHOTS, 12.0)) is False
        assert record_statistic(session, StatisticObservation(1, TEAM_A, Metric.BALL_POSSESSION, 60.0)) is True
        session.commit()

        assert len(fetch_fixture_results(session)) == 1
        observations = fetch_statistic_observations(session)
    assert {(o.metric, o.value) for o in observations} == {
        (Metric.TOTAL_SHOTS, 10.0),
        (Metric.BALL_POSSESSION, 60.0),
    }


def test_record_statistic_for_unknown_fixture_is_skipped(session_factory) -> None:
    with session_factory() as session:
        assert record_statistic(session, StatisticObservation(99, TEAM_A, Metric.TOTAL_SHOTS, 5.0)) is False


def test_fetch_fixture_results_orders_by_fixture_id(session_factory) -> None:
    _seed(session_factory, [_fixture(3, TEAM_A, TEAM_B, 1, 0), _fixture(1, TEAM_B, TEAM_C, 2, 2)], [])
    with session_factory() as session:
        assert [fixture.fixture_id for fixture in fetch_fixture_results(session)] == [1, 3]


def test_fetch_fixture_results_applies_lookback(session_factory) -> None:
    recent = FixtureResult(
        fixture_id=2,
        event_time=datetime.now(UTC).replace(tzinfo=None, microsecond=0),
        home_team_id=TEAM_A,
        away_team_id=TEAM_B,
        home_score=1,
        away_score=0,
    )
    _seed(session_factory, [_fixture(1, TEAM_A, TEAM_B, 2, 0), recent], [])
    with session_factory() as session:
        assert [fixture.fixture_id for fixture in fetch_fixture_results(session, 30)] == [2]
        assert len(fetch_fixture_results(session, 0)) == 2


def test_full_recompute_single_fixture(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [_fixture(1, TEAM_A, TEAM_B, 3, 1)],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)),
    )

    summary = run_full_recompute(session_factory=session_factory, system_config=system_config)

    assert summary.processed_fixtures == 1
    assert summary.applied_updates == 4
    assert summary.skipped_updates == 0
    assert summary.tracked_teams == 2
    assert summary.normalized is True

    ratings = _ratings(session_factory)
    for column in ("goal_elo", "winner_elo", "total_shots_elo", "ball_possession_elo", "composite_elo"):
        assert getattr(ratings[TEAM_A], column) == pytest.approx(2000.0)
        assert getattr(ratings[TEAM_B], column) == pytest.approx(1000.0)

    with session_factory() as session:
        system = get_rating_system(session, system_config.name)
        assert system is not None
        assert system.normalized is True
        assert system.processed_fixtures == 1
        assert system.config_json["draw_policy"] == "split"


def test_full_recompute_isolates_partial_failures(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [
            _fixture(1, TEAM_A, TEAM_B, 3, 1),
            _fixture(2, TEAM_B, TEAM_C, 0, 0),
            _fixture(3, TEAM_C, TEAM_A, None, None),
        ],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)) + _stats(3, TEAM_C, TEAM_A, (4, 12), (30, 70)),
    )

    summary = run_full_recompute(session_factory=session_factory, system_config=system_config)

    # fixture 2 lacks statistics, fixture 3 lacks a score line
    assert summary.processed_fixtures == 3
    assert summary.applied_updates == 4 + 2 + 2
    assert summary.skipped_updates == 2 + 2
    assert summary.tracked_teams == 3

    ratings = _ratings(session_factory)
    for row in ratings.values():
        for column in ("goal_elo", "winner_elo", "total_shots_elo", "ball_possession_elo"):
            assert 1000.0 - 1e-9 <= getattr(row, column) <= 2000.0 + 1e-9
    assert ratings[TEAM_A].composite_elo > ratings[TEAM_C].composite_elo


def test_full_recompute_is_repeatable(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [_fixture(1, TEAM_A, TEAM_B, 3, 1), _fixture(2, TEAM_C, TEAM_A, 2, 2)],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)) + _stats(2, TEAM_C, TEAM_A, (7, 8), (45, 55)),
    )

    run_full_recompute(session_factory=session_factory, system_config=system_config)
    first = {team_id: row.composite_elo for team_id, row in _ratings(session_factory).items()}
    run_full_recompute(session_factory=session_factory, system_config=system_config)
    second = {team_id: row.composite_elo for team_id, row in _ratings(session_factory).items()}

    assert second == {team_id: pytest.approx(value) for team_id, value in first.items()}


def test_dry_run_leaves_store_untouched(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [_fixture(1, TEAM_A, TEAM_B, 3, 1)],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)),
    )
    messages: list[str] = []

    summary = run_full_recompute(
        session_factory=session_factory,
        system_config=system_config,
        dry_run=True,
        echo=messages.append,
    )

    assert summary.dry_run is True
    assert summary.tracked_teams == 2
    assert summary.system_id is None
    assert messages and messages[0].startswith("[dry-run]")
    with session_factory() as session:
        assert count_tracked_teams(session) == 0
        assert session.query(RatingSystem).count() == 0


def test_normalize_refuses_second_pass(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [_fixture(1, TEAM_A, TEAM_B, 3, 1)],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)),
    )
    run_full_recompute(session_factory=session_factory, system_config=system_config)

    with pytest.raises(RatingsAlreadyNormalizedError, match="already normalized"):
        normalize_stored_ratings(session_factory=session_factory, system_config=system_config)

    assert normalize_stored_ratings(
        session_factory=session_factory,
        system_config=system_config,
        force=True,
    ) == 2


def test_normalize_rescales_ratings_of_unnormalized_system(session_factory, system_config, rating_system_id) -> None:
    with session_factory() as session:
        with session.begin():
            for team_id, goal_elo in ((TEAM_A, 1040.0), (TEAM_B, 960.0)):
                session.add(
                    TeamRating(
                        rating_system_id=rating_system_id,
                        team_id=team_id,
                        goal_elo=goal_elo,
                        winner_elo=1000.0,
                        total_shots_elo=1000.0,
                        ball_possession_elo=1000.0,
                        composite_elo=1000.0,
                    )
                )

    normalize_stored_ratings(session_factory=session_factory, system_config=system_config)

    ratings = _ratings(session_factory)
    assert ratings[TEAM_A].goal_elo == pytest.approx(2000.0)
    assert ratings[TEAM_B].goal_elo == pytest.approx(1000.0)
    assert ratings[TEAM_A].winner_elo == pytest.approx(1500.0)
    with session_factory() as session:
        system = get_rating_system(session, system_config.name)
        assert system is not None and system.normalized is True


def test_predict_stored_match(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [_fixture(1, TEAM_A, TEAM_B, 3, 1)],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40)),
    )
    run_full_recompute(session_factory=session_factory, system_config=system_config)

    prediction = predict_stored_match(
        session_factory=session_factory,
        system_config=system_config,
        team1_id=TEAM_A,
        team2_id=TEAM_B,
    )

    assert prediction.team1_probability > 0.9
    assert prediction.team1_probability + prediction.team2_probability == pytest.approx(1.0)


def test_predict_unknown_team_materializes_default_row(session_factory, system_config) -> None:
    prediction = predict_stored_match(
        session_factory=session_factory,
        system_config=system_config,
        team1_id=TEAM_A,
        team2_id=TEAM_C,
    )

    assert prediction.as_pair() == (0.5, 0.5)
    with session_factory() as session:
        assert count_tracked_teams(session) == 2
        system = get_rating_system(session, system_config.name)
        assert system is not None
        row = session.get(TeamRating, (system.id, TEAM_C))
        assert row is not None
        assert row.goal_elo == pytest.approx(1000.0)


def test_recomputing_one_system_leaves_another_systems_ratings_intact(session_factory, system_config) -> None:
    _seed(
        session_factory,
        [
            _fixture(1, TEAM_A, TEAM_B, 3, 1),
            _fixture(2, TEAM_B, TEAM_C, 1, 1),
            _fixture(3, TEAM_C, TEAM_A, 2, 0),
        ],
        _stats(1, TEAM_A, TEAM_B, (10, 6), (60, 40))
        + _stats(2, TEAM_B, TEAM_C, (9, 9), (52, 48))
        + _stats(3, TEAM_C, TEAM_A, (11, 3), (58, 42)),
    )
    other_config = replace(
        system_config,
        name="football_elo_away_draws",
        parameters=EloParameters(k_factor=60.0, draw_policy=DrawPolicy.AWAY),
    )

    run_full_recompute(session_factory=session_factory, system_config=system_config)
    before = predict_stored_match(
        session_factory=session_factory,
        system_config=system_config,
        team1_id=TEAM_A,
        team2_id=TEAM_B,
    )

    other_summary = run_full_recompute(session_factory=session_factory, system_config=other_config)
    after = predict_stored_match(
        session_factory=session_factory,
        system_config=system_config,
        team1_id=TEAM_A,
        team2_id=TEAM_B,
    )

    assert after.as_pair() == before.as_pair()
    assert other_summary.tracked_teams == 3
    with session_factory() as session:
        first = get_rating_system(session, system_config.name)
        second = get_rating_system(session, other_config.name)
        assert first is not None and second is not None
        assert first.normalized is True and second.normalized is True
        assert count_tracked_teams(session, rating_system_id=first.id) == 3
        assert count_tracked_teams(session, rating_system_id=second.id) == 3
        assert count_tracked_teams(session) == 6


def test_fold_ignores_statistics_outside_the_fixture_window(system_config) -> None:
    recent = FixtureResult(
        fixture_id=2,
        event_time=datetime(2024, 9, 2, 18, 0, 0),
        home_team_id=TEAM_A,
        away_team_id=TEAM_B,
        home_score=3,
        away_score=1,
    )
    observations = _stats(1, TEAM_A, TEAM_B, (0, 100), (10, 90)) + _stats(2, TEAM_A, TEAM_B, (10, 6), (60, 40))
    store = InMemoryRatingStore()

    fold_fixtures(store=store, system_config=system_config, fixtures=[recent], observations=observations)

    # only fixture 2 defines the populations, so each side scores 1.0 or 0.0
    for dimension in (Dimension.GOAL, Dimension.SHOTS, Dimension.POSSESSION):
        assert store.get_rating(TEAM_A, dimension) == pytest.approx(1012.5)
        assert store.get_rating(TEAM_B, dimension) == pytest.approx(987.5)
