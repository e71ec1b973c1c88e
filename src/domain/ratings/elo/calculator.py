"""Multi-factor team Elo logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from domain.ratings.common import FixtureResult, StatisticKey, StatisticObservation, statistic_value
from domain.ratings.protocol import (
    DIMENSION_METRICS,
    RATED_DIMENSIONS,
    Dimension,
    DrawPolicy,
    RatingStore,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5


@dataclass(frozen=True)
class EloParameters:
    initial_rating: float = 1000.0
    k_factor: float = 25.0
    scale_factor: float = 400.0
    draw_policy: DrawPolicy = DrawPolicy.SPLIT
    rescale_floor: float = 1000.0
    rescale_span: float = 1000.0
    dimension_k_factors: Mapping[Dimension, float] = field(default_factory=dict)

    def k_factor_for(self, dimension: Dimension) -> float:
        return self.dimension_k_factors.get(dimension, self.k_factor)


@dataclass(frozen=True)
class MetricBounds:
    """Observed min/max of one metric population."""

    minimum: float
    maximum: float

    @classmethod
    def from_values(cls, values: Iterable[float]) -> MetricBounds | None:
        collected = list(values)
        if not collected:
            return None
        return cls(minimum=min(collected), maximum=max(collected))

    def normalize(self, value: float) -> float:
        return normalize_value(value, self.minimum, self.maximum)


@dataclass(frozen=True)
class DimensionUpdate:
    """One applied Elo step for both sides of a fixture on one dimension."""

    fixture_id: int
    dimension: Dimension
    home_team_id: int
    away_team_id: int
    home_actual: float
    away_actual: float
    home_expected: float
    away_expected: float
    home_pre: float
    away_pre: float
    home_post: float
    away_post: float
    k_factor: float


@dataclass(frozen=True)
class DimensionSkip:
    """A dimension left untouched for one fixture, with the reason."""

    fixture_id: int
    dimension: Dimension
    reason: str


DimensionOutcome = DimensionUpdate | DimensionSkip


def normalize_value(value: float, minimum: float, maximum: float) -> float:
    """Map a raw value onto [0, 1] given the population bounds.

    A single-valued population (``maximum == minimum``) maps to the neutral 0.5.
    """
    if maximum < minimum:
        raise ValueError(f"maximum={maximum} is below minimum={minimum}")
    if maximum == minimum:
        return NEUTRAL_SCORE
    return (value - minimum) / (maximum - minimum)


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def update_rating(rating: float, expected_score: float, actual_score: float, k_factor: float) -> float:
    return rating + k_factor * (actual_score - expected_score)


def compute_dimension_bounds(
    fixtures: Iterable[FixtureResult],
    observations: Iterable[StatisticObservation],
) -> dict[Dimension, MetricBounds]:
    """Population bounds per normalized dimension over every known record."""
    goals: list[float] = []
    for fixture in fixtures:
        for score in (fixture.home_score, fixture.away_score):
            if score is not None:
                goals.append(float(score))

    metric_values: dict[Dimension, list[float]] = {dimension: [] for dimension in DIMENSION_METRICS}
    metric_dimensions = {metric: dimension for dimension, metric in DIMENSION_METRICS.items()}
    for observation in observations:
        if observation.value is None:
            continue
        dimension = metric_dimensions.get(observation.metric)
        if dimension is not None:
            metric_values[dimension].append(float(observation.value))

    bounds: dict[Dimension, MetricBounds] = {}
    for dimension, values in ((Dimension.GOAL, goals), *metric_values.items()):
        dimension_bounds = MetricBounds.from_values(values)
        if dimension_bounds is not None:
            bounds[dimension] = dimension_bounds
    return bounds


class MultiFactorEloCalculator:
    """Sequential fixture fold over every rated dimension."""

    def __init__(
        self,
        params: EloParameters,
        store: RatingStore,
        *,
        bounds: Mapping[Dimension, MetricBounds],
        statistics: Mapping[StatisticKey, float | None],
        dimensions: Sequence[Dimension] = RATED_DIMENSIONS,
    ) -> None:
        self.params = params
        self.store = store
        self.bounds = dict(bounds)
        self.statistics = statistics
        self.dimensions = tuple(dimensions)

    def _winner_scores(self, fixture: FixtureResult) -> tuple[float, float] | str:
        if fixture.home_score is None or fixture.away_score is None:
            return "missing score"
        if fixture.home_score > fixture.away_score:
            return 1.0, 0.0
        if fixture.home_score < fixture.away_score:
            return 0.0, 1.0
        if self.params.draw_policy == DrawPolicy.AWAY:
            return 0.0, 1.0
        return NEUTRAL_SCORE, NEUTRAL_SCORE

    def _raw_values(
        self,
        fixture: FixtureResult,
        dimension: Dimension,
    ) -> tuple[float | None, float | None]:
        if dimension == Dimension.GOAL:
            return (
                None if fixture.home_score is None else float(fixture.home_score),
                None if fixture.away_score is None else float(fixture.away_score),
            )
        metric = DIMENSION_METRICS[dimension]
        home_value = statistic_value(
            self.statistics,
            fixture_id=fixture.fixture_id,
            team_id=fixture.home_team_id,
            metric=metric,
        )
        away_value = statistic_value(
            self.statistics,
            fixture_id=fixture.fixture_id,
            team_id=fixture.away_team_id,
            metric=metric,
        )
        return home_value, away_value

    def _actual_scores(self, fixture: FixtureResult, dimension: Dimension) -> tuple[float, float] | str:
        if dimension == Dimension.WINNER:
            return self._winner_scores(fixture)

        home_value, away_value = self._raw_values(fixture, dimension)
        if home_value is None:
            return f"missing home {dimension.value} value"
        if away_value is None:
            return f"missing away {dimension.value} value"

        dimension_bounds = self.bounds.get(dimension)
        if dimension_bounds is None:
            return f"no observed population for {dimension.value}"
        return dimension_bounds.normalize(home_value), dimension_bounds.normalize(away_value)

    def process_dimension(self, fixture: FixtureResult, dimension: Dimension) -> DimensionOutcome:
        if fixture.home_team_id == fixture.away_team_id:
            return DimensionSkip(
                fixture_id=fixture.fixture_id,
                dimension=dimension,
                reason=f"identical teams ({fixture.home_team_id})",
            )

        actual = self._actual_scores(fixture, dimension)
        if isinstance(actual, str):
            return DimensionSkip(fixture_id=fixture.fixture_id, dimension=dimension, reason=actual)
        home_actual, away_actual = actual

        home_pre = self.store.get_rating(fixture.home_team_id, dimension)
        away_pre = self.store.get_rating(fixture.away_team_id, dimension)

        home_expected = calculate_expected_score(home_pre, away_pre, self.params.scale_factor)
        away_expected = calculate_expected_score(away_pre, home_pre, self.params.scale_factor)

        k_factor = self.params.k_factor_for(dimension)
        home_post = update_rating(home_pre, home_expected, home_actual, k_factor)
        away_post = update_rating(away_pre, away_expected, away_actual, k_factor)

        self.store.set_rating(fixture.home_team_id, dimension, home_post)
        self.store.set_rating(fixture.away_team_id, dimension, away_post)

        return DimensionUpdate(
            fixture_id=fixture.fixture_id,
            dimension=dimension,
            home_team_id=fixture.home_team_id,
            away_team_id=fixture.away_team_id,
            home_actual=home_actual,
            away_actual=away_actual,
            home_expected=home_expected,
            away_expected=away_expected,
            home_pre=home_pre,
            away_pre=away_pre,
            home_post=home_post,
            away_post=away_post,
            k_factor=k_factor,
        )

    def process_fixture(self, fixture: FixtureResult) -> list[DimensionOutcome]:
        outcomes: list[DimensionOutcome] = []
        for dimension in self.dimensions:
            outcome = self.process_dimension(fixture, dimension)
            if isinstance(outcome, DimensionSkip):
                logger.warning(
                    "skipping fixture_id=%s dimension=%s: %s",
                    outcome.fixture_id,
                    outcome.dimension.value,
                    outcome.reason,
                )
            outcomes.append(outcome)
        return outcomes


__all__ = [
    "DimensionOutcome",
    "DimensionSkip",
    "DimensionUpdate",
    "EloParameters",
    "MetricBounds",
    "MultiFactorEloCalculator",
    "NEUTRAL_SCORE",
    "calculate_expected_score",
    "compute_dimension_bounds",
    "normalize_value",
    "update_rating",
]
