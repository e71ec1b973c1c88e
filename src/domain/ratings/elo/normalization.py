"""Cross-dimension rescaling applied once after a full fixture fold."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from domain.ratings.elo.calculator import MetricBounds
from domain.ratings.elo.predictor import CompositeWeights, composite_rating
from domain.ratings.protocol import RATED_DIMENSIONS, Dimension, RatingStore


def rescale_ratings(
    ratings: Mapping[int, float],
    *,
    floor: float = 1000.0,
    span: float = 1000.0,
) -> dict[int, float]:
    """Map one dimension's ratings linearly onto [floor, floor + span]."""
    bounds = MetricBounds.from_values(ratings.values())
    if bounds is None:
        return {}
    return {team_id: floor + span * bounds.normalize(rating) for team_id, rating in ratings.items()}


def normalize_dimensions(
    store: RatingStore,
    *,
    weights: CompositeWeights,
    floor: float = 1000.0,
    span: float = 1000.0,
    dimensions: Sequence[Dimension] = RATED_DIMENSIONS,
) -> dict[Dimension, MetricBounds]:
    """Rescale every rated dimension in place and refresh composite ratings.

    Callers track whether a store was already normalized, since ratings folded
    after a rescale no longer share one scale. Returns the pre-rescale bounds
    per dimension.
    """
    team_ids = store.team_ids()
    pre_bounds: dict[Dimension, MetricBounds] = {}

    for dimension in dimensions:
        ratings = {team_id: store.get_rating(team_id, dimension) for team_id in team_ids}
        bounds = MetricBounds.from_values(ratings.values())
        if bounds is None:
            continue
        pre_bounds[dimension] = bounds
        for team_id, rating in rescale_ratings(ratings, floor=floor, span=span).items():
            store.set_rating(team_id, dimension, rating)

    for team_id in team_ids:
        store.set_rating(team_id, Dimension.COMPOSITE, composite_rating(store, team_id, weights))

    return pre_bounds


__all__ = ["normalize_dimensions", "rescale_ratings"]
