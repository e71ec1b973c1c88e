"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    DimensionOutcome,
    DimensionSkip,
    DimensionUpdate,
    EloParameters,
    MetricBounds,
    MultiFactorEloCalculator,
    calculate_expected_score,
    compute_dimension_bounds,
    normalize_value,
    update_rating,
)
from domain.ratings.elo.config import FootballEloSystemConfig, load_football_elo_system_configs
from domain.ratings.elo.normalization import normalize_dimensions, rescale_ratings
from domain.ratings.elo.predictor import (
    CompositeWeights,
    MatchPrediction,
    composite_rating,
    predict_match,
)

__all__ = [
    "CompositeWeights",
    "DimensionOutcome",
    "DimensionSkip",
    "DimensionUpdate",
    "EloParameters",
    "FootballEloSystemConfig",
    "MatchPrediction",
    "MetricBounds",
    "MultiFactorEloCalculator",
    "calculate_expected_score",
    "composite_rating",
    "compute_dimension_bounds",
    "load_football_elo_system_configs",
    "normalize_dimensions",
    "normalize_value",
    "predict_match",
    "rescale_ratings",
    "update_rating",
]
