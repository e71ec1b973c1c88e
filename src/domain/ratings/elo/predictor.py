"""Composite rating blend and matchup win probabilities."""

from __future__ import annotations

from dataclasses import dataclass

from domain.ratings.elo.calculator import calculate_expected_score
from domain.ratings.protocol import RATED_DIMENSIONS, Dimension, RatingStore


@dataclass(frozen=True)
class CompositeWeights:
    goal: float = 0.3
    winner: float = 0.3
    shots: float = 0.15
    possession: float = 0.25

    def weight_for(self, dimension: Dimension) -> float:
        if dimension == Dimension.GOAL:
            return self.goal
        if dimension == Dimension.WINNER:
            return self.winner
        if dimension == Dimension.SHOTS:
            return self.shots
        if dimension == Dimension.POSSESSION:
            return self.possession
        raise ValueError(f"{dimension.value} has no composite weight")

    def total(self) -> float:
        return self.goal + self.winner + self.shots + self.possession


@dataclass(frozen=True)
class MatchPrediction:
    team1_id: int
    team2_id: int
    team1_rating: float
    team2_rating: float
    team1_probability: float
    team2_probability: float

    def as_pair(self) -> tuple[float, float]:
        return self.team1_probability, self.team2_probability


def composite_rating(store: RatingStore, team_id: int, weights: CompositeWeights) -> float:
    """Fixed-weight blend of a team's four dimension ratings."""
    return sum(
        weights.weight_for(dimension) * store.get_rating(team_id, dimension)
        for dimension in RATED_DIMENSIONS
    )


def predict_match(
    store: RatingStore,
    team1_id: int,
    team2_id: int,
    *,
    weights: CompositeWeights,
    scale_factor: float = 400.0,
) -> MatchPrediction:
    """Win probabilities for two teams from their composite ratings."""
    team1_rating = composite_rating(store, team1_id, weights)
    team2_rating = composite_rating(store, team2_id, weights)
    team1_probability = calculate_expected_score(team1_rating, team2_rating, scale_factor)
    return MatchPrediction(
        team1_id=team1_id,
        team2_id=team2_id,
        team1_rating=team1_rating,
        team2_rating=team2_rating,
        team1_probability=team1_probability,
        team2_probability=1.0 - team1_probability,
    )


__all__ = ["CompositeWeights", "MatchPrediction", "composite_rating", "predict_match"]
