"""Tests for the cross-dimension rescale pass."""

from __future__ import annotations

import pytest

from domain.ratings.elo.normalization import normalize_dimensions, rescale_ratings
from domain.ratings.elo.predictor import CompositeWeights
from domain.ratings.protocol import RATED_DIMENSIONS, Dimension
from domain.ratings.store import InMemoryRatingStore


def test_rescale_ratings_maps_onto_band() -> None:
    rescaled = rescale_ratings({1: 900.0, 2: 1000.0, 3: 1100.0})
    assert rescaled == {
        1: pytest.approx(1000.0),
        2: pytest.approx(1500.0),
        3: pytest.approx(2000.0),
    }


def test_rescale_ratings_custom_floor_and_span() -> None:
    rescaled = rescale_ratings({1: 10.0, 2: 30.0}, floor=0.0, span=100.0)
    assert rescaled == {1: pytest.approx(0.0), 2: pytest.approx(100.0)}


def test_rescale_ratings_single_value_population_is_centered() -> None:
    assert rescale_ratings({1: 1012.5, 2: 1012.5}) == {1: pytest.approx(1500.0), 2: pytest.approx(1500.0)}


def test_rescale_ratings_empty_population() -> None:
    assert rescale_ratings({}) == {}


def test_rescale_of_full_band_is_fixed_point() -> None:
    first = rescale_ratings({1: 951.0, 2: 1003.0, 3: 1049.0})
    second = rescale_ratings(first)
    assert second == {team_id: pytest.approx(rating) for team_id, rating in first.items()}


def test_rescale_preserves_ordering() -> None:
    ratings = {1: 1033.0, 2: 977.0, 3: 1001.0, 4: 1020.0}
    rescaled = rescale_ratings(ratings)
    assert sorted(ratings, key=ratings.__getitem__) == sorted(rescaled, key=rescaled.__getitem__)


def test_normalize_dimensions_rescales_each_dimension_independently() -> None:
    store = InMemoryRatingStore()
    store.set_rating(1, Dimension.GOAL, 1012.5)
    store.set_rating(2, Dimension.GOAL, 987.5)
    store.set_rating(1, Dimension.WINNER, 990.0)
    store.set_rating(2, Dimension.WINNER, 1010.0)
    store.set_rating(1, Dimension.SHOTS, 1001.0)
    store.set_rating(2, Dimension.SHOTS, 1001.0)

    pre_bounds = normalize_dimensions(store, weights=CompositeWeights())

    assert store.get_rating(1, Dimension.GOAL) == pytest.approx(2000.0)
    assert store.get_rating(2, Dimension.GOAL) == pytest.approx(1000.0)
    assert store.get_rating(1, Dimension.WINNER) == pytest.approx(1000.0)
    assert store.get_rating(2, Dimension.WINNER) == pytest.approx(2000.0)
    assert store.get_rating(1, Dimension.SHOTS) == pytest.approx(1500.0)
    assert pre_bounds[Dimension.GOAL].minimum == pytest.approx(987.5)
    assert pre_bounds[Dimension.GOAL].maximum == pytest.approx(1012.5)
    assert set(pre_bounds) == set(RATED_DIMENSIONS)


def test_normalize_dimensions_writes_composite() -> None:
    store = InMemoryRatingStore()
    for dimension in RATED_DIMENSIONS:
        store.set_rating(1, dimension, 1050.0)
        store.set_rating(2, dimension, 950.0)

    normalize_dimensions(store, weights=CompositeWeights())

    assert store.get_rating(1, Dimension.COMPOSITE) == pytest.approx(2000.0)
    assert store.get_rating(2, Dimension.COMPOSITE) == pytest.approx(1000.0)


def test_normalize_dimensions_on_empty_store() -> None:
    store = InMemoryRatingStore()
    assert normalize_dimensions(store, weights=CompositeWeights()) == {}
    assert store.tracked_team_count() == 0
