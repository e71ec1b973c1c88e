"""Football rating domain modules."""

from domain.ratings.common import FixtureResult, StatisticObservation
from domain.ratings.protocol import Dimension, Metric

__all__ = ["Dimension", "FixtureResult", "Metric", "StatisticObservation"]
