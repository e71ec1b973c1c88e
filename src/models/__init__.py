"""ORM models."""

from models.base import Base
from models.fixture import Fixture
from models.statistics import BallPossession, FixtureStatisticMixin, TotalShots
from models.system import RatingSystem
from models.team_rating import DEFAULT_RATING, TeamRating

__all__ = [
    "BallPossession",
    "Base",
    "DEFAULT_RATING",
    "Fixture",
    "FixtureStatisticMixin",
    "RatingSystem",
    "TeamRating",
    "TotalShots",
]
