"""Per-metric statistic observation table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class FixtureStatisticMixin:
    """Common columns for one metric observed per fixture and team."""

    fixture_id: Mapped[int] = mapped_column(ForeignKey("fixtures.id"), primary_key=True)
    team_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class TotalShots(FixtureStatisticMixin, Base):
    """Total shots per team per fixture."""

    __tablename__ = "total_shots"


class BallPossession(FixtureStatisticMixin, Base):
    """Ball possession percentage (0-100) per team per fixture."""

    __tablename__ = "ball_possession"
