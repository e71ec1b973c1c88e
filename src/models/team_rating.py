"""team_ratings table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

DEFAULT_RATING = 1000.0


class TeamRating(Base):
    """Current per-dimension ratings (one row per team per rating system)."""

    __tablename__ = "team_ratings"
    __table_args__ = (
        Index("idx_team_ratings_system_composite", "rating_system_id", "composite_elo"),
    )

    rating_system_id: Mapped[int] = mapped_column(
        ForeignKey("rating_systems.id", ondelete="CASCADE"),
        primary_key=True,
    )
    team_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    goal_elo: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_RATING)
    winner_elo: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_RATING)
    total_shots_elo: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_RATING)
    ball_possession_elo: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_RATING)
    composite_elo: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_RATING)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
