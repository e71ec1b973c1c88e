"""fixtures table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Fixture(Base):
    """One completed match as recorded by ingestion (immutable once stored)."""

    __tablename__ = "fixtures"
    __table_args__ = (
        Index("idx_fixtures_event_time", "event_time", "id"),
        Index("idx_fixtures_teams", "home_team_id", "away_team_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    home_team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    away_team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    home_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    away_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    event_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
