from __future__ import annotations

from pathlib import Path

import pytest

from db import create_db_engine, create_session_factory
from domain.ratings.elo.calculator import EloParameters
from domain.ratings.elo.config import FootballEloSystemConfig
from domain.ratings.elo.predictor import CompositeWeights
from repositories.fixtures import ensure_football_schema
from repositories.ratings.system import upsert_rating_system


@pytest.fixture
def engine(tmp_path: Path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'football_tracker.db'}")
    ensure_football_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def system_config(tmp_path: Path) -> FootballEloSystemConfig:
    return FootballEloSystemConfig(
        name="football_elo_test",
        description="test system",
        file_path=tmp_path / "test.toml",
        lookback_days=0,
        parameters=EloParameters(),
        weights=CompositeWeights(),
    )


@pytest.fixture
def rating_system_id(session_factory, system_config: FootballEloSystemConfig) -> int:
    with session_factory() as session:
        with session.begin():
            system = upsert_rating_system(
                session,
                name=system_config.name,
                description=system_config.description,
                config_json=system_config.as_config_json(),
            )
            return int(system.id)
