#!/usr/bin/env python3
"""Record fixtures and statistics from a clean CSV feed (idempotent per key)."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.feed import read_fixture_feed, read_statistic_feed
from domain.ratings.errors import MalformedRecordError
from repositories.fixtures import ensure_football_schema, record_fixtures, record_statistics

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Fixture feed import.",
)


@app.command("import")
def import_fixtures(
    fixtures_file: Annotated[
        Path,
        typer.Option("--fixtures", help="CSV with fixture_id,home_team_id,away_team_id,home_score,away_score,timestamp."),
    ],
    statistics_file: Annotated[
        Path | None,
        typer.Option("--statistics", help="CSV with fixture_id,team_id,metric,value."),
    ] = None,
    since: Annotated[
        int,
        typer.Option("--since", help="Only record fixtures at or after this unix timestamp (0 = all)."),
    ] = 0,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite tracker file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Record new fixtures first, then their statistics; existing keys are skipped."""
    if since < 0:
        raise typer.BadParameter("--since must be >= 0")

    try:
        fixtures = read_fixture_feed(fixtures_file)
        observations = read_statistic_feed(statistics_file) if statistics_file is not None else []
    except MalformedRecordError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if since > 0:
        cutoff = datetime.fromtimestamp(since, UTC).replace(tzinfo=None)
        fixtures = [fixture for fixture in fixtures if fixture.event_time >= cutoff]

    engine = create_db_engine(db_url)
    ensure_football_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        with session.begin():
            inserted_fixtures = record_fixtures(session, fixtures)
            inserted_statistics = record_statistics(session, observations)

    typer.echo(
        "completed "
        f"read_fixtures={len(fixtures)} "
        f"inserted_fixtures={inserted_fixtures} "
        f"read_statistics={len(observations)} "
        f"inserted_statistics={inserted_statistics}"
    )


if __name__ == "__main__":
    app()
