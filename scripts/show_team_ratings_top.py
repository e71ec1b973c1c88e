#!/usr/bin/env python3
"""Show top teams by one stored rating dimension."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ratings.protocol import Dimension
from domain.teams import load_team_directory
from repositories.fixtures import ensure_football_schema
from repositories.ratings.system import fetch_top_team_ratings, get_rating_system

DEFAULT_TEAMS_FILE = ROOT_DIR / "configs" / "teams" / "swiss_super_league.toml"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Query top teams from team_ratings.",
)


@app.command()
def show_team_ratings_top(
    system_name: Annotated[
        str,
        typer.Option("--system-name", help="Rating system name from rating_systems.name."),
    ] = "football_elo_default",
    dimension: Annotated[
        Dimension,
        typer.Option("--dimension", help="Rating dimension to order by."),
    ] = Dimension.COMPOSITE,
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of teams to return."),
    ] = 20,
    teams_file: Annotated[
        Path | None,
        typer.Option("--teams-file", help="Optional TOML file of [[team]] id/name entries."),
    ] = DEFAULT_TEAMS_FILE,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite tracker file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print top teams by the chosen dimension."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")

    directory = load_team_directory(teams_file) if teams_file is not None and teams_file.exists() else None

    engine = create_db_engine(db_url)
    ensure_football_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        system = get_rating_system(session, system_name)
        rows = (
            []
            if system is None
            else fetch_top_team_ratings(
                session,
                rating_system_id=system.id,
                dimension=dimension,
                top_n=top_n,
            )
        )

    if not rows:
        typer.echo(f"No rows found for system '{system_name}'. Run rebuild_ratings.py rebuild first.")
        return

    typer.echo(f"system={system_name} dimension={dimension.value} top_n={top_n}")
    for index, (team_id, rating) in enumerate(rows, start=1):
        team_name = directory.name_for(team_id) if directory is not None else str(team_id)
        typer.echo(f"{index:2d}. {team_name:<20} {dimension.value}={rating:8.2f}")


if __name__ == "__main__":
    app()
