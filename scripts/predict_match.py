#!/usr/bin/env python3
"""Print win chances for two teams from their stored composite ratings."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.pipeline import predict_stored_match
from domain.ratings.elo.config import load_football_elo_system_configs
from domain.ratings.errors import StoreUnavailableError
from domain.teams import load_team_directory
from repositories.fixtures import ensure_football_schema

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "football_elo"
DEFAULT_TEAMS_FILE = ROOT_DIR / "configs" / "teams" / "swiss_super_league.toml"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match win-probability predictions.",
)


@app.command()
def predict(
    team1: Annotated[str, typer.Argument(help="First team name (case-insensitive).")],
    team2: Annotated[str, typer.Argument(help="Second team name (case-insensitive).")],
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite tracker file."),
    ] = DEFAULT_DB_URL,
    teams_file: Annotated[
        Path,
        typer.Option("--teams-file", help="TOML file of [[team]] id/name entries."),
    ] = DEFAULT_TEAMS_FILE,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of football Elo TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str,
        typer.Option("--config-name", help="Config filename providing weights and scale."),
    ] = "default.toml",
) -> None:
    """Resolve both names and print each side's chance as a percentage."""
    directory = load_team_directory(teams_file)
    try:
        team1_id = directory.resolve(team1)
        team2_id = directory.resolve(team2)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0])) from exc

    configs = [
        config
        for config in load_football_elo_system_configs(config_dir)
        if config.file_path.name == config_name
    ]
    if not configs:
        raise typer.BadParameter(
            f"No config named '{config_name}' found in {config_dir}",
            param_hint="--config-name",
        )

    engine = create_db_engine(db_url)
    ensure_football_schema(engine)
    session_factory = create_session_factory(engine)

    try:
        prediction = predict_stored_match(
            session_factory=session_factory,
            system_config=configs[0],
            team1_id=team1_id,
            team2_id=team2_id,
        )
    except StoreUnavailableError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Team {directory.name_for(team1_id)} chances: {prediction.team1_probability * 100:.2f}%")
    typer.echo(f"Team {directory.name_for(team2_id)} chances: {prediction.team2_probability * 100:.2f}%")


if __name__ == "__main__":
    app()
