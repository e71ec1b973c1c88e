#!/usr/bin/env python3
"""Recompute multi-factor football Elo ratings from recorded fixtures."""

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
from domain.pipeline import normalize_stored_ratings, run_full_recompute
from domain.ratings.elo.config import FootballEloSystemConfig, load_football_elo_system_configs
from domain.ratings.errors import RatingsAlreadyNormalizedError, StoreUnavailableError
from repositories.fixtures import ensure_football_schema

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "football_elo"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Football Elo recompute commands.",
)


def _select_configs(config_dir: Path, config_name: str | None) -> list[FootballEloSystemConfig]:
    configs = load_football_elo_system_configs(config_dir)
    if config_name is None:
        return configs

    selected = [config for config in configs if config.file_path.name == config_name]
    if not selected:
        raise typer.BadParameter(
            f"No config named '{config_name}' found in {config_dir}",
            param_hint="--config-name",
        )
    return selected


@app.command()
def rebuild(
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite tracker file."),
    ] = DEFAULT_DB_URL,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of football Elo TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str | None,
        typer.Option(
            "--config-name",
            help="Optional single config filename (for example: default.toml).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute ratings in memory without writing team_ratings."),
    ] = False,
) -> None:
    """Fold every fixture through all dimensions, then rescale dimensions once."""
    configs = _select_configs(config_dir, config_name)

    engine = create_db_engine(db_url)
    ensure_football_schema(engine)
    session_factory = create_session_factory(engine)

    typer.echo(f"loaded_configs={len(configs)} config_dir={config_dir}")

    for config in configs:
        try:
            run_full_recompute(
                session_factory=session_factory,
                system_config=config,
                dry_run=dry_run,
                echo=typer.echo,
            )
        except StoreUnavailableError as exc:
            typer.echo(f"error system={config.name}: {exc}", err=True)
            raise typer.Exit(code=1) from exc


@app.command()
def normalize(
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite tracker file."),
    ] = DEFAULT_DB_URL,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of football Elo TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str,
        typer.Option("--config-name", help="Config filename whose system is normalized."),
    ] = "default.toml",
    force: Annotated[
        bool,
        typer.Option("--force", help="Rescale again even if the system is already normalized."),
    ] = False,
) -> None:
    """Run only the cross-dimension rescale over stored ratings."""
    (config,) = _select_configs(config_dir, config_name)

    engine = create_db_engine(db_url)
    ensure_football_schema(engine)
    session_factory = create_session_factory(engine)

    try:
        tracked_teams = normalize_stored_ratings(
            session_factory=session_factory,
            system_config=config,
            force=force,
        )
    except RatingsAlreadyNormalizedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    except StoreUnavailableError as exc:
        typer.echo(f"error system={config.name}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"normalized system={config.name} tracked_teams={tracked_teams}")


if __name__ == "__main__":
    app()
