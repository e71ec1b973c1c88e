"""Case-insensitive team-name directory loaded from TOML."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from domain.config_base import load_toml_file


def _name_key(name: str) -> str:
    return " ".join(name.strip().lower().split())


@dataclass(frozen=True)
class TeamDirectory:
    """Bidirectional id/name lookup for one competition."""

    names_by_id: Mapping[int, str]

    def resolve(self, name: str) -> int:
        key = _name_key(name)
        for team_id, team_name in self.names_by_id.items():
            if _name_key(team_name) == key:
                return team_id
        available = ", ".join(sorted(self.names_by_id.values()))
        raise KeyError(f"Unknown team '{name}'. Available: {available}")

    def name_for(self, team_id: int) -> str:
        return self.names_by_id.get(team_id, str(team_id))


def load_team_directory(file_path: Path) -> TeamDirectory:
    """Read ``[[team]]`` entries (``id``, ``name``) from a TOML file."""
    raw = load_toml_file(file_path)
    entries = raw.get("team", [])
    if not entries:
        raise ValueError(f"{file_path}: at least one [[team]] entry is required")

    names_by_id: dict[int, str] = {}
    seen_names: set[str] = set()
    for entry in entries:
        if "id" not in entry or "name" not in entry:
            raise ValueError(f"{file_path}: every [[team]] needs id and name, got {entry}")
        team_id = int(entry["id"])
        name = str(entry["name"]).strip()
        key = _name_key(name)
        if team_id in names_by_id or key in seen_names:
            raise ValueError(f"{file_path}: duplicate team entry id={team_id} name={name!r}")
        names_by_id[team_id] = name
        seen_names.add(key)

    return TeamDirectory(names_by_id=names_by_id)


__all__ = ["TeamDirectory", "load_team_directory"]
