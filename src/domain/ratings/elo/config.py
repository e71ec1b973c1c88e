"""Load football Elo system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_section
from domain.ratings.elo.calculator import EloParameters
from domain.ratings.elo.predictor import CompositeWeights
from domain.ratings.protocol import Dimension, DrawPolicy

WEIGHT_SUM_TOLERANCE = 1e-9

_K_FACTOR_KEYS: dict[str, Dimension] = {
    "goal": Dimension.GOAL,
    "winner": Dimension.WINNER,
    "shots": Dimension.SHOTS,
    "possession": Dimension.POSSESSION,
}


@dataclass(frozen=True)
class FootballEloSystemConfig(BaseSystemConfig):
    """Configuration for one multi-factor Elo recompute."""

    parameters: EloParameters
    weights: CompositeWeights

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "k_factor": self.parameters.k_factor,
            "k_factors": {
                key: self.parameters.k_factor_for(dimension)
                for key, dimension in _K_FACTOR_KEYS.items()
            },
            "scale_factor": self.parameters.scale_factor,
            "draw_policy": self.parameters.draw_policy.value,
            "rescale_floor": self.parameters.rescale_floor,
            "rescale_span": self.parameters.rescale_span,
            "lookback_days": self.lookback_days,
            "weights": {
                "goal": self.weights.goal,
                "winner": self.weights.winner,
                "shots": self.weights.shots,
                "possession": self.weights.possession,
            },
        }


def load_football_elo_system_configs(config_dir: Path) -> list[FootballEloSystemConfig]:
    """Load and validate all football Elo TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_football_elo_system_config,
        duplicate_name_label="football elo",
    )


def _parse_football_elo_system_config(raw: dict[str, Any], file_path: Path) -> FootballEloSystemConfig:
    name, description, lookback_days = parse_system_section(raw, file_path)
    elo_raw = raw.get("elo", {})
    weights_raw = raw.get("weights", {})

    draw_policy_value = str(elo_raw.get("draw_policy", DrawPolicy.SPLIT.value)).strip().lower()
    try:
        draw_policy = DrawPolicy(draw_policy_value)
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in DrawPolicy)
        raise ValueError(f"{file_path}: [elo].draw_policy must be one of: {allowed}") from exc

    k_factors_raw = elo_raw.get("k_factors", {})
    unknown_keys = sorted(set(k_factors_raw) - set(_K_FACTOR_KEYS))
    if unknown_keys:
        raise ValueError(f"{file_path}: unknown [elo.k_factors] keys: {unknown_keys}")

    parameters = EloParameters(
        initial_rating=float(elo_raw.get("initial_rating", 1000.0)),
        k_factor=float(elo_raw.get("k_factor", 25.0)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
        draw_policy=draw_policy,
        rescale_floor=float(elo_raw.get("rescale_floor", 1000.0)),
        rescale_span=float(elo_raw.get("rescale_span", 1000.0)),
        dimension_k_factors={
            _K_FACTOR_KEYS[key]: float(value) for key, value in k_factors_raw.items()
        },
    )
    weights = CompositeWeights(
        goal=float(weights_raw.get("goal", 0.3)),
        winner=float(weights_raw.get("winner", 0.3)),
        shots=float(weights_raw.get("shots", 0.15)),
        possession=float(weights_raw.get("possession", 0.25)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)
    _validate_weights(file_path=file_path, weights=weights)

    return FootballEloSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        lookback_days=lookback_days,
        parameters=parameters,
        weights=weights,
    )


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.initial_rating <= 0.0:
        raise ValueError(f"{file_path}: [elo].initial_rating must be > 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.rescale_span <= 0.0:
        raise ValueError(f"{file_path}: [elo].rescale_span must be > 0")
    for dimension, k_factor in parameters.dimension_k_factors.items():
        if k_factor <= 0.0:
            raise ValueError(f"{file_path}: [elo.k_factors] for {dimension.value} must be > 0")


def _validate_weights(*, file_path: Path, weights: CompositeWeights) -> None:
    for label, value in (
        ("goal", weights.goal),
        ("winner", weights.winner),
        ("shots", weights.shots),
        ("possession", weights.possession),
    ):
        if value < 0.0:
            raise ValueError(f"{file_path}: [weights].{label} must be >= 0")
    if abs(weights.total() - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise ValueError(f"{file_path}: [weights] must sum to 1.0 (got {weights.total()})")
