"""Readers for the clean CSV fixture/statistic feed."""

from __future__ import annotations

import csv
from datetime import UTC, datetime
from pathlib import Path

from domain.ratings.common import FixtureResult, StatisticObservation
from domain.ratings.errors import MalformedRecordError
from domain.ratings.protocol import Metric

FIXTURE_COLUMNS = ("fixture_id", "home_team_id", "away_team_id", "home_score", "away_score", "timestamp")
STATISTIC_COLUMNS = ("fixture_id", "team_id", "metric", "value")


def parse_metric_value(value: str) -> float:
    """Parse a statistic cell such as ``"14"`` or ``"60%"``; a trailing percent sign is dropped."""
    cleaned = value.strip().removesuffix("%").strip()
    try:
        return float(cleaned)
    except ValueError as exc:
        raise MalformedRecordError(f"invalid metric value {value!r}") from exc


def _required_int(row: dict[str, str], column: str) -> int:
    raw = (row.get(column) or "").strip()
    if not raw:
        raise MalformedRecordError(f"missing {column}")
    try:
        return int(raw)
    except ValueError as exc:
        raise MalformedRecordError(f"invalid {column}={raw!r}") from exc


def _optional_int(row: dict[str, str], column: str) -> int | None:
    raw = (row.get(column) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise MalformedRecordError(f"invalid {column}={raw!r}") from exc


def _check_header(file_path: Path, fieldnames: list[str] | None, expected: tuple[str, ...]) -> None:
    missing = [column for column in expected if column not in (fieldnames or [])]
    if missing:
        raise MalformedRecordError(f"{file_path}: missing columns {missing}")


def parse_fixture_row(row: dict[str, str]) -> FixtureResult:
    timestamp = _required_int(row, "timestamp")
    return FixtureResult(
        fixture_id=_required_int(row, "fixture_id"),
        event_time=datetime.fromtimestamp(timestamp, UTC).replace(tzinfo=None),
        home_team_id=_required_int(row, "home_team_id"),
        away_team_id=_required_int(row, "away_team_id"),
        home_score=_optional_int(row, "home_score"),
        away_score=_optional_int(row, "away_score"),
    )


def parse_statistic_row(row: dict[str, str]) -> StatisticObservation:
    metric_raw = (row.get("metric") or "").strip()
    try:
        metric = Metric(metric_raw)
    except ValueError as exc:
        raise MalformedRecordError(f"unknown metric {metric_raw!r}") from exc

    value_raw = (row.get("value") or "").strip()
    value = parse_metric_value(value_raw) if value_raw else None
    return StatisticObservation(
        fixture_id=_required_int(row, "fixture_id"),
        team_id=_required_int(row, "team_id"),
        metric=metric,
        value=value,
    )


def read_fixture_feed(file_path: Path) -> list[FixtureResult]:
    with file_path.open(newline="", encoding="utf-8") as file:
        reader = csv.DictReader(file)
        _check_header(file_path, reader.fieldnames, FIXTURE_COLUMNS)
        fixtures: list[FixtureResult] = []
        for row in reader:
            try:
                fixtures.append(parse_fixture_row(row))
            except MalformedRecordError as exc:
                raise MalformedRecordError(f"{file_path}:{reader.line_num}: {exc}") from exc
    return fixtures


def read_statistic_feed(file_path: Path) -> list[StatisticObservation]:
    with file_path.open(newline="", encoding="utf-8") as file:
        reader = csv.DictReader(file)
        _check_header(file_path, reader.fieldnames, STATISTIC_COLUMNS)
        observations: list[StatisticObservation] = []
        for row in reader:
            try:
                observations.append(parse_statistic_row(row))
            except MalformedRecordError as exc:
                raise MalformedRecordError(f"{file_path}:{reader.line_num}: {exc}") from exc
    return observations


__all__ = [
    "parse_fixture_row",
    "parse_metric_value",
    "parse_statistic_row",
    "read_fixture_feed",
    "read_statistic_feed",
]
