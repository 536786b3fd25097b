from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict

from savecast_core.domain.models import CompoundingFrequency, SimulationSettings

DEFAULTS = SimulationSettings()


def load_simulation_settings(path: str | Path) -> SimulationSettings:
    """Missing keys fall back to defaults; malformed values raise ValueError."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must hold a JSON object")
    try:
        return _settings_from_dict(data)
    except (TypeError, OverflowError) as exc:
        raise ValueError(f"Invalid settings in {path}: {exc}") from exc


def _settings_from_dict(data: Dict[str, Any]) -> SimulationSettings:
    goal = data.get("goal")
    return SimulationSettings(
        initial_balance=float(data.get("initial_balance", DEFAULTS.initial_balance)),
        apy=float(data.get("apy", DEFAULTS.apy)),
        start_date=_parse_date(data.get("start_date"), DEFAULTS.start_date),
        target_date=_parse_date(data.get("target_date"), DEFAULTS.target_date),
        compounding_frequency=CompoundingFrequency.parse(
            data.get("compounding_frequency", DEFAULTS.compounding_frequency)
        ),
        goal=None if goal is None else float(goal),
        inflation_rate=float(data.get("inflation_rate", DEFAULTS.inflation_rate)),
        tax_rate=float(data.get("tax_rate", DEFAULTS.tax_rate)),
    )


def _parse_date(raw: Any, default: dt.date) -> dt.date:
    if raw is None:
        return default
    return dt.date.fromisoformat(str(raw))


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
