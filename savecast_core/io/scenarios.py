from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, Iterable, List

from savecast_core.domain.errors import ScenarioParseError
from savecast_core.domain.models import (
    CompoundingFrequency,
    Deposit,
    Scenario,
    SimulationPoint,
    SimulationResult,
    SimulationSettings,
)


def _settings_to_json(settings: SimulationSettings) -> dict:
    return {
        "initial_balance": settings.initial_balance,
        "apy": settings.apy,
        "start_date": settings.start_date.isoformat(),
        "target_date": settings.target_date.isoformat(),
        "compounding_frequency": settings.compounding_frequency.value,
        "goal": settings.goal,
        "inflation_rate": settings.inflation_rate,
        "tax_rate": settings.tax_rate,
    }


def deposit_to_json(deposit: Deposit) -> dict:
    return {
        "amount": deposit.amount,
        "date": deposit.date.isoformat(),
        "recurring": deposit.recurring,
        "day": deposit.day,
    }


def result_to_json(result: SimulationResult) -> dict:
    return {
        "series": [{"date": d, "balance": b} for d, b in result.to_timeseries()],
        "final_balance": result.final_balance,
        "total_deposited": result.total_deposited,
    }


def scenario_to_json(scenario: Scenario) -> dict:
    return {
        "name": scenario.name,
        "settings": _settings_to_json(scenario.settings),
        "deposits": [deposit_to_json(d) for d in scenario.deposits],
        "result": result_to_json(scenario.result),
        "interest_gained": scenario.interest_gained,
    }


def dump_scenarios(scenarios: Iterable[Scenario]) -> str:
    return json.dumps([scenario_to_json(s) for s in scenarios], indent=2)


# -------------------------------
# Parsing
# -------------------------------


def _date(raw: Any) -> dt.date:
    if not isinstance(raw, str):
        raise TypeError(f"expected ISO date string, got {type(raw).__name__}")
    return dt.date.fromisoformat(raw)


def _number(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise TypeError(f"expected number, got {type(raw).__name__}")
    return float(raw)


def _settings_from_json(data: Dict[str, Any]) -> SimulationSettings:
    goal = data.get("goal")
    return SimulationSettings(
        initial_balance=_number(data["initial_balance"]),
        apy=_number(data["apy"]),
        start_date=_date(data["start_date"]),
        target_date=_date(data["target_date"]),
        compounding_frequency=CompoundingFrequency.parse(data["compounding_frequency"]),
        goal=None if goal is None else _number(goal),
        inflation_rate=_number(data["inflation_rate"]),
        tax_rate=_number(data["tax_rate"]),
    )


def deposit_from_json(data: Dict[str, Any]) -> Deposit:
    recurring = data["recurring"]
    if not isinstance(recurring, bool):
        raise TypeError("deposit 'recurring' must be a boolean")
    # day is re-derived from date
    return Deposit(amount=_number(data["amount"]), date=_date(data["date"]), recurring=recurring)


def _result_from_json(data: Dict[str, Any]) -> SimulationResult:
    series = tuple(
        SimulationPoint(date=_date(p["date"]), balance=_number(p["balance"])) for p in data["series"]
    )
    return SimulationResult(
        series=series,
        final_balance=_number(data["final_balance"]),
        total_deposited=_number(data["total_deposited"]),
    )


def scenario_from_json(data: Dict[str, Any]) -> Scenario:
    name = data["name"]
    if not isinstance(name, str):
        raise TypeError("scenario 'name' must be a string")
    return Scenario(
        name=name,
        settings=_settings_from_json(data["settings"]),
        deposits=tuple(deposit_from_json(d) for d in data["deposits"]),
        result=_result_from_json(data["result"]),
        interest_gained=_number(data["interest_gained"]),
    )


def load_scenarios(text: str) -> List[Scenario]:
    """
    Parse exported text back into scenarios. Any structural problem raises
    ScenarioParseError; nothing is returned partially.
    """
    try:
        data = json.loads(text)
    except ValueError as exc:  # also integers past the digit limit
        raise ScenarioParseError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ScenarioParseError("Expected a JSON array of scenarios")

    scenarios: List[Scenario] = []
    for i, item in enumerate(data):
        try:
            scenarios.append(scenario_from_json(item))
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
            raise ScenarioParseError(f"Scenario #{i}: {exc!r}") from exc
    return scenarios
