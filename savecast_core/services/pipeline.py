from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from savecast_core.domain.models import Deposit, Scenario, SimulationResult, SimulationSettings
from savecast_core.services import metrics
from savecast_core.services import simulator


def run_settings(settings: SimulationSettings, deposits: Sequence[Deposit]) -> SimulationResult:
    return simulator.simulate_settings(settings, deposits)


def build_scenario(name: str, settings: SimulationSettings, deposits: Sequence[Deposit]) -> Scenario:
    result = run_settings(settings, deposits)
    return Scenario(
        name=name,
        settings=settings,
        deposits=tuple(deposits),
        result=result,
        interest_gained=metrics.interest_gained(settings.initial_balance, result),
    )


def compare_scenarios(scenarios: Iterable[Scenario]) -> pd.DataFrame:
    """
    Balance series of each scenario aligned on date, one column per scenario.
    Days outside a scenario's range are NaN. Duplicate names get a #n suffix.
    """
    columns = {}
    for sc in scenarios:
        label = sc.name
        n = 2
        while label in columns:
            label = f"{sc.name} #{n}"
            n += 1
        columns[label] = pd.Series(
            [p.balance for p in sc.result.series],
            index=pd.to_datetime([p.date for p in sc.result.series]),
            dtype=float,
        )
    if not columns:
        return pd.DataFrame(index=pd.DatetimeIndex([], name="date"))
    frame = pd.concat(columns, axis=1).sort_index()
    frame.index.name = "date"
    return frame
