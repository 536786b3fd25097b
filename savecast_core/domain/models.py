from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from typing import List, Optional, Tuple


class CompoundingFrequency(str, enum.Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw: "str | CompoundingFrequency") -> "CompoundingFrequency":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown compounding frequency: {raw!r}") from None


@dataclasses.dataclass(frozen=True)
class Deposit:
    amount: float
    date: dt.date
    recurring: bool = False
    day: int = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        # anniversary day used for recurring matching
        object.__setattr__(self, "day", self.date.day)


@dataclasses.dataclass(frozen=True)
class SimulationPoint:
    date: dt.date
    balance: float


@dataclasses.dataclass(frozen=True)
class SimulationResult:
    series: Tuple[SimulationPoint, ...]
    final_balance: float
    total_deposited: float

    def to_timeseries(self) -> List[Tuple[str, float]]:
        return [(p.date.isoformat(), p.balance) for p in self.series]


@dataclasses.dataclass(frozen=True)
class SimulationSettings:
    initial_balance: float = 1000.0
    apy: float = 0.137
    start_date: dt.date = dt.date(2025, 1, 1)
    target_date: dt.date = dt.date(2025, 12, 31)
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.DAILY
    goal: Optional[float] = None
    inflation_rate: float = 0.0  # percent
    tax_rate: float = 0.0  # percent


@dataclasses.dataclass(frozen=True)
class Scenario:
    name: str
    settings: SimulationSettings
    deposits: Tuple[Deposit, ...]
    result: SimulationResult
    interest_gained: float


@dataclasses.dataclass(frozen=True)
class ScenarioSummary:
    name: str
    start_date: dt.date
    target_date: dt.date
    final_balance: float
    real_final_balance: float
    total_deposited: float
    interest_gained: float
