from savecast_core.domain.errors import (  # noqa: F401
    DepositRowError,
    SavecastError,
    ScenarioIndexError,
    ScenarioParseError,
)
from savecast_core.domain.models import (  # noqa: F401
    CompoundingFrequency,
    Deposit,
    Scenario,
    ScenarioSummary,
    SimulationPoint,
    SimulationResult,
    SimulationSettings,
)

__all__ = [
    "CompoundingFrequency",
    "Deposit",
    "DepositRowError",
    "SavecastError",
    "Scenario",
    "ScenarioIndexError",
    "ScenarioParseError",
    "ScenarioSummary",
    "SimulationPoint",
    "SimulationResult",
    "SimulationSettings",
]
