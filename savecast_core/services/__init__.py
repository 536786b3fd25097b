from savecast_core.services.pipeline import build_scenario, compare_scenarios, run_settings  # noqa: F401
from savecast_core.services.simulator import simulate  # noqa: F401
from savecast_core.services.store import ScenarioStore  # noqa: F401

__all__ = [
    "simulate",
    "run_settings",
    "build_scenario",
    "compare_scenarios",
    "ScenarioStore",
]
