from savecast_core.io.config import load_simulation_settings  # noqa: F401
from savecast_core.io.deposits import load_deposits, parse_deposit_row, write_example_csv  # noqa: F401
from savecast_core.io.scenarios import dump_scenarios, load_scenarios  # noqa: F401

__all__ = [
    "dump_scenarios",
    "load_deposits",
    "load_scenarios",
    "load_simulation_settings",
    "parse_deposit_row",
    "write_example_csv",
]
