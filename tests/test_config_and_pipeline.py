import datetime as dt
import json
import math
from pathlib import Path

import pytest

from savecast_core.domain.models import CompoundingFrequency, Deposit, SimulationSettings
from savecast_core.io.config import load_simulation_settings
from savecast_core.services.pipeline import build_scenario, compare_scenarios


def test_settings_file_overrides_defaults(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "initial_balance": 5000,
                "apy": 0.04,
                "start_date": "2026-01-01",
                "compounding_frequency": "Yearly",
                "goal": 6000,
                "tax_rate": 22,
            }
        )
    )
    settings = load_simulation_settings(path)

    assert settings.initial_balance == 5000.0
    assert settings.apy == 0.04
    assert settings.start_date == dt.date(2026, 1, 1)
    assert settings.target_date == dt.date(2025, 12, 31)
    assert settings.compounding_frequency is CompoundingFrequency.YEARLY
    assert settings.goal == 6000.0
    assert settings.inflation_rate == 0.0
    assert settings.tax_rate == 22.0


def test_settings_reject_unknown_frequency(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text('{"compounding_frequency": "weekly"}')
    with pytest.raises(ValueError):
        load_simulation_settings(path)


def test_build_scenario_computes_interest_gained():
    settings = SimulationSettings(apy=0.0, start_date=dt.date(2025, 1, 1), target_date=dt.date(2025, 1, 31))
    scenario = build_scenario("flat", settings, [Deposit(100.0, dt.date(2025, 1, 10))])

    assert scenario.result.final_balance == 1100.0
    assert scenario.interest_gained == 0.0
    assert scenario.deposits == (Deposit(100.0, dt.date(2025, 1, 10)),)


def test_compare_aligns_series_by_date():
    a = build_scenario("Base", SimulationSettings(start_date=dt.date(2025, 1, 1), target_date=dt.date(2025, 1, 3)), [])
    b = build_scenario("Base", SimulationSettings(start_date=dt.date(2025, 1, 2), target_date=dt.date(2025, 1, 4)), [])
    frame = compare_scenarios([a, b])

    assert list(frame.columns) == ["Base", "Base #2"]
    assert frame.index.name == "date"
    assert len(frame) == 4
    assert math.isnan(frame["Base"].iloc[-1])
    assert math.isnan(frame["Base #2"].iloc[0])
    assert frame["Base"].iloc[0] == pytest.approx(a.result.series[0].balance)


def test_compare_empty_collection():
    assert compare_scenarios([]).empty


@pytest.mark.parametrize("content", ['{"initial_balance": null}', "[1, 2, 3]", '{"apy": [0.05]}'])
def test_settings_reject_malformed_values(tmp_path: Path, content):
    path = tmp_path / "settings.json"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_simulation_settings(path)
