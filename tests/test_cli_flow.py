import json
from pathlib import Path

from typer.testing import CliRunner

from savecast_core.cli import app


runner = CliRunner()


def test_cli_simulate_with_csv_and_inline_deposits(tmp_path: Path):
    csv_path = tmp_path / "example_deposits.csv"
    result_example = runner.invoke(app, ["example-csv", "--out", str(csv_path)])
    assert result_example.exit_code == 0, result_example.stdout
    assert csv_path.exists()

    out_path = tmp_path / "result.json"
    result_sim = runner.invoke(
        app,
        [
            "simulate",
            "--initial-balance",
            "1000",
            "--apy",
            "0",
            "--start",
            "2025-01-01",
            "--target",
            "2025-12-31",
            "--deposits",
            str(csv_path),
            "--deposit",
            "100@2025-12-25",
            "--out",
            str(out_path),
        ],
    )
    assert result_sim.exit_code == 0, result_sim.stdout

    payload = json.loads(out_path.read_text())
    # 9 + 9 recurring 250s from April, one 1000 and the inline 100
    assert payload["result"]["total_deposited"] == 250 * 18 + 1000 + 100
    assert payload["result"]["final_balance"] == 1000 + payload["result"]["total_deposited"]
    assert len(payload["result"]["series"]) == 365
    assert payload["interest_gained"] == 0


def test_cli_scenario_lifecycle(tmp_path: Path):
    store_path = tmp_path / "scenarios.json"
    common = ["--store", str(store_path), "--start", "2025-01-01", "--target", "2025-06-30"]

    for name, apy in (("low", "0.02"), ("high", "0.08")):
        result = runner.invoke(app, ["save", "--name", name, "--apy", apy, *common])
        assert result.exit_code == 0, result.stdout

    result_over = runner.invoke(
        app, ["save", "--name", "mid", "--apy", "0.05", "--index", "1", *common]
    )
    assert result_over.exit_code == 0, result_over.stdout
    stored = json.loads(store_path.read_text())
    assert [s["name"] for s in stored] == ["low", "mid"]

    series_path = tmp_path / "series.csv"
    result_cmp = runner.invoke(app, ["compare", "--store", str(store_path), "--series-out", str(series_path)])
    assert result_cmp.exit_code == 0, result_cmp.stdout
    assert "low" in result_cmp.stdout
    header = series_path.read_text().splitlines()[0]
    assert header == "date,low,mid"

    result_del = runner.invoke(app, ["delete", "--index", "0", "--store", str(store_path)])
    assert result_del.exit_code == 0, result_del.stdout
    assert [s["name"] for s in json.loads(store_path.read_text())] == ["mid"]


def test_cli_rejects_bad_index_without_touching_store(tmp_path: Path):
    store_path = tmp_path / "scenarios.json"
    runner.invoke(app, ["save", "--name", "only", "--store", str(store_path)])
    before = store_path.read_text()

    result = runner.invoke(app, ["delete", "--index", "5", "--store", str(store_path)])
    assert result.exit_code == 1
    result = runner.invoke(app, ["save", "--name", "x", "--index", "3", "--store", str(store_path)])
    assert result.exit_code == 1
    assert store_path.read_text() == before


def test_cli_tax_rate():
    result = runner.invoke(app, ["tax-rate", "20000"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "12%"


def test_cli_bad_settings_file_is_a_usage_error(tmp_path: Path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text('{"initial_balance": null}')

    result = runner.invoke(app, ["simulate", "--settings", str(settings_path)])
    assert result.exit_code == 2
    assert not isinstance(result.exception, TypeError)


def test_cli_suggests_bracket_from_pre_tax_interest():
    result = runner.invoke(
        app,
        [
            "simulate",
            "--initial-balance",
            "200000",
            "--apy",
            "0.1",
            "--compounding",
            "yearly",
            "--start",
            "2025-01-01",
            "--target",
            "2025-01-01",
            "--tax-rate",
            "50",
        ],
    )
    assert result.exit_code == 0, result.stdout
    # 10,000 net after 50% tax is 20,000 gross
    assert "pre-tax interest: 12%" in result.stdout
