from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from savecast_core.domain.errors import SavecastError
from savecast_core.domain.models import CompoundingFrequency, Deposit, Scenario, SimulationSettings
from savecast_core.io import config as config_io
from savecast_core.io import deposits as deposits_io
from savecast_core.io import scenarios as scenarios_io
from savecast_core.services import metrics
from savecast_core.services import pipeline
from savecast_core.services.store import ScenarioStore

app = typer.Typer(help="Savings balance projection and scenario comparison.")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]{message}[/red]")
    return typer.Exit(code=1)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _parse_date(raw: str) -> dt.date:
    try:
        return dt.date.fromisoformat(raw.strip())
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {raw!r}") from None


def _parse_deposit_option(raw: str) -> Deposit:
    """
    Parse AMOUNT@DATE or AMOUNT@DATE:R (R marks a recurring deposit).
    """
    amount_txt, sep, rest = raw.partition("@")
    if not sep:
        raise typer.BadParameter(f"Deposit must look like AMOUNT@YYYY-MM-DD[:R], got {raw!r}")
    date_txt, _, flag = rest.partition(":")
    if flag and flag.strip().upper() != "R":
        raise typer.BadParameter(f"Unknown deposit flag {flag!r}; only R is supported")
    try:
        amount = float(amount_txt)
    except ValueError:
        raise typer.BadParameter(f"Unparseable deposit amount {amount_txt!r}") from None
    return Deposit(amount=amount, date=_parse_date(date_txt), recurring=bool(flag))


def _build_settings(
    settings_file: Optional[Path],
    initial_balance: Optional[float],
    apy: Optional[float],
    start: Optional[str],
    target: Optional[str],
    compounding: Optional[str],
    goal: Optional[float],
    inflation_rate: Optional[float],
    tax_rate: Optional[float],
) -> SimulationSettings:
    try:
        base = config_io.load_simulation_settings(settings_file) if settings_file else SimulationSettings()
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Cannot read settings file {settings_file}: {exc}") from exc
    overrides = {}
    if initial_balance is not None:
        overrides["initial_balance"] = initial_balance
    if apy is not None:
        overrides["apy"] = apy
    if start is not None:
        overrides["start_date"] = _parse_date(start)
    if target is not None:
        overrides["target_date"] = _parse_date(target)
    if compounding is not None:
        try:
            overrides["compounding_frequency"] = CompoundingFrequency.parse(compounding)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from None
    if goal is not None:
        overrides["goal"] = goal
    if inflation_rate is not None:
        overrides["inflation_rate"] = inflation_rate
    if tax_rate is not None:
        overrides["tax_rate"] = tax_rate
    return dataclasses.replace(base, **overrides)


def _collect_deposits(csv_path: Optional[Path], raw_deposits: Optional[List[str]], strict: bool) -> List[Deposit]:
    collected: List[Deposit] = []
    if csv_path:
        collected.extend(deposits_io.load_deposits(csv_path, strict=strict))
    for raw in raw_deposits or []:
        collected.append(_parse_deposit_option(raw))
    return collected


def _load_store(path: Path) -> ScenarioStore:
    store = ScenarioStore()
    if path.exists():
        store.import_(path.read_text(encoding="utf-8"))
    return store


def _write_store(path: Path, store: ScenarioStore) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(store.export(), encoding="utf-8")


def _print_summary(scenario: Scenario) -> None:
    s = scenario.settings
    result = scenario.result
    if not result.series:
        console.print("[yellow]Start date is after target date; nothing to simulate.[/yellow]")
    real = metrics.real_balance(result.final_balance, s.inflation_rate, s.start_date, s.target_date)
    console.print(f"\n[bold cyan]== Projection {s.start_date} -> {s.target_date} ==[/bold cyan]")
    console.print(
        f"Assumptions: APY [bold]{s.apy*100:.2f}%[/bold], {s.compounding_frequency.value} compounding, "
        f"tax [bold]{s.tax_rate:.1f}%[/bold], inflation [bold]{s.inflation_rate:.1f}%[/bold]"
    )
    console.print(f"Final balance: [green]{_money(result.final_balance)}[/green]")
    console.print(f"Real balance (inflation-adjusted): {_money(real)}")
    console.print(f"Total deposited: {_money(result.total_deposited)}")
    console.print(f"Interest gained: {_money(scenario.interest_gained)}")
    if s.goal is not None:
        progress = metrics.goal_progress(s.goal, result.final_balance)
        console.print(f"Goal {_money(s.goal)}: [bold]{progress:.0f}%[/bold] reached")
    gross = metrics.pre_tax_interest(scenario.interest_gained, s.tax_rate)
    if gross > 0:
        console.print(f"Suggested tax rate on {_money(gross)} pre-tax interest: {metrics.suggested_tax_rate(gross):.0f}%")


_SETTINGS_HELP = "JSON settings file (options below override it)"


@app.command()
def simulate(
    settings: Optional[Path] = typer.Option(None, help=_SETTINGS_HELP),
    initial_balance: Optional[float] = typer.Option(None, help="Starting balance"),
    apy: Optional[float] = typer.Option(None, help="Annual percentage yield as a decimal (0.05 = 5%)"),
    start: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD"),
    target: Optional[str] = typer.Option(None, help="Target date YYYY-MM-DD"),
    compounding: Optional[str] = typer.Option(None, help="Compounding frequency: daily|monthly|yearly"),
    goal: Optional[float] = typer.Option(None, help="Savings goal to track progress against"),
    inflation_rate: Optional[float] = typer.Option(None, help="Annual inflation rate in percent"),
    tax_rate: Optional[float] = typer.Option(None, help="Tax rate on interest in percent"),
    deposits: Optional[Path] = typer.Option(None, help="CSV with Deposit,Date,Recurring columns"),
    deposit: Optional[List[str]] = typer.Option(None, help="Extra deposit AMOUNT@YYYY-MM-DD[:R]; repeatable"),
    strict: bool = typer.Option(False, help="Fail on malformed CSV rows instead of skipping them"),
    out: Optional[Path] = typer.Option(None, help="Output path for the result JSON"),
):
    """Project the balance day by day and print the summary."""
    sim_settings = _build_settings(settings, initial_balance, apy, start, target, compounding, goal, inflation_rate, tax_rate)
    try:
        deposit_list = _collect_deposits(deposits, deposit, strict)
    except (SavecastError, FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    scenario = pipeline.build_scenario("current", sim_settings, deposit_list)
    _print_summary(scenario)
    if out:
        _save_json(out, scenarios_io.scenario_to_json(scenario))
        typer.echo(f"Simulation written to {out}")


@app.command("example-csv")
def example_csv(
    out: Optional[Path] = typer.Option(None, help=f"Where to write the example (e.g. {deposits_io.EXAMPLE_FILENAME})"),
):
    """Write or print a reference deposits CSV."""
    if out:
        deposits_io.write_example_csv(out)
        typer.echo(f"Example deposits written to {out}")
    else:
        typer.echo(deposits_io.EXAMPLE_CSV, nl=False)


@app.command()
def save(
    name: str = typer.Option(..., help="Scenario name (duplicates allowed)"),
    store: Path = typer.Option(Path("scenarios.json"), help="Scenario store file"),
    settings: Optional[Path] = typer.Option(None, help=_SETTINGS_HELP),
    initial_balance: Optional[float] = typer.Option(None, help="Starting balance"),
    apy: Optional[float] = typer.Option(None, help="Annual percentage yield as a decimal"),
    start: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD"),
    target: Optional[str] = typer.Option(None, help="Target date YYYY-MM-DD"),
    compounding: Optional[str] = typer.Option(None, help="Compounding frequency: daily|monthly|yearly"),
    goal: Optional[float] = typer.Option(None, help="Savings goal"),
    inflation_rate: Optional[float] = typer.Option(None, help="Annual inflation rate in percent"),
    tax_rate: Optional[float] = typer.Option(None, help="Tax rate on interest in percent"),
    deposits: Optional[Path] = typer.Option(None, help="CSV with Deposit,Date,Recurring columns"),
    deposit: Optional[List[str]] = typer.Option(None, help="Extra deposit AMOUNT@YYYY-MM-DD[:R]; repeatable"),
    index: Optional[int] = typer.Option(None, help="Overwrite the scenario at this index instead of appending"),
):
    """Simulate and store the run as a named scenario."""
    sim_settings = _build_settings(settings, initial_balance, apy, start, target, compounding, goal, inflation_rate, tax_rate)
    try:
        deposit_list = _collect_deposits(deposits, deposit, strict=False)
        scenario_store = _load_store(store)
        scenario = pipeline.build_scenario(name, sim_settings, deposit_list)
        if index is None:
            position = scenario_store.save(scenario)
        else:
            scenario_store.overwrite(index, scenario)
            position = index
    except (SavecastError, FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    _write_store(store, scenario_store)
    _print_summary(scenario)
    typer.echo(f"Scenario '{name}' stored at index {position} in {store}")


@app.command()
def delete(
    index: int = typer.Option(..., help="Index of the scenario to remove"),
    store: Path = typer.Option(Path("scenarios.json"), help="Scenario store file"),
):
    """Remove a scenario; later scenarios shift down by one."""
    try:
        scenario_store = _load_store(store)
        removed = scenario_store.delete(index)
    except SavecastError as exc:
        raise _fail(str(exc)) from exc
    _write_store(store, scenario_store)
    typer.echo(f"Deleted scenario '{removed.name}' ({len(scenario_store)} left)")


@app.command()
def compare(
    store: Path = typer.Option(Path("scenarios.json"), help="Scenario store file"),
    series_out: Optional[Path] = typer.Option(None, help="Write aligned daily balances of all scenarios as CSV"),
):
    """Show saved scenarios side by side."""
    if not store.exists():
        raise _fail(f"No scenario store at {store}")
    try:
        scenario_store = _load_store(store)
    except SavecastError as exc:
        raise _fail(str(exc)) from exc
    if not len(scenario_store):
        console.print("[yellow]No scenarios saved yet.[/yellow]")
        return

    table = Table(title="Scenario Comparison")
    for header in ("#", "Name", "Start", "Target", "Final", "Real final", "Deposited", "Interest"):
        table.add_column(header, justify="left" if header in ("Name", "Start", "Target") else "right")
    for i, row in enumerate(scenario_store.summaries()):
        table.add_row(
            str(i),
            row.name,
            row.start_date.isoformat(),
            row.target_date.isoformat(),
            _money(row.final_balance),
            _money(row.real_final_balance),
            _money(row.total_deposited),
            _money(row.interest_gained),
        )
    console.print(table)

    if series_out:
        frame = pipeline.compare_scenarios(scenario_store)
        series_out.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(series_out, date_format="%Y-%m-%d")
        typer.echo(f"Balance series written to {series_out}")


@app.command("tax-rate")
def tax_rate(interest: float = typer.Argument(..., help="Pre-tax interest earned")):
    """Suggest a marginal tax rate for an amount of interest."""
    typer.echo(f"{metrics.suggested_tax_rate(interest):.0f}%")


if __name__ == "__main__":
    app()
