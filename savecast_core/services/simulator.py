from __future__ import annotations

import datetime as dt
import logging
from typing import List, Sequence, Set

from savecast_core.domain.models import (
    CompoundingFrequency,
    Deposit,
    SimulationPoint,
    SimulationResult,
    SimulationSettings,
)

logger = logging.getLogger(__name__)

_ONE_DAY = dt.timedelta(days=1)


def period_rate(apy: float, frequency: CompoundingFrequency, day: dt.date) -> float:
    """
    Interest rate credited on ``day``:
    - daily: every day accrues (1+apy)^(1/365) - 1
    - monthly: only the 1st of the month accrues (1+apy)^(1/12) - 1
    - yearly: only January 1st accrues the full apy
    """
    if frequency is CompoundingFrequency.DAILY:
        return (1 + apy) ** (1 / 365) - 1
    if frequency is CompoundingFrequency.MONTHLY:
        return (1 + apy) ** (1 / 12) - 1 if day.day == 1 else 0.0
    if frequency is CompoundingFrequency.YEARLY:
        return apy if (day.month, day.day) == (1, 1) else 0.0
    raise ValueError(f"Unsupported compounding frequency: {frequency!r}")


def simulate(
    initial_balance: float,
    apy: float,
    start_date: dt.date,
    target_date: dt.date,
    deposits: Sequence[Deposit],
    compounding_frequency: CompoundingFrequency | str = CompoundingFrequency.DAILY,
    tax_rate: float = 0.0,
) -> SimulationResult:
    """
    Walk every calendar day from start_date to target_date inclusive.

    Each day: credit interest for the compounding policy (net of tax_rate %,
    which only touches interest), then add the deposits due that day, then
    record the balance. An inverted range yields an empty series.
    """
    frequency = CompoundingFrequency.parse(compounding_frequency)
    balance = float(initial_balance)
    total_deposited = 0.0
    series: List[SimulationPoint] = []

    if start_date > target_date:
        return SimulationResult(series=(), final_balance=balance, total_deposited=0.0)

    logger.debug(
        "Simulating %d days from %s to %s (%s)",
        (target_date - start_date).days + 1,
        start_date,
        target_date,
        frequency.value,
    )

    keep = 1 - tax_rate / 100
    applied: Set[int] = set()  # positions of one-time deposits already credited
    today = start_date
    while today <= target_date:
        balance += balance * period_rate(apy, frequency, today) * keep

        for idx, dep in enumerate(deposits):
            if dep.recurring:
                if dep.date <= today and dep.day == today.day:
                    balance += dep.amount
                    total_deposited += dep.amount
            elif idx not in applied and dep.date == today:
                balance += dep.amount
                total_deposited += dep.amount
                applied.add(idx)

        series.append(SimulationPoint(date=today, balance=balance))
        today += _ONE_DAY

    return SimulationResult(
        series=tuple(series),
        final_balance=series[-1].balance,
        total_deposited=total_deposited,
    )


def simulate_settings(settings: SimulationSettings, deposits: Sequence[Deposit]) -> SimulationResult:
    return simulate(
        initial_balance=settings.initial_balance,
        apy=settings.apy,
        start_date=settings.start_date,
        target_date=settings.target_date,
        deposits=deposits,
        compounding_frequency=settings.compounding_frequency,
        tax_rate=settings.tax_rate,
    )
