from __future__ import annotations

import datetime as dt
from typing import List, Tuple

from savecast_core.domain.models import SimulationResult

_SECONDS_PER_YEAR = 365 * 24 * 3600

# (upper bound of pre-tax interest, marginal rate in percent)
_TAX_BRACKETS: List[Tuple[float, float]] = [
    (11_000, 10),
    (44_725, 12),
    (95_375, 22),
    (182_100, 24),
    (231_250, 32),
    (578_125, 35),
]
_TOP_RATE = 37.0


def interest_gained(initial_balance: float, result: SimulationResult) -> float:
    return result.final_balance - (initial_balance + result.total_deposited)


def years_between(start: dt.date, end: dt.date) -> float:
    """Elapsed time in fixed 365-day years (no leap-year adjustment)."""
    return (end - start).total_seconds() / _SECONDS_PER_YEAR


def real_balance(final_balance: float, inflation_rate: float, start: dt.date, end: dt.date) -> float:
    """Discount a nominal balance by inflation_rate (percent per year) over start..end."""
    return final_balance / (1 + inflation_rate / 100) ** years_between(start, end)


def pre_tax_interest(net_interest: float, tax_rate: float) -> float:
    """Gross interest behind a net figure; tax_rate (percent) scales every credit uniformly."""
    keep = 1 - tax_rate / 100
    if keep == 0:
        return net_interest
    return net_interest / keep


def goal_progress(goal: float, balance: float) -> float:
    """Percent of goal reached, capped at 100. A non-positive goal counts as met."""
    if goal <= 0:
        return 100.0
    return min(balance / goal * 100, 100.0)


def suggested_tax_rate(interest: float) -> float:
    for upper, rate in _TAX_BRACKETS:
        if interest <= upper:
            return float(rate)
    return _TOP_RATE
