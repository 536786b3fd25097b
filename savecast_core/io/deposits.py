from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Any, List, Mapping

import pandas as pd

from savecast_core.domain.errors import DepositRowError
from savecast_core.domain.models import Deposit

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"Deposit", "Date", "Recurring"}

EXAMPLE_FILENAME = "example_deposits.csv"
EXAMPLE_CSV = """Deposit,Date,Recurring
250,2025-04-08,Y
250,2025-04-22,Y
1000,2025-05-15,N
"""


def parse_deposit_row(row: Mapping[str, Any], row_number: int) -> Deposit:
    """Build a Deposit from one CSV row with Deposit/Date/Recurring columns."""
    try:
        amount = float(str(row["Deposit"]).strip())
    except ValueError:
        raise DepositRowError(row_number, f"unparseable amount {row['Deposit']!r}") from None
    if amount != amount:  # "nan"
        raise DepositRowError(row_number, "amount is not a number")

    try:
        date = pd.to_datetime(str(row["Date"]).strip()).date()
    except (ValueError, TypeError):
        raise DepositRowError(row_number, f"unparseable date {row['Date']!r}") from None
    if not isinstance(date, dt.date) or pd.isna(date):
        raise DepositRowError(row_number, f"unparseable date {row['Date']!r}")

    flag = str(row["Recurring"]).strip().upper()
    if flag not in ("Y", "N"):
        raise DepositRowError(row_number, f"Recurring must be Y or N, got {row['Recurring']!r}")

    return Deposit(amount=amount, date=date, recurring=flag == "Y")


def load_deposits(csv_path: str | Path, strict: bool = False) -> List[Deposit]:
    """
    Load deposits from a CSV with a Deposit,Date,Recurring header.

    Malformed rows are logged and skipped, or raised when ``strict``.
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in deposits CSV: {sorted(missing)}")

    deposits: List[Deposit] = []
    skipped = 0
    # header is line 1
    for row_number, (_, row) in enumerate(df.iterrows(), start=2):
        try:
            deposits.append(parse_deposit_row(row, row_number))
        except DepositRowError as exc:
            if strict:
                raise
            skipped += 1
            logger.warning("Skipping deposit in %s: %s", path.name, exc)

    logger.info("Loaded %d deposits from %s (%d skipped)", len(deposits), path, skipped)
    return deposits


def write_example_csv(path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(EXAMPLE_CSV, encoding="utf-8")
    return out
