from __future__ import annotations


class SavecastError(Exception):
    """Base class for errors raised by savecast_core."""


class ScenarioIndexError(SavecastError, IndexError):
    def __init__(self, index: int, size: int):
        super().__init__(f"Scenario index {index} out of range (store holds {size})")
        self.index = index
        self.size = size


class ScenarioParseError(SavecastError, ValueError):
    """Scenario import text is not a well-formed scenario collection."""


class DepositRowError(SavecastError, ValueError):
    def __init__(self, row_number: int, reason: str):
        super().__init__(f"Row {row_number}: {reason}")
        self.row_number = row_number
        self.reason = reason
