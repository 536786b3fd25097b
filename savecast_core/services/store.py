from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from savecast_core.domain.errors import ScenarioIndexError, ScenarioParseError
from savecast_core.domain.models import Scenario, ScenarioSummary
from savecast_core.io import scenarios as scenarios_io
from savecast_core.services import metrics

logger = logging.getLogger(__name__)


class ScenarioStore:
    """
    Ordered, in-memory collection of saved scenarios.

    Names are not required to be unique. Indices shift left after a delete.
    """

    def __init__(self, scenarios: Optional[List[Scenario]] = None):
        self._scenarios: List[Scenario] = list(scenarios or [])

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(list(self._scenarios))

    def __getitem__(self, index: int) -> Scenario:
        self._check_index(index)
        return self._scenarios[index]

    @property
    def scenarios(self) -> List[Scenario]:
        return list(self._scenarios)

    def save(self, scenario: Scenario) -> int:
        self._scenarios.append(scenario)
        logger.info("Saved scenario %r at index %d", scenario.name, len(self._scenarios) - 1)
        return len(self._scenarios) - 1

    def overwrite(self, index: int, scenario: Scenario) -> None:
        self._check_index(index)
        self._scenarios[index] = scenario
        logger.info("Overwrote scenario at index %d with %r", index, scenario.name)

    def delete(self, index: int) -> Scenario:
        self._check_index(index)
        removed = self._scenarios.pop(index)
        logger.info("Deleted scenario %r from index %d", removed.name, index)
        return removed

    def export(self) -> str:
        return scenarios_io.dump_scenarios(self._scenarios)

    def import_(self, text: str) -> int:
        """Replace the whole store with the parsed text; unchanged on ScenarioParseError."""
        try:
            parsed = scenarios_io.load_scenarios(text)
        except ScenarioParseError:
            logger.warning("Rejected scenario import; keeping %d existing scenarios", len(self._scenarios))
            raise
        self._scenarios = parsed
        logger.info("Imported %d scenarios", len(parsed))
        return len(parsed)

    def summaries(self) -> List[ScenarioSummary]:
        rows = []
        for sc in self._scenarios:
            s = sc.settings
            rows.append(
                ScenarioSummary(
                    name=sc.name,
                    start_date=s.start_date,
                    target_date=s.target_date,
                    final_balance=sc.result.final_balance,
                    real_final_balance=metrics.real_balance(
                        sc.result.final_balance, s.inflation_rate, s.start_date, s.target_date
                    ),
                    total_deposited=sc.result.total_deposited,
                    interest_gained=sc.interest_gained,
                )
            )
        return rows

    def _check_index(self, index: int) -> None:
        # negative indices are not positions
        if not 0 <= index < len(self._scenarios):
            raise ScenarioIndexError(index, len(self._scenarios))
