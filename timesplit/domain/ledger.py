"""Domain entities for the day-by-day allocation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

EPS = 1e-6


@dataclass(slots=True, frozen=True)
class RemainingLedger:
    """Hours each project is still owed from its weekly total.

    One ledger is threaded through the week: every day receives the current
    ledger and hands back the one produced by :meth:`consume`.
    """

    balances: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_weekly(cls, weekly_hours: Mapping[str, float]) -> "RemainingLedger":
        return cls(balances=dict(weekly_hours))

    def owed(self, project_id: str) -> float:
        return self.balances.get(project_id, 0.0)

    def open_balances(self) -> list[tuple[str, float]]:
        """Projects with a positive balance, in weekly-total order."""

        return [(pid, hours) for pid, hours in self.balances.items() if hours > EPS]

    def consume(self, allocations: Mapping[str, float]) -> "RemainingLedger":
        balances = dict(self.balances)
        for project_id, hours in allocations.items():
            balances[project_id] = round(balances.get(project_id, 0.0) - hours, 6)
        return RemainingLedger(balances=balances)
