"""
Reward sink used by the session engine.

The engine only decides *when* points are due (first-try mastery, session
completion); what the points buy lives outside this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class RewardSink(Protocol):
    """Anything that can receive bonus points."""

    def award(self, points: int, reason: str) -> None:
        ...


@dataclass
class PointsLedger:
    """
    In-memory points balance with a log of awards.

    The host persists `balance` after each mutation.
    """
    balance: int = 0
    awards: list[tuple[int, str]] = field(default_factory=list)

    def award(self, points: int, reason: str) -> None:
        self.balance += points
        self.awards.append((points, reason))
