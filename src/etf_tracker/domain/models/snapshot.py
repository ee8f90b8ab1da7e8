"""Snapshot domain model for the portfolio value history."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Snapshot:
    """
    One point in the value-history series.

    is_static marks the single previous-close seed at market open.
    is_transient marks a display-only "current value" point; such points
    are never persisted.
    """

    timestamp: datetime
    value: Decimal
    is_static: bool = False
    is_transient: bool = False

    def sort_key(self) -> tuple[datetime, int]:
        # Static seed sorts ahead of a real point sharing its timestamp
        return (self.timestamp, 0 if self.is_static else 1)
