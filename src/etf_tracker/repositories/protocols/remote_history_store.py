"""Remote history store protocol."""

from typing import Protocol

from etf_tracker.domain.models import Snapshot


class RemoteHistoryStore(Protocol):
    """Durable copy of the value history kept by the backend."""

    def load(self) -> list[Snapshot]:
        """
        Return the stored series ([] when nothing is stored).

        Raises RemoteUnavailable when the store cannot be reached or answers garbage.
        """
        ...

    def save(self, series: list[Snapshot]) -> bool:
        """Replace the stored series. Returns False on failure; never raises."""
        ...
