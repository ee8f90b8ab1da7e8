"""View models for history ledger outputs."""

from dataclasses import dataclass, field
from typing import Optional

from etf_tracker.domain.models.enums import AppendStatus, ReconcileSource
from etf_tracker.domain.models.snapshot import Snapshot


@dataclass
class AppendResult:
    """Outcome of append_snapshot: status plus the stored and evicted points."""

    status: AppendStatus
    snapshot: Optional[Snapshot] = None
    evicted: list[Snapshot] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def appended(self) -> bool:
        return self.status != AppendStatus.DISCARDED


@dataclass
class ReconcileResult:
    """Series adopted at load time, tagged with the branch that produced it."""

    source: ReconcileSource
    series: list[Snapshot] = field(default_factory=list)
