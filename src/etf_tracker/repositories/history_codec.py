"""Serialization of the value-history series for the local cache and remote store."""

import json
from decimal import Decimal
from typing import Any

from pydantic import TypeAdapter, ValidationError

from etf_tracker.api.schemas.history import SnapshotPayload
from etf_tracker.core.exceptions import StorageCorrupt
from etf_tracker.core.timezone import to_eastern
from etf_tracker.domain.models import Snapshot

_payload_list = TypeAdapter(list[SnapshotPayload])


def to_payload(snapshot: Snapshot) -> SnapshotPayload:
    return SnapshotPayload(
        timestamp=snapshot.timestamp,
        value=float(snapshot.value),
        is_static=snapshot.is_static,
    )


def from_payload(payload: SnapshotPayload) -> Snapshot:
    return Snapshot(
        timestamp=to_eastern(payload.timestamp),
        value=Decimal(str(payload.value)),
        is_static=payload.is_static,
    )


def dump_series(series: list[Snapshot]) -> list[dict[str, Any]]:
    """JSON-ready dicts in wire layout; transient points are dropped."""
    return [
        to_payload(s).model_dump(mode="json", by_alias=True)
        for s in series
        if not s.is_transient
    ]


def load_series(raw: Any) -> list[Snapshot]:
    """Validate wire dicts into snapshots. Raises pydantic ValidationError."""
    return [from_payload(p) for p in _payload_list.validate_python(raw)]


def encode_series(series: list[Snapshot]) -> str:
    return json.dumps(dump_series(series))


def decode_series(text: str, key: str = "portfolioHistory") -> list[Snapshot]:
    """
    Parse a cached series.

    Accepts a bare list or an object with a portfolioHistory list.
    Raises StorageCorrupt on anything else.
    """
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise StorageCorrupt(key, f"invalid JSON ({exc})")
    if isinstance(raw, dict):
        raw = raw.get("portfolioHistory")
    if not isinstance(raw, list):
        raise StorageCorrupt(key, "expected a list of snapshots")
    try:
        return load_series(raw)
    except ValidationError as exc:
        raise StorageCorrupt(key, f"{exc.error_count()} invalid snapshot field(s)")
