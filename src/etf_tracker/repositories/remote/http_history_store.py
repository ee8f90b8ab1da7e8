"""
Remote history store reached over HTTP:
GET /portfolio-history and POST /portfolio-update on the backend.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from etf_tracker.core.exceptions import RemoteUnavailable
from etf_tracker.core.timezone import now_eastern
from etf_tracker.domain.models import Snapshot
from etf_tracker.repositories.history_codec import dump_series, load_series

logger = logging.getLogger(__name__)

HISTORY_FORMAT_VERSION = 2


class HttpRemoteHistoryStore:
    """httpx client for the backend's portfolio-history endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout_seconds)

    def load(self) -> list[Snapshot]:
        try:
            response = self._client.get("/portfolio-history")
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(f"GET /portfolio-history failed: {exc}")
        if response.status_code == 404:
            return []
        if response.is_error:
            raise RemoteUnavailable(f"GET /portfolio-history returned {response.status_code}")
        try:
            body = response.json()
        except ValueError:
            raise RemoteUnavailable("GET /portfolio-history returned invalid JSON")
        if not isinstance(body, dict):
            raise RemoteUnavailable("GET /portfolio-history returned an unexpected body")
        raw = body.get("portfolioHistory")
        if raw is None:
            return []
        try:
            return load_series(raw)
        except ValidationError as exc:
            raise RemoteUnavailable(f"Remote history is malformed: {exc.error_count()} error(s)")

    def save(self, series: list[Snapshot]) -> bool:
        body = {
            "portfolioHistory": dump_series(series),
            "timestamp": now_eastern().isoformat(),
            "version": HISTORY_FORMAT_VERSION,
        }
        try:
            response = self._client.post("/portfolio-update", json=body)
        except httpx.HTTPError as exc:
            logger.warning("Remote history save failed: %s", exc)
            return False
        if response.is_error:
            logger.warning("Remote history save returned %s", response.status_code)
            return False
        try:
            return bool(response.json().get("success", True))
        except (ValueError, AttributeError):
            return True

    def close(self) -> None:
        self._client.close()
