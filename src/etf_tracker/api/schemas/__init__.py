"""Pydantic schemas for the HTTP API."""

from etf_tracker.api.schemas.history import (
    SnapshotPayload,
    PortfolioHistoryResponse,
    PortfolioUpdateRequest,
    PortfolioUpdateResponse,
)
from etf_tracker.api.schemas.market import QuotePayload, NewsItem

__all__ = [
    "SnapshotPayload",
    "PortfolioHistoryResponse",
    "PortfolioUpdateRequest",
    "PortfolioUpdateResponse",
    "QuotePayload",
    "NewsItem",
]
