"""Pydantic schemas for the portfolio history API and cache format."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SnapshotPayload(BaseModel):
    """One persisted history point: timestamp, total value, static-seed flag."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    value: float
    is_static: bool = Field(default=False, alias="isStatic")


class PortfolioHistoryResponse(BaseModel):
    """Response for GET /portfolio-history."""

    model_config = ConfigDict(populate_by_name=True)

    portfolio_history: list[SnapshotPayload] = Field(alias="portfolioHistory")


class PortfolioUpdateRequest(BaseModel):
    """Body of POST /portfolio-update."""

    model_config = ConfigDict(populate_by_name=True)

    portfolio_history: list[SnapshotPayload] = Field(alias="portfolioHistory")
    timestamp: Optional[datetime] = None
    version: Optional[Union[int, str]] = None


class PortfolioUpdateResponse(BaseModel):
    """Response for POST /portfolio-update."""

    success: bool
