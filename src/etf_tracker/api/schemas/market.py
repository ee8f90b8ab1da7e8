"""Pydantic schemas for the quote/news proxy (upstream field names kept)."""

from typing import Optional

from pydantic import BaseModel


class QuotePayload(BaseModel):
    """Quote: c = current price, d = change from previous close, dp = percent change."""

    c: float
    d: float
    dp: float
    error: Optional[str] = None


class NewsItem(BaseModel):
    """Company news article; datetime is unix seconds."""

    headline: str
    source: str
    url: str
    datetime: int
    related: Optional[str] = None
