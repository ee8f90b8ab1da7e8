"""API routers package."""

from etf_tracker.api.routers.market import router as market_router
from etf_tracker.api.routers.history import router as history_router

__all__ = [
    "market_router",
    "history_router",
]
