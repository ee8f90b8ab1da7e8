"""Remote copy of the portfolio value history: GET /portfolio-history, POST /portfolio-update."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException

from etf_tracker.api.deps import get_kv_store
from etf_tracker.api.schemas.history import (
    PortfolioHistoryResponse,
    PortfolioUpdateRequest,
    PortfolioUpdateResponse,
)
from etf_tracker.config.settings import get_settings
from etf_tracker.core.exceptions import StorageCorrupt
from etf_tracker.repositories.history_codec import decode_series, to_payload
from etf_tracker.repositories.sqlalchemy import SqlAlchemyKeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["history"])


@router.get("/portfolio-history", response_model=PortfolioHistoryResponse)
def get_portfolio_history(
    store: SqlAlchemyKeyValueStore = Depends(get_kv_store),
):
    """Return the stored series; 404 when nothing (readable) is stored."""
    key = get_settings().history_cache_key
    text = store.get(key)
    if not text:
        raise HTTPException(status_code=404, detail="No portfolio history stored")
    try:
        series = decode_series(text, key)
    except StorageCorrupt as exc:
        logger.error("Stored portfolio history is corrupt: %s", exc.message)
        store.delete(key)
        raise HTTPException(status_code=404, detail="No portfolio history stored")
    return PortfolioHistoryResponse(portfolio_history=[to_payload(s) for s in series])


@router.post("/portfolio-update", response_model=PortfolioUpdateResponse)
def update_portfolio_history(
    body: PortfolioUpdateRequest,
    store: SqlAlchemyKeyValueStore = Depends(get_kv_store),
):
    """Replace the stored series with the posted one."""
    key = get_settings().history_cache_key
    raw = [p.model_dump(mode="json", by_alias=True) for p in body.portfolio_history]
    store.set(key, json.dumps(raw))
    logger.info("Stored %d history point(s) (client version %s)", len(raw), body.version)
    return PortfolioUpdateResponse(success=True)
