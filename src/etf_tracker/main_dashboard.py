#!/usr/bin/env python3
"""Headless dashboard entry point.

Starts a session against the backend proxy, then re-values the basket on
the market-clock schedule until interrupted.
Run with: python -m etf_tracker.main_dashboard
"""

import logging
import sys
import threading

from etf_tracker.app_context import DashboardSession
from etf_tracker.config.logging_config import setup_logging
from etf_tracker.core.exceptions import AppError


def main() -> None:
    """Run the dashboard loop."""
    setup_logging()
    logger = logging.getLogger(__name__)

    session = DashboardSession.from_settings()
    try:
        result = session.start()
        view = session.dashboard()
        logger.info(
            "Session started (history from %s): total %s, cash %s, day change %s",
            result.source.value,
            view.summary.total_value,
            view.summary.cash,
            view.summary.day_change,
        )
        for article in session.news():
            logger.info("News: %s (%s)", article.headline, article.source)

        scheduler = session.start_scheduler()
        logger.info("Next snapshot at %s", scheduler.next_due.isoformat())
        threading.Event().wait()

    except KeyboardInterrupt:
        logger.info("Shutting down")

    except AppError as e:
        logger.error(f"Session failed to start: {e.message}")
        sys.exit(1)

    finally:
        session.close()


if __name__ == "__main__":
    main()
