"""Application settings and configuration."""

from datetime import time
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Fixed basket: ticker -> display name
DEFAULT_BASKET: dict[str, str] = {
    "GOOGL": "Alphabet (Google)",
    "AMZN": "Amazon",
    "AMGN": "Amgen",
    "BA": "Boeing",
    "CAT": "Caterpillar",
    "JNJ": "Johnson & Johnson",
    "NEE": "NextEra Energy",
    "NKE": "Nike, Inc.",
    "NOC": "Northrop Grumman",
    "RMD": "ResMed",
    "RIVN": "Rivian",
    "RTX": "RTX",
    "SWK": "Stanley Black & Decker",
    "SYK": "Stryker",
    "TGT": "Target",
    "VZ": "Verizon",
}


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".etf-tracker"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ETF_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "ETF Basket Tracker"
    app_version: str = "0.1.0"

    # Portfolio
    basket: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_BASKET))
    initial_investment: float = 10000.0

    # Backend proxy used by the dashboard (quotes, news, remote history)
    api_base_url: str = "http://localhost:3000"

    # Upstream provider used by the proxy: "yfinance" or "stub"
    market_provider: str = "yfinance"

    # Data directory (local history cache, server-side history store)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None
    local_cache_path: Optional[Path] = None

    log_level: str = "INFO"

    # Market data caching
    quote_cache_ttl_seconds: int = 300
    news_cache_ttl_seconds: int = 3600
    fetch_timeout_seconds: float = 10.0
    fetch_max_workers: int = 8
    news_limit: int = 7
    news_lookback_days: int = 30

    # Session window
    session_timezone: str = "US/Eastern"
    session_open: time = time(9, 30)
    session_close: time = time(16, 0)
    snapshot_interval_seconds: int = 300

    # History
    history_write_dedupe_seconds: int = 30
    history_cleanup_dedupe_seconds: int = 60
    history_max_points: int = 1000
    history_cache_key: str = "portfolioHistory"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "etf_tracker.db"
        return f"sqlite:///{db_path}"

    def get_local_cache_path(self) -> Path:
        """Get the dashboard-side history cache file."""
        return self.local_cache_path or self.get_data_dir() / "dashboard_cache.db"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
