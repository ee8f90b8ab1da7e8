"""Application-level exceptions."""

from typing import Iterable


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class DataUnavailable(AppError):
    """Raised when one or more tickers could not be fetched from the data provider."""

    def __init__(self, tickers: Iterable[str], kind: str = "quote"):
        self.tickers = sorted(set(tickers))
        self.kind = kind
        super().__init__(
            f"Failed to fetch {kind} data for: {', '.join(self.tickers)}",
            code="DATA_UNAVAILABLE",
        )


class InvalidTradeInput(AppError):
    """Raised when trade input is not a positive number of shares."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_TRADE_INPUT")


class UnknownTicker(AppError):
    """Raised when a trade references a ticker outside the basket."""

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(f"Unknown ticker: {ticker}", code="UNKNOWN_TICKER")


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, ticker: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {ticker}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class InsufficientCashError(AppError):
    """Raised when a purchase costs more than the available cash."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient cash: requested {requested}, available {available}",
            code="INSUFFICIENT_CASH",
        )


class InsufficientData(AppError):
    """Raised when no ticker yields a usable previous close at session start."""

    def __init__(self, message: str = "No ticker produced a valid previous close"):
        super().__init__(message, code="INSUFFICIENT_DATA")


class StorageCorrupt(AppError):
    """Raised when the local history cache cannot be parsed."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Stored value for '{key}' is unreadable: {reason}", code="STORAGE_CORRUPT")


class RemoteUnavailable(AppError):
    """Raised when the remote history store cannot be reached."""

    def __init__(self, message: str):
        super().__init__(message, code="REMOTE_UNAVAILABLE")


# Short aliases matching the error taxonomy names
InsufficientShares = InsufficientSharesError
InsufficientCash = InsufficientCashError
