"""Portfolio store: equal-weight allocation, valuation and simulated trades."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Union

from etf_tracker.core.exceptions import (
    InsufficientCashError,
    InsufficientData,
    InsufficientSharesError,
    InvalidTradeInput,
    UnknownTicker,
)
from etf_tracker.domain.models import Holding, Portfolio, TradeSide
from etf_tracker.domain.views import (
    HoldingValuation,
    Quote,
    TradeResult,
    ValuationResult,
)

logger = logging.getLogger(__name__)

# Allocated share counts are quantized so later trade arithmetic stays exact
SHARE_QUANTUM = Decimal("0.00000001")
ZERO = Decimal("0")


def parse_trade_shares(raw: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Validate user-entered share quantity at the boundary.

    Rejects missing, non-numeric, non-finite and non-positive input.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidTradeInput("Enter a number of shares")
    text = str(raw).strip()
    if not text:
        raise InvalidTradeInput("Enter a number of shares")
    try:
        shares = Decimal(text)
    except InvalidOperation:
        raise InvalidTradeInput(f"Not a number: {text!r}")
    if not shares.is_finite():
        raise InvalidTradeInput(f"Not a finite number: {text!r}")
    if shares <= 0:
        raise InvalidTradeInput("Shares must be greater than zero")
    return shares


def parse_trade_side(raw: Union[TradeSide, str]) -> TradeSide:
    """Accept a TradeSide or its name in any case."""
    if isinstance(raw, TradeSide):
        return raw
    try:
        return TradeSide(str(raw).strip().upper())
    except ValueError:
        raise InvalidTradeInput(f"Trade side must be BUY or SELL, not {raw!r}")


class PortfolioStore:
    """
    In-memory cash + holdings for one session.

    Valuation is always derived fresh from holding state; no running
    totals are kept. Callers serialize access (see DashboardSession).
    """

    def __init__(self, portfolio: Optional[Portfolio] = None):
        self._portfolio = portfolio

    @property
    def portfolio(self) -> Portfolio:
        if self._portfolio is None:
            raise InsufficientData("Portfolio has not been initialized")
        return self._portfolio

    @property
    def is_initialized(self) -> bool:
        return self._portfolio is not None

    def initialize(
        self,
        quotes: Mapping[str, Quote],
        total_investment: Union[Decimal, float, int],
        names: Optional[Mapping[str, str]] = None,
    ) -> Portfolio:
        """
        Build holdings from an equal-weight split of total_investment.

        Each ticker's notional is bought at its previous close
        (current price minus day change). Tickers without a usable
        previous close are dropped from the basket; the remaining N share
        the investment equally and cash starts at zero.
        """
        names = names or {}
        investment = Decimal(str(total_investment))

        usable = {}
        for ticker, quote in quotes.items():
            if quote is None or quote.current_price is None or quote.day_change_per_share is None:
                logger.info("Dropping %s from basket: no quote", ticker)
                continue
            if quote.previous_close <= 0:
                logger.info("Dropping %s from basket: previous close %s is not positive", ticker, quote.previous_close)
                continue
            usable[ticker.upper()] = quote

        if not usable:
            raise InsufficientData()

        notional = investment / len(usable)
        holdings = {}
        for ticker, quote in usable.items():
            shares = (notional / quote.previous_close).quantize(SHARE_QUANTUM)
            holdings[ticker] = Holding(
                ticker=ticker,
                display_name=names.get(ticker, ticker),
                share_count=shares,
                current_price=quote.current_price,
                day_change_per_share=quote.day_change_per_share,
            )

        self._portfolio = Portfolio(holdings=holdings, cash=ZERO, initial_investment=investment)
        logger.info("Initialized basket of %d holdings with %s invested", len(holdings), investment)
        return self._portfolio

    def apply_quotes(self, quotes: Mapping[str, Quote]) -> None:
        """Update prices; tickers absent from quotes keep their last values."""
        for ticker, holding in self.portfolio.holdings.items():
            quote = quotes.get(ticker)
            if quote is None:
                continue
            holding.current_price = quote.current_price
            holding.day_change_per_share = quote.day_change_per_share

    def revalue(self, quotes: Optional[Mapping[str, Quote]] = None) -> ValuationResult:
        """
        Apply quotes (if any) and recompute totals, weights and day change.

        weight is 0 when total value is 0; day_change_percent is 0 when the
        previous close is 0.
        """
        if quotes:
            self.apply_quotes(quotes)
        portfolio = self.portfolio

        value_at_prev_close = ZERO
        total_day_change = ZERO
        for holding in portfolio.holdings.values():
            value_at_prev_close += holding.share_count * holding.previous_close
            total_day_change += holding.share_count * holding.day_change_per_share
        total_value = value_at_prev_close + total_day_change + portfolio.cash

        valuations = {}
        for ticker, holding in portfolio.holdings.items():
            market_value = holding.market_value
            weight = market_value / total_value if total_value != 0 else ZERO
            prev_close = holding.previous_close
            day_change_percent = holding.day_change_per_share / prev_close if prev_close != 0 else ZERO
            valuations[ticker] = HoldingValuation(
                ticker=ticker,
                share_count=holding.share_count,
                current_price=holding.current_price,
                day_change_per_share=holding.day_change_per_share,
                market_value=market_value,
                day_change_value=holding.share_count * holding.day_change_per_share,
                weight=weight,
                day_change_percent=day_change_percent,
            )

        return ValuationResult(
            value_at_prev_close=value_at_prev_close,
            total_day_change=total_day_change,
            total_value=total_value,
            cash=portfolio.cash,
            holdings=valuations,
        )

    def execute_trade(
        self,
        ticker: str,
        shares: Union[Decimal, int, str],
        side: TradeSide,
    ) -> TradeResult:
        """
        Buy or sell shares at the holding's current price.

        No partial fills: a rejected trade leaves cash and shares untouched.
        """
        if not isinstance(shares, Decimal):
            shares = parse_trade_shares(shares)
        elif not shares.is_finite() or shares <= 0:
            raise InvalidTradeInput("Shares must be greater than zero")
        side = parse_trade_side(side)

        holding = self.portfolio.get(ticker)
        if holding is None:
            raise UnknownTicker(ticker)

        trade_value = shares * holding.current_price
        portfolio = self.portfolio
        if side == TradeSide.BUY:
            if portfolio.cash < trade_value:
                raise InsufficientCashError(str(trade_value), str(portfolio.cash))
            new_cash = portfolio.cash - trade_value
            new_shares = holding.share_count + shares
        else:
            if shares > holding.share_count:
                raise InsufficientSharesError(holding.ticker, str(shares), str(holding.share_count))
            new_cash = portfolio.cash + trade_value
            new_shares = holding.share_count - shares

        portfolio.cash = new_cash
        holding.share_count = new_shares
        logger.info("%s %s %s @ %s (cash now %s)", side.value, shares, holding.ticker, holding.current_price, new_cash)

        return TradeResult(
            ticker=holding.ticker,
            side=side,
            shares=shares,
            price=holding.current_price,
            trade_value=trade_value,
            cash_after=new_cash,
            shares_after=new_shares,
        )
