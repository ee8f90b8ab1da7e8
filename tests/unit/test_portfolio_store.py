"""
Unit tests for PortfolioStore.

Tests cover:
- Equal-weight allocation at previous close
- Dropping tickers without a usable previous close
- Revaluation totals, weights and day-change percentages
- Trade execution and rejection (cash, shares, ticker, input)
"""

import pytest
from decimal import Decimal

from etf_tracker.core.exceptions import (
    InsufficientCashError,
    InsufficientData,
    InsufficientSharesError,
    InvalidTradeInput,
    UnknownTicker,
)
from etf_tracker.domain.models import Holding, Portfolio, TradeSide
from etf_tracker.services.portfolio_store import PortfolioStore, parse_trade_shares

from tests.conftest import quote


def _two_ticker_store() -> PortfolioStore:
    """A: prev close 100 (110, +10); B: prev close 50 (45, -5); 10000 invested."""
    store = PortfolioStore()
    store.initialize(
        {"A": quote("A", "110", "10"), "B": quote("B", "45", "-5")},
        10000,
        names={"A": "Alpha", "B": "Beta"},
    )
    return store


def _state(store: PortfolioStore) -> tuple:
    p = store.portfolio
    return (p.cash, {t: h.share_count for t, h in p.holdings.items()})


# =============================================================================
# INITIALIZATION TESTS
# =============================================================================


class TestInitialize:
    """Tests for equal-weight allocation."""

    def test_example_allocation_at_previous_close(self):
        """
        GIVEN A with previous close 100 and B with previous close 50
        WHEN 10000 is allocated equally
        THEN A gets 50 shares, B gets 100 shares, cash is 0
        """
        store = _two_ticker_store()

        portfolio = store.portfolio
        assert portfolio.holdings["A"].share_count == Decimal("50")
        assert portfolio.holdings["B"].share_count == Decimal("100")
        assert portfolio.cash == Decimal("0")
        assert portfolio.initial_investment == Decimal("10000")

    def test_display_names_applied(self):
        store = _two_ticker_store()

        assert store.portfolio.holdings["A"].display_name == "Alpha"
        assert store.portfolio.holdings["B"].display_name == "Beta"

    def test_notional_sums_to_investment(self):
        """Three-way split sums back to the investment within tolerance."""
        store = PortfolioStore()
        portfolio = store.initialize(
            {
                "A": quote("A", "110", "10"),
                "B": quote("B", "45", "-5"),
                "C": quote("C", "20", "0"),
            },
            Decimal("10000"),
        )

        deployed = sum(h.share_count * h.previous_close for h in portfolio.holdings.values())
        assert abs(deployed - Decimal("10000")) < Decimal("0.001")
        for holding in portfolio.holdings.values():
            notional = holding.share_count * holding.previous_close
            assert abs(notional - Decimal("10000") / 3) < Decimal("0.001")
        assert portfolio.cash == Decimal("0")

    def test_zero_previous_close_is_dropped(self):
        """
        GIVEN a ticker whose price equals its day change (previous close 0)
        WHEN initializing
        THEN that ticker is excluded and the others split the whole investment
        """
        store = PortfolioStore()
        portfolio = store.initialize(
            {
                "A": quote("A", "110", "10"),
                "Z": quote("Z", "5", "5"),
            },
            10000,
        )

        assert set(portfolio.holdings) == {"A"}
        assert portfolio.holdings["A"].share_count == Decimal("100")

    def test_negative_previous_close_is_dropped(self):
        """
        GIVEN a ticker whose day change exceeds its price (previous close -5)
        WHEN initializing
        THEN that ticker is excluded and no share count is negative
        """
        store = PortfolioStore()
        portfolio = store.initialize(
            {
                "A": quote("A", "5", "10"),
                "B": quote("B", "100", "0"),
            },
            10000,
        )

        assert set(portfolio.holdings) == {"B"}
        assert portfolio.holdings["B"].share_count == Decimal("100")
        assert all(h.share_count >= 0 for h in portfolio.holdings.values())

    def test_empty_basket_raises_insufficient_data(self):
        store = PortfolioStore()

        with pytest.raises(InsufficientData):
            store.initialize({"Z": quote("Z", "5", "5")}, 10000)

        assert not store.is_initialized

    def test_no_quotes_raises_insufficient_data(self):
        with pytest.raises(InsufficientData):
            PortfolioStore().initialize({}, 10000)


# =============================================================================
# REVALUATION TESTS
# =============================================================================


class TestRevalue:
    """Tests for derived valuation metrics."""

    def test_totals(self):
        store = _two_ticker_store()

        result = store.revalue()

        # 50*100 + 100*50 at previous close; +500 on A, -500 on B
        assert result.value_at_prev_close == Decimal("10000")
        assert result.total_day_change == Decimal("0")
        assert result.total_value == Decimal("10000")
        assert result.cash == Decimal("0")

    def test_weights_and_percentages(self):
        store = _two_ticker_store()

        result = store.revalue()

        a, b = result.holdings["A"], result.holdings["B"]
        assert a.market_value == Decimal("5500")
        assert a.weight == Decimal("0.55")
        assert b.weight == Decimal("0.45")
        assert a.day_change_percent == Decimal("0.1")
        assert b.day_change_percent == Decimal("-0.1")
        assert a.day_change_value == Decimal("500")
        assert b.day_change_value == Decimal("-500")

    def test_total_value_matches_cash_plus_holdings(self):
        store = _two_ticker_store()
        store.execute_trade("A", Decimal("10"), TradeSide.SELL)

        result = store.revalue({"A": quote("A", "120", "20")})

        assert result.total_value == store.portfolio.total_value()

    def test_new_quotes_update_prices(self):
        store = _two_ticker_store()

        result = store.revalue({"A": quote("A", "120", "20")})

        assert store.portfolio.holdings["A"].current_price == Decimal("120")
        assert result.holdings["A"].market_value == Decimal("6000")

    def test_missing_tickers_keep_prior_prices(self):
        """Stale-but-present: B keeps its last price when absent from quotes."""
        store = _two_ticker_store()

        result = store.revalue({"A": quote("A", "120", "20")})

        assert store.portfolio.holdings["B"].current_price == Decimal("45")
        assert result.holdings["B"].market_value == Decimal("4500")

    def test_zero_total_value_gives_zero_weight(self):
        holding = Holding(
            ticker="A",
            display_name="Alpha",
            share_count=Decimal("0"),
            current_price=Decimal("0"),
            day_change_per_share=Decimal("0"),
        )
        store = PortfolioStore(Portfolio(holdings={"A": holding}))

        result = store.revalue()

        assert result.total_value == Decimal("0")
        assert result.holdings["A"].weight == Decimal("0")
        assert result.holdings["A"].day_change_percent == Decimal("0")

    def test_zero_previous_close_mid_session_is_zero_guarded(self):
        store = _two_ticker_store()

        result = store.revalue({"A": quote("A", "7", "7")})

        assert result.holdings["A"].day_change_percent == Decimal("0")

    def test_uninitialized_store_raises(self):
        with pytest.raises(InsufficientData):
            PortfolioStore().revalue()


# =============================================================================
# TRADE TESTS
# =============================================================================


class TestExecuteTrade:
    """Tests for simulated buys and sells."""

    def test_sell_adds_cash_and_removes_shares(self):
        store = _two_ticker_store()

        result = store.execute_trade("A", Decimal("10"), TradeSide.SELL)

        assert result.trade_value == Decimal("1100")
        assert store.portfolio.cash == Decimal("1100")
        assert store.portfolio.holdings["A"].share_count == Decimal("40")
        assert result.cash_after == Decimal("1100")
        assert result.shares_after == Decimal("40")

    def test_buy_spends_cash(self):
        store = _two_ticker_store()
        store.execute_trade("A", Decimal("10"), TradeSide.SELL)

        store.execute_trade("B", Decimal("20"), TradeSide.BUY)

        assert store.portfolio.cash == Decimal("200")
        assert store.portfolio.holdings["B"].share_count == Decimal("120")

    def test_sell_more_than_held_is_rejected(self):
        """
        GIVEN A holds 50 shares at price 100
        WHEN selling 60 shares
        THEN InsufficientShares is raised and state is unchanged
        """
        holding = Holding(
            ticker="A",
            display_name="Alpha",
            share_count=Decimal("50"),
            current_price=Decimal("100"),
            day_change_per_share=Decimal("0"),
        )
        store = PortfolioStore(Portfolio(holdings={"A": holding}))
        before = _state(store)

        with pytest.raises(InsufficientSharesError):
            store.execute_trade("A", Decimal("60"), TradeSide.SELL)

        assert _state(store) == before

    def test_buy_without_cash_is_rejected(self):
        store = _two_ticker_store()
        before = _state(store)

        with pytest.raises(InsufficientCashError):
            store.execute_trade("A", Decimal("1"), TradeSide.BUY)

        assert _state(store) == before

    def test_unknown_ticker_is_rejected(self):
        store = _two_ticker_store()

        with pytest.raises(UnknownTicker):
            store.execute_trade("NOPE", Decimal("1"), TradeSide.BUY)

    def test_non_positive_shares_rejected(self):
        store = _two_ticker_store()

        with pytest.raises(InvalidTradeInput):
            store.execute_trade("A", Decimal("0"), TradeSide.SELL)
        with pytest.raises(InvalidTradeInput):
            store.execute_trade("A", Decimal("-1"), TradeSide.SELL)

    def test_string_side_and_lowercase_ticker(self):
        store = _two_ticker_store()

        result = store.execute_trade("a", "5", "SELL")

        assert result.ticker == "A"
        assert result.side == TradeSide.SELL

    def test_lowercase_side_accepted(self):
        store = _two_ticker_store()

        result = store.execute_trade("A", "5", "sell")

        assert result.side == TradeSide.SELL

    def test_unknown_side_is_invalid_input(self):
        store = _two_ticker_store()
        before = _state(store)

        with pytest.raises(InvalidTradeInput):
            store.execute_trade("A", "5", "hold")

        assert _state(store) == before

    def test_rejected_trades_leave_total_value_unchanged(self):
        store = _two_ticker_store()
        store.execute_trade("A", Decimal("10"), TradeSide.SELL)
        total_before = store.portfolio.total_value()
        state_before = _state(store)

        rejected = [
            ("A", Decimal("41"), TradeSide.SELL),
            ("B", Decimal("100.5"), TradeSide.SELL),
            ("B", Decimal("1000"), TradeSide.BUY),
            ("A", Decimal("10.01"), TradeSide.BUY),
            ("X", Decimal("1"), TradeSide.BUY),
        ]
        for ticker, shares, side in rejected:
            with pytest.raises((InsufficientSharesError, InsufficientCashError, UnknownTicker)):
                store.execute_trade(ticker, shares, side)

        assert store.portfolio.total_value() == total_before
        assert _state(store) == state_before

    def test_buy_then_sell_restores_state_exactly(self):
        store = _two_ticker_store()
        store.execute_trade("A", Decimal("10"), TradeSide.SELL)
        before = _state(store)

        store.execute_trade("B", Decimal("3.3333"), TradeSide.BUY)
        store.execute_trade("B", Decimal("3.3333"), TradeSide.SELL)

        assert _state(store) == before

    def test_sell_entire_position(self):
        store = _two_ticker_store()

        store.execute_trade("A", Decimal("50"), TradeSide.SELL)

        assert store.portfolio.holdings["A"].share_count == Decimal("0")
        assert "A" in store.portfolio.holdings


class TestParseTradeShares:
    """Boundary validation of user-entered share quantities."""

    @pytest.mark.parametrize("raw", ["", "   ", None, "abc", "1e", "0", "-3", "nan", "inf", "-inf"])
    def test_rejects_invalid_input(self, raw):
        with pytest.raises(InvalidTradeInput):
            parse_trade_shares(raw)

    def test_accepts_fractional_input(self):
        assert parse_trade_shares(" 2.5 ") == Decimal("2.5")

    def test_accepts_numbers(self):
        assert parse_trade_shares(3) == Decimal("3")
