from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from globitex.exchange import (
    Account,
    Balance,
    CryptoTransactionFee,
    EuroAccount,
    EuroPaymentHistory,
    OrderBook,
    Ticker,
    Trade,
)
from globitex.utils.exceptions import ResponseFormatError


def test_balance_from_raw() -> None:
    balance = Balance.from_raw({"currency": "EUR", "available": "10.5", "reserved": "1"})

    assert balance.currency == "EUR"
    assert balance.available == Decimal("10.5")
    assert balance.reserved == Decimal("1")
    assert balance.data == {"currency": "EUR", "available": "10.5", "reserved": "1"}


def test_balance_missing_field_raises() -> None:
    with pytest.raises(ResponseFormatError) as exc:
        Balance.from_raw({"currency": "EUR", "available": "10.5"})
    assert "reserved" in str(exc.value)


def test_objects_are_read_only() -> None:
    ticker = Ticker.from_raw({"symbol": "XBTEUR", "last": "1"})

    with pytest.raises(dataclasses.FrozenInstanceError):
        ticker.symbol = "ETHEUR"  # type: ignore[misc]
    with pytest.raises(TypeError):
        ticker.data["symbol"] = "ETHEUR"  # type: ignore[index]


def test_ticker_optional_fields_and_timestamp() -> None:
    ticker = Ticker.from_raw({"symbol": "XBTEUR", "timestamp": 1620000000123})

    assert ticker.ask is None
    assert ticker.volume is None
    assert ticker.observed_at == datetime(2021, 5, 3, 0, 0, 0, 123000, tzinfo=timezone.utc)


def test_ticker_rejects_non_numeric_price() -> None:
    with pytest.raises(ResponseFormatError):
        Ticker.from_raw({"symbol": "XBTEUR", "ask": "n/a"})


def test_ticker_requires_mapping() -> None:
    with pytest.raises(ResponseFormatError):
        Ticker.from_raw(["XBTEUR"])


def test_order_book_accepts_object_entries() -> None:
    book = OrderBook.from_raw(
        {
            "asks": [{"price": "405.71", "volume": "0.09"}],
            "bids": [{"price": "405.50", "volume": "1.5"}],
        }
    )

    assert book.best_ask is not None and book.best_ask.price == Decimal("405.71")
    assert book.bids[0].volume == Decimal("1.5")


def test_order_book_empty_sides() -> None:
    book = OrderBook.from_raw({"asks": [], "bids": []})

    assert book.best_ask is None
    assert book.best_bid is None


def test_order_book_rejects_bad_entries() -> None:
    with pytest.raises(ResponseFormatError):
        OrderBook.from_raw({"asks": [["405.71"]], "bids": []})
    with pytest.raises(ResponseFormatError):
        OrderBook.from_raw({"asks": []})


def test_trade_executed_at() -> None:
    trade = Trade.from_raw({"tid": 1, "date": "1620000000000", "price": "1", "amount": "2"})

    assert trade.tid == "1"
    assert trade.side is None
    assert trade.executed_at == datetime(2021, 5, 3, tzinfo=timezone.utc)


def test_trade_requires_date() -> None:
    with pytest.raises(ResponseFormatError):
        Trade.from_raw({"tid": "1", "price": "1", "amount": "2"})


def test_account_without_balances() -> None:
    account = Account.from_raw({"account": "VER564A02"})

    assert account.main is False
    assert account.balances == ()
    assert account.balance("EUR") is None


def test_crypto_transaction_fee_requires_fee() -> None:
    with pytest.raises(ResponseFormatError):
        CryptoTransactionFee.from_raw({"currency": "BTC"})


def test_euro_account_defaults_currency() -> None:
    account = EuroAccount.from_raw({"iban": "LV00GLBX0000000000001", "balance": "5", "default": "false"})

    assert account.currency == "EUR"
    assert account.balance == Decimal("5")
    assert account.default is False


def test_euro_payment_history_requires_payments_list() -> None:
    with pytest.raises(ResponseFormatError):
        EuroPaymentHistory.from_raw({"account": "LV00GLBX0000000000001"})

    history = EuroPaymentHistory.from_raw({"payments": []})
    assert history.account is None
    assert history.payments == ()


def test_euro_payment_history_length() -> None:
    history = EuroPaymentHistory.from_raw(
        {
            "account": "LV00GLBX0000000000001",
            "payments": [
                {"id": "1", "date": 1620000000000, "amount": "10.00", "currency": "EUR"},
                {"id": "2", "date": 1620000001000, "amount": "-2.50", "currency": "EUR"},
            ],
        }
    )

    assert len(history) == 2
    assert history.payments[1].amount == Decimal("-2.50")
