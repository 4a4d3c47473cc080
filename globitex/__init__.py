"""Globitex 거래/결제 REST API 파이썬 클라이언트."""

from .exchange import (
    Account,
    Balance,
    ClientCredentials,
    CryptoTransactionFee,
    EuroAccount,
    EuroPayment,
    EuroPaymentHistory,
    GBXUtilizationTransaction,
    GlobitexClient,
    GlobitexEndpoint,
    HttpMethod,
    OrderBook,
    OrderBookEntry,
    Pair,
    Ticker,
    Trade,
    Transaction,
)
from .utils.exceptions import (
    AppError,
    ConfigurationError,
    DataValidationError,
    ExchangeError,
    GlobitexApiError,
    ResponseFormatError,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AppError",
    "Balance",
    "ClientCredentials",
    "ConfigurationError",
    "CryptoTransactionFee",
    "DataValidationError",
    "EuroAccount",
    "EuroPayment",
    "EuroPaymentHistory",
    "ExchangeError",
    "GBXUtilizationTransaction",
    "GlobitexApiError",
    "GlobitexClient",
    "GlobitexEndpoint",
    "HttpMethod",
    "OrderBook",
    "OrderBookEntry",
    "Pair",
    "ResponseFormatError",
    "Ticker",
    "Trade",
    "Transaction",
]
