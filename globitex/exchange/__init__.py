"""Globitex REST API 클라이언트와 응답 자료구조."""

from .globitex_client import (
    API_VERSION,
    ClientCredentials,
    GlobitexClient,
    GlobitexEndpoint,
    HttpMethod,
    build_query_string,
    clean_parameters,
    decode_result,
)
from .objects import (
    Account,
    Balance,
    CryptoTransactionFee,
    EuroAccount,
    EuroPayment,
    EuroPaymentHistory,
    GBXUtilizationTransaction,
    OrderBook,
    OrderBookEntry,
    Pair,
    Ticker,
    Trade,
    Transaction,
)

__all__ = [
    "API_VERSION",
    "Account",
    "Balance",
    "ClientCredentials",
    "CryptoTransactionFee",
    "EuroAccount",
    "EuroPayment",
    "EuroPaymentHistory",
    "GBXUtilizationTransaction",
    "GlobitexClient",
    "GlobitexEndpoint",
    "HttpMethod",
    "OrderBook",
    "OrderBookEntry",
    "Pair",
    "Ticker",
    "Trade",
    "Transaction",
    "build_query_string",
    "clean_parameters",
    "decode_result",
]
