"""Globitex API 응답을 감싸는 읽기 전용 자료구조.

모든 객체는 ``from_raw`` 로 디코딩된 JSON 매핑에서 생성되며, 원본 매핑은
``data`` 속성에 읽기 전용으로 보존된다. 가격/수량 문자열은 ``Decimal`` 로,
밀리초 타임스탬프는 ``int`` 로 노출한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from ..utils.converters import optional_decimal, str_to_bool, to_decimal
from ..utils.exceptions import ResponseFormatError
from ..utils.time_utils import from_millis

JsonMapping = Mapping[str, Any]


def _ensure_mapping(payload: Any, owner: str) -> JsonMapping:
    if not isinstance(payload, Mapping):
        raise ResponseFormatError(f"{owner} 응답은 객체여야 합니다: {type(payload).__name__}")
    return payload


def _require(payload: JsonMapping, key: str, owner: str) -> Any:
    """필수 필드를 꺼낸다. 없으면 ResponseFormatError."""
    try:
        return payload[key]
    except KeyError as exc:
        raise ResponseFormatError(f"{owner} 응답에 '{key}' 필드가 없습니다.") from exc


def _decimal(payload: JsonMapping, key: str, owner: str) -> Decimal:
    value = _require(payload, key, owner)
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise ResponseFormatError(f"{owner}.{key} 값이 숫자가 아닙니다: {value!r}") from exc


def _optional_decimal(payload: JsonMapping, key: str, owner: str) -> Optional[Decimal]:
    value = payload.get(key)
    try:
        return optional_decimal(value)
    except ValueError as exc:
        raise ResponseFormatError(f"{owner}.{key} 값이 숫자가 아닙니다: {value!r}") from exc


def _optional_int(payload: JsonMapping, key: str, owner: str) -> Optional[int]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ResponseFormatError(f"{owner}.{key} 값이 정수가 아닙니다: {value!r}") from exc


def _optional_str(payload: JsonMapping, key: str) -> Optional[str]:
    value = payload.get(key)
    return None if value is None else str(value)


def _list_field(payload: JsonMapping, key: str, owner: str) -> Sequence[Any]:
    value = _require(payload, key, owner)
    if not isinstance(value, (list, tuple)):
        raise ResponseFormatError(f"{owner}.{key} 필드는 배열이어야 합니다.")
    return value


def _frozen(payload: JsonMapping) -> Mapping[str, Any]:
    return MappingProxyType(dict(payload))


@dataclass(frozen=True)
class Ticker:
    """단일 심볼의 24시간 시세 요약."""

    symbol: str
    ask: Optional[Decimal]
    bid: Optional[Decimal]
    last: Optional[Decimal]
    low: Optional[Decimal]
    high: Optional[Decimal]
    open: Optional[Decimal]
    volume: Optional[Decimal]
    volume_quote: Optional[Decimal]
    timestamp: Optional[int]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Ticker":
        """ticker 응답을 파싱한다."""

        raw = _ensure_mapping(payload, "ticker")
        return cls(
            symbol=str(_require(raw, "symbol", "ticker")),
            ask=_optional_decimal(raw, "ask", "ticker"),
            bid=_optional_decimal(raw, "bid", "ticker"),
            last=_optional_decimal(raw, "last", "ticker"),
            low=_optional_decimal(raw, "low", "ticker"),
            high=_optional_decimal(raw, "high", "ticker"),
            open=_optional_decimal(raw, "open", "ticker"),
            volume=_optional_decimal(raw, "volume", "ticker"),
            volume_quote=_optional_decimal(raw, "volumeQuote", "ticker"),
            timestamp=_optional_int(raw, "timestamp", "ticker"),
            data=_frozen(raw),
        )

    @property
    def observed_at(self) -> Optional[datetime]:
        return from_millis(self.timestamp)


@dataclass(frozen=True)
class OrderBookEntry:
    """호가창의 한 단계(가격, 수량)."""

    price: Decimal
    volume: Decimal

    @classmethod
    def from_raw(cls, payload: Any) -> "OrderBookEntry":
        # [price, volume] 배열 또는 {"price", "volume"} 객체를 모두 허용한다.
        if isinstance(payload, Mapping):
            return cls(
                price=_decimal(payload, "price", "orderbook"),
                volume=_decimal(payload, "volume", "orderbook"),
            )
        if isinstance(payload, (list, tuple)) and len(payload) >= 2:
            try:
                return cls(price=to_decimal(payload[0]), volume=to_decimal(payload[1]))
            except ValueError as exc:
                raise ResponseFormatError(f"호가 값이 숫자가 아닙니다: {payload!r}") from exc
        raise ResponseFormatError(f"호가 항목 형식이 올바르지 않습니다: {payload!r}")


@dataclass(frozen=True)
class OrderBook:
    """매도/매수 호가 목록."""

    asks: tuple[OrderBookEntry, ...]
    bids: tuple[OrderBookEntry, ...]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "OrderBook":
        raw = _ensure_mapping(payload, "orderbook")
        return cls(
            asks=tuple(OrderBookEntry.from_raw(item) for item in _list_field(raw, "asks", "orderbook")),
            bids=tuple(OrderBookEntry.from_raw(item) for item in _list_field(raw, "bids", "orderbook")),
            data=_frozen(raw),
        )

    @property
    def best_ask(self) -> Optional[OrderBookEntry]:
        return self.asks[0] if self.asks else None

    @property
    def best_bid(self) -> Optional[OrderBookEntry]:
        return self.bids[0] if self.bids else None


# formatItem=array 응답의 위치별 필드 순서
TRADE_ARRAY_FIELDS = ("tid", "price", "amount", "date", "side")


@dataclass(frozen=True)
class Trade:
    """체결 내역 한 건."""

    tid: str
    date: int
    price: Decimal
    amount: Decimal
    side: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Trade":
        """object 형식과 array 형식의 체결 항목을 모두 파싱한다."""

        if isinstance(payload, (list, tuple)):
            payload = dict(zip(TRADE_ARRAY_FIELDS, payload))
        raw = _ensure_mapping(payload, "trades")
        date = _optional_int(raw, "date", "trades")
        if date is None:
            raise ResponseFormatError("trades 응답에 'date' 필드가 없습니다.")
        return cls(
            tid=str(_require(raw, "tid", "trades")),
            date=date,
            price=_decimal(raw, "price", "trades"),
            amount=_decimal(raw, "amount", "trades"),
            side=_optional_str(raw, "side"),
            data=_frozen(raw),
        )

    @property
    def executed_at(self) -> Optional[datetime]:
        return from_millis(self.date)


@dataclass(frozen=True)
class Pair:
    """거래 가능한 심볼 정보."""

    symbol: str
    price_increment: Optional[Decimal]
    size_increment: Optional[Decimal]
    size_min: Optional[Decimal]
    currency: Optional[str]
    commodity: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Pair":
        raw = _ensure_mapping(payload, "symbols")
        return cls(
            symbol=str(_require(raw, "symbol", "symbols")),
            price_increment=_optional_decimal(raw, "priceIncrement", "symbols"),
            size_increment=_optional_decimal(raw, "sizeIncrement", "symbols"),
            size_min=_optional_decimal(raw, "sizeMin", "symbols"),
            currency=_optional_str(raw, "currency"),
            commodity=_optional_str(raw, "commodity"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class Balance:
    """계좌 내 통화별 잔고."""

    currency: str
    available: Decimal
    reserved: Decimal
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Balance":
        raw = _ensure_mapping(payload, "balance")
        return cls(
            currency=str(_require(raw, "currency", "balance")),
            available=_decimal(raw, "available", "balance"),
            reserved=_decimal(raw, "reserved", "balance"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class Account:
    """거래 계좌와 통화별 잔고 목록."""

    account: str
    main: bool
    balances: tuple[Balance, ...]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Account":
        raw = _ensure_mapping(payload, "accounts")
        return cls(
            account=str(_require(raw, "account", "accounts")),
            main=str_to_bool(raw.get("main"), False),
            balances=tuple(Balance.from_raw(item) for item in raw.get("balance") or ()),
            data=_frozen(raw),
        )

    def balance(self, currency: str) -> Optional[Balance]:
        """통화 코드로 잔고를 찾는다. 대소문자는 구분하지 않는다."""
        wanted = currency.upper()
        for item in self.balances:
            if item.currency.upper() == wanted:
                return item
        return None


@dataclass(frozen=True)
class CryptoTransactionFee:
    """암호화폐 출금(채굴) 수수료."""

    fee: Decimal
    currency: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "CryptoTransactionFee":
        raw = _ensure_mapping(payload, "fee")
        return cls(
            fee=_decimal(raw, "fee", "fee"),
            currency=_optional_str(raw, "currency"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class Transaction:
    """입출금 등 결제 트랜잭션."""

    id: str
    type: Optional[str]
    status: Optional[str]
    currency: Optional[str]
    amount: Optional[Decimal]
    commission: Optional[Decimal]
    account: Optional[str]
    created: Optional[int]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "Transaction":
        raw = _ensure_mapping(payload, "transactions")
        return cls(
            id=str(_require(raw, "id", "transactions")),
            type=_optional_str(raw, "type"),
            status=_optional_str(raw, "status"),
            currency=_optional_str(raw, "currency"),
            amount=_optional_decimal(raw, "amount", "transactions"),
            commission=_optional_decimal(raw, "commission", "transactions"),
            account=_optional_str(raw, "account"),
            created=_optional_int(raw, "created", "transactions"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class GBXUtilizationTransaction:
    """GBX(Globitex Token) 사용 내역."""

    id: str
    date: Optional[int]
    transaction_type: Optional[str]
    gbx_amount: Optional[Decimal]
    eur_amount: Optional[Decimal]
    status: Optional[str]
    account: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "GBXUtilizationTransaction":
        raw = _ensure_mapping(payload, "gbxUtilizationList")
        return cls(
            id=str(_require(raw, "id", "gbxUtilizationList")),
            date=_optional_int(raw, "date", "gbxUtilizationList"),
            transaction_type=_optional_str(raw, "transactionType"),
            gbx_amount=_optional_decimal(raw, "gbxAmount", "gbxUtilizationList"),
            eur_amount=_optional_decimal(raw, "eurAmount", "gbxUtilizationList"),
            status=_optional_str(raw, "status"),
            account=_optional_str(raw, "account"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class EuroAccount:
    """유로 지갑 계좌 상태."""

    iban: str
    currency: str
    balance: Optional[Decimal]
    available_balance: Optional[Decimal]
    blocked_amount: Optional[Decimal]
    default: bool
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "EuroAccount":
        raw = _ensure_mapping(payload, "eurowallet")
        return cls(
            iban=str(_require(raw, "iban", "eurowallet")),
            currency=str(raw.get("currency") or "EUR"),
            balance=_optional_decimal(raw, "balance", "eurowallet"),
            available_balance=_optional_decimal(raw, "availableBalance", "eurowallet"),
            blocked_amount=_optional_decimal(raw, "blockedAmount", "eurowallet"),
            default=str_to_bool(raw.get("default"), False),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class EuroPayment:
    """유로 지갑 결제 내역 한 건."""

    id: Optional[str]
    date: Optional[str]
    amount: Optional[Decimal]
    currency: Optional[str]
    direction: Optional[str]
    status: Optional[str]
    counterparty: Optional[str]
    details: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "EuroPayment":
        raw = _ensure_mapping(payload, "payments")
        return cls(
            id=_optional_str(raw, "id"),
            date=_optional_str(raw, "date"),
            amount=_optional_decimal(raw, "amount", "payments"),
            currency=_optional_str(raw, "currency"),
            direction=_optional_str(raw, "direction"),
            status=_optional_str(raw, "status"),
            counterparty=_optional_str(raw, "counterparty"),
            details=_optional_str(raw, "details"),
            data=_frozen(raw),
        )


@dataclass(frozen=True)
class EuroPaymentHistory:
    """유로 지갑 결제 이력."""

    account: Optional[str]
    payments: tuple[EuroPayment, ...]
    data: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, payload: Any) -> "EuroPaymentHistory":
        raw = _ensure_mapping(payload, "eurowallet/payments/history")
        return cls(
            account=_optional_str(raw, "account"),
            payments=tuple(
                EuroPayment.from_raw(item)
                for item in _list_field(raw, "payments", "eurowallet/payments/history")
            ),
            data=_frozen(raw),
        )

    def __len__(self) -> int:
        return len(self.payments)


__all__ = [
    "Account",
    "Balance",
    "CryptoTransactionFee",
    "EuroAccount",
    "EuroPayment",
    "EuroPaymentHistory",
    "GBXUtilizationTransaction",
    "OrderBook",
    "OrderBookEntry",
    "Pair",
    "TRADE_ARRAY_FIELDS",
    "Ticker",
    "Trade",
    "Transaction",
]
