"""Globitex REST API 클라이언트."""

from __future__ import annotations

import hashlib
import hmac
import json
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import requests
from pydantic import SecretStr
from requests import Response, Session

from ..config import get_settings
from ..utils.converters import to_query_value
from ..utils.exceptions import ConfigurationError, GlobitexApiError, ResponseFormatError
from ..utils.logger import get_logger
from ..utils.time_utils import microsecond_timestamp
from .objects import (
    Account,
    CryptoTransactionFee,
    EuroAccount,
    EuroPaymentHistory,
    GBXUtilizationTransaction,
    OrderBook,
    Pair,
    Ticker,
    Trade,
    Transaction,
)

Parameters = Mapping[str, Any]
Timeout = Union[float, Tuple[float, float]]

API_VERSION = "1"


class HttpMethod(str, Enum):
    """비공개 요청에 사용할 수 있는 HTTP 메서드."""

    GET = "get"
    POST = "post"


class GlobitexEndpoint(str, Enum):
    """Globitex REST API 1 엔드포인트."""

    # Public API
    TIME = "time"
    TICKER = "ticker"
    ORDERBOOK = "orderbook"
    TRADES = "trades"
    SYMBOLS = "symbols"

    # Private API
    ACCOUNTS = "payment/accounts"
    CRYPTO_PAYOUT_FEE = "payment/payout/fee/crypto"
    CRYPTO_DEPOSIT_ADDRESS = "payment/deposit/crypto/address"
    TRANSACTIONS = "payment/transactions"
    GBX_UTILIZATION_LIST = "gbx-utilization/list"
    EURO_ACCOUNT_STATUS = "eurowallet/status"
    EURO_PAYMENT_HISTORY = "eurowallet/payments/history"


@dataclass(frozen=True)
class ClientCredentials:
    """Globitex API 인증 정보. 시크릿은 서명 계산에만 쓰이고 전송되지 않는다."""

    api_key: str
    api_secret: str = field(repr=False)

    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.api_secret)


def _endpoint_name(method: Union[GlobitexEndpoint, str]) -> str:
    return method.value if isinstance(method, GlobitexEndpoint) else str(method)


def _secret_or_default(value: Optional[str], default: Optional[SecretStr]) -> str:
    if value is not None:
        return value
    return default.get_secret_value() if default is not None else ""


def clean_parameters(parameters: Optional[Parameters]) -> dict[str, str]:
    """None 값을 제외하고 나머지 값을 쿼리용 문자열로 바꾼다. 입력 순서는 유지한다."""

    if not parameters:
        return {}
    return {str(key): to_query_value(value) for key, value in parameters.items() if value is not None}


def build_query_string(parameters: Optional[Parameters]) -> str:
    """서명과 전송에 공통으로 쓰이는 key=value&key=value 형식의 쿼리 문자열."""

    return urlencode(clean_parameters(parameters))


def decode_result(body: Union[str, bytes]) -> Any:
    """응답 본문(JSON)을 디코딩한다. 잘못된 JSON은 json.JSONDecodeError를 그대로 전파한다."""

    if isinstance(body, bytes):
        body = body.decode("utf-8")
    return json.loads(body)


class GlobitexClient:
    """Globitex REST API 호출을 담당하는 기본 클라이언트."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        session: Optional[Session] = None,
        timeout: Optional[Timeout] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        globitex_settings = settings.globitex

        self._base_url = (base_url or globitex_settings.rest_base_url).rstrip("/")
        self._api_version = str(api_version or globitex_settings.api_version or API_VERSION)
        self._timeout: Timeout = timeout if timeout is not None else globitex_settings.timeout
        self._user_agent = user_agent or globitex_settings.user_agent
        self._session: Session = session or requests.Session()
        self._owns_session = session is None
        self._logger = get_logger(__name__)
        self._clock: Callable[[], int] = time.time_ns
        self._sign_lock = threading.Lock()

        # 빈 문자열도 명시적인 값으로 취급한다. None 일 때만 설정값을 사용한다.
        resolved_api_key = _secret_or_default(api_key, globitex_settings.api_key)
        resolved_api_secret = _secret_or_default(api_secret, globitex_settings.api_secret)
        self._credentials = ClientCredentials(resolved_api_key, resolved_api_secret)

    @property
    def base_url(self) -> str:
        """REST API 기본 URL."""

        return self._base_url

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def timeout(self) -> Timeout:
        """요청 기본 타임아웃."""

        return self._timeout

    @property
    def session(self) -> Session:
        """내부 HTTP 세션."""

        return self._session

    @property
    def credentials(self) -> ClientCredentials:
        """설정된 인증 정보."""

        return self._credentials

    def close(self) -> None:
        """직접 생성한 세션만 종료한다."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "GlobitexClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - 컨텍스트 관리자 편의 기능
        self.close()

    # ------------------------------------------------------------------
    # 경로 및 서명
    # ------------------------------------------------------------------
    def build_path(self, method: Union[GlobitexEndpoint, str], is_public: bool = False) -> str:
        """``/api/<version>[/public]/<method>`` 경로를 만든다."""

        method_value = _endpoint_name(method)
        base_path = f"/api/{self._api_version}"
        if is_public:
            base_path += "/public"
        return f"{base_path}/{method_value}"

    def build_url(self, method: Union[GlobitexEndpoint, str], is_public: bool = False) -> str:
        return f"{self._base_url}{self.build_path(method, is_public)}"

    def generate_nonce(self) -> str:
        """초 + 6자리 마이크로초로 이루어진 숫자 문자열 nonce."""

        return microsecond_timestamp(self._clock)

    def generate_signature(
        self,
        method: Union[GlobitexEndpoint, str],
        parameters: Optional[Parameters],
        nonce: str,
    ) -> str:
        """Globitex 서명을 계산한다.

        uri = path [+ '?' + query]
        message = api_key + '&' + nonce + uri
        signature = lower(hex(hmac_sha512(message, secret)))

        경로는 HTTP 메서드와 무관하게 항상 비공개 형식(``/public`` 없음)을 사용한다.
        """

        uri = self.build_path(method)
        query_string = build_query_string(parameters)
        if query_string:
            uri = f"{uri}?{query_string}"

        message = f"{self._credentials.api_key}&{nonce}{uri}"
        return hmac.new(
            self._credentials.api_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha512,
        ).hexdigest().lower()

    def _sign(self, method: Union[GlobitexEndpoint, str], parameters: Parameters) -> tuple[str, str]:
        # nonce 생성과 서명은 하나의 단위로 직렬화한다.
        with self._sign_lock:
            nonce = self.generate_nonce()
            signature = self.generate_signature(method, parameters, nonce)
        return nonce, signature

    # ------------------------------------------------------------------
    # 요청 전송
    # ------------------------------------------------------------------
    def public_request(
        self,
        method: Union[GlobitexEndpoint, str],
        path: str = "",
        parameters: Optional[Parameters] = None,
    ) -> Any:
        """인증 없이 GET 요청을 보낸다."""

        url = self.build_url(method, True)
        if path:
            url = f"{url}/{path}"
        headers = {"User-Agent": self._user_agent}
        response = self._send("GET", url, headers=headers, params=clean_parameters(parameters))
        return decode_result(response.content)

    def private_request(
        self,
        method: Union[GlobitexEndpoint, str],
        parameters: Optional[Parameters] = None,
        http_method: Union[HttpMethod, str] = HttpMethod.POST,
    ) -> Any:
        """서명된 요청을 보낸다. POST는 form 본문, GET은 쿼리 문자열로 파라미터를 전달한다."""

        verb = http_method.value if isinstance(http_method, HttpMethod) else str(http_method).lower()
        if verb not in (HttpMethod.GET.value, HttpMethod.POST.value):
            raise ValueError(f"지원하지 않는 HTTP 메서드입니다: {http_method}")
        if not self._credentials.is_configured():
            raise ConfigurationError("Globitex API 키/시크릿을 설정한 뒤 호출해야 합니다.")

        payload = clean_parameters(parameters)
        nonce, signature = self._sign(method, payload)
        headers = {
            "User-Agent": self._user_agent,
            "X-Nonce": nonce,
            "X-API-Key": self._credentials.api_key,
            "X-Signature": signature,
        }

        url = self.build_url(method)
        if verb == HttpMethod.POST.value:
            response = self._send("POST", url, headers=headers, data=payload)
        else:
            response = self._send("GET", url, headers=headers, params=payload)
        return decode_result(response.content)

    def _send(
        self,
        http_method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, str]] = None,
        data: Optional[Mapping[str, str]] = None,
    ) -> Response:
        self._logger.debug("Globitex 요청: %s %s", http_method, url)
        try:
            response = self._session.request(
                method=http_method,
                url=url,
                params=params or None,
                data=data or None,
                headers=dict(headers),
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            error = self._translate_http_error(exc, url)
            self._logger.warning("Globitex 요청 실패: %s %s - %s", http_method, url, error.message)
            raise error from exc
        except requests.Timeout as exc:
            self._logger.warning("Globitex 요청 시간 초과: %s %s", http_method, url)
            raise GlobitexApiError(
                f"Globitex API 요청 시간 초과: {exc}", cause=exc, endpoint=url
            ) from exc
        except requests.ConnectionError as exc:
            self._logger.warning("Globitex 서버 연결 실패: %s %s", http_method, url)
            raise GlobitexApiError(
                f"Globitex API 서버 연결 실패: {exc}", cause=exc, endpoint=url
            ) from exc
        except requests.RequestException as exc:
            self._logger.warning("Globitex 요청 오류: %s %s - %s", http_method, url, exc)
            raise GlobitexApiError(str(exc), cause=exc, endpoint=url) from exc
        return response

    def _translate_http_error(self, exc: requests.HTTPError, url: str) -> GlobitexApiError:
        response = exc.response
        status_code = response.status_code if response is not None else None
        body = response.text if response is not None else None

        if status_code == 404:
            return GlobitexApiError(
                f"엔드포인트를 찾을 수 없습니다: ({url})",
                cause=exc,
                status_code=status_code,
                endpoint=url,
                payload=body,
            )

        message = str(exc)
        detail = self._extract_api_error(response)
        if detail:
            message = f"{message} - {detail}"
        return GlobitexApiError(message, cause=exc, status_code=status_code, endpoint=url, payload=body)

    @staticmethod
    def _extract_api_error(response: Optional[Response]) -> Optional[str]:
        # {"errors": [{"code": 20, "message": "..."}]} 형식의 오류 본문
        if response is None:
            return None
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, Mapping):
            return None
        errors = payload.get("errors")
        if not isinstance(errors, list) or not errors or not isinstance(errors[0], Mapping):
            return None
        first = errors[0]
        code = first.get("code")
        message = first.get("message") or first.get("data")
        if code is None and not message:
            return None
        return f"Globitex API 오류({code}): {message}"

    @staticmethod
    def _field(result: Any, key: str, method: Union[GlobitexEndpoint, str]) -> Any:
        endpoint = _endpoint_name(method)
        if not isinstance(result, Mapping) or key not in result:
            raise ResponseFormatError(f"{endpoint} 응답에 '{key}' 필드가 없습니다.")
        return result[key]

    def _list_field(self, result: Any, key: str, method: Union[GlobitexEndpoint, str]) -> list[Any]:
        value = self._field(result, key, method)
        if not isinstance(value, list):
            raise ResponseFormatError(f"{_endpoint_name(method)} 응답의 '{key}' 필드는 배열이어야 합니다.")
        return value

    # ------------------------------------------------------------------
    # 시세 조회 (Public)
    # ------------------------------------------------------------------
    def get_time(self) -> int:
        """서버 시간을 밀리초 UNIX 타임스탬프로 반환한다."""

        result = self.public_request(GlobitexEndpoint.TIME)
        value = self._field(result, "timestamp", GlobitexEndpoint.TIME)
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ResponseFormatError(f"time.timestamp 값이 정수가 아닙니다: {value!r}") from exc

    def get_ticker(self, pair: str) -> Ticker:
        result = self.public_request(GlobitexEndpoint.TICKER, pair)
        return Ticker.from_raw(result)

    def get_order_book(self, pair: str) -> OrderBook:
        result = self.public_request(GlobitexEndpoint.ORDERBOOK, pair)
        return OrderBook.from_raw(result)

    def get_trades(self, pair: str, format_item: str = "object") -> list[Trade]:
        """최근 체결 내역. ``format_item`` 은 object(기본) 또는 array."""

        result = self.public_request(GlobitexEndpoint.TRADES, pair, {"formatItem": format_item})
        return [Trade.from_raw(item) for item in self._list_field(result, "trades", GlobitexEndpoint.TRADES)]

    def get_asset_pairs(self) -> list[Pair]:
        result = self.public_request(GlobitexEndpoint.SYMBOLS)
        return [Pair.from_raw(item) for item in self._list_field(result, "symbols", GlobitexEndpoint.SYMBOLS)]

    # ------------------------------------------------------------------
    # 계좌 및 결제 (Private)
    # ------------------------------------------------------------------
    def get_account_balance(self) -> list[Account]:
        result = self.private_request(GlobitexEndpoint.ACCOUNTS, {}, HttpMethod.GET)
        return [
            Account.from_raw(item) for item in self._list_field(result, "accounts", GlobitexEndpoint.ACCOUNTS)
        ]

    def get_crypto_transaction_fee(self, currency: str, amount: str, account: str) -> CryptoTransactionFee:
        """암호화폐 출금(채굴) 수수료를 조회한다.

        Args:
            currency: 통화 코드 (예: BTC)
            amount: 출금 금액 (예: "1.23")
            account: 출금할 계좌 번호 (예: XAZ123A91)
        """

        result = self.private_request(
            GlobitexEndpoint.CRYPTO_PAYOUT_FEE,
            {"currency": currency, "amount": amount, "account": account},
            HttpMethod.GET,
        )
        return CryptoTransactionFee.from_raw(result)

    def get_crypto_currency_deposit_address(self, currency: str, account: Optional[str] = None) -> str:
        """이전에 생성된 암호화폐 입금 주소를 반환한다.

        Args:
            currency: 통화 코드 (예: BTC)
            account: 입금 받을 계좌 번호. 없으면 기본 계좌의 주소를 반환한다.
        """

        result = self.private_request(
            GlobitexEndpoint.CRYPTO_DEPOSIT_ADDRESS,
            {"currency": currency, "account": account},
            HttpMethod.GET,
        )
        return str(self._field(result, "address", GlobitexEndpoint.CRYPTO_DEPOSIT_ADDRESS))

    def get_transactions(self, params: Optional[Parameters] = None) -> list[Transaction]:
        """결제 트랜잭션 목록과 상태를 조회한다. 선택 파라미터는 그대로 전달된다."""

        result = self.private_request(GlobitexEndpoint.TRANSACTIONS, params or {}, HttpMethod.GET)
        return [
            Transaction.from_raw(item)
            for item in self._list_field(result, "transactions", GlobitexEndpoint.TRANSACTIONS)
        ]

    def get_gbx_utilization_transactions(
        self, params: Optional[Parameters] = None
    ) -> list[GBXUtilizationTransaction]:
        result = self.private_request(GlobitexEndpoint.GBX_UTILIZATION_LIST, params or {}, HttpMethod.GET)
        return [
            GBXUtilizationTransaction.from_raw(item)
            for item in self._list_field(result, "gbxUtilizationList", GlobitexEndpoint.GBX_UTILIZATION_LIST)
        ]

    def get_euro_account_status(self) -> list[EuroAccount]:
        """기본(단일) 또는 전체 유로 지갑 계좌 상태."""

        result = self.private_request(GlobitexEndpoint.EURO_ACCOUNT_STATUS, {}, HttpMethod.GET)
        return [
            EuroAccount.from_raw(item)
            for item in self._list_field(result, "accounts", GlobitexEndpoint.EURO_ACCOUNT_STATUS)
        ]

    def get_euro_payment_history(
        self,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        account: Optional[str] = None,
    ) -> EuroPaymentHistory:
        """유로 지갑 결제 이력을 조회한다.

        Args:
            from_date: 조회 시작일 (yyyy-MM-dd)
            to_date: 조회 종료일 (yyyy-MM-dd)
            account: IBAN 계좌 번호. 없으면 기본 계좌를 사용한다.
        """

        result = self.private_request(
            GlobitexEndpoint.EURO_PAYMENT_HISTORY,
            {"fromDate": from_date, "toDate": to_date, "account": account},
            HttpMethod.GET,
        )
        return EuroPaymentHistory.from_raw(result)


__all__ = [
    "API_VERSION",
    "ClientCredentials",
    "GlobitexClient",
    "GlobitexEndpoint",
    "HttpMethod",
    "build_query_string",
    "clean_parameters",
    "decode_result",
]
