"""라이브러리 공통 예외 계층."""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """라이브러리 전반에서 사용하는 기본 예외 클래스."""


class ConfigurationError(AppError):
    """환경 설정이나 필수 값(API 키 등)이 누락된 경우 발생."""


class DataValidationError(AppError):
    """데이터 검증 실패를 표현."""


class ResponseFormatError(DataValidationError):
    """API 응답에 기대한 필드가 없거나 형식이 맞지 않는 경우 발생."""


class ExchangeError(AppError):
    """거래소 API 호출 중 발생한 예외."""


class GlobitexApiError(ExchangeError):
    """Globitex API 전송 계층에서 발생하는 단일 예외 타입.

    원인이 된 예외는 ``cause`` 에 그대로 보존되며, 가능한 경우 HTTP 상태 코드,
    호출한 엔드포인트, 원본 응답 본문을 함께 담는다.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        payload: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.status_code = status_code
        self.endpoint = endpoint
        self.payload = payload


__all__ = [
    "AppError",
    "ConfigurationError",
    "DataValidationError",
    "ExchangeError",
    "GlobitexApiError",
    "ResponseFormatError",
]
