"""데이터 변환 관련 헬퍼 함수."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

NumberLike = Union[str, int, float, Decimal]


def to_decimal(value: NumberLike) -> Decimal:
    """숫자형 또는 문자열 값을 Decimal로 변환한다."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Decimal 변환 실패: {value}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"Decimal 변환 실패: {value}") from exc


def optional_decimal(value: Optional[NumberLike]) -> Optional[Decimal]:
    """None 또는 빈 문자열은 그대로 None으로 돌려준다."""
    if value is None or value == "":
        return None
    return to_decimal(value)


def str_to_bool(value: Union[str, bool, int, None], default: bool = False) -> bool:
    """문자열 혹은 기타 값을 불리언으로 해석한다."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, int):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def to_query_value(value: Any) -> str:
    """쿼리 문자열에 들어갈 값을 문자열로 바꾼다. 불리언은 1/0으로 표기한다."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


__all__ = [
    "NumberLike",
    "optional_decimal",
    "str_to_bool",
    "to_decimal",
    "to_query_value",
]
