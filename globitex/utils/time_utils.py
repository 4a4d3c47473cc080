"""시간 관련 헬퍼 함수 모음."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Optional


def from_millis(value: Optional[int | str]) -> Optional[datetime]:
    """밀리초 단위 UNIX 타임스탬프를 UTC datetime으로 변환한다."""
    if value is None or value == "":
        return None
    millis = int(value)
    seconds, remainder = divmod(millis, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=remainder * 1000)


def microsecond_timestamp(clock: Callable[[], int] = time.time_ns) -> str:
    """초 단위 정수 뒤에 6자리 마이크로초를 이어붙인 숫자 문자열을 만든다.

    부동소수점을 거치지 않도록 나노초 정수 시계에서 직접 계산한다.
    """
    nanoseconds = clock()
    seconds, remainder = divmod(nanoseconds, 1_000_000_000)
    microseconds = remainder // 1000
    return f"{seconds}{microseconds:06d}"


__all__ = [
    "from_millis",
    "microsecond_timestamp",
]
