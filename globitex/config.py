"""환경변수 기반 라이브러리 설정 로더."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_REST_BASE_URL = "https://api.globitex.com"
DEFAULT_API_VERSION = "1"
DEFAULT_USER_AGENT = "Globitex Python API Agent"


def _to_int(value: str | int | None, default: int) -> int:
    """문자열 값을 정수로 변환한다."""
    if isinstance(value, int):
        return value
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: str | float | None, default: float) -> float:
    """문자열 값을 실수로 변환한다."""
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class LoggingSettings(BaseModel):
    """로깅 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    file_name: str = Field(default="globitex.log")
    rotation_when: str = Field(default="midnight")
    rotation_interval: int = Field(default=1, ge=1)
    backup_count: int = Field(default=7, ge=0)

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """환경변수에서 로깅 설정을 생성한다."""
        log_dir_value = os.getenv("LOG_DIR", "logs")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir_value).expanduser(),
            file_name=os.getenv("LOG_FILE_NAME", "globitex.log"),
            rotation_when=os.getenv("LOG_ROTATION_WHEN", "midnight"),
            rotation_interval=_to_int(os.getenv("LOG_ROTATION_INTERVAL"), 1),
            backup_count=_to_int(os.getenv("LOG_BACKUP_COUNT"), 7),
        )

    @property
    def normalized_level(self) -> str:
        """대문자로 정규화된 로그 레벨."""
        return self.level.upper()

    def resolve_log_dir(self, base_dir: Path) -> Path:
        """상대 경로는 ``base_dir`` 기준으로 해석한 로그 디렉터리."""
        if self.log_dir.is_absolute():
            return self.log_dir
        return (base_dir / self.log_dir).resolve()

    def resolve_log_path(self, base_dir: Path) -> Path:
        """``base_dir`` 기준 로그 파일 전체 경로."""
        return self.resolve_log_dir(base_dir) / self.file_name


class GlobitexSettings(BaseModel):
    """Globitex API 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[SecretStr] = Field(default=None)
    api_secret: Optional[SecretStr] = Field(default=None)
    rest_base_url: str = Field(default=DEFAULT_REST_BASE_URL)
    api_version: str = Field(default=DEFAULT_API_VERSION)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls) -> "GlobitexSettings":
        """환경변수에서 Globitex API 설정을 생성한다."""
        api_key = os.getenv("GLOBITEX_API_KEY")
        api_secret = os.getenv("GLOBITEX_API_SECRET")
        return cls(
            api_key=SecretStr(api_key) if api_key else None,
            api_secret=SecretStr(api_secret) if api_secret else None,
            rest_base_url=os.getenv("GLOBITEX_REST_BASE_URL", DEFAULT_REST_BASE_URL),
            api_version=os.getenv("GLOBITEX_API_VERSION", DEFAULT_API_VERSION),
            user_agent=os.getenv("GLOBITEX_USER_AGENT", DEFAULT_USER_AGENT),
            timeout=_to_float(os.getenv("GLOBITEX_TIMEOUT"), 10.0),
        )


class AppSettings(BaseModel):
    """라이브러리 전반에 사용되는 설정 묶음."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_dir: Path = Field(default_factory=Path.cwd)
    environment: str = Field(default="development")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    globitex: GlobitexSettings = Field(default_factory=GlobitexSettings)

    @classmethod
    def load(cls) -> "AppSettings":
        """환경변수 및 기본값을 반영하여 설정 인스턴스를 생성한다.

        ``.env`` 는 현재 작업 디렉터리에서 위로 올라가며 찾는다. 이미 설정된
        환경변수는 덮어쓰지 않는다.
        """
        load_dotenv(find_dotenv(usecwd=True))
        return cls(
            base_dir=Path.cwd(),
            environment=os.getenv("APP_ENV", "development"),
            logging=LoggingSettings.from_env(),
            globitex=GlobitexSettings.from_env(),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """전역 설정을 캐시하여 반환한다."""
    return AppSettings.load()


__all__ = [
    "AppSettings",
    "DEFAULT_API_VERSION",
    "DEFAULT_REST_BASE_URL",
    "DEFAULT_USER_AGENT",
    "GlobitexSettings",
    "LoggingSettings",
    "get_settings",
]
