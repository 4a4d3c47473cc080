"""라이브러리 전역에서 사용하는 로깅 설정 유틸리티."""

from __future__ import annotations

import logging
from logging import Logger
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Dict

from ..config import get_settings

_LOG_CONFIGURED = False


def _ensure_directory(path: Path) -> None:
    """필요한 디렉터리를 생성한다."""
    path.parent.mkdir(parents=True, exist_ok=True)


def _build_logging_config() -> Dict[str, Any]:
    """dictConfig에 사용할 로깅 설정을 생성한다."""
    settings = get_settings()
    logging_settings = settings.logging
    log_path = logging_settings.resolve_log_path(settings.base_dir)
    _ensure_directory(log_path)

    formatter = {
        "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": logging_settings.normalized_level,
            },
            "file": {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "standard",
                "level": logging_settings.normalized_level,
                "filename": str(log_path),
                "when": logging_settings.rotation_when,
                "interval": logging_settings.rotation_interval,
                "backupCount": logging_settings.backup_count,
                "encoding": "utf-8",
                "delay": True,
            },
        },
        "loggers": {
            "globitex": {
                "level": logging_settings.normalized_level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
        },
    }


def configure_logging(force: bool = False) -> None:
    """로깅 설정을 초기화한다.

    라이브러리는 스스로 핸들러를 붙이지 않는다. 애플리케이션이 원할 때 호출한다.
    상대 경로 ``LOG_DIR`` 는 설치 위치가 아니라 현재 작업 디렉터리 기준이다.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED and not force:
        return
    dictConfig(_build_logging_config())
    _LOG_CONFIGURED = True


def get_logger(name: str) -> Logger:
    """지정된 이름의 로거를 반환한다."""
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
