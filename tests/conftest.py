from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from globitex.config import get_settings  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="module")
def xbteur_trades_payload() -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / "globitex_trades_xbteur.json").read_text(encoding="utf-8"))
