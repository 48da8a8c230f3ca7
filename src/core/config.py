"""앱 설정 관리 모듈 — 환경변수/Secrets 로드 및 전역 설정 제공.

Streamlit Community Cloud에서는 `.env` 대신 Secrets(`.streamlit/secrets.toml`)로
환경변수를 주입하는 경우가 많다. 이 모듈은 다음 우선순위로 값을 로드한다.

1) OS 환경변수 (os.environ, `.env` 포함)
2) Streamlit secrets.toml (프로젝트/.streamlit 또는 사용자 홈)
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


def _load_secrets() -> dict[str, Any]:
    candidates = [
        _PROJECT_ROOT / ".streamlit" / "secrets.toml",
        Path.home() / ".streamlit" / "secrets.toml",
    ]
    for path in candidates:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError:
            continue

        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError:
            continue

        if isinstance(data, dict):
            return data
    return {}


_SECRETS = _load_secrets()


def _get_raw(key: str) -> str | None:
    value = os.getenv(key)
    if value is not None:
        return value

    secret = _SECRETS.get(key)
    if secret is None:
        return None
    if isinstance(secret, (str, int, float, bool)):
        return str(secret)
    return None


def _get_str(key: str, default: str) -> str:
    value = _get_raw(key)
    if value is None:
        return default
    return str(value).strip()


def _get_bool(key: str, default: bool) -> bool:
    value = _get_raw(key)
    if value is None:
        return default
    return str(value).strip().lower() == "true"


def _get_float(key: str, default: float) -> float:
    value = _get_raw(key)
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except ValueError:
        return default


def _get_path(key: str, default: Path) -> Path:
    value = _get_raw(key)
    if not value:
        return default
    path = Path(value.strip())
    return path if path.is_absolute() else _PROJECT_ROOT / path


@dataclass(frozen=True)
class Settings:
    """앱 전역 설정. 환경변수에서 값을 읽으며 frozen=True로 런타임 변경을 방지."""

    debug: bool = field(default_factory=lambda: _get_bool("DEBUG", False))

    # 비어 있으면 HTTP 대신 내장 지역 테이블(location_data_path)을 사용한다.
    location_api_base_url: str = field(
        default_factory=lambda: _get_str("LOCATION_API_BASE_URL", "")
    )
    location_api_timeout_seconds: float = field(
        default_factory=lambda: _get_float("LOCATION_API_TIMEOUT_SECONDS", 10.0)
    )
    location_data_path: Path = field(
        default_factory=lambda: _get_path(
            "LOCATION_DATA_PATH", _PROJECT_ROOT / "data" / "sample_locations.csv"
        )
    )
    options_cache_ttl_seconds: float = field(
        default_factory=lambda: _get_float("OPTIONS_CACHE_TTL_SECONDS", 3600.0)
    )

    submission_db_path: Path = field(
        default_factory=lambda: _PROJECT_ROOT / "data" / "submissions.db"
    )
    submission_history_limit: int = 20


settings = Settings()
