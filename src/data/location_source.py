"""지역 옵션 데이터 소스.

상태 머신이 의존하는 LocationDataSource 프로토콜과,
pandas DataFrame(CSV/Excel/JSON 파일) 기반 구현을 제공한다.

모든 구현은 옵션을 `list[str]` 하나의 형태로 반환한다.
(국가/주 응답이 {name} 객체인 HTTP API는 location_api 어댑터에서 정규화)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, cast

import pandas as pd

from src.core.exceptions import LocationDataError

logger = logging.getLogger(__name__)

# 파일마다 컬럼명이 다를 수 있으므로 유연하게 매핑
_COLUMN_ALIASES: dict[str, list[str]] = {
    "country": ["country", "Country", "country_name", "nation"],
    "state": ["state", "State", "state_name", "province", "Province", "region"],
    "district": ["district", "District", "district_name", "county", "County"],
    "city": ["city", "City", "city_name", "town", "Town", "municipality"],
}

_REQUIRED_COLUMNS = tuple(_COLUMN_ALIASES)


class LocationDataSource(Protocol):
    """4단계 옵션 조회 인터페이스. 실패 시 FetchError를 던진다."""

    async def list_countries(self) -> list[str]: ...

    async def list_states(self, country: str) -> list[str]: ...

    async def list_districts(self, country: str, state: str) -> list[str]: ...

    async def list_cities(self, country: str, state: str, district: str) -> list[str]: ...


def _resolve_column(df_columns: list[str], target_key: str) -> str | None:
    """DataFrame 컬럼 중 target_key에 매핑되는 실제 컬럼명을 찾아 반환."""
    for alias in _COLUMN_ALIASES.get(target_key, [target_key]):
        if alias in df_columns:
            return alias
    return None


def normalize_location_frame(df: pd.DataFrame) -> pd.DataFrame:
    """컬럼명을 country/state/district/city로 맞추고 값을 문자열로 정리.

    4개 컬럼 중 하나라도 찾지 못하면 LocationDataError.
    """
    columns = [str(c).strip() for c in df.columns]
    df = df.copy()
    df.columns = columns

    rename: dict[str, str] = {}
    missing: list[str] = []
    for key in _REQUIRED_COLUMNS:
        resolved = _resolve_column(columns, key)
        if resolved is None:
            missing.append(key)
        else:
            rename[resolved] = key
    if missing:
        raise LocationDataError(f"지역 데이터에 필수 컬럼이 없습니다: {', '.join(missing)}")

    out = cast("pd.DataFrame", df[list(rename)].rename(columns=rename))
    for key in _REQUIRED_COLUMNS:
        out[key] = out[key].fillna("").astype(str).str.strip()
    return out


def load_location_frame(path: Path) -> pd.DataFrame:
    """CSV/Excel/JSON 지역 테이블 파일을 읽어 정규화된 DataFrame으로 반환."""
    lower_name = path.name.lower()
    try:
        if lower_name.endswith(".csv"):
            df = pd.read_csv(path, dtype=str, encoding="utf-8-sig")
        elif lower_name.endswith((".xlsx", ".xls")):
            df = pd.read_excel(path, dtype=str)
        elif lower_name.endswith(".json"):
            raw = json.loads(path.read_text(encoding="utf-8"))
            df = pd.DataFrame(raw if isinstance(raw, list) else [raw])
        else:
            raise LocationDataError(f"지원하지 않는 파일 형식: {path.name}")
    except LocationDataError:
        raise
    except Exception as e:
        raise LocationDataError(f"지역 데이터 파일 읽기 실패 ({path.name}): {e}") from e

    frame = normalize_location_frame(df)
    logger.info("지역 데이터 로드 완료: %d건 (%s)", len(frame), path.name)
    return frame


def _unique_sorted(series: Any) -> list[str]:
    values = cast("Any", series).dropna().unique().tolist()
    return sorted({str(v) for v in values if str(v)})


class FrameLocationDataSource:
    """DataFrame 한 장으로 4단계 옵션을 제공하는 데이터 소스.

    부모 값이 테이블에 없으면 빈 리스트를 반환한다.
    """

    def __init__(self, df: pd.DataFrame) -> None:
        self._df = normalize_location_frame(df)

    @classmethod
    def from_file(cls, path: Path) -> FrameLocationDataSource:
        return cls(load_location_frame(path))

    async def list_countries(self) -> list[str]:
        return _unique_sorted(self._df["country"])

    async def list_states(self, country: str) -> list[str]:
        df = self._df
        filtered = df[df["country"] == country]
        return _unique_sorted(filtered["state"])

    async def list_districts(self, country: str, state: str) -> list[str]:
        df = self._df
        filtered = df[(df["country"] == country) & (df["state"] == state)]
        return _unique_sorted(filtered["district"])

    async def list_cities(self, country: str, state: str, district: str) -> list[str]:
        df = self._df
        filtered = df[
            (df["country"] == country) & (df["state"] == state) & (df["district"] == district)
        ]
        return _unique_sorted(filtered["city"])
