"""지역 옵션 조회 캐싱 유틸리티.

- 성공한 조회 결과만 (메서드, 파라미터) 단위로 TTL 동안 보관
- 실패(FetchError)는 캐시하지 않으므로 다음 선택 시 다시 조회된다
- 저장할 때 만료 항목을 지우고, max_entries를 넘으면 오래된 것부터 버린다

Streamlit 앱에서는 st.cache_resource로 프로세스당 한 인스턴스를 공유한다 (src/app.py).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.data.location_source import LocationDataSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1024


class CachedLocationDataSource:
    def __init__(
        self,
        inner: LocationDataSource,
        ttl_seconds: float,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[tuple[str, ...], tuple[float, list[str]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    async def list_countries(self) -> list[str]:
        return await self._cached(("countries",), self._inner.list_countries)

    async def list_states(self, country: str) -> list[str]:
        return await self._cached(
            ("states", country), lambda: self._inner.list_states(country)
        )

    async def list_districts(self, country: str, state: str) -> list[str]:
        return await self._cached(
            ("districts", country, state),
            lambda: self._inner.list_districts(country, state),
        )

    async def list_cities(self, country: str, state: str, district: str) -> list[str]:
        return await self._cached(
            ("cities", country, state, district),
            lambda: self._inner.list_cities(country, state, district),
        )

    async def _cached(
        self,
        key: tuple[str, ...],
        fetch: Callable[[], Awaitable[list[str]]],
    ) -> list[str]:
        hit = self._entries.get(key)
        if hit is not None and (self._clock() - hit[0]) < self._ttl:
            return list(hit[1])

        values = list(await fetch())
        if self._ttl > 0 and self._max_entries > 0:
            self._store(key, values)
        return list(values)

    def _store(self, key: tuple[str, ...], values: list[str]) -> None:
        now = self._clock()
        expired = [
            k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self._ttl
        ]
        for k in expired:
            del self._entries[k]

        # dict 삽입 순서 = 저장 시각 순서 (갱신 시 pop 후 다시 넣는다)
        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[key] = (now, values)

        if expired:
            logger.debug("옵션 캐시 만료 항목 %d건 제거", len(expired))
