"""지역 옵션 HTTP API 어댑터.

엔드포인트 (LOCATION_API_BASE_URL 기준):
- GET  /countries                           → data: [{name, ...}, ...]
- POST /countries/states                    → data: {name, states: [{name, ...}]}
- POST /countries/state/districts           → data: [str, ...]
- POST /countries/state/district/cities     → data: [str, ...]

모든 응답은 {error, msg, data} 래퍼로 온다.
국가/주는 {name} 객체, 구/시는 문자열 배열이므로 여기서 `list[str]`로 정규화한다.
재시도는 하지 않는다. 다음 선택 시 자연스럽게 다시 조회된다.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from src.core.config import settings
from src.core.exceptions import FetchError
from src.data.models import ApiEnvelope, Level, NamedItem, StatesPayload

_NAMED_LIST = TypeAdapter(list[NamedItem])
_STR_LIST = TypeAdapter(list[str])


class HttpLocationDataSource:
    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        raw_url = base_url if base_url is not None else settings.location_api_base_url
        self._base_url = raw_url.strip().rstrip("/")
        self._timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.location_api_timeout_seconds
        )

        if not self._base_url:
            raise FetchError(
                "LOCATION_API_BASE_URL이 설정되지 않았습니다. "
                "환경변수(.env 포함) 또는 Streamlit Secrets에 설정하세요."
            )

        # 주입된 클라이언트가 없으면 요청마다 새로 연다 (Streamlit 콜백은 매번 새 이벤트 루프)
        self._client = client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def list_countries(self) -> list[str]:
        data = await self._request("GET", "/countries", None, Level.COUNTRY)
        items = self._parse(_NAMED_LIST, data, Level.COUNTRY)
        return [item.name for item in items]

    async def list_states(self, country: str) -> list[str]:
        data = await self._request(
            "POST", "/countries/states", {"country": country}, Level.STATE
        )
        try:
            payload = StatesPayload.model_validate(data)
        except ValidationError as exc:
            raise FetchError("State 응답 파싱 실패", level=Level.STATE) from exc
        return [item.name for item in payload.states]

    async def list_districts(self, country: str, state: str) -> list[str]:
        data = await self._request(
            "POST",
            "/countries/state/districts",
            {"country": country, "state": state},
            Level.DISTRICT,
        )
        return self._parse(_STR_LIST, data, Level.DISTRICT)

    async def list_cities(self, country: str, state: str, district: str) -> list[str]:
        data = await self._request(
            "POST",
            "/countries/state/district/cities",
            {"country": country, "state": state, "district": district},
            Level.CITY,
        )
        return self._parse(_STR_LIST, data, Level.CITY)

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, str] | None,
        level: Level,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                resp = await self._client.request(method, url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(method, url, json=body)
        except httpx.TimeoutException as exc:
            raise FetchError(f"{level.value} 요청 시간 초과", level=level) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"{level.value} 네트워크 오류: {exc}", level=level) from exc

        if resp.status_code >= 400:
            raise FetchError(
                f"{level.value} HTTP 오류: {resp.status_code}",
                level=level,
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise FetchError(
                f"{level.value} 응답 JSON 파싱 실패", level=level, status_code=resp.status_code
            ) from exc

        try:
            envelope = ApiEnvelope.model_validate(payload)
        except ValidationError as exc:
            raise FetchError(
                f"{level.value} 응답 형식 오류", level=level, status_code=resp.status_code
            ) from exc

        if envelope.error:
            raise FetchError(
                f"{level.value} 조회 실패{f': {envelope.msg}' if envelope.msg else ''}",
                level=level,
                status_code=resp.status_code,
            )
        return envelope.data

    @staticmethod
    def _parse(adapter: TypeAdapter[Any], data: Any, level: Level) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as exc:
            raise FetchError(f"{level.value} 응답 파싱 실패", level=level) from exc
