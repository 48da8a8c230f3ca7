from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from src.core.exceptions import FetchError
from src.data.models import LocationSelection

HIERARCHY: dict[str, dict[str, dict[str, list[str]]]] = {
    "Brazil": {
        "SP": {
            "Centro": ["Sao Paulo", "Guarulhos"],
            "Zona Sul": ["Santo Amaro", "Interlagos"],
        },
        "RJ": {
            "Centro": ["Rio de Janeiro"],
        },
    },
    "India": {
        "Karnataka": {
            "Mysuru": ["Mysuru", "Nanjangud"],
        },
        "Maharashtra": {
            "Pune": ["Pune", "Baramati"],
        },
    },
}


class FakeLocationDataSource:
    """메모리 계층 구조 기반 테스트용 데이터 소스.

    - calls: 호출 기록 (예: ("states", "Brazil"))
    - fail: 실패시킬 메서드 종류 ("countries", "states", "districts", "cities")
    - gates: 특정 호출을 Event가 set될 때까지 붙잡아 둔다
    - on_call: 호출 시점에 실행할 관찰 함수
    """

    def __init__(self, hierarchy: dict[str, dict[str, dict[str, list[str]]]] | None = None) -> None:
        self.hierarchy = hierarchy if hierarchy is not None else HIERARCHY
        self.calls: list[tuple[str, ...]] = []
        self.fail: dict[str, Exception] = {}
        self.gates: dict[tuple[str, ...], asyncio.Event] = {}
        self.on_call: Callable[[], None] | None = None

    def gate(self, *key: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[key] = event
        return event

    async def _respond(self, key: tuple[str, ...], values: list[str]) -> list[str]:
        self.calls.append(key)
        if self.on_call is not None:
            self.on_call()
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        error = self.fail.get(key[0])
        if error is not None:
            raise error
        return list(values)

    async def list_countries(self) -> list[str]:
        return await self._respond(("countries",), sorted(self.hierarchy))

    async def list_states(self, country: str) -> list[str]:
        states = self.hierarchy.get(country, {})
        return await self._respond(("states", country), sorted(states))

    async def list_districts(self, country: str, state: str) -> list[str]:
        districts = self.hierarchy.get(country, {}).get(state, {})
        return await self._respond(("districts", country, state), sorted(districts))

    async def list_cities(self, country: str, state: str, district: str) -> list[str]:
        cities = self.hierarchy.get(country, {}).get(state, {}).get(district, [])
        return await self._respond(("cities", country, state, district), list(cities))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_source() -> FakeLocationDataSource:
    return FakeLocationDataSource()


@pytest.fixture
def failing_states_source() -> FakeLocationDataSource:
    source = FakeLocationDataSource()
    source.fail["states"] = FetchError("states endpoint down")
    return source


@pytest.fixture
def sample_selection() -> LocationSelection:
    return LocationSelection(country="Brazil", state="SP", district="Centro", city="Sao Paulo")


@pytest.fixture
def make_source() -> Callable[..., FakeLocationDataSource]:
    return FakeLocationDataSource
