"""재사용 가능한 UI 헬퍼 — 위젯 키, 툴팁, 표시 문자열 등."""

from __future__ import annotations

from src.data.models import Level, LocationSelection

_TOOLTIPS: dict[Level, str] = {
    Level.COUNTRY: "Please select a country first",
    Level.STATE: "Please select a state after selecting a country",
    Level.DISTRICT: "Please select a district after selecting a state",
    Level.CITY: "Please select a city after selecting a district",
}


def widget_key(level: Level) -> str:
    """selectbox의 session_state 키. 예: Level.STATE → 'location_state'"""
    return f"location_{level.field_name}"


def level_tooltip(level: Level) -> str:
    return _TOOLTIPS[level]


def level_placeholder(level: Level, has_options: bool) -> str:
    """옵션이 없을 때는 위 단계 선택을 유도한다."""
    if has_options:
        return f"Select {level.value.lower()}"
    parents = level.above()
    if not parents:
        return "No countries available"
    return f"Select a {parents[-1].value.lower()} first"


def format_selection(selection: LocationSelection) -> str:
    """제출 확인용 한 줄 요약. 예: 'Country: Brazil · State: SP · ...'"""
    return " · ".join(
        f"{level.value}: {selection.value_of(level) or '-'}" for level in Level.ordered()
    )
