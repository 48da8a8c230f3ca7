"""지역 선택 폼 — 4단계 Cascading 드롭다운 + 제출 확인 다이얼로그.

상태는 전부 LocationSelector가 갖고, 이 모듈은 그 상태를 위젯에 그리기만 한다.
Streamlit 콜백은 동기 함수이므로 전이는 asyncio.run으로 실행한다.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

import streamlit as st

from src.core.selector import LocationSelector
from src.data.models import Level, LocationSelection
from src.ui.components import format_selection, level_placeholder, level_tooltip, widget_key

if TYPE_CHECKING:
    from src.core.exceptions import FetchError
    from src.data.location_source import LocationDataSource

_SELECTOR_KEY = "location_selector"
_ACCEPTED_KEY = "location_last_accepted"


def build_selector(
    source: LocationDataSource,
    on_accepted: Callable[[LocationSelection], None] | None = None,
) -> LocationSelector:
    def _remember(selection: LocationSelection) -> None:
        st.session_state[_ACCEPTED_KEY] = selection
        if on_accepted is not None:
            on_accepted(selection)

    def _on_fetch_error(level: Level, exc: FetchError) -> None:
        st.toast(f"{level.value} 목록을 불러오지 못했습니다: {exc.message}", icon="⚠️")

    return LocationSelector(source, on_submit=_remember, on_fetch_error=_on_fetch_error)


def get_selector(factory: Callable[[], LocationSelector]) -> LocationSelector:
    """세션당 하나의 LocationSelector를 만들고 국가 목록을 미리 불러온다."""
    selector = st.session_state.get(_SELECTOR_KEY)
    if isinstance(selector, LocationSelector):
        return selector

    selector = factory()
    with st.spinner("국가 목록 로딩 중..."):
        asyncio.run(selector.initialize())
    st.session_state[_SELECTOR_KEY] = selector
    _sync_widgets(selector)
    return selector


def _sync_widgets(selector: LocationSelector) -> None:
    """선택 상태를 위젯 값으로 되돌려 쓴다 (아래 단계 초기화 반영)."""
    selection = selector.selection
    options = selector.options
    for level in Level.ordered():
        value = selection[level]
        st.session_state[widget_key(level)] = value if value in options[level] else None


def _on_level_change(selector: LocationSelector, level: Level) -> None:
    # 다이얼로그를 X로 닫고 폼을 다시 만지면 닫힌 것으로 본다
    selector.close_dialog()
    value = st.session_state.get(widget_key(level)) or ""
    target = level.next
    label = f"{target.value} 목록 로딩 중..." if target else "선택 반영 중..."
    with st.spinner(label):
        asyncio.run(selector.select(level, value))
    _sync_widgets(selector)


def _on_submit(selector: LocationSelector) -> None:
    with st.spinner("제출 중..."):
        asyncio.run(selector.submit())
    _sync_widgets(selector)


@st.dialog("Form submitted successfully!")
def _show_submitted_dialog(selector: LocationSelector, selection: LocationSelection) -> None:
    st.write(format_selection(selection))
    if st.button("Close", use_container_width=True, on_click=selector.close_dialog):
        st.rerun()


def render_location_form(selector: LocationSelector) -> None:
    """4단계 드롭다운, 필드 오류, 제출 버튼, 확인 다이얼로그를 렌더링."""
    options = selector.options
    errors = selector.errors
    for level in Level.ordered():
        level_options = options[level]
        st.selectbox(
            level.value,
            options=level_options,
            index=None,
            key=widget_key(level),
            placeholder=level_placeholder(level, bool(level_options)),
            help=level_tooltip(level),
            on_change=_on_level_change,
            args=(selector, level),
            disabled=not level_options,
        )
        if level in errors:
            st.error(errors[level])

    st.button(
        "Submit",
        type="primary",
        use_container_width=True,
        on_click=_on_submit,
        args=(selector,),
    )

    if selector.dialog_open:
        accepted = st.session_state.get(_ACCEPTED_KEY)
        if isinstance(accepted, LocationSelection):
            _show_submitted_dialog(selector, accepted)
        else:
            selector.close_dialog()
