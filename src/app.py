"""지역 선택 폼 — Streamlit 메인 앱.

LOCATION_API_BASE_URL이 설정되어 있으면 HTTP API로, 없으면 내장 지역 테이블로
국가/주/구/시 옵션을 조회한다.
"""

from __future__ import annotations

import logging

import streamlit as st

from src.core.config import settings
from src.core.exceptions import LocationDataError, SubmissionDBError
from src.core.selector import LocationSelector
from src.data.location_api import HttpLocationDataSource
from src.data.location_source import FrameLocationDataSource, LocationDataSource
from src.data.models import LocationSelection, SubmissionRecord
from src.data.submission_db import SubmissionRepository
from src.ui.dashboard import render_submission_history
from src.ui.location_form import build_selector, get_selector, render_location_form
from src.utils.cache import CachedLocationDataSource

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_data_source() -> LocationDataSource:
    source: LocationDataSource
    if settings.location_api_base_url:
        source = HttpLocationDataSource()
    else:
        source = FrameLocationDataSource.from_file(settings.location_data_path)

    if settings.options_cache_ttl_seconds > 0:
        return CachedLocationDataSource(source, ttl_seconds=settings.options_cache_ttl_seconds)
    return source


@st.cache_resource(show_spinner="지역 데이터 로딩 중...")
def get_shared_data_source() -> LocationDataSource:
    """프로세스당 한 번만 데이터 소스를 만들어 모든 세션이 테이블과 옵션 캐시를 공유한다."""
    source = build_data_source()
    logger.info("지역 데이터 소스 생성: %s", type(source).__name__)
    return source


def save_submission(selection: LocationSelection) -> None:
    """제출된 선택값을 이력 DB에 저장. 저장 실패가 폼 동작을 막지는 않는다."""
    logger.info("제출 수신: %s", selection.model_dump())
    try:
        SubmissionRepository().save(SubmissionRecord.from_selection(selection))
    except SubmissionDBError:
        logger.warning("제출 이력 저장 실패", exc_info=True)


def _make_selector() -> LocationSelector:
    return build_selector(get_shared_data_source(), on_accepted=save_submission)


def main() -> None:
    st.set_page_config(
        page_title="📍 Location Form",
        page_icon="📍",
        layout="centered",
    )

    st.title("📍 Location Form")
    st.caption("국가 → 주 → 구 → 시 순서로 선택하세요.")

    try:
        selector = get_selector(_make_selector)
    except LocationDataError as exc:
        st.error(f"지역 데이터 오류: {exc.message}")
        return

    render_location_form(selector)

    st.divider()
    render_submission_history(limit=settings.submission_history_limit)


if __name__ == "__main__":
    main()
