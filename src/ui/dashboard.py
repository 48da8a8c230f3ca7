"""제출 이력 패널 — 최근 제출된 지역 목록."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd
import streamlit as st

from src.core.exceptions import SubmissionDBError
from src.data.submission_db import SubmissionRepository

if TYPE_CHECKING:
    from src.data.models import SubmissionRecord


def submissions_to_dataframe(records: list[SubmissionRecord]) -> pd.DataFrame:
    """SubmissionRecord 리스트를 표시용 DataFrame으로 변환."""
    rows = [
        {
            "제출 시각": r.submitted_at.strftime("%Y-%m-%d %H:%M"),
            "Country": r.country,
            "State": r.state,
            "District": r.district,
            "City": r.city,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["제출 시각", "Country", "State", "District", "City"])


def render_submission_history(limit: int = 20) -> None:
    st.subheader("📜 제출 이력")

    try:
        repo = SubmissionRepository()
        rows = repo.list_recent(limit=limit)
    except SubmissionDBError:
        st.info("제출 이력을 불러올 수 없습니다.")
        return

    if not rows:
        st.info("아직 제출 이력이 없습니다.")
        return

    st.dataframe(submissions_to_dataframe(rows), use_container_width=True, hide_index=True)
