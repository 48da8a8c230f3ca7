from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from src.data.models import LocationSelection, SubmissionRecord
from src.data.submission_db import SubmissionRepository

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def tmp_repo(tmp_path: Path) -> SubmissionRepository:
    return SubmissionRepository(db_path=tmp_path / "test_submissions.db")


def _make_record(
    country: str = "Brazil",
    state: str = "SP",
    district: str = "Centro",
    city: str = "Sao Paulo",
    submitted_at: datetime | None = None,
) -> SubmissionRecord:
    kwargs: dict[str, str | datetime] = {
        "country": country,
        "state": state,
        "district": district,
        "city": city,
    }
    if submitted_at is not None:
        kwargs["submitted_at"] = submitted_at
    return SubmissionRecord.model_validate(kwargs)


class TestSave:
    def test_save_returns_positive_id(self, tmp_repo: SubmissionRepository) -> None:
        row_id = tmp_repo.save(_make_record())
        assert row_id >= 1

    def test_save_increments_id(self, tmp_repo: SubmissionRepository) -> None:
        id1 = tmp_repo.save(_make_record())
        id2 = tmp_repo.save(_make_record(country="India"))
        assert id2 > id1

    def test_save_persists_all_fields(self, tmp_repo: SubmissionRepository) -> None:
        ts = datetime(2026, 1, 15, 9, 30, 0)
        tmp_repo.save(_make_record(submitted_at=ts))

        rows = tmp_repo.list_recent(limit=1)
        assert len(rows) == 1
        saved = rows[0]
        assert saved.country == "Brazil"
        assert saved.state == "SP"
        assert saved.district == "Centro"
        assert saved.city == "Sao Paulo"
        assert saved.submitted_at == ts


class TestListRecent:
    def test_empty_db_returns_empty_list(self, tmp_repo: SubmissionRepository) -> None:
        assert tmp_repo.list_recent() == []

    def test_returns_newest_first(self, tmp_repo: SubmissionRepository) -> None:
        tmp_repo.save(_make_record(submitted_at=datetime(2026, 1, 1)))
        tmp_repo.save(_make_record(submitted_at=datetime(2026, 1, 3)))
        tmp_repo.save(_make_record(submitted_at=datetime(2026, 1, 2)))

        rows = tmp_repo.list_recent()
        timestamps = [r.submitted_at for r in rows]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_limit_caps_results(self, tmp_repo: SubmissionRepository) -> None:
        for i in range(5):
            tmp_repo.save(_make_record(city=f"City {i}"))

        assert len(tmp_repo.list_recent(limit=3)) == 3

    def test_default_limit_is_20(self, tmp_repo: SubmissionRepository) -> None:
        for i in range(25):
            tmp_repo.save(_make_record(city=f"City {i}"))

        assert len(tmp_repo.list_recent()) == 20


class TestDelete:
    def test_delete_existing_returns_true(self, tmp_repo: SubmissionRepository) -> None:
        row_id = tmp_repo.save(_make_record())
        assert tmp_repo.delete(row_id) is True

    def test_delete_nonexistent_returns_false(self, tmp_repo: SubmissionRepository) -> None:
        assert tmp_repo.delete(9999) is False

    def test_delete_only_target_row(self, tmp_repo: SubmissionRepository) -> None:
        id1 = tmp_repo.save(_make_record(country="Brazil"))
        tmp_repo.save(_make_record(country="India"))
        tmp_repo.delete(id1)

        remaining = tmp_repo.list_recent()
        assert len(remaining) == 1
        assert remaining[0].country == "India"


class TestCount:
    def test_empty_db_returns_zero(self, tmp_repo: SubmissionRepository) -> None:
        assert tmp_repo.count() == 0

    def test_count_after_delete(self, tmp_repo: SubmissionRepository) -> None:
        row_id = tmp_repo.save(_make_record())
        tmp_repo.save(_make_record())
        tmp_repo.delete(row_id)
        assert tmp_repo.count() == 1


class TestTableCreation:
    def test_auto_creates_parent_dirs(self, tmp_path: Path) -> None:
        deep_path = tmp_path / "a" / "b" / "c" / "submissions.db"
        repo = SubmissionRepository(db_path=deep_path)
        repo.save(_make_record())
        assert deep_path.exists()

    def test_reuses_existing_table(self, tmp_path: Path) -> None:
        db_path = tmp_path / "reuse.db"
        SubmissionRepository(db_path=db_path).save(_make_record())

        assert SubmissionRepository(db_path=db_path).count() == 1


class TestIso8601Timestamps:
    def test_stored_as_iso_string(self, tmp_path: Path) -> None:
        import sqlite3

        db_path = tmp_path / "ts.db"
        repo = SubmissionRepository(db_path=db_path)
        repo.save(_make_record(submitted_at=datetime(2026, 2, 5, 14, 30, 0)))

        conn = sqlite3.connect(str(db_path))
        raw = conn.execute("SELECT submitted_at FROM submissions").fetchone()[0]
        conn.close()
        assert raw == "2026-02-05T14:30:00"


class TestSubmissionRecordModel:
    def test_from_selection(self, sample_selection: LocationSelection) -> None:
        record = SubmissionRecord.from_selection(sample_selection)
        assert record.id is None
        assert record.country == "Brazil"
        assert record.city == "Sao Paulo"
        assert isinstance(record.submitted_at, datetime)

    def test_display_name(self) -> None:
        assert _make_record().display_name == "Sao Paulo, Centro, SP, Brazil"
