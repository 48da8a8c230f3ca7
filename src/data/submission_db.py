from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.exceptions import SubmissionDBError
from src.data.models import SubmissionRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS submissions (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    country      TEXT    NOT NULL,
    state        TEXT    NOT NULL,
    district     TEXT    NOT NULL,
    city         TEXT    NOT NULL,
    submitted_at TEXT    NOT NULL
);
"""


class SubmissionRepository:
    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or settings.submission_db_path
        self._ensure_table()

    def _connect(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_table(self) -> None:
        try:
            conn = self._connect()
            try:
                conn.execute(_CREATE_TABLE_SQL)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.exception("제출 이력 테이블 생성 실패")
            raise SubmissionDBError(f"테이블 생성 실패: {exc}") from exc

    def save(self, record: SubmissionRecord) -> int:
        sql = """
            INSERT INTO submissions (country, state, district, city, submitted_at)
            VALUES (?, ?, ?, ?, ?)
        """
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    sql,
                    (
                        record.country,
                        record.state,
                        record.district,
                        record.city,
                        record.submitted_at.isoformat(),
                    ),
                )
                conn.commit()
                row_id = cursor.lastrowid
                assert row_id is not None
                return row_id
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.exception("제출 이력 저장 실패")
            raise SubmissionDBError(f"이력 저장 실패: {exc}") from exc

    def list_recent(self, limit: int = 20) -> list[SubmissionRecord]:
        sql = "SELECT * FROM submissions ORDER BY submitted_at DESC, id DESC LIMIT ?"
        try:
            conn = self._connect()
            try:
                rows = conn.execute(sql, (limit,)).fetchall()
                return [self._row_to_record(row) for row in rows]
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.exception("제출 이력 목록 조회 실패")
            raise SubmissionDBError(f"이력 조회 실패: {exc}") from exc

    def delete(self, record_id: int) -> bool:
        sql = "DELETE FROM submissions WHERE id = ?"
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(sql, (record_id,))
                conn.commit()
                return cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.exception("제출 이력 삭제 실패")
            raise SubmissionDBError(f"이력 삭제 실패: {exc}") from exc

    def count(self) -> int:
        sql = "SELECT COUNT(*) FROM submissions"
        try:
            conn = self._connect()
            try:
                row = conn.execute(sql).fetchone()
                return int(row[0])
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.exception("제출 이력 건수 조회 실패")
            raise SubmissionDBError(f"이력 건수 조회 실패: {exc}") from exc

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> SubmissionRecord:
        return SubmissionRecord(
            id=row["id"],
            country=row["country"],
            state=row["state"],
            district=row["district"],
            city=row["city"],
            submitted_at=datetime.fromisoformat(row["submitted_at"]),
        )
