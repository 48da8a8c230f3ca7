"""커스텀 예외 클래스 모듈

앱에서 발생하는 모든 예외의 계층 구조를 정의한다.
필드 검증 오류는 예외가 아니라 데이터(ValidationErrors)로 다루므로 여기에 없다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.data.models import Level


class LocationFormError(Exception):
    """앱 전체 기본 예외

    모든 커스텀 예외의 부모 클래스.
    """

    def __init__(self, message: str = "알 수 없는 오류가 발생했습니다.") -> None:
        self.message = message
        super().__init__(self.message)


class FetchError(LocationFormError):
    """지역 옵션 조회 실패

    네트워크 오류, HTTP 오류, 응답 파싱 실패 등 데이터 소스 쪽 실패 전부.
    """

    def __init__(
        self,
        message: str = "지역 목록 조회 중 오류가 발생했습니다.",
        level: Level | None = None,
        status_code: int | None = None,
    ) -> None:
        self.level = level
        self.status_code = status_code
        super().__init__(message)


class LocationDataError(LocationFormError):
    """지역 테이블 파일 관련 에러

    CSV/Excel/JSON 파싱 실패, 필수 컬럼 누락 등.
    """

    def __init__(
        self,
        message: str = "지역 데이터 로드 중 오류가 발생했습니다.",
    ) -> None:
        super().__init__(message)


class SubmissionDBError(LocationFormError):
    def __init__(
        self,
        message: str = "제출 이력 DB 처리 중 오류가 발생했습니다.",
    ) -> None:
        super().__init__(message)
