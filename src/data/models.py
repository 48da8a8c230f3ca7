"""데이터 모델 모듈

선택 단계(Level), 제출 스냅샷, 외부 API 응답 형태를 정의한다.
외부 데이터(지역 API 응답)는 이 모듈의 Pydantic 모델로 검증한다.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Level(Enum):
    """4단계 지역 선택 순서. 선언 순서가 곧 의존 방향이다 (위 → 아래)."""

    COUNTRY = "Country"
    STATE = "State"
    DISTRICT = "District"
    CITY = "City"

    @classmethod
    def ordered(cls) -> list[Level]:
        return list(cls)

    @property
    def position(self) -> int:
        return Level.ordered().index(self)

    @property
    def field_name(self) -> str:
        """LocationSelection 필드명 (예: Level.STATE → 'state')."""
        return self.name.lower()

    @property
    def next(self) -> Level | None:
        levels = Level.ordered()
        i = self.position
        return levels[i + 1] if i + 1 < len(levels) else None

    def below(self) -> list[Level]:
        """자신보다 아래(의존하는) 단계 목록."""
        return Level.ordered()[self.position + 1 :]

    def above(self) -> list[Level]:
        """자신보다 위(부모) 단계 목록."""
        return Level.ordered()[: self.position]


class LocationSelection(BaseModel):
    """제출 시점의 4단계 선택값 스냅샷

    빈 문자열은 '선택 안 함'을 뜻한다.
    """

    model_config = {"frozen": True}

    country: str = Field(default="", description="국가")
    state: str = Field(default="", description="주/도")
    district: str = Field(default="", description="구/군")
    city: str = Field(default="", description="시/읍")

    @classmethod
    def from_levels(cls, values: dict[Level, str]) -> LocationSelection:
        return cls(**{level.field_name: values.get(level, "") for level in Level.ordered()})

    def value_of(self, level: Level) -> str:
        return str(getattr(self, level.field_name))

    @property
    def display_name(self) -> str:
        """표시용 지역명 (가장 구체적인 단계가 앞)"""
        parts = [self.value_of(level) for level in reversed(Level.ordered())]
        return ", ".join(p for p in parts if p)


class NamedItem(BaseModel):
    """국가/주 목록 응답의 개별 항목 ({name: ...})."""

    model_config = {"extra": "ignore"}

    name: str


class StatesPayload(BaseModel):
    """주 목록 응답 본문. 국가 정보와 함께 states 배열이 온다."""

    model_config = {"extra": "ignore"}

    name: str = ""
    states: list[NamedItem] = Field(default_factory=list)


class ApiEnvelope(BaseModel):
    """지역 API 공통 응답 래퍼 ({error, msg, data})."""

    model_config = {"extra": "ignore"}

    error: bool = False
    msg: str = ""
    data: Any = None


class SubmissionRecord(BaseModel):
    id: int | None = None
    country: str
    state: str
    district: str
    city: str
    submitted_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_selection(cls, selection: LocationSelection) -> SubmissionRecord:
        return cls(
            country=selection.country,
            state=selection.state,
            district=selection.district,
            city=selection.city,
        )

    @property
    def display_name(self) -> str:
        return LocationSelection(
            country=self.country, state=self.state, district=self.district, city=self.city
        ).display_name
