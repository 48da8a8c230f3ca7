"""4단계 Cascading 지역 선택 상태 머신.

국가 → 주 → 구 → 시 순으로 선택하며, 위 단계 선택이 바뀌면 아래 단계의
선택값/옵션을 즉시 비우고 다음 단계 옵션을 데이터 소스에서 다시 받아온다.

상태는 전부 인스턴스가 소유한다 (모듈 전역 상태 없음).

늦게 도착한 응답 처리:
- 단계별 요청 번호(_request_seq)를 두고, 해당 단계 옵션을 무효화할 때마다 증가시킨다.
- 조회 결과는 요청 당시 번호가 현재 번호와 같을 때만 반영한다.
- 실패도 마찬가지로, 버려진 요청의 실패는 on_fetch_error로 알리지 않는다.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

from src.core.exceptions import FetchError
from src.core.validation import REQUIRED_RULES, RequiredRule, collect_errors
from src.data.models import Level, LocationSelection

if TYPE_CHECKING:
    from collections.abc import Mapping

    from src.data.location_source import LocationDataSource

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[LocationSelection], None]
FetchErrorCallback = Callable[[Level, FetchError], None]

_FETCHING_LEVELS = (Level.COUNTRY, Level.STATE, Level.DISTRICT)


class LocationSelector:
    def __init__(
        self,
        source: LocationDataSource,
        on_submit: SubmitCallback | None = None,
        on_fetch_error: FetchErrorCallback | None = None,
        rules: Mapping[Level, RequiredRule] | None = None,
    ) -> None:
        self._source = source
        self._on_submit = on_submit
        self._on_fetch_error = on_fetch_error
        self._rules = rules if rules is not None else REQUIRED_RULES

        self._selection: dict[Level, str] = {level: "" for level in Level.ordered()}
        self._options: dict[Level, list[str]] = {level: [] for level in Level.ordered()}
        self._errors: dict[Level, str] = {}
        self._request_seq: dict[Level, int] = {level: 0 for level in Level.ordered()}
        self._in_flight = 0
        self._dialog_open = False

    @property
    def selection(self) -> dict[Level, str]:
        return dict(self._selection)

    @property
    def options(self) -> dict[Level, list[str]]:
        return {level: list(values) for level, values in self._options.items()}

    @property
    def errors(self) -> dict[Level, str]:
        return dict(self._errors)

    @property
    def loading(self) -> bool:
        """조회가 하나라도 진행 중이면 True (개수는 노출하지 않는다)."""
        return self._in_flight > 0

    @property
    def dialog_open(self) -> bool:
        return self._dialog_open

    def snapshot(self) -> LocationSelection:
        return LocationSelection.from_levels(self._selection)

    async def initialize(self) -> None:
        """국가 목록을 불러와 첫 단계 옵션을 채운다."""
        self._invalidate([Level.COUNTRY])
        await self._load_options(Level.COUNTRY, self._source.list_countries)

    async def select(self, level: Level, value: str) -> None:
        """UI용 단일 진입점. 시(City)는 조회 없이 select_city로 보낸다."""
        if level is Level.CITY:
            self.select_city(value)
            return
        await self.select_level(level, value)

    async def select_level(self, level: Level, value: str) -> None:
        """국가/주/구 단계 선택.

        await 이전에 아래 단계 선택값과 옵션을 모두 비우므로, 조회 도중
        다른 선택이 들어와도 버려진 선택의 옵션이 화면에 남지 않는다.
        빈 문자열 선택은 '선택 해제'로 보고 조회 없이 아래 단계만 비운다.
        상위 단계가 비어 있는데 값을 고르면 ValueError.
        """
        if level not in _FETCHING_LEVELS:
            raise ValueError(
                f"select_level은 {level.value} 단계를 지원하지 않습니다. select_city를 사용하세요."
            )
        if value:
            self._require_parents(level)

        self._selection[level] = value
        for lower in level.below():
            self._selection[lower] = ""
        self._errors.pop(level, None)
        self._invalidate(level.below())
        logger.debug("%s 선택: %r", level.value, value)

        if not value:
            return

        target = level.next
        assert target is not None
        await self._load_options(target, self._fetcher_for(level, value))

    def select_city(self, value: str) -> None:
        """말단 단계. 조회하지 않고 옵션도 건드리지 않는다."""
        if value:
            self._require_parents(Level.CITY)
        self._selection[Level.CITY] = value
        self._errors.pop(Level.CITY, None)
        logger.debug("%s 선택: %r", Level.CITY.value, value)

    def validate(self) -> bool:
        self._errors = collect_errors(self._selection, self._rules)
        return not self._errors

    async def submit(self) -> bool:
        """검증 통과 시 스냅샷을 넘기고 상태를 초기화한 뒤 국가 목록을 다시 불러온다.

        검증 실패 시 오류 메시지 외에는 아무 상태도 바꾸지 않고 False를 반환한다.
        """
        if not self.validate():
            logger.debug("제출 거부 — 필수 항목 누락: %s", [lv.value for lv in self._errors])
            return False

        accepted = self.snapshot()
        self._dialog_open = True
        self.reset()
        logger.info("제출 완료: %s", accepted.display_name)

        try:
            if self._on_submit is not None:
                self._on_submit(accepted)
        finally:
            await self.initialize()
        return True

    def close_dialog(self) -> None:
        self._dialog_open = False

    def reset(self) -> None:
        """선택값/옵션/오류를 초기 상태로. 진행 중인 조회 결과는 모두 버려진다."""
        for level in Level.ordered():
            self._selection[level] = ""
        self._errors = {}
        self._invalidate(Level.ordered())

    def _invalidate(self, levels: Sequence[Level]) -> None:
        for level in levels:
            self._request_seq[level] += 1
            self._options[level] = []

    def _require_parents(self, level: Level) -> None:
        missing = [parent.value for parent in level.above() if not self._selection[parent]]
        if missing:
            raise ValueError(
                f"{level.value} 선택 전에 상위 단계를 먼저 선택하세요: {', '.join(missing)}"
            )

    def _fetcher_for(self, level: Level, value: str) -> Callable[[], Awaitable[Sequence[str]]]:
        country = self._selection[Level.COUNTRY]
        state = self._selection[Level.STATE]
        if level is Level.COUNTRY:
            return lambda: self._source.list_states(value)
        if level is Level.STATE:
            return lambda: self._source.list_districts(country, value)
        return lambda: self._source.list_cities(country, state, value)

    async def _load_options(
        self,
        target: Level,
        fetch: Callable[[], Awaitable[Sequence[str]]],
    ) -> None:
        seq = self._request_seq[target]
        self._in_flight += 1
        try:
            try:
                result = list(await fetch())
            except Exception as exc:
                if self._request_seq[target] != seq:
                    logger.debug("%s 옵션 조회 실패 폐기 (선택이 바뀜): %s", target.value, exc)
                    return
                if isinstance(exc, FetchError):
                    error = exc
                else:
                    logger.exception("%s 옵션 조회 중 예기치 못한 오류", target.value)
                    error = FetchError(f"{target.value} 옵션 조회 실패: {exc}", level=target)
                self._report_fetch_error(target, error)
                return

            if self._request_seq[target] != seq:
                logger.debug("%s 옵션 응답 폐기 (선택이 바뀜)", target.value)
                return
            self._options[target] = result
            logger.debug("%s 옵션 %d건 반영", target.value, len(result))
        finally:
            self._in_flight -= 1

    def _report_fetch_error(self, target: Level, exc: FetchError) -> None:
        if exc.level is None:
            exc.level = target
        logger.warning("%s 옵션 조회 실패: %s", target.value, exc.message)
        if self._on_fetch_error is None:
            return
        try:
            self._on_fetch_error(target, exc)
        except Exception:
            logger.warning("on_fetch_error 콜백 실패", exc_info=True)
