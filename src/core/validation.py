"""필수 입력 검증 규칙.

규칙은 코드가 아니라 데이터(Level → 판정 함수 + 메시지)로 정의한다.
검증 결과는 예외가 아니라 {Level: 메시지} 딕셔너리로 반환된다.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from src.data.models import Level


@dataclass(frozen=True)
class RequiredRule:
    predicate: Callable[[str], bool]
    message: str


def _is_filled(value: str) -> bool:
    return bool(value)


REQUIRED_RULES: dict[Level, RequiredRule] = {
    level: RequiredRule(predicate=_is_filled, message=f"{level.value} is required")
    for level in Level.ordered()
}


def collect_errors(
    selection: Mapping[Level, str],
    rules: Mapping[Level, RequiredRule] = REQUIRED_RULES,
) -> dict[Level, str]:
    """규칙을 통과하지 못한 단계만 {Level: 메시지}로 반환."""
    errors: dict[Level, str] = {}
    for level in Level.ordered():
        rule = rules.get(level)
        if rule is None:
            continue
        if not rule.predicate(selection.get(level, "")):
            errors[level] = rule.message
    return errors
