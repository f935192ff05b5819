"""
core/explorer/filters.py - 필터 엔진

항상 필터되지 않은 기준 뷰를 입력으로 받아 새 뷰를 돌려주는 순수 함수들입니다.

필터 종류:
    - 부분 문자열: 대소문자 무시, 아무 셀이나 포함하면 통과
    - 정규식 / 역정규식: 한 번 컴파일, 역정규식은 어떤 셀과도 맞지 않는 행만 유지
    - 태그: "k=v,k2=v2" 모두가 TAGS 셀 토큰에 있어야 통과
    - 퍼지: 행별 최고 점수로 내림차순 안정 정렬

/ 입력 해석 (parse_filter_expression):
    ""        → 필터 해제
    "-f q"    → 퍼지
    "-t k=v"  → 태그
    "!pat"    → 역정규식
    그 외     → 정규식
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from core.exceptions import FilterCompileError, InvalidActionError

from .types import ResourceView, TableRow

logger = logging.getLogger(__name__)

TAGS_COLUMN = "TAGS"

# 퍼지 점수 상수
FUZZY_SUBSTRING_BASE = 1000
FUZZY_INDEX_PENALTY = 10
FUZZY_SUBSEQUENCE_STEP = 5


class FilterMode(str, Enum):
    """활성 필터 종류"""

    NONE = "none"
    SUBSTRING = "substring"
    REGEX = "regex"
    INVERSE_REGEX = "inverse_regex"
    TAGS = "tags"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class FilterExpression:
    """'/' 뒤 입력을 해석한 결과"""

    mode: FilterMode
    argument: str = ""


def parse_filter_expression(expression: str) -> FilterExpression:
    """'/' 뒤 입력을 필터 종류와 인자로 분리"""
    value = expression.strip()
    if not value:
        return FilterExpression(FilterMode.NONE)
    if value.startswith("-f"):
        return FilterExpression(FilterMode.FUZZY, value[2:].strip())
    if value.startswith("-t"):
        return FilterExpression(FilterMode.TAGS, value[2:].strip())
    if value.startswith("!"):
        return FilterExpression(FilterMode.INVERSE_REGEX, value[1:].strip())
    return FilterExpression(FilterMode.REGEX, value)


# =============================================================================
# 부분 문자열 / 정규식
# =============================================================================


def filter_view(view: ResourceView, needle: str) -> ResourceView:
    """부분 문자열 필터 (needle은 이미 소문자/공백 제거된 값)"""
    rows = [row.copy() for row in view.rows if any(needle in cell.lower() for cell in row.cells)]
    return view.with_rows(rows)


def compile_filter_pattern(pattern: str) -> re.Pattern[str]:
    """정규식 필터 컴파일

    Raises:
        FilterCompileError: 잘못된 정규식
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug("정규식 컴파일 실패: %r (%s)", pattern, e)
        raise FilterCompileError(pattern, e) from e


def filter_view_regex(view: ResourceView, pattern: re.Pattern[str], inverse: bool = False) -> ResourceView:
    """정규식 필터 (inverse=True면 어떤 셀과도 맞지 않는 행만 유지)"""
    rows = []
    for row in view.rows:
        matched = any(pattern.search(cell) for cell in row.cells)
        if matched != inverse:
            rows.append(row.copy())
    return view.with_rows(rows)


# =============================================================================
# 태그
# =============================================================================


def parse_tag_filter_criteria(expression: str) -> list[str]:
    """'k=v,k2=v2' 태그 조건을 소문자 'k=v' 목록으로 변환

    Raises:
        InvalidActionError: 빈 조건 또는 잘못된 쌍
    """
    trimmed = expression.strip()
    if not trimmed:
        raise InvalidActionError("empty tag filter")
    criteria: list[str] = []
    for part in trimmed.split(","):
        key, sep, value = part.strip().lower().partition("=")
        if not sep or not key.strip() or not value.strip():
            raise InvalidActionError(f"invalid tag filter {part}")
        criteria.append(f"{key.strip()}={value.strip()}")
    return criteria


def row_matches_tags(cells: list[str], tag_index: int, criteria: list[str]) -> bool:
    if tag_index < 0 or tag_index >= len(cells):
        return False
    available = {token.strip() for token in cells[tag_index].lower().split(",") if token.strip()}
    return all(expected in available for expected in criteria)


def filter_view_tags(view: ResourceView, criteria: list[str]) -> ResourceView:
    """태그 필터 (TAGS 컬럼이 없으면 빈 뷰)"""
    tag_index = view.column_index(TAGS_COLUMN)
    if tag_index < 0:
        logger.debug("%s 뷰에 TAGS 컬럼 없음", view.resource.value)
        return view.with_rows([])
    rows = [row.copy() for row in view.rows if row_matches_tags(row.cells, tag_index, criteria)]
    return view.with_rows(rows)


# =============================================================================
# 퍼지
# =============================================================================


def fuzzy_score(value: str, query: str) -> int | None:
    """셀 하나의 퍼지 점수

    부분 문자열이면 1000 - 10*위치 + len(needle),
    순서대로 나타나는 부분 수열이면 글자당 5점, 아니면 None.
    """
    candidate = value.lower()
    needle = query.strip().lower()
    if not needle:
        return None
    index = candidate.find(needle)
    if index >= 0:
        return FUZZY_SUBSTRING_BASE - index * FUZZY_INDEX_PENALTY + len(needle)

    position = 0
    score = 0
    for char in needle:
        found = candidate.find(char, position)
        if found < 0:
            return None
        score += FUZZY_SUBSEQUENCE_STEP
        position = found + 1
    return score


def row_fuzzy_score(cells: list[str], query: str) -> int | None:
    """행의 최고 셀 점수 (맞는 셀이 없으면 None)"""
    scores = [score for score in (fuzzy_score(cell, query) for cell in cells) if score is not None]
    if not scores:
        return None
    return max(scores)


def filter_view_fuzzy(view: ResourceView, query: str) -> ResourceView:
    """퍼지 필터: 맞지 않는 행 제외 후 점수 내림차순 안정 정렬"""
    scored: list[tuple[int, TableRow]] = []
    for row in view.rows:
        score = row_fuzzy_score(row.cells, query)
        if score is not None:
            scored.append((score, row.copy()))
    scored.sort(key=lambda item: item[0], reverse=True)
    logger.debug("퍼지 필터 %r: %d/%d행", query, len(scored), len(view.rows))
    return view.with_rows([row for _score, row in scored])
