"""
core/explorer/sorting.py - 정렬 엔진

한 컬럼 기준의 안정 정렬입니다. 양쪽 셀이 모두 정수면 숫자로,
아니면 소문자 텍스트로 비교합니다.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key

from .types import TableRow

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

ASCENDING_GLYPH = "↑"
DESCENDING_GLYPH = "↓"


def _as_int(value: str) -> int | None:
    if _INTEGER_PATTERN.match(value):
        return int(value)
    return None


def less_cell(left: str, right: str, ascending: bool = True) -> bool:
    """정렬 방향을 반영한 셀 비교 (left가 앞에 와야 하면 True)"""
    left_int = _as_int(left)
    right_int = _as_int(right)
    if left_int is not None and right_int is not None:
        return left_int < right_int if ascending else left_int > right_int
    left_lower = left.lower()
    right_lower = right.lower()
    return left_lower < right_lower if ascending else left_lower > right_lower


def sort_rows(rows: list[TableRow], column_index: int, ascending: bool = True) -> list[TableRow]:
    """(식별자, 셀) 쌍을 함께 재정렬한 새 목록 (안정 정렬)

    Args:
        rows: 정렬할 행
        column_index: 기준 컬럼 위치
        ascending: 오름차순 여부

    Returns:
        정렬된 새 행 목록
    """

    def compare(left: TableRow, right: TableRow) -> int:
        a = left.cells[column_index]
        b = right.cells[column_index]
        if less_cell(a, b, ascending):
            return -1
        if less_cell(b, a, ascending):
            return 1
        return 0

    logger.debug("행 정렬: 컬럼 %d, %d행, %s", column_index, len(rows), "asc" if ascending else "desc")
    return sorted(rows, key=cmp_to_key(compare))


def direction_glyph(ascending: bool) -> str:
    return ASCENDING_GLYPH if ascending else DESCENDING_GLYPH


@dataclass
class SortState:
    """현재 정렬 컬럼과 방향 (column이 빈 문자열이면 정렬 안 됨)"""

    column: str = ""
    ascending: bool = True

    @property
    def active(self) -> bool:
        return bool(self.column)

    def next_direction(self, column: str, default_ascending: bool = True) -> bool:
        """같은 컬럼을 다시 정렬하면 방향 반전, 아니면 기본 방향"""
        if self.column == column:
            return not self.ascending
        return default_ascending

    def reset(self) -> None:
        self.column = ""
        self.ascending = True
