"""
tests/core/explorer/test_sorting.py - 정렬 엔진 테스트
"""

import logging

from core.explorer.sorting import SortState, direction_glyph, less_cell, sort_rows
from core.explorer.types import TableRow


class TestLessCell:
    def test_integers_compare_numerically(self):
        assert less_cell("9", "10") is True
        assert less_cell("-5", "+3") is True

    def test_text_compares_case_insensitively(self):
        assert less_cell("Beta", "alpha") is False
        assert less_cell("alpha", "Beta") is True

    def test_mixed_falls_back_to_text(self):
        """한쪽만 정수면 텍스트 비교"""
        assert less_cell("10", "9a") is True

    def test_descending(self):
        assert less_cell("10", "9", ascending=False) is True


class TestSortRows:
    """sort_rows 테스트"""

    def rows(self):
        return [
            TableRow("a", ["a", "10"]),
            TableRow("b", ["b", "9"]),
            TableRow("c", ["c", "10"]),
        ]

    def test_ids_follow_cells(self):
        result = sort_rows(self.rows(), 1)
        assert [row.id for row in result] == ["b", "a", "c"]
        assert result[0].cells == ["b", "9"]

    def test_stable_for_ties(self):
        result = sort_rows(self.rows(), 1, ascending=False)
        assert [row.id for row in result] == ["a", "c", "b"]

    def test_input_not_mutated(self):
        rows = self.rows()
        sort_rows(rows, 1)
        assert [row.id for row in rows] == ["a", "b", "c"]


class TestSortState:
    def test_inactive_by_default(self):
        assert SortState().active is False

    def test_next_direction_toggles_same_column(self):
        state = SortState(column="NAME", ascending=True)
        assert state.next_direction("NAME") is False
        assert state.next_direction("POWER") is True
        assert state.next_direction("POWER", default_ascending=False) is False

    def test_reset(self):
        state = SortState(column="NAME", ascending=False)
        state.reset()
        assert state == SortState()

    def test_glyph(self):
        assert direction_glyph(True) == "↑"
        assert direction_glyph(False) == "↓"


class TestSortLogging:
    def test_sort_logged(self, caplog):
        rows = [TableRow("a", ["a", "10"]), TableRow("b", ["b", "9"])]
        with caplog.at_level(logging.DEBUG, logger="core.explorer.sorting"):
            sort_rows(rows, 1, ascending=False)
        assert "행 정렬: 컬럼 1, 2행, desc" in [r.message for r in caplog.records]
