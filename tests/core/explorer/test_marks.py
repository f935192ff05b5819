"""
tests/core/explorer/test_marks.py - 마크 집합 테스트
"""

import logging

from core.explorer.marks import NO_ANCHOR, MarkSet

IDS = ["a", "b", "c", "d"]


class TestToggle:
    def test_toggle_sets_anchor(self):
        marks = MarkSet()
        marks.toggle(IDS, 1)
        assert "b" in marks
        assert marks.anchor == 1

    def test_toggle_twice_unmarks(self):
        marks = MarkSet()
        marks.toggle(IDS, 1)
        marks.toggle(IDS, 1)
        assert len(marks) == 0

    def test_out_of_range_ignored(self):
        marks = MarkSet()
        marks.toggle(IDS, 9)
        assert len(marks) == 0
        assert marks.anchor == NO_ANCHOR


class TestSpan:
    """범위 마크 테스트"""

    def test_span_from_anchor(self):
        marks = MarkSet()
        marks.toggle(IDS, 3)
        marks.span(IDS, 1)
        assert sorted(marks) == ["b", "c", "d"]

    def test_span_without_anchor_toggles(self):
        marks = MarkSet()
        marks.span(IDS, 2)
        assert sorted(marks) == ["c"]
        assert marks.anchor == 2

    def test_span_on_empty_ids(self):
        marks = MarkSet()
        marks.span([], 0)
        assert len(marks) == 0


class TestResolveTargets:
    def test_marked_rows_in_view_order(self):
        marks = MarkSet()
        marks.toggle(IDS, 3)
        marks.toggle(IDS, 0)
        assert marks.resolve_targets(IDS, 1) == ["a", "d"]

    def test_cursor_row_when_nothing_marked(self):
        assert MarkSet().resolve_targets(IDS, 2) == ["c"]

    def test_empty_view(self):
        assert MarkSet().resolve_targets([], 0) == []

    def test_marks_hidden_by_filter_are_skipped(self):
        """현재 뷰에 없는 마크는 대상에서 제외"""
        marks = MarkSet()
        marks.toggle(IDS, 0)
        assert marks.resolve_targets(["b", "c"], 0) == []

    def test_clear(self):
        marks = MarkSet()
        marks.toggle(IDS, 0)
        marks.clear()
        assert len(marks) == 0
        assert marks.anchor == NO_ANCHOR


class TestMarkLogging:
    def test_span_logged(self, caplog):
        marks = MarkSet()
        marks.toggle(IDS, 0)
        with caplog.at_level(logging.DEBUG, logger="core.explorer.marks"):
            marks.span(IDS, 2)
        assert "범위 마크: 0-2 (총 3개)" in [r.message for r in caplog.records]
