"""
tests/core/explorer/test_render.py - 텍스트 렌더러 테스트
"""

import pytest

from core.explorer.render import (
    EMPTY_VIEW_LINE,
    KEY_HINT_LINE,
    action_line,
    header_line,
    render_interactive_view,
    viewport_bounds,
)
from core.explorer.types import ResourceKind, ResourceView, TableRow


@pytest.fixture
def small_view():
    return ResourceView(
        resource=ResourceKind.HOST,
        columns=["NAME", "STATE"],
        rows=[TableRow("a", ["a", "on"]), TableRow("bb", ["bb", "off"])],
        actions=["reboot"],
    )


class TestLines:
    def test_header(self):
        assert header_line(ResourceKind.VM, "", True, 0, False) == "HyperSphere :: vm | Mode: RW | Sort: - | Marks[0]\n"
        assert header_line(ResourceKind.LUN, "NAME", False, 2, True) == (
            "HyperSphere :: lun | Mode: RO | Sort: NAME↓ | Marks[2]\n"
        )

    def test_action_line(self):
        assert action_line(["a", "b"]) == "Actions: a, b (run: !<action>)\n"
        assert action_line([]) == "Actions: none\n"


class TestRenderInteractiveView:
    """테이블 렌더링 테스트"""

    def test_layout(self, small_view):
        lines = render_interactive_view(small_view).split("\n")
        assert lines[0] == "HyperSphere :: host | Mode: RW | Sort: - | Marks[0]"
        assert lines[1] == "M  >  [NAME]  STATE"
        assert lines[2].rstrip() == "   >  a     on"
        assert lines[3].rstrip() == "      bb    off"
        assert lines[4] == "Actions: reboot (run: !<action>)"
        assert lines[5] + "\n" == KEY_HINT_LINE
        assert lines[6] == ""

    def test_marks_sort_and_selection(self, small_view):
        text = render_interactive_view(
            small_view,
            selected_row=1,
            selected_column=1,
            sort_column="STATE",
            ascending=True,
            marks={"a"},
        )
        lines = text.split("\n")
        assert "Sort: STATE↑ | Marks[1]" in lines[0]
        assert lines[1].rstrip() == "M  >  NAME  [STATE↑]"
        assert lines[2].startswith("*     a")
        assert lines[3].startswith("   >  bb")

    def test_every_line_ends_with_newline(self, small_view):
        assert render_interactive_view(small_view).endswith("\n")

    def test_empty_view(self):
        text = render_interactive_view(ResourceView(resource=ResourceKind.TAG, columns=["TAG"]))
        assert text == "HyperSphere :: tag | Mode: RW | Sort: - | Marks[0]\n" + EMPTY_VIEW_LINE

    def test_viewport_limits_body(self):
        rows = [TableRow(f"r{i:02d}", [f"r{i:02d}"]) for i in range(25)]
        view = ResourceView(resource=ResourceKind.VM, columns=["NAME"], rows=rows)
        lines = render_interactive_view(view, selected_row=15, viewport_rows=10).split("\n")
        body = lines[2:12]
        assert body[0].rstrip().endswith("r06")
        assert body[-1].startswith("   >  r15")
        assert lines[12].startswith("Actions:")


class TestViewportBounds:
    @pytest.mark.parametrize(
        "total, selected, expected",
        [
            (5, 3, (0, 5)),
            (25, 0, (0, 10)),
            (25, 15, (6, 16)),
            (25, 30, (15, 25)),
        ],
    )
    def test_bounds(self, total, selected, expected):
        assert viewport_bounds(total, selected, 10) == expected

    def test_non_positive_max_shows_all(self):
        assert viewport_bounds(25, 3, 0) == (0, 25)
