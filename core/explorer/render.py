"""
core/explorer/render.py - 텍스트 테이블 렌더러

출력 형식:
    HyperSphere :: vm | Mode: RW | Sort: NAME↑ | Marks[1]
    M  >  [NAME↑]  POWER  ...
    *  >  vm-a     on     ...
    Actions: power-on, power-off (run: !<action>)
    Keys: Space mark | J/K or Up/Down row | Shift+Left/Right column | Shift+O sort column

빈 뷰는 헤더 다음에 "No resources found."만 출력합니다.
본문은 최대 viewport_rows행이며, 선택 행이 창 밖으로 나가면 선택 행에서 끝나는 창을 보여줍니다.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from .sorting import direction_glyph
from .types import ResourceKind, ResourceView

DEFAULT_VIEWPORT_ROWS = 10
EMPTY_VIEW_LINE = "No resources found.\n"
KEY_HINT_LINE = "Keys: Space mark | J/K or Up/Down row | Shift+Left/Right column | Shift+O sort column\n"
CELL_SEPARATOR = "  "


def header_line(
    resource: ResourceKind,
    sort_column: str,
    ascending: bool,
    marked: int,
    read_only: bool,
) -> str:
    mode = "RO" if read_only else "RW"
    sort = f"{sort_column}{direction_glyph(ascending)}" if sort_column else "-"
    return f"HyperSphere :: {resource.value} | Mode: {mode} | Sort: {sort} | Marks[{marked}]\n"


def action_line(actions: Sequence[str]) -> str:
    if not actions:
        return "Actions: none\n"
    return f"Actions: {', '.join(actions)} (run: !<action>)\n"


def decorate_columns(columns: Sequence[str], selected_column: int, sort_column: str, ascending: bool) -> list[str]:
    """정렬 컬럼에 방향 표시, 선택 컬럼은 [ ]로 감싸기"""
    decorated: list[str] = []
    for index, column in enumerate(columns):
        label = column
        if sort_column and column == sort_column:
            label += direction_glyph(ascending)
        if index == selected_column:
            label = f"[{label}]"
        decorated.append(label)
    return decorated


def viewport_bounds(total_rows: int, selected_row: int, max_rows: int = DEFAULT_VIEWPORT_ROWS) -> tuple[int, int]:
    """본문 창의 [start, end) 범위"""
    if max_rows <= 0 or total_rows <= max_rows:
        return 0, total_rows
    normalized = min(max(selected_row, 0), total_rows - 1)
    start = max(0, normalized - max_rows + 1)
    return start, start + max_rows


def column_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    widths: list[int] = []
    for row in rows:
        for index, value in enumerate(row):
            if index >= len(widths):
                widths.append(len(value))
            elif len(value) > widths[index]:
                widths[index] = len(value)
    return widths


def format_cells(cells: Sequence[str], widths: Sequence[int]) -> str:
    parts = [value.ljust(widths[index]) if index < len(widths) else value for index, value in enumerate(cells)]
    return CELL_SEPARATOR.join(parts) + "\n"


def render_interactive_view(
    view: ResourceView,
    selected_row: int = 0,
    selected_column: int = 0,
    sort_column: str = "",
    ascending: bool = True,
    marks: Collection[str] = (),
    read_only: bool = False,
    viewport_rows: int = DEFAULT_VIEWPORT_ROWS,
) -> str:
    """정렬/마크/커서 표시가 포함된 테이블 텍스트

    Args:
        view: 표시할 뷰
        selected_row: 커서 행 위치
        selected_column: 선택 컬럼 위치 (M, > 컬럼 제외)
        sort_column: 정렬 컬럼 이름 (없으면 빈 문자열)
        ascending: 정렬 방향
        marks: 마크된 행 식별자
        read_only: 읽기 전용 모드 여부
        viewport_rows: 본문 최대 행 수

    Returns:
        렌더링된 텍스트 (각 줄은 개행으로 끝남)
    """
    lines = [header_line(view.resource, sort_column, ascending, len(marks), read_only)]
    if not view.rows:
        lines.append(EMPTY_VIEW_LINE)
        return "".join(lines)

    header = decorate_columns(["M", ">", *view.columns], selected_column + 2, sort_column, ascending)
    body = [
        ["*" if row.id in marks else " ", ">" if index == selected_row else " ", *row.cells]
        for index, row in enumerate(view.rows)
    ]
    start, end = viewport_bounds(len(body), selected_row, viewport_rows)
    body = body[start:end]
    # 헤더 너비는 장식 전 이름 기준
    widths = column_widths([["M", ">", *view.columns], *body])

    lines.append(format_cells(header, widths))
    lines.extend(format_cells(cells, widths) for cells in body)
    lines.append(action_line(view.actions))
    lines.append(KEY_HINT_LINE)
    return "".join(lines)


def render_resource_view(view: ResourceView) -> str:
    """정렬/마크 없는 정적 테이블"""
    return render_interactive_view(view)
