"""
core/explorer/marks.py - 행 식별자 기반 선택(마크) 집합

마크는 행 위치가 아니라 식별자를 가리키므로 정렬/필터 후에도 유지됩니다.
앵커는 마지막으로 토글한 행 위치이며, 범위 마크의 시작점이 됩니다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

NO_ANCHOR = -1


class MarkSet:
    """식별자 마크 집합과 범위 선택 앵커"""

    def __init__(self) -> None:
        self._marks: set[str] = set()
        self.anchor: int = NO_ANCHOR

    def __len__(self) -> int:
        return len(self._marks)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._marks

    def __iter__(self) -> Iterator[str]:
        return iter(self._marks)

    def is_marked(self, row_id: str) -> bool:
        return row_id in self._marks

    def toggle(self, ids: Sequence[str], cursor: int) -> None:
        """커서 행의 마크를 뒤집고 앵커를 커서로 이동 (커서가 범위 밖이면 무시)"""
        if cursor < 0 or cursor >= len(ids):
            return
        row_id = ids[cursor]
        if row_id in self._marks:
            self._marks.discard(row_id)
        else:
            self._marks.add(row_id)
        self.anchor = cursor

    def span(self, ids: Sequence[str], cursor: int) -> None:
        """앵커부터 커서까지 모두 마크

        앵커가 없거나 범위를 벗어나면 toggle과 같이 동작합니다.
        """
        if not ids:
            return
        if self.anchor < 0 or self.anchor >= len(ids):
            self.toggle(ids, cursor)
            return
        start, end = sorted((self.anchor, cursor))
        start = max(start, 0)
        end = min(end, len(ids) - 1)
        self._marks.update(ids[start : end + 1])
        logger.debug("범위 마크: %d-%d (총 %d개)", start, end, len(self._marks))

    def clear(self) -> None:
        self._marks.clear()
        self.anchor = NO_ANCHOR

    def resolve_targets(self, ids: Sequence[str], cursor: int) -> list[str]:
        """액션 대상: 마크된 행(뷰 순서) 또는 커서 행 또는 빈 목록"""
        if self._marks:
            return [row_id for row_id in ids if row_id in self._marks]
        if 0 <= cursor < len(ids):
            return [ids[cursor]]
        return []
