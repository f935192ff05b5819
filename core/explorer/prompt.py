"""
core/explorer/prompt.py - 명령 프롬프트 기록과 추천

제한된 크기의 명령 기록(위/아래 탐색)과 접두사 기반 추천을 제공합니다.
"""

from __future__ import annotations

from .types import ResourceView, resource_command_aliases

DEFAULT_HISTORY_MAX = 200

CONTROL_COMMANDS: tuple[str, ...] = (
    ":help",
    ":q",
    ":readonly",
    ":ro",
    ":history up",
    ":history down",
    ":ctx",
)


class PromptState:
    """명령 기록과 추천 상태

    Args:
        max_size: 기록 최대 개수 (1 미만이면 기본값 200)
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_MAX):
        if max_size < 1:
            max_size = DEFAULT_HISTORY_MAX
        self.max_size = max_size
        self._history: list[str] = []
        self._cursor = 0

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def record(self, line: str) -> None:
        """공백 제거 후 기록 (빈 줄 무시, 가장 오래된 항목부터 버림)"""
        trimmed = line.strip()
        if not trimmed:
            return
        self._history.append(trimmed)
        if len(self._history) > self.max_size:
            self._history = self._history[-self.max_size :]
        self._cursor = len(self._history)

    def previous(self) -> str | None:
        """이전 기록 (처음에서 멈춤, 기록 없으면 None)"""
        if not self._history:
            return None
        if self._cursor > 0:
            self._cursor -= 1
        return self._history[self._cursor]

    def next(self) -> str | None:
        """다음 기록 (마지막에서 멈춤, 기록 없으면 None)"""
        if not self._history:
            return None
        if self._cursor >= len(self._history):
            self._cursor = len(self._history) - 1
            return self._history[self._cursor]
        if self._cursor < len(self._history) - 1:
            self._cursor += 1
        return self._history[self._cursor]

    def suggest(self, prefix: str, view: ResourceView) -> list[str]:
        """접두사로 시작하는 명령 추천 (대소문자 무시, 중복 제거, 정렬)

        후보: ':alias' 명령, 제어 명령, 현재 뷰의 '!action', 정렬 단축키
        """
        trimmed = prefix.strip()
        if not trimmed:
            return []
        candidates = resource_command_aliases() + list(CONTROL_COMMANDS)
        candidates += [f"!{action}" for action in view.actions]
        candidates += sorted(view.sort_hotkeys)
        prefix_lower = trimmed.lower()
        return sorted({candidate for candidate in candidates if candidate.lower().startswith(prefix_lower)})
