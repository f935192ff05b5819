"""
core/explorer/command.py - 명령 입력 파서

명령 모드에서 입력한 한 줄을 타입이 지정된 명령으로 변환합니다.
상태가 없는 순수 함수이며, 해석 규칙은 아래 우선순위를 따릅니다.

    " "                 → hotkey SPACE
    공백뿐인 입력        → noop
    :q / :quit          → quit
    :help / :h / ?      → help
    :-                  → last_view
    /<expr>             → filter (해석은 필터 디스패치에 위임)
    :ro / :readonly     → readonly [on|off|toggle]
    :history up|down    → history
    :suggest <prefix>   → suggest
    :ctx [name]         → context
    :<alias> [...]      → view
    !<action ...>       → action (소문자 변환)
    그 외               → hotkey (대문자 변환)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rapidfuzz import process

from core.exceptions import (
    InvalidActionError,
    MissingCommandPrefixError,
    UnknownResourceError,
    UnsupportedHotKeyError,
)

from .types import RESOURCE_ALIASES, ResourceKind

# 별칭 추천 최소 유사도 (%)
ALIAS_SUGGEST_MIN_SCORE = 60
ALIAS_SUGGEST_LIMIT = 3


class CommandKind(str, Enum):
    """입력 한 줄이 유발하는 탐색기 동작"""

    NOOP = "noop"
    QUIT = "quit"
    HELP = "help"
    CONTEXT = "context"
    READ_ONLY = "readonly"
    LAST_VIEW = "last_view"
    HISTORY = "history"
    SUGGEST = "suggest"
    FILTER = "filter"
    VIEW = "view"
    ACTION = "action"
    HOTKEY = "hotkey"


@dataclass(frozen=True)
class ExplorerCommand:
    """파싱된 명령"""

    kind: CommandKind
    value: str = ""


_LITERAL_COMMANDS: dict[str, CommandKind] = {
    ":q": CommandKind.QUIT,
    ":quit": CommandKind.QUIT,
    ":help": CommandKind.HELP,
    ":h": CommandKind.HELP,
    "?": CommandKind.HELP,
    ":-": CommandKind.LAST_VIEW,
}


def parse_explorer_input(line: str) -> ExplorerCommand:
    """한 줄 입력을 명령으로 변환

    Args:
        line: 사용자 입력 원문

    Returns:
        ExplorerCommand

    Raises:
        InvalidActionError: 빈 액션, 잘못된 readonly/history/suggest/ctx 인자
        UnknownResourceError: 알 수 없는 ':' 명령
        UnsupportedHotKeyError: ':ro'로 시작하지만 ro/readonly가 아닌 토큰
    """
    if line == " ":
        return ExplorerCommand(CommandKind.HOTKEY, "SPACE")
    trimmed = line.strip()
    if not trimmed:
        return ExplorerCommand(CommandKind.NOOP)

    literal = _LITERAL_COMMANDS.get(trimmed)
    if literal is not None:
        return ExplorerCommand(literal)

    if trimmed.startswith("/"):
        return ExplorerCommand(CommandKind.FILTER, trimmed[1:].strip())
    if trimmed.startswith(":"):
        return _parse_colon_command(trimmed)
    if trimmed.startswith("!"):
        action = trimmed[1:].strip().lower()
        if not action:
            raise InvalidActionError("empty action")
        return ExplorerCommand(CommandKind.ACTION, action)
    return ExplorerCommand(CommandKind.HOTKEY, normalize_key(trimmed))


def _parse_colon_command(line: str) -> ExplorerCommand:
    if line.startswith(":ro") or line.startswith(":readonly"):
        return _parse_read_only_command(line)
    if line.startswith(":history"):
        return _parse_history_command(line)
    if line.startswith(":suggest "):
        return _parse_suggest_command(line)
    if line.startswith(":ctx"):
        return _parse_context_command(line)
    resource = parse_resource_command(line)
    return ExplorerCommand(CommandKind.VIEW, resource.value)


def _parse_read_only_command(line: str) -> ExplorerCommand:
    fields = line[1:].split()
    if not fields:
        raise InvalidActionError("empty command")
    if fields[0] not in ("ro", "readonly"):
        raise UnsupportedHotKeyError(line)
    if len(fields) == 1:
        return ExplorerCommand(CommandKind.READ_ONLY, "toggle")
    value = fields[1].strip().lower()
    if value not in ("on", "off", "toggle"):
        raise InvalidActionError(f"readonly {value}")
    return ExplorerCommand(CommandKind.READ_ONLY, value)


def _parse_history_command(line: str) -> ExplorerCommand:
    fields = line[1:].split()
    if len(fields) != 2 or fields[0] != "history":
        raise InvalidActionError("invalid history command")
    value = fields[1].strip().lower()
    if value not in ("up", "down"):
        raise InvalidActionError(f"history {value}")
    return ExplorerCommand(CommandKind.HISTORY, value)


def _parse_suggest_command(line: str) -> ExplorerCommand:
    value = line[len(":suggest") :].strip()
    if not value:
        raise InvalidActionError("empty suggest prefix")
    return ExplorerCommand(CommandKind.SUGGEST, value)


def _parse_context_command(line: str) -> ExplorerCommand:
    fields = line[1:].split()
    if not fields or fields[0] != "ctx":
        raise InvalidActionError("invalid context command")
    if len(fields) == 1:
        return ExplorerCommand(CommandKind.CONTEXT, "")
    if len(fields) == 2:
        return ExplorerCommand(CommandKind.CONTEXT, fields[1])
    raise InvalidActionError(f"context {' '.join(fields[1:])}")


def parse_resource_command(command: str) -> ResourceKind:
    """':<alias> [args]' 형태의 뷰 전환 명령을 리소스 종류로 변환

    첫 단어 이후의 인자는 무시합니다.

    Raises:
        MissingCommandPrefixError: ':' 접두사 없음
        UnknownResourceError: 빈 이름 또는 알 수 없는 별칭
    """
    trimmed = command.strip()
    if not trimmed.startswith(":"):
        raise MissingCommandPrefixError(command)
    fields = trimmed[1:].strip().lower().split()
    if not fields:
        raise UnknownResourceError("empty")
    name = fields[0]
    resource = ResourceKind.resolve(name)
    if resource is None:
        raise UnknownResourceError(name, suggest_aliases(name))
    return resource


def suggest_aliases(name: str) -> list[str]:
    """알 수 없는 리소스 이름과 비슷한 별칭 추천

    Args:
        name: 입력된 리소스 이름

    Returns:
        ':' 명령 형태의 추천 별칭 (유사도 내림차순)
    """
    matches = process.extract(
        name,
        list(RESOURCE_ALIASES),
        limit=ALIAS_SUGGEST_LIMIT,
        score_cutoff=ALIAS_SUGGEST_MIN_SCORE,
    )
    return [f":{alias}" for alias, _score, _index in matches]


def normalize_key(key: str) -> str:
    """단축키 정규화 (리터럴 공백 → SPACE, 나머지는 대문자)"""
    if key == " ":
        return "SPACE"
    trimmed = key.strip()
    if not trimmed:
        return ""
    return trimmed.upper()
