"""
cli/runner.py - 탐색기 명령 루프

표준 입력의 한 줄씩을 세션 명령으로 처리하고 상태 라인을 만듭니다.
어떤 HSError도 루프를 끝내지 않으며, 상태 라인으로 변환됩니다.

상태 라인:
    command error: <메시지>
    action_error code=<코드> message="<메시지>" entity="<행>" retryable=<true|false>
    mode: read-only | mode: read-write
    history: <항목> | history: <none>
    suggestions: a, b | suggestions: <none>
    contexts: a, b | active: x
    context: x
    switched to last view
    filter: <값>
    view: <별칭>
    key: <키>
    vmware-api action=<액션> resource=<종류> targets=<id,...>
    bye

Usage:
    from cli.runner import ExplorerRunner, CliActionExecutor

    runner = ExplorerRunner(session, PromptState(), ContextManager(), CliActionExecutor())
    status, keep_running = runner.handle_line(":host")
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Sequence

from cli.i18n import t
from core.exceptions import ConfirmationRequiredError, HSError, error_code, format_error_for_user
from core.explorer.command import CommandKind, ExplorerCommand, parse_explorer_input
from core.explorer.context import ContextManager
from core.explorer.prompt import PromptState
from core.explorer.session import Session
from core.explorer.types import ResourceKind

logger = logging.getLogger(__name__)

# 확인 콜백: 보류된 파괴적 액션을 실행할지 결정
ConfirmCallback = Callable[[ConfirmationRequiredError], bool]

NO_ENTITY = "-"
DEFAULT_ACTION_STATUS = "action executed"

HELP_KEYS = (
    "explorer.ready",
    "explorer.help_views",
    "explorer.help_navigation",
    "explorer.help_aliases",
    "explorer.help_filter",
    "explorer.help_modes",
    "explorer.help_prompt",
    "explorer.help_hotkeys",
    "explorer.help_actions",
)


def explorer_help_lines() -> list[str]:
    """명령 모드 안내 문구 (현재 언어)"""
    return [t(key) for key in HELP_KEYS]


class CliActionExecutor:
    """VMware API 호출 대신 실행 내용을 기록하는 실행기

    Attributes:
        messages: 실행할 때마다 추가되는 "vmware-api ..." 라인
    """

    def __init__(self) -> None:
        self.messages: list[str] = []

    @property
    def last_message(self) -> str | None:
        return self.messages[-1] if self.messages else None

    def execute(self, resource: ResourceKind, action: str, ids: Sequence[str]) -> None:
        message = f"vmware-api action={action} resource={resource.value} targets={','.join(ids)}"
        logger.info(message)
        self.messages.append(message)


def format_action_error(error: BaseException, entity: str | None) -> str:
    """액션 실패 상태 라인

    Args:
        error: 액션 실행 중 발생한 예외
        entity: 선택된 행 식별자 (없으면 "-")

    Returns:
        action_error code=... message="..." entity="..." retryable=...
    """
    retryable = bool(getattr(error, "retriable", False))
    message = error.message if isinstance(error, HSError) else str(error)
    return (
        f"action_error code={error_code(error)} message={json.dumps(message, ensure_ascii=False)}"
        f" entity={json.dumps(entity or NO_ENTITY, ensure_ascii=False)}"
        f" retryable={str(retryable).lower()}"
    )


class ExplorerRunner:
    """명령 모드 한 줄 처리기

    Args:
        session: 탐색 세션
        prompt: 명령 기록 상태
        contexts: 엔드포인트 컨텍스트
        executor: 액션 실행기
        confirm: 파괴적 액션 확인 콜백 (None이면 같은 명령을 다시 입력해야 실행)
    """

    def __init__(
        self,
        session: Session,
        prompt: PromptState,
        contexts: ContextManager,
        executor: CliActionExecutor,
        confirm: ConfirmCallback | None = None,
    ):
        self.session = session
        self.prompt = prompt
        self.contexts = contexts
        self.executor = executor
        self.confirm = confirm

    def handle_line(self, line: str) -> tuple[str | None, bool]:
        """입력 한 줄 처리

        Args:
            line: 사용자 입력

        Returns:
            (상태 라인 또는 None, 루프 계속 여부)
        """
        try:
            command = parse_explorer_input(line)
        except HSError as e:
            return f"command error: {format_error_for_user(e)}", True

        if command.kind not in (CommandKind.NOOP, CommandKind.HISTORY):
            self.prompt.record(line)

        if command.kind is CommandKind.NOOP:
            return None, True
        if command.kind is CommandKind.QUIT:
            return "bye", False
        if command.kind is CommandKind.ACTION:
            return self._run_action(command.value), True

        try:
            return self._dispatch(command, line), True
        except HSError as e:
            logger.debug("명령 실패: %s (%s)", line.strip(), e.code)
            return f"command error: {format_error_for_user(e)}", True

    def _dispatch(self, command: ExplorerCommand, line: str) -> str | None:
        session = self.session
        kind = command.kind

        if kind is CommandKind.HELP:
            return "\n".join(explorer_help_lines())
        if kind is CommandKind.READ_ONLY:
            if command.value == "on":
                session.read_only = True
            elif command.value == "off":
                session.read_only = False
            else:
                session.read_only = not session.read_only
            return "mode: read-only" if session.read_only else "mode: read-write"
        if kind is CommandKind.HISTORY:
            entry = self.prompt.previous() if command.value == "up" else self.prompt.next()
            return f"history: {entry if entry is not None else '<none>'}"
        if kind is CommandKind.SUGGEST:
            suggestions = self.prompt.suggest(command.value, session.current_view())
            return f"suggestions: {', '.join(suggestions) if suggestions else '<none>'}"
        if kind is CommandKind.CONTEXT:
            return self._handle_context(command.value)
        if kind is CommandKind.LAST_VIEW:
            session.last_view()
            return "switched to last view"
        if kind is CommandKind.FILTER:
            session.apply_filter_expression(command.value)
            return f"filter: {command.value}" if command.value else "filter: <none>"
        if kind is CommandKind.VIEW:
            session.execute_command(f":{command.value}")
            return f"view: {command.value}"

        # 단축키: n/N 구분을 위해 원문 전달 (리터럴 공백은 SPACE)
        key = line.strip() or command.value
        session.handle_key(key)
        return f"key: {command.value}"

    def _handle_context(self, name: str) -> str:
        if not name:
            return f"contexts: {', '.join(self.contexts.list())} | active: {self.contexts.active}"
        self.contexts.switch(name)
        # 새 엔드포인트 기준으로 현재 뷰 다시 로드
        self.session.execute_command(f":{self.session.resource.value}")
        return f"context: {self.contexts.active}"

    def _run_action(self, text: str) -> str:
        session = self.session
        before = len(self.executor.messages)
        try:
            try:
                session.apply_action(text, self.executor)
            except ConfirmationRequiredError as e:
                if self.confirm is None:
                    raise
                if not self.confirm(e):
                    session.deny_pending_action()
                    return f"action denied: {e.action}"
                session.apply_action(text, self.executor)
        except Exception as e:  # noqa: BLE001
            logger.warning("액션 실패: %s (%s)", text, e)
            return format_action_error(e, session.selected_id())

        if len(self.executor.messages) > before:
            return self.executor.last_message or DEFAULT_ACTION_STATUS
        return DEFAULT_ACTION_STATUS

    def run(self, lines: Iterable[str], emit: Callable[[str], None]) -> None:
        """입력이 끝나거나 :q 를 만날 때까지 명령 루프 실행

        Args:
            lines: 입력 줄 (예: 표준 입력)
            emit: 출력 함수 (예: click.echo)
        """
        for line in explorer_help_lines():
            emit(line)
        emit(self.session.render().rstrip("\n"))
        for raw in lines:
            status, keep_running = self.handle_line(raw.rstrip("\r\n"))
            if status:
                emit(status)
            if not keep_running:
                return
            emit(self.session.render().rstrip("\n"))
