"""
core/explorer/session.py - 탐색기 세션 상태 머신

현재 뷰, 필터되지 않은 기준 뷰, 선택 위치, 정렬, 필터, 마크, 읽기 전용 모드,
액션 확인/타임아웃/재시도 정책, 전이 로그, 감사 기록을 관리합니다.

모든 파싱/검증 오류는 상태를 바꾸지 않고 예외로 전달됩니다.
액션 실행 실패는 전이/감사 기록을 남긴 뒤 예외를 그대로 다시 발생시킵니다.

Usage:
    from core.explorer import Session, default_catalog

    session = Session(default_catalog())
    session.execute_command(":host")
    session.handle_key("SPACE")
    session.apply_action("enter-maintenance", executor)
    print(session.render())
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from core.exceptions import (
    ConfirmationRequiredError,
    InvalidActionError,
    NoPreviousViewError,
    ReadOnlyError,
    UnsupportedHotKeyError,
)

from .actions import (
    DEFAULT_RETRY_CONFIG,
    STATUS_CANCELLED,
    STATUS_FAILURE,
    STATUS_QUEUED,
    STATUS_RUNNING,
    STATUS_SUCCESS,
    ActionCanceler,
    ActionExecutor,
    ConfirmationTracker,
    RetryConfig,
    action_side_effects,
    execute_with_retries,
    format_timestamp,
    host_maintenance_effect,
    is_destructive_action,
    parse_action_input,
    resolve_executor_action,
    update_connection_cells,
)
from .breadcrumb import breadcrumb_path
from .catalog import default_cell, select_visible_columns
from .command import normalize_key
from .filters import (
    FilterExpression,
    FilterMode,
    compile_filter_pattern,
    filter_view,
    filter_view_fuzzy,
    filter_view_regex,
    filter_view_tags,
    parse_filter_expression,
    parse_tag_filter_criteria,
)
from .marks import MarkSet
from .navigator import Navigator
from .render import DEFAULT_VIEWPORT_ROWS, render_interactive_view
from .sorting import SortState, sort_rows
from .types import (
    ActionAudit,
    ActionPreview,
    ActionProposal,
    ActionRequest,
    ActionTransition,
    Catalog,
    DetailField,
    ResourceDetails,
    ResourceKind,
    ResourceView,
)

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "operator"

NO_FILTER = FilterExpression(FilterMode.NONE)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def clamp_index(value: int, length: int) -> int:
    """0 ≤ value < length로 고정 (length가 0이면 0)"""
    if length == 0:
        return 0
    return min(max(value, 0), length - 1)


def folder_scope_key(path: str) -> str:
    """폴더 경로의 마지막 구간 (예: "/dc-1/vm/prod" → "prod")"""
    trimmed = path.strip().strip("/")
    if not trimmed:
        return ""
    return trimmed.split("/")[-1]


class Session:
    """k9s 스타일 리소스 탐색 세션

    Args:
        catalog: 행 카탈로그
        resource: 초기 리소스 종류 (기본 vm)
        read_only: 읽기 전용 모드로 시작할지 여부
        actor: 감사 기록에 남길 작업자 이름
        clock: 현재 시각 함수 (전이/감사 타임스탬프, 타임아웃 측정)
        sleep: 재시도 사이 대기 함수
        viewport_rows: 렌더링 본문 최대 행 수
        retry_config: 재시도 백오프 설정
    """

    def __init__(
        self,
        catalog: Catalog,
        resource: ResourceKind = ResourceKind.VM,
        read_only: bool = False,
        actor: str = DEFAULT_ACTOR,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] | None = None,
        viewport_rows: int = DEFAULT_VIEWPORT_ROWS,
        retry_config: RetryConfig | None = None,
    ):
        self._navigator = Navigator(catalog, resource)
        self._base_view = self._navigator.table_for(resource)
        self._view = self._base_view.copy()
        self._previous: ResourceKind | None = None
        self._selected_row = 0
        self._selected_column = 0
        self._sort = SortState()
        self._filter_text = ""
        self._filter = NO_FILTER
        self._marks = MarkSet()
        self._column_selection: dict[ResourceKind, list[str]] = {}
        self._read_only = read_only
        self.actor = actor or DEFAULT_ACTOR
        self._clock = clock or _utc_now
        self._sleep = sleep or time.sleep
        self.viewport_rows = viewport_rows
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG

        self._last_action: ActionRequest | None = None
        self._confirmations = ConfirmationTracker()
        self._proposal: ActionProposal | None = None
        self._action_timeouts: dict[str, float] = {}
        self._action_retries: dict[str, int] = {}
        self._transitions: list[ActionTransition] = []
        self._audits: list[ActionAudit] = []

    # =========================================================================
    # 상태 조회
    # =========================================================================

    @property
    def catalog(self) -> Catalog:
        return self._navigator.catalog

    @property
    def resource(self) -> ResourceKind:
        return self._view.resource

    @property
    def previous_resource(self) -> ResourceKind | None:
        return self._previous

    @property
    def selected_row(self) -> int:
        return self._selected_row

    @property
    def selected_column(self) -> int:
        return self._selected_column

    @property
    def sort_column(self) -> str:
        return self._sort.column

    @property
    def sort_ascending(self) -> bool:
        return self._sort.ascending

    @property
    def filter_text(self) -> str:
        return self._filter_text

    @property
    def mark_count(self) -> int:
        return len(self._marks)

    @property
    def read_only(self) -> bool:
        return self._read_only

    @read_only.setter
    def read_only(self, value: bool) -> None:
        self._read_only = value
        logger.debug("읽기 전용 모드: %s", value)

    @property
    def pending_action(self) -> ActionRequest | None:
        return self._confirmations.pending

    @property
    def last_action(self) -> ActionRequest | None:
        return self._last_action

    def current_view(self) -> ResourceView:
        return self._view

    def is_marked(self, row_id: str) -> bool:
        return self._marks.is_marked(row_id)

    def selected_id(self) -> str | None:
        """커서 행의 식별자 (행이 없으면 None)"""
        ids = self._view.ids
        if 0 <= self._selected_row < len(ids):
            return ids[self._selected_row]
        return None

    def set_selection(self, row: int, column: int) -> None:
        self._selected_row = clamp_index(row, len(self._view.rows))
        self._selected_column = clamp_index(column, len(self._view.columns))

    # =========================================================================
    # 뷰 전환
    # =========================================================================

    def execute_command(self, command: str) -> None:
        """':alias' 명령으로 뷰 전환

        선택, 정렬, 필터, 마크, 앵커를 초기화하고 저장된 컬럼 선택을 다시 적용합니다.

        Raises:
            MissingCommandPrefixError: ':' 접두사 없음
            UnknownResourceError: 알 수 없는 별칭
        """
        view = self._navigator.execute(command)
        stored = self._column_selection.get(view.resource)
        if stored is not None:
            view, _ = select_visible_columns(view, stored)
        if self._view.resource != view.resource:
            self._previous = self._view.resource
        self._base_view = view
        self._view = view.copy()
        self._selected_row = 0
        self._selected_column = 0
        self._sort.reset()
        self._filter_text = ""
        self._filter = NO_FILTER
        self._marks.clear()
        self._proposal = None
        logger.debug("뷰 전환: %s (이전: %s)", view.resource, self._previous)

    def last_view(self) -> None:
        """이전 리소스 뷰로 돌아가기 (반복하면 두 뷰를 오감)

        Raises:
            NoPreviousViewError: 이전 뷰 기록 없음
        """
        if self._previous is None:
            raise NoPreviousViewError()
        current = self._view.resource
        self.execute_command(f":{self._previous.value}")
        self._previous = current

    # =========================================================================
    # 컬럼 선택
    # =========================================================================

    def set_visible_columns(self, columns: Sequence[str]) -> None:
        """현재 뷰의 표시 컬럼을 설정하고 종류별로 기억

        Raises:
            InvalidColumnsError: 빈 선택 또는 알 수 없는 컬럼
        """
        resource = self._view.resource
        full_view = self._navigator.table_for(resource)
        selected, normalized = select_visible_columns(full_view, columns)
        self._column_selection[resource] = normalized
        self._replace_base_view(selected)

    def reset_visible_columns(self) -> None:
        """현재 뷰의 컬럼 선택을 지우고 전체 컬럼으로 복원"""
        resource = self._view.resource
        self._column_selection.pop(resource, None)
        self._replace_base_view(self._navigator.table_for(resource))

    def visible_columns(self) -> list[str]:
        return list(self._view.columns)

    def available_columns(self) -> list[str]:
        return list(self._navigator.table_for(self._view.resource).columns)

    def _replace_base_view(self, view: ResourceView) -> None:
        self._base_view = view
        self._view = view.copy()
        self._sort.reset()
        self._selected_column = clamp_index(self._selected_column, len(self._view.columns))
        if self._filter.mode is not FilterMode.NONE:
            self._apply_filter_expression(self._filter)
        self._clamp_selected_row()

    # =========================================================================
    # 필터
    # =========================================================================

    def apply_filter(self, text: str) -> None:
        """부분 문자열 필터 (빈 값이면 해제)"""
        self._filter_text = text.strip().lower()
        if not self._filter_text:
            self._clear_filter()
            return
        self._filter = FilterExpression(FilterMode.SUBSTRING, self._filter_text)
        self._view = filter_view(self._base_view, self._filter_text)
        self._clamp_selected_row()
        logger.debug("필터 적용: %r → %d행", self._filter_text, len(self._view.rows))

    def apply_regex_filter(self, pattern: str) -> None:
        """정규식 필터 (빈 패턴이면 해제)

        Raises:
            FilterCompileError: 잘못된 정규식 (뷰는 그대로 유지)
        """
        self._apply_regex_filter(pattern, inverse=False)

    def apply_inverse_regex_filter(self, pattern: str) -> None:
        """어떤 셀과도 맞지 않는 행만 남기는 역정규식 필터"""
        self._apply_regex_filter(pattern, inverse=True)

    def apply_tag_filter(self, expression: str) -> None:
        """'k=v,k2=v2' 태그를 모두 가진 행만 남기기

        Raises:
            InvalidActionError: 빈 조건 또는 잘못된 쌍
        """
        criteria = parse_tag_filter_criteria(expression)
        self._filter_text = "-t " + ",".join(criteria)
        self._filter = FilterExpression(FilterMode.TAGS, expression)
        self._view = filter_view_tags(self._base_view, criteria)
        self._clamp_selected_row()

    def apply_fuzzy_filter(self, query: str) -> None:
        """퍼지 필터 (점수 내림차순)

        Raises:
            InvalidActionError: 빈 질의
        """
        trimmed = query.strip()
        if not trimmed:
            raise InvalidActionError("empty fuzzy filter")
        self._filter_text = "-f " + trimmed
        self._filter = FilterExpression(FilterMode.FUZZY, trimmed)
        self._view = filter_view_fuzzy(self._base_view, trimmed)
        self._clamp_selected_row()

    def apply_filter_expression(self, expression: str) -> None:
        """'/' 입력 해석: '-f' 퍼지, '-t' 태그, '!' 역정규식, 그 외 정규식, 빈 값은 해제"""
        self._apply_filter_expression(parse_filter_expression(expression))

    def _apply_filter_expression(self, parsed: FilterExpression) -> None:
        if parsed.mode is FilterMode.NONE:
            self._clear_filter()
        elif parsed.mode is FilterMode.SUBSTRING:
            self.apply_filter(parsed.argument)
        elif parsed.mode is FilterMode.FUZZY:
            self.apply_fuzzy_filter(parsed.argument)
        elif parsed.mode is FilterMode.TAGS:
            self.apply_tag_filter(parsed.argument)
        elif parsed.mode is FilterMode.INVERSE_REGEX:
            self.apply_inverse_regex_filter(parsed.argument)
        else:
            self.apply_regex_filter(parsed.argument)

    def _apply_regex_filter(self, pattern: str, inverse: bool) -> None:
        trimmed = pattern.strip()
        if not trimmed:
            self._clear_filter()
            return
        compiled = compile_filter_pattern(trimmed)
        self._filter_text = f"!{trimmed}" if inverse else trimmed
        self._filter = FilterExpression(FilterMode.INVERSE_REGEX if inverse else FilterMode.REGEX, trimmed)
        self._view = filter_view_regex(self._base_view, compiled, inverse)
        self._clamp_selected_row()
        logger.debug("정규식 필터 적용: %r → %d행", self._filter_text, len(self._view.rows))

    def _clear_filter(self) -> None:
        self._filter_text = ""
        self._filter = NO_FILTER
        self._view = self._base_view.copy()
        self._clamp_selected_row()

    # =========================================================================
    # 단축키
    # =========================================================================

    def handle_key(self, key: str) -> None:
        """k9s 스타일 단축키 한 개 처리

        Raises:
            UnsupportedHotKeyError: 현재 뷰에 정의되지 않은 키
        """
        # 필터가 활성일 때 n/N은 다음/이전 결과로 이동
        if key == "n" and self._jump_filtered_match(1):
            return
        if key == "N" and self._jump_filtered_match(-1):
            return

        normalized = normalize_key(key)
        if not normalized:
            return

        if normalized in ("J", "DOWN"):
            self._move_row(1)
        elif normalized in ("K", "UP"):
            self._move_row(-1)
        elif normalized in ("RIGHT", "SHIFT+RIGHT"):
            self._move_column(1)
        elif normalized in ("LEFT", "SHIFT+LEFT"):
            self._move_column(-1)
        elif normalized == "SPACE":
            self._marks.toggle(self._view.ids, self._selected_row)
        elif normalized == "CTRL+SPACE":
            self._marks.span(self._view.ids, self._selected_row)
        elif normalized == "CTRL+\\":
            self._marks.clear()
        elif normalized in ("O", "SHIFT+O"):
            self._sort_by_selected_column(key)
        elif normalized == "SHIFT+I":
            self._invert_sort(key)
        elif normalized == "SHIFT+J":
            self._jump_to_owner()
        elif normalized == "SHIFT+W":
            self._warp_to_scoped_vm_view()
        else:
            column = self._view.sort_hotkeys.get(normalized)
            if column is None:
                raise UnsupportedHotKeyError(key)
            self._sort_by_column(column, default_ascending=True)

    def _move_row(self, delta: int) -> None:
        count = len(self._view.rows)
        if count:
            self._selected_row = (self._selected_row + delta) % count

    def _move_column(self, delta: int) -> None:
        count = len(self._view.columns)
        if count:
            self._selected_column = (self._selected_column + delta) % count

    def _jump_filtered_match(self, step: int) -> bool:
        count = len(self._view.rows)
        if not self._filter_text or count == 0:
            return False
        self.set_selection((self._selected_row + step) % count, self._selected_column)
        return True

    def _selected_row_id(self) -> str:
        row_id = self.selected_id()
        if row_id is None:
            raise InvalidActionError("no selected rows")
        return row_id

    def _jump_to_owner(self) -> None:
        """VM에서 소속 호스트(없으면 클러스터의 첫 리소스 풀)로 이동"""
        if self._view.resource is not ResourceKind.VM:
            raise UnsupportedHotKeyError("SHIFT+J")
        vm = self.catalog.find_vm(self._selected_row_id())
        if vm is None:
            raise InvalidActionError("selected vm not found")
        if vm.host.strip() and self.catalog.find_host(vm.host) is not None:
            if self._jump_to_owned_row(":host", vm.host):
                return
        pool = self.catalog.first_resource_pool_for_cluster(vm.cluster)
        if pool is not None and self._jump_to_owned_row(":rp", pool):
            return
        raise UnsupportedHotKeyError("SHIFT+J")

    def _jump_to_owned_row(self, command: str, row_id: str) -> bool:
        self.execute_command(command)
        ids = self._view.ids
        if row_id not in ids:
            return False
        self.set_selection(ids.index(row_id), 0)
        return True

    def _warp_to_scoped_vm_view(self) -> None:
        """폴더/태그 행에서 해당 범위로 필터된 VM 뷰로 이동"""
        row_id = self._selected_row_id()
        key = ""
        if self._view.resource is ResourceKind.FOLDER:
            key = folder_scope_key(row_id)
        elif self._view.resource is ResourceKind.TAG:
            key = row_id.strip()
        if not key:
            raise UnsupportedHotKeyError("SHIFT+W")
        self.execute_command(":vm")
        self.apply_filter(key)

    # =========================================================================
    # 정렬
    # =========================================================================

    def _sort_by_selected_column(self, key: str) -> None:
        if not 0 <= self._selected_column < len(self._view.columns):
            raise UnsupportedHotKeyError(key, "selected column out of range")
        self._sort_by_column(self._view.columns[self._selected_column], default_ascending=True)

    def _invert_sort(self, key: str) -> None:
        if not self._sort.active:
            raise UnsupportedHotKeyError(key, "no active sort")
        self._sort_by_column(self._sort.column, self._sort.ascending)

    def _sort_by_column(self, column: str, default_ascending: bool) -> None:
        index = self._view.column_index(column)
        if index < 0:
            return
        ascending = self._sort.next_direction(column, default_ascending)
        self._view = self._view.with_rows(sort_rows(self._view.rows, index, ascending))
        # 필터 해제 시에도 정렬 순서 유지
        base_index = self._base_view.column_index(column)
        if base_index >= 0:
            self._base_view = self._base_view.with_rows(sort_rows(self._base_view.rows, base_index, ascending))
        self._sort.column = column
        self._sort.ascending = ascending
        self._selected_column = index
        self._clamp_selected_row()
        logger.debug("정렬: %s %s", column, "asc" if ascending else "desc")

    def _clamp_selected_row(self) -> None:
        self._selected_row = clamp_index(self._selected_row, len(self._view.rows))

    # =========================================================================
    # 액션
    # =========================================================================

    def apply_action(self, text: str, executor: ActionExecutor) -> None:
        """선택/마크된 행에 액션 실행

        파괴적 액션은 첫 호출에서 보류되고 ConfirmationRequiredError를 발생시키며,
        같은 요청을 다시 호출하면 실행됩니다.

        Args:
            text: "name key=value ..." 형태의 액션 입력
            executor: 액션 실행기

        Raises:
            ReadOnlyError: 읽기 전용 모드
            InvalidActionError: 잘못된 액션/옵션 또는 대상 없음
            ConfirmationRequiredError: 확인 대기
            ActionTimeoutError: 실행 시간 초과
            Exception: 실행기 예외 (재시도 후 그대로 전달)
        """
        name, executor_action, ids = self._prepare_action(text)
        if is_destructive_action(name):
            request = ActionRequest(self._view.resource, name, tuple(ids))
            if not self._confirmations.consume(request):
                logger.info("확인 대기: %s (%d개 대상)", name, len(ids))
                raise ConfirmationRequiredError(name, ids)
        self._run_action(name, executor_action, ids, executor)

    def propose_action(self, text: str) -> ActionProposal:
        """액션을 검증하고 명시적 확인용 제안을 생성 (실행하지 않음)

        새 제안은 이전 제안을 대체하며, 뷰 전환 시 무효화됩니다.
        """
        name, executor_action, ids = self._prepare_action(text)
        proposal = ActionProposal(
            token=uuid.uuid4().hex,
            action_text=executor_action,
            request=ActionRequest(self._view.resource, name, tuple(ids)),
            destructive=is_destructive_action(name),
        )
        self._proposal = proposal
        logger.info("액션 제안: %s (%d개 대상, token=%s)", executor_action, len(ids), proposal.token)
        return proposal

    def confirm_action(self, proposal: ActionProposal, executor: ActionExecutor) -> None:
        """propose_action으로 받은 제안을 실행

        Raises:
            InvalidActionError: 제안이 없거나 교체/무효화된 경우
            ReadOnlyError: 제안 이후 읽기 전용 모드로 바뀐 경우
        """
        if self._proposal is None or self._proposal.token != proposal.token:
            raise InvalidActionError("stale proposal")
        if self._read_only:
            raise ReadOnlyError()
        self._proposal = None
        self._confirmations.deny()
        request = proposal.request
        self._run_action(request.action, proposal.action_text, list(request.ids), executor)

    def preview_action(self, action: str) -> ActionPreview:
        """실행 없이 대상과 영향 요약"""
        normalized = action.strip().lower()
        if normalized not in self._view.actions:
            raise InvalidActionError(action)
        ids = self._target_ids()
        if not ids:
            raise InvalidActionError("no selected rows")
        return ActionPreview(
            resource=self._view.resource,
            action=normalized,
            target_count=len(ids),
            target_ids=tuple(ids),
            side_effects=tuple(action_side_effects(normalized)),
        )

    def cancel_last_action(self, canceler: ActionCanceler | None) -> None:
        """가장 최근 액션 취소 요청

        Raises:
            InvalidActionError: 이전 액션 또는 취소기 없음
        """
        if self._last_action is None:
            raise InvalidActionError("no pending action")
        if canceler is None:
            raise InvalidActionError("canceler unavailable")
        request = self._last_action
        canceler.cancel(request.resource, request.action, list(request.ids))
        self._record_transition(request.action, STATUS_CANCELLED, request.resource)
        logger.info("액션 취소: %s", request.action)

    def set_action_timeout(self, action: str, seconds: float) -> None:
        """액션별 타임아웃 (0 이하면 설정 제거)"""
        normalized = action.strip().lower()
        if not normalized:
            return
        if seconds <= 0:
            self._action_timeouts.pop(normalized, None)
            return
        self._action_timeouts[normalized] = seconds

    def set_action_retry_limit(self, action: str, retries: int) -> None:
        """최초 호출 이후 재시도 횟수 (0 이하면 설정 제거)"""
        normalized = action.strip().lower()
        if not normalized:
            return
        if retries <= 0:
            self._action_retries.pop(normalized, None)
            return
        self._action_retries[normalized] = retries

    def deny_pending_action(self) -> None:
        """보류 중인 확인 요청과 제안 폐기"""
        self._confirmations.deny()
        self._proposal = None

    def action_transitions(self) -> list[ActionTransition]:
        return list(self._transitions)

    def action_audits(self) -> list[ActionAudit]:
        return list(self._audits)

    def _target_ids(self) -> list[str]:
        return self._marks.resolve_targets(self._view.ids, self._selected_row)

    def _prepare_action(self, text: str) -> tuple[str, str, list[str]]:
        if self._read_only:
            raise ReadOnlyError()
        name, options = parse_action_input(text)
        executor_action = resolve_executor_action(self._view, name, options, self.catalog, raw=text)
        ids = self._target_ids()
        if not ids:
            raise InvalidActionError("no selected rows")
        return name, executor_action, ids

    def _run_action(self, name: str, executor_action: str, ids: list[str], executor: ActionExecutor) -> None:
        resource = self._view.resource
        self._last_action = ActionRequest(resource, executor_action, tuple(ids))
        self._record_transition(name, STATUS_QUEUED)
        self._record_transition(name, STATUS_RUNNING)
        logger.info("액션 실행: %s %s (%d개 대상)", resource, executor_action, len(ids))

        try:
            execute_with_retries(
                lambda: executor.execute(resource, executor_action, list(ids)),
                action=name,
                retry_limit=self._action_retries.get(name, self.retry_config.max_retries),
                timeout=self._action_timeouts.get(name),
                clock=self._clock,
                sleep=self._sleep,
                retry_config=self.retry_config,
            )
        except Exception as e:
            self._record_transition(name, STATUS_FAILURE)
            self._record_audit(name, ids, STATUS_FAILURE, ids)
            logger.warning("액션 실패: %s (%s)", executor_action, e)
            raise

        self._record_transition(name, STATUS_SUCCESS)
        self._apply_post_action_state(name, ids)
        self._record_audit(name, ids, STATUS_SUCCESS, [])

    def _apply_post_action_state(self, name: str, ids: list[str]) -> None:
        effect = host_maintenance_effect(self._view.resource, name, ids, self.catalog)
        if effect is None:
            return
        self._navigator.catalog = effect.catalog
        update_connection_cells(self._base_view, ids, effect.connection_state)
        update_connection_cells(self._view, ids, effect.connection_state)
        self._record_transition(name, effect.status)

    def _record_transition(self, action: str, status: str, resource: ResourceKind | None = None) -> None:
        self._transitions.append(
            ActionTransition(
                resource=resource or self._view.resource,
                action=action,
                status=status,
                timestamp=format_timestamp(self._clock()),
            )
        )

    def _record_audit(self, action: str, targets: list[str], outcome: str, failed_ids: list[str]) -> None:
        self._audits.append(
            ActionAudit(
                resource=self._view.resource,
                actor=self.actor,
                timestamp=format_timestamp(self._clock()),
                action=action,
                targets=tuple(targets),
                outcome=outcome,
                failed_ids=tuple(failed_ids),
            )
        )

    # =========================================================================
    # 경로 / 상세 / 렌더링
    # =========================================================================

    def breadcrumb_path(self) -> str:
        return breadcrumb_path(self._view.resource, self.selected_id(), self.catalog)

    def selected_resource_details(self) -> ResourceDetails:
        """선택 행의 상세 패널

        Raises:
            InvalidActionError: 선택 행 없음 또는 VM 행을 카탈로그에서 찾을 수 없음
        """
        row_id = self._selected_row_id()
        if self._view.resource is ResourceKind.VM:
            vm = self.catalog.find_vm(row_id)
            if vm is None:
                raise InvalidActionError("no selected rows")
            fields = [
                DetailField("NAME", vm.name),
                DetailField("POWER_STATE", default_cell(vm.power_state)),
                DetailField("CPU_COUNT", str(vm.cpu_count)),
                DetailField("MEMORY_MB", str(vm.memory_mb)),
                DetailField("COMMENTS", default_cell(vm.comments)),
                DetailField("DESCRIPTION", default_cell(vm.description)),
                DetailField("SNAPSHOT_COUNT", str(vm.effective_snapshot_count)),
            ]
            for index, snapshot in enumerate(vm.snapshots, start=1):
                value = f"{default_cell(snapshot.identifier)} @ {default_cell(snapshot.timestamp)}"
                fields.append(DetailField(f"SNAPSHOT_{index}", value))
            return ResourceDetails(title="VM DETAILS", fields=fields)

        cells = self._view.rows[self._selected_row].cells
        fields = [
            DetailField(column, default_cell(cells[index]) if index < len(cells) else "-")
            for index, column in enumerate(self._view.columns)
        ]
        return ResourceDetails(title=f"{self._view.resource.value.upper()} DETAILS", fields=fields)

    def render(self) -> str:
        return render_interactive_view(
            self._view,
            selected_row=self._selected_row,
            selected_column=self._selected_column,
            sort_column=self._sort.column,
            ascending=self._sort.ascending,
            marks=self._marks,
            read_only=self._read_only,
            viewport_rows=self.viewport_rows,
        )
