"""
core/explorer/actions.py - 벌크 액션 프로토콜 구성 요소

액션 입력 파싱, 옵션 검증, 파괴적 액션 확인, 재시도/타임아웃 실행,
호스트 유지보수 후처리를 제공합니다. 세션은 이 함수들을 조합해
전이 로그와 감사 기록을 남깁니다.

주요 구성 요소:
- parse_action_input: "name key=value ..." 파싱
- resolve_executor_action: migrate/snapshot 옵션 검증 후 실행기 액션 문자열 생성
- ConfirmationTracker: 두 번 호출 확인 핸드셰이크
- RetryConfig / execute_with_retries: 분류 기반 재시도 + 사후 타임아웃 검사
- host_maintenance_effect: 유지보수 진입/해제 후 새 카탈로그 스냅샷
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Protocol

from core.exceptions import ActionTimeoutError, InvalidActionError, is_retryable

from .types import ActionRequest, Catalog, ResourceKind, ResourceView

logger = logging.getLogger(__name__)

DESTRUCTIVE_ACTIONS: frozenset[str] = frozenset({"power-off", "delete", "remove", "revert", "evacuate"})

ACTION_SIDE_EFFECTS: dict[str, tuple[str, ...]] = {
    "power-off": ("workloads stop", "guest sessions terminate"),
    "power-on": ("workloads start", "resource consumption increases"),
    "migrate": ("placement changes", "short-lived migration overhead"),
}
DEFAULT_SIDE_EFFECTS: tuple[str, ...] = ("resource state may change",)

# 전이 상태
STATUS_QUEUED = "queued"
STATUS_RUNNING = "running"
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"
STATUS_CANCELLED = "cancelled"
STATUS_MAINTENANCE_ENABLED = "maintenance-enabled"
STATUS_MAINTENANCE_DISABLED = "maintenance-disabled"

CONNECTION_COLUMN = "CONNECTION"


class ActionExecutor(Protocol):
    """가상화 플랫폼 어댑터를 통해 벌크 액션을 적용하는 실행기

    실패 시 예외를 발생시킵니다. 재시도 가능 여부는
    ActionExecutionError(category=...)로 전달합니다.
    """

    def execute(self, resource: ResourceKind, action: str, ids: Sequence[str]) -> None: ...


class ActionCanceler(Protocol):
    """이전에 시작한 액션을 취소하는 백엔드"""

    def cancel(self, resource: ResourceKind, action: str, ids: Sequence[str]) -> None: ...


def is_destructive_action(action: str) -> bool:
    return action in DESTRUCTIVE_ACTIONS


def action_side_effects(action: str) -> list[str]:
    """액션 미리보기에 표시할 영향 설명"""
    return list(ACTION_SIDE_EFFECTS.get(action, DEFAULT_SIDE_EFFECTS))


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 UTC 타임스탬프 (소수 초는 뒤쪽 0 제거, naive 값은 UTC로 간주)"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    text = utc.strftime("%Y-%m-%dT%H:%M:%S")
    if utc.microsecond:
        text += "." + f"{utc.microsecond:06d}".rstrip("0")
    return text + "Z"


# =============================================================================
# 입력 파싱 / 옵션 검증
# =============================================================================


def parse_action_input(text: str) -> tuple[str, dict[str, str]]:
    """'name key=value ...' 입력을 (소문자 액션 이름, 옵션)으로 분리

    옵션 키는 소문자로 정규화됩니다.

    Raises:
        InvalidActionError: 빈 입력, '=' 없는 토큰, 빈 키 또는 값
    """
    fields = text.split()
    if not fields:
        raise InvalidActionError("empty action")
    name = fields[0].strip().lower()
    options: dict[str, str] = {}
    for token in fields[1:]:
        key, sep, value = token.partition("=")
        key = key.strip().lower()
        value = value.strip()
        if not sep or not key or not value:
            raise InvalidActionError(f"invalid option {token}")
        options[key] = value
    return name, options


def validated_migrate_action(options: dict[str, str], catalog: Catalog) -> str:
    """migrate 옵션 검증 (host= 또는 datastore= 중 정확히 하나)

    Returns:
        "migrate host=<h>" 또는 "migrate datastore=<d>"
    """
    has_host = "host" in options
    has_datastore = "datastore" in options
    if has_host == has_datastore:
        raise InvalidActionError("migrate requires exactly one of host=<name> or datastore=<name>")
    if has_host:
        host = options["host"]
        if catalog.find_host(host) is None:
            raise InvalidActionError(f"unknown host {host}")
        return f"migrate host={host}"
    datastore = options["datastore"]
    if not catalog.has_datastore(datastore):
        raise InvalidActionError(f"unknown datastore {datastore}")
    return f"migrate datastore={datastore}"


def validated_snapshot_action(action: str, options: dict[str, str], catalog: Catalog) -> str:
    """스냅샷 뷰 액션 옵션 검증

    create는 snapshot=<name>, remove/revert는 존재하는 snapshot=<id>만 허용합니다.
    """
    snapshot_id = options.get("snapshot", "")
    if action == "create":
        if not snapshot_id or len(options) != 1:
            raise InvalidActionError("create requires snapshot=<name>")
        return f"create snapshot={snapshot_id}"
    if action in ("remove", "revert"):
        if not snapshot_id or len(options) != 1:
            raise InvalidActionError(f"{action} requires snapshot=<id>")
        if not catalog.has_snapshot(snapshot_id):
            raise InvalidActionError(f"unknown snapshot {snapshot_id}")
        return f"{action} snapshot={snapshot_id}"
    if options:
        raise InvalidActionError(f"unsupported options for {action}")
    return action


def resolve_executor_action(
    view: ResourceView,
    name: str,
    options: dict[str, str],
    catalog: Catalog,
    raw: str = "",
) -> str:
    """액션 이름/옵션을 검증하고 실행기에 넘길 액션 문자열을 만든다

    Args:
        view: 현재 뷰 (허용 액션 목록 확인용)
        name: 정규화된 액션 이름
        options: 파싱된 옵션
        catalog: 대상 존재 여부 확인용 카탈로그
        raw: 에러 메시지에 쓸 원본 입력

    Raises:
        InvalidActionError: 허용되지 않은 액션이나 잘못된 옵션
    """
    if name not in view.actions:
        raise InvalidActionError(raw or name)
    if name == "migrate":
        return validated_migrate_action(options, catalog)
    if view.resource is ResourceKind.SNAPSHOT:
        return validated_snapshot_action(name, options, catalog)
    if options:
        raise InvalidActionError(f"unsupported options for {name}")
    return name


# =============================================================================
# 확인
# =============================================================================


class ConfirmationTracker:
    """파괴적 액션의 두 번 호출 확인

    첫 호출은 요청을 보류하고 False, 동일한 다음 호출은 보류를 소비하고 True.
    다른 요청이 오면 보류 요청을 교체합니다.
    """

    def __init__(self) -> None:
        self.pending: ActionRequest | None = None

    def consume(self, request: ActionRequest) -> bool:
        if self.pending is not None and self.pending == request:
            self.pending = None
            return True
        self.pending = request
        return False

    def deny(self) -> None:
        self.pending = None


# =============================================================================
# 재시도 실행
# =============================================================================


@dataclass
class RetryConfig:
    """재시도 설정

    Attributes:
        max_retries: 액션별 설정이 없을 때의 재시도 횟수 (0이면 재시도 안함)
        base_delay: 기본 대기 시간 (초, 0이면 대기 없음)
        max_delay: 최대 대기 시간 (초)
        exponential_base: 지수 백오프 밑수
        jitter: 지터 사용 여부 (대기 시간에 랜덤성 추가)
    """

    max_retries: int = 0
    base_delay: float = 0.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = False

    def get_delay(self, attempt: int) -> float:
        """재시도 대기 시간 계산

        Exponential backoff with optional jitter.

        Args:
            attempt: 현재 시도 횟수 (0부터 시작)

        Returns:
            대기 시간 (초)
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            # Full jitter: [0, delay]
            delay = random.uniform(0, delay)

        return delay


# 기본 재시도 설정
DEFAULT_RETRY_CONFIG = RetryConfig()


def execute_with_retries(
    attempt_once: Callable[[], None],
    *,
    action: str,
    retry_limit: int,
    timeout: float | None,
    clock: Callable[[], datetime],
    sleep: Callable[[float], None],
    retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
) -> int:
    """실행기 호출을 최대 1 + retry_limit번 시도

    성공한 시도라도 clock으로 잰 시간이 timeout을 넘으면 ActionTimeoutError로
    실패 처리합니다. 재시도는 재시도 가능으로 분류된 오류에만 적용됩니다.

    Args:
        attempt_once: 실행기 호출 한 번
        action: 로그/에러 메시지용 액션 이름
        retry_limit: 최초 호출 이후 추가 시도 횟수
        timeout: 초 단위 타임아웃 (None이면 검사 안함)
        clock: 현재 시각 함수
        sleep: 재시도 사이 대기 함수
        retry_config: 백오프 설정

    Returns:
        성공까지 걸린 시도 횟수

    Raises:
        마지막 시도의 예외 (재시도 불가하거나 재시도 소진 시)
    """
    attempt = 0
    while True:
        started = clock()
        try:
            attempt_once()
            elapsed = (clock() - started).total_seconds()
            if timeout is not None and elapsed > timeout:
                raise ActionTimeoutError(action, elapsed, timeout)
            return attempt + 1
        except Exception as e:
            if not is_retryable(e) or attempt >= retry_limit:
                raise
            delay = retry_config.get_delay(attempt)
            logger.warning(
                "액션 재시도 %d/%d: %s (%s), %.2f초 후",
                attempt + 1,
                retry_limit,
                action,
                e,
                delay,
            )
            if delay > 0:
                sleep(delay)
            attempt += 1


# =============================================================================
# 후처리
# =============================================================================


@dataclass(frozen=True)
class MaintenanceEffect:
    """호스트 유지보수 액션의 후처리 결과"""

    catalog: Catalog
    connection_state: str
    status: str


_MAINTENANCE_TRANSITIONS: dict[str, tuple[str, str]] = {
    "enter-maintenance": ("maintenance", STATUS_MAINTENANCE_ENABLED),
    "exit-maintenance": ("connected", STATUS_MAINTENANCE_DISABLED),
}


def host_maintenance_effect(
    resource: ResourceKind,
    action: str,
    ids: Sequence[str],
    catalog: Catalog,
) -> MaintenanceEffect | None:
    """호스트 유지보수 진입/해제 후 새 카탈로그 스냅샷

    대상 호스트의 연결 상태만 바꾼 새 Catalog를 돌려주며, 기존 행은 변경하지 않습니다.

    Returns:
        MaintenanceEffect 또는 해당 없는 액션이면 None
    """
    if resource is not ResourceKind.HOST or action not in _MAINTENANCE_TRANSITIONS:
        return None
    state, status = _MAINTENANCE_TRANSITIONS[action]
    targets = set(ids)
    hosts = [replace(row, connection_state=state) if row.name in targets else row for row in catalog.hosts]
    return MaintenanceEffect(catalog=replace(catalog, hosts=hosts), connection_state=state, status=status)


def update_connection_cells(view: ResourceView, ids: Sequence[str], state: str) -> None:
    """호스트 뷰의 CONNECTION 셀을 대상 행만 갱신"""
    if view.resource is not ResourceKind.HOST:
        return
    column = view.column_index(CONNECTION_COLUMN)
    if column < 0:
        return
    targets = set(ids)
    for row in view.rows:
        if row.id in targets and column < len(row.cells):
            row.cells[column] = state
