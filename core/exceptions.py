"""
core/exceptions.py - 통합 예외 계층 구조

탐색기 전체에서 사용되는 예외 클래스들을 정의합니다.
모든 파싱/검증 오류는 세션 상태를 바꾸지 않고 호출자에게 그대로 전달되며,
명령 루프에서 상태 메시지로 변환됩니다.

예외 계층 구조:
    HSError (베이스)
    ├── ExplorerError (탐색기 세션)
    │   ├── MissingCommandPrefixError
    │   ├── UnknownResourceError
    │   ├── UnsupportedHotKeyError
    │   ├── InvalidActionError
    │   ├── ConfirmationRequiredError
    │   ├── NoPreviousViewError
    │   ├── ReadOnlyError
    │   ├── InvalidColumnsError
    │   ├── FilterCompileError
    │   ├── ActionTimeoutError
    │   └── ContextError
    ├── ActionExecutionError (실행기 실패, 재시도 분류 포함)
    ├── ConfigError (설정 관련)
    └── ValidationError (입력 문서 검증)

Usage:
    from core.exceptions import ActionExecutionError, ErrorCategory

    def execute(kind, action, ids):
        raise ActionExecutionError(
            "vCenter busy",
            category=ErrorCategory.THROTTLING,
        )
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class HSError(Exception):
    """HyperSphere 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
        code: 상태 라인에 표시되는 에러 코드
    """

    code = "ERR_GENERIC"

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 탐색기 세션 예외
# =============================================================================


class ExplorerError(HSError):
    """탐색기 세션 관련 예외"""

    code = "ERR_EXPLORER"


class MissingCommandPrefixError(ExplorerError):
    """':' 접두사가 없는 뷰 전환 명령"""

    code = "ERR_MISSING_PREFIX"

    def __init__(self, command: str):
        super().__init__("command must start with ':'", details={"command": command})
        self.command = command


class UnknownResourceError(ExplorerError):
    """알 수 없는 리소스 종류

    suggestions에는 입력과 가장 가까운 별칭 후보가 담깁니다.
    """

    code = "ERR_UNKNOWN_RESOURCE"

    def __init__(self, name: str, suggestions: list[str] | None = None):
        message = f"unknown resource: {name}"
        if suggestions:
            message = f"{message} (did you mean {', '.join(suggestions)}?)"
        super().__init__(message, details={"resource": name})
        self.resource = name
        self.suggestions = list(suggestions or [])


class UnsupportedHotKeyError(ExplorerError):
    """현재 뷰에 동작이 정의되지 않은 단축키"""

    code = "ERR_UNSUPPORTED_HOTKEY"

    def __init__(self, key: str, reason: str | None = None):
        message = f"unsupported hotkey: {key}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, details={"key": key})
        self.key = key


class InvalidActionError(ExplorerError):
    """지원하지 않는 액션, 잘못된 옵션, 대상 없음 등"""

    code = "ERR_INVALID_ACTION"

    def __init__(self, reason: str):
        super().__init__(f"invalid action: {reason}", details={"reason": reason})
        self.reason = reason


class ConfirmationRequiredError(ExplorerError):
    """파괴적 액션이 두 번째 확인 호출을 기다리는 상태"""

    code = "ERR_CONFIRMATION_REQUIRED"

    def __init__(self, action: str, targets: list[str] | tuple[str, ...]):
        super().__init__(
            f"confirmation required: {action} on {len(targets)} target(s)",
            details={"action": action, "targets": list(targets)},
        )
        self.action = action
        self.targets = list(targets)


class NoPreviousViewError(ExplorerError):
    """이전 뷰 기록이 없는 상태에서 ':-' 요청"""

    code = "ERR_NO_PREVIOUS_VIEW"

    def __init__(self) -> None:
        super().__init__("no previous view")


class ReadOnlyError(ExplorerError):
    """읽기 전용 모드에서 변경 액션 요청"""

    code = "ERR_READ_ONLY"

    def __init__(self) -> None:
        super().__init__("read-only mode")


class InvalidColumnsError(ExplorerError):
    """비어 있거나 알 수 없는 컬럼 선택"""

    code = "ERR_INVALID_COLUMNS"

    def __init__(self, reason: str):
        super().__init__(f"invalid columns: {reason}", details={"reason": reason})


class FilterCompileError(ExplorerError):
    """정규식 필터 컴파일 실패"""

    code = "ERR_FILTER"

    def __init__(self, pattern: str, cause: Exception | None = None):
        super().__init__(f"invalid filter pattern {pattern!r}", cause=cause, details={"pattern": pattern})
        self.pattern = pattern


class ActionTimeoutError(ExplorerError):
    """액션 실행 시간이 설정된 타임아웃을 초과"""

    code = "ERR_TIMEOUT"

    def __init__(self, action: str, elapsed: float, timeout: float):
        super().__init__(
            f"action timed out: {action} ({elapsed:.3f}s > {timeout:.3f}s)",
            details={"action": action, "elapsed": elapsed, "timeout": timeout},
        )
        self.action = action
        self.elapsed = elapsed
        self.timeout = timeout


class ContextError(ExplorerError):
    """알 수 없는 엔드포인트 컨텍스트"""

    code = "ERR_CONTEXT"

    def __init__(self, name: str):
        super().__init__(f"unknown context: {name}", details={"context": name})
        self.context = name


# =============================================================================
# 액션 실행기 예외
# =============================================================================


class ErrorCategory(str, Enum):
    """실행기 실패 분류

    재시도 여부는 이 분류로 결정됩니다.
    """

    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVICE_ERROR = "service_error"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


# 재시도 가능한 분류
RETRYABLE_CATEGORIES: frozenset[ErrorCategory] = frozenset(
    {
        ErrorCategory.THROTTLING,
        ErrorCategory.TIMEOUT,
        ErrorCategory.NETWORK,
        ErrorCategory.SERVICE_ERROR,
    }
)


class ActionExecutionError(HSError):
    """액션 실행기(가상화 플랫폼 어댑터) 실패

    재시도 가능 여부를 예외 데이터로 명시합니다.
    retriable을 지정하지 않으면 category로부터 결정됩니다.
    """

    code = "ERR_ACTION"

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        retriable: bool | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause, details={"category": category.value})
        self.category = category
        self.retriable = category in RETRYABLE_CATEGORIES if retriable is None else retriable
        self.details["retriable"] = self.retriable


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(HSError):
    """설정 관련 예외"""

    code = "ERR_CONFIG"

    def __init__(
        self,
        key: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class ValidationError(HSError):
    """입력 검증 오류"""

    code = "ERR_VALIDATION"

    def __init__(
        self,
        field: str,
        value: Any,
        expected: str,
        cause: Exception | None = None,
    ):
        message = f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'"
        super().__init__(message, cause)
        self.field = field
        self.value = value
        self.expected = expected
        self.details.update(
            {
                "field": field,
                "value": str(value),
                "expected": expected,
            }
        )


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def is_retryable(error: BaseException | None) -> bool:
    """재시도 가능한 실행기 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        ActionExecutionError이고 재시도 가능으로 분류되었으면 True
    """
    return isinstance(error, ActionExecutionError) and error.retriable


def error_code(error: BaseException) -> str:
    """상태 라인에 표시할 에러 코드

    Args:
        error: 예외

    Returns:
        HSError는 code 속성, 그 외에는 ERR_ACTION
    """
    if isinstance(error, HSError):
        return error.code
    return "ERR_ACTION"


def format_error_for_user(error: BaseException) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, HSError):
        # 커스텀 예외는 이미 포맷팅됨
        return str(error)

    return f"{error.__class__.__name__}: {error}"
