"""
core/explorer - 리소스 탐색기 세션 엔진

가상화 인벤토리를 k9s 스타일로 탐색하는 세션 엔진입니다.

구성:
    types.py       # 리소스 종류, 행 레코드, 카탈로그, 뷰, 액션 기록
    command.py     # 명령 입력 파서
    catalog.py     # 종류별 뷰 빌더, 컬럼 선택
    navigator.py   # 활성 리소스 전환
    filters.py     # 부분 문자열/정규식/태그/퍼지 필터
    sorting.py     # 타입 인식 안정 정렬
    marks.py       # 식별자 기반 마크 집합
    actions.py     # 액션 파싱/검증/확인/재시도/후처리
    breadcrumb.py  # 선택 행 계층 경로
    prompt.py      # 명령 기록과 추천
    context.py     # 엔드포인트 컨텍스트
    render.py      # 텍스트 테이블 렌더러
    loader.py      # YAML/JSON 카탈로그 로더, 데모 카탈로그
    session.py     # 세션 상태 머신
"""

from .actions import ActionCanceler, ActionExecutor, RetryConfig
from .catalog import VIEW_SPECS, build_view
from .command import CommandKind, ExplorerCommand, parse_explorer_input, parse_resource_command
from .context import ContextManager
from .loader import catalog_from_dict, default_catalog, load_catalog
from .navigator import Navigator
from .prompt import PromptState
from .render import render_interactive_view, render_resource_view
from .session import Session
from .types import (
    RESOURCE_ALIASES,
    ActionAudit,
    ActionPreview,
    ActionProposal,
    ActionRequest,
    ActionTransition,
    Catalog,
    ResourceDetails,
    ResourceKind,
    ResourceView,
    TableRow,
    resource_command_aliases,
)

__all__: list[str] = [
    # 세션
    "Session",
    "Navigator",
    "PromptState",
    "ContextManager",
    # 파서
    "CommandKind",
    "ExplorerCommand",
    "parse_explorer_input",
    "parse_resource_command",
    # 카탈로그
    "Catalog",
    "VIEW_SPECS",
    "build_view",
    "load_catalog",
    "catalog_from_dict",
    "default_catalog",
    # 타입
    "RESOURCE_ALIASES",
    "ResourceKind",
    "ResourceView",
    "TableRow",
    "ResourceDetails",
    "ActionRequest",
    "ActionTransition",
    "ActionAudit",
    "ActionPreview",
    "ActionProposal",
    "resource_command_aliases",
    # 액션
    "ActionExecutor",
    "ActionCanceler",
    "RetryConfig",
    # 렌더링
    "render_interactive_view",
    "render_resource_view",
]
