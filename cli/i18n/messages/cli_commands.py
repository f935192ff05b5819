"""
cli/i18n/messages/cli_commands.py - CLI 명령 메시지

hs 명령 그룹(explore, view, resources)의 안내/오류 메시지입니다.
"""

from __future__ import annotations

CLI_MESSAGES = {
    # =========================================================================
    # 도움말
    # =========================================================================
    "help_intro": {
        "ko": "VMware 인벤토리를 k9s 스타일 명령 모드로 탐색합니다.",
        "en": "Explore VMware inventory in a k9s-style command mode.",
    },
    "help_usage": {
        "ko": "[기본 사용법]",
        "en": "[Basic Usage]",
    },
    "help_explore": {
        "ko": "대화형 명령 모드 (표준 입력)",
        "en": "Interactive command mode (stdin)",
    },
    "help_view": {
        "ko": "리소스 뷰 한 번 출력",
        "en": "Render one resource view",
    },
    "help_resources": {
        "ko": "리소스 종류와 별칭 목록",
        "en": "List resource kinds and aliases",
    },
    # =========================================================================
    # 카탈로그 / 설정
    # =========================================================================
    "catalog_loaded": {
        "ko": "카탈로그 로드: {path}",
        "en": "Catalog loaded: {path}",
    },
    "catalog_error": {
        "ko": "카탈로그 로드 실패: {error}",
        "en": "Failed to load catalog: {error}",
    },
    "config_error": {
        "ko": "설정 오류: {error}",
        "en": "Configuration error: {error}",
    },
    "view_error": {
        "ko": "뷰 생성 실패: {error}",
        "en": "Failed to build view: {error}",
    },
    "verbose_enabled": {
        "ko": "상세 로그 활성화",
        "en": "Verbose logging enabled",
    },
    # =========================================================================
    # resources 명령
    # =========================================================================
    "resources_title": {
        "ko": "리소스 종류",
        "en": "Resource Kinds",
    },
    "col_kind": {
        "ko": "종류",
        "en": "Kind",
    },
    "col_aliases": {
        "ko": "별칭",
        "en": "Aliases",
    },
    "col_columns": {
        "ko": "컬럼",
        "en": "Columns",
    },
    "col_actions": {
        "ko": "액션",
        "en": "Actions",
    },
    "usage_hint": {
        "ko": "사용법: hs view <별칭> 또는 hs explore",
        "en": "Usage: hs view <alias> or hs explore",
    },
}
