"""
cli/i18n/messages/explorer.py - 탐색기 명령 모드 메시지

명령 모드 안내, 확인 프롬프트, 시작 패널 문구를 포함합니다.
"""

from __future__ import annotations

EXPLORER_MESSAGES = {
    # =========================================================================
    # 명령 모드 안내
    # =========================================================================
    "ready": {
        "ko": "명령 모드 준비 완료.",
        "en": "Command mode ready.",
    },
    "help_views": {
        "ko": "뷰: :vm :lun :cluster :host :datastore | 종료: :q",
        "en": "Views: :vm :lun :cluster :host :datastore | Quit: :q",
    },
    "help_navigation": {
        "ko": "이동: :- 이전 뷰로 전환",
        "en": "Navigation: :- toggles previous view",
    },
    "help_aliases": {
        "ko": "별칭: :vms :luns :hosts :ds (전체 목록: hs resources)",
        "en": "Aliases: :vms :luns :hosts :ds (full list: hs resources)",
    },
    "help_filter": {
        "ko": "필터: /정규식, /!역정규식, /-t 태그=값, /-f 퍼지 (/ 로 해제)",
        "en": "Filter: /regex, /!inverse, /-t tag=value, /-f fuzzy (clear with /)",
    },
    "help_modes": {
        "ko": "모드: :ro [on|off|toggle] 읽기 전용",
        "en": "Modes: :ro [on|off|toggle] for read-only",
    },
    "help_prompt": {
        "ko": "프롬프트: :history up/down, :suggest <접두사>, :ctx [이름]",
        "en": "Prompt: :history up/down, :suggest <prefix>, :ctx [name]",
    },
    "help_hotkeys": {
        "ko": "단축키: SPACE, CTRL+SPACE, CTRL+\\, J/K, SHIFT+LEFT, SHIFT+RIGHT, SHIFT+O, SHIFT+I",
        "en": "Hotkeys: SPACE, CTRL+SPACE, CTRL+\\, J/K, SHIFT+LEFT, SHIFT+RIGHT, SHIFT+O, SHIFT+I",
    },
    "help_actions": {
        "ko": "액션: !<액션> (예: :vm 에서 !power-off)",
        "en": "Actions: !<action> (for example !power-off in :vm)",
    },
    # =========================================================================
    # 시작 패널
    # =========================================================================
    "banner_title": {
        "ko": "HyperSphere 탐색기",
        "en": "HyperSphere Explorer",
    },
    "banner_subtitle": {
        "ko": "컨텍스트: {context} | 모드: {mode} | 작업자: {actor}",
        "en": "Context: {context} | Mode: {mode} | Actor: {actor}",
    },
    # =========================================================================
    # 확인
    # =========================================================================
    "confirm_action": {
        "ko": "{action} 을(를) {count}개 대상({targets})에 실행하시겠습니까?",
        "en": "Run {action} on {count} target(s) ({targets})?",
    },
    "input_error": {
        "ko": "입력 오류: {error}",
        "en": "input error: {error}",
    },
}
