# core/__init__.py
"""
core - HyperSphere 탐색기 엔진

가상화 인벤토리 탐색 세션 엔진, 설정, 예외 계층을 포함하는 최상위 패키지입니다.

아키텍처:
    core/
    ├── explorer/       # 세션 엔진 (파서, 뷰 빌더, 필터, 정렬, 마크, 액션)
    ├── config.py       # 탐색기 설정 (CLI > 환경 변수 > 설정 파일 > 기본값)
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 세션 사용
    from core.explorer import Session, default_catalog
    session = Session(default_catalog())
    session.execute_command(":host")

    # 예외 처리
    from core.exceptions import ConfirmationRequiredError
    try:
        session.apply_action("power-off", executor)
    except ConfirmationRequiredError:
        session.apply_action("power-off", executor)

    # 설정
    from core.config import resolve_settings
    settings = resolve_settings({"read_only": True})
"""

from core import config, exceptions, explorer

__all__: list[str] = [
    # 서브패키지
    "explorer",
    # 모듈
    "config",
    "exceptions",
]
