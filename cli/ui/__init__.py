# cli/ui - 콘솔 컴포넌트 (rich)
"""
콘솔 UI 모듈

탐색기 CLI 전용 출력 컴포넌트 (패널, 테이블, 에러 메시지)
"""

from .console import (
    build_resource_table,
    console,
    get_logger,
    print_error,
    print_explorer_banner,
)

__all__ = [
    "console",
    "get_logger",
    "print_error",
    "print_explorer_banner",
    "build_resource_table",
]
