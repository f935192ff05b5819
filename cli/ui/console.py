"""
cli/ui/console.py - Rich 콘솔 유틸리티

탐색기 CLI의 일관된 콘솔 출력을 위한 함수들
"""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from core.explorer.catalog import VIEW_SPECS
from core.explorer.types import ResourceKind


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()


def get_logger(name: str = "core", level: int = logging.INFO) -> logging.Logger:
    """Rich 핸들러가 설정된 logger를 반환합니다.

    --verbose 실행 시 엔진 로그(core.*)를 콘솔에 표시하는 데 사용합니다.

    Args:
        name: logger 이름 (기본값: "core")
        level: 로그 레벨

    Returns:
        logging.Logger: 설정된 logger 인스턴스
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 이미 Rich 핸들러가 있으면 레벨만 갱신
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)

    return logger


# =============================================================================
# 표준 출력 스타일
# =============================================================================

SYMBOL_ERROR = "✗"


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)

    Args:
        message: 출력할 메시지
    """
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_explorer_banner(title: str, subtitle: str | None = None) -> None:
    """탐색기 시작 패널 출력

    Args:
        title: 제목 (예: "HyperSphere Explorer")
        subtitle: 부제목 (컨텍스트, 모드 등)
    """
    body = f"[bold blue]{title}[/]"
    if subtitle:
        body += f"\n[dim]{subtitle}[/]"
    console.print(Panel(body, border_style="blue", padding=(0, 2)))


def build_resource_table(title: str, headers: tuple[str, str, str, str]) -> Table:
    """리소스 종류별 별칭/컬럼/액션 요약 테이블 생성

    Args:
        title: 테이블 제목
        headers: (종류, 별칭, 컬럼, 액션) 헤더 텍스트

    Returns:
        rich Table
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column(headers[0], style="cyan", no_wrap=True)
    table.add_column(headers[1], style="white")
    table.add_column(headers[2], style="dim")
    table.add_column(headers[3], style="yellow")

    for kind in ResourceKind:
        spec = VIEW_SPECS[kind]
        table.add_row(
            kind.value,
            " ".join(f":{alias}" for alias in kind.aliases),
            ", ".join(spec.columns),
            ", ".join(spec.actions) or "-",
        )
    return table
