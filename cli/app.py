"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    hs                      # 대화형 명령 모드 (hs explore 와 동일)
    hs --version            # 버전 표시
    hs --lang en explore    # 영어 출력
    hs explore [옵션]       # 표준 입력으로 명령 모드 실행
    hs view <별칭> [옵션]   # 리소스 뷰 한 번 출력
    hs resources            # 리소스 종류/별칭 목록

Usage:
    $ hs explore --catalog inventory.yaml --resource host --read-only
    $ echo ":host" | hs explore
    $ hs view host --filter "esxi-0[12]"
    $ python -m cli.app
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO, Any

import click
import questionary
from click import Context

from cli.i18n import set_lang, t
from cli.runner import CliActionExecutor, ConfirmCallback, ExplorerRunner
from cli.ui.console import build_resource_table, console, get_logger, print_error, print_explorer_banner
from core.config import ExplorerSettings, get_version, resolve_settings
from core.exceptions import ConfigError, ConfirmationRequiredError, HSError, ValidationError, format_error_for_user
from core.explorer.command import parse_resource_command
from core.explorer.context import ContextManager
from core.explorer.loader import default_catalog, load_catalog
from core.explorer.prompt import PromptState
from core.explorer.session import Session
from core.explorer.types import Catalog

# 엔진 로그가 명령 모드 출력에 섞이지 않도록 WARNING 이상만 표시
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

VERSION = get_version()


def _build_help_text() -> str:
    lines = [
        "HS - HyperSphere Explorer",
        "",
        t("cli.help_intro"),
        "",
        "\b",  # Click 줄바꿈 유지 마커
        t("cli.help_usage"),
        f"  hs explore            {t('cli.help_explore')}",
        f"  hs view <alias>       {t('cli.help_view')}",
        f"  hs resources          {t('cli.help_resources')}",
    ]
    return "\n".join(lines)


def _resolve(overrides: Mapping[str, Any], config_path: str | None) -> ExplorerSettings:
    try:
        return resolve_settings(overrides, config_path=config_path)
    except ConfigError as e:
        print_error(t("cli.config_error", error=format_error_for_user(e)))
        raise SystemExit(1) from e


def _load_catalog(path: str | None) -> Catalog:
    if path is None:
        return default_catalog()
    try:
        catalog = load_catalog(path)
    except ValidationError as e:
        print_error(t("cli.catalog_error", error=format_error_for_user(e)))
        raise SystemExit(1) from e
    logger.info(t("cli.catalog_loaded", path=path))
    return catalog


def _build_session(settings: ExplorerSettings, catalog: Catalog) -> Session:
    session = Session(
        catalog,
        resource=settings.resource,
        read_only=settings.read_only,
        actor=settings.actor,
        viewport_rows=settings.viewport_rows,
    )
    for action, seconds in settings.action_timeouts.items():
        session.set_action_timeout(action, seconds)
    for action, retries in settings.action_retries.items():
        session.set_action_retry_limit(action, retries)
    return session


def _confirm_callback(assume_yes: bool, stream: IO[str]) -> ConfirmCallback | None:
    """파괴적 액션 확인 방법 결정

    --yes 이면 항상 승인, TTY이면 questionary 확인, 그 외에는 None
    (같은 명령을 다시 입력해야 실행).
    """
    if assume_yes:
        return lambda _error: True
    if not stream.isatty():
        return None

    def confirm(error: ConfirmationRequiredError) -> bool:
        question = t(
            "explorer.confirm_action",
            action=error.action,
            count=len(error.targets),
            targets=", ".join(error.targets),
        )
        return bool(questionary.confirm(question, default=False).ask())

    return confirm


@click.group(invoke_without_command=True)
@click.version_option(VERSION, prog_name="hs")
@click.option(
    "--lang",
    type=click.Choice(["ko", "en"]),
    default=None,
    help="UI 언어 설정 / UI language (ko: 한국어, en: English)",
)
@click.pass_context
def cli(ctx: Context, lang: str | None) -> None:
    """HS - HyperSphere Explorer"""
    if lang:
        set_lang(lang)

    ctx.ensure_object(dict)
    ctx.obj["lang"] = lang

    if ctx.invoked_subcommand is None:
        ctx.invoke(explore_command)


cli.help = _build_help_text()


@cli.command("explore")
@click.option("-c", "--catalog", "catalog_path", type=click.Path(dir_okay=False), help="카탈로그 YAML/JSON 경로")
@click.option("-r", "--resource", default=None, help="초기 리소스 별칭 (예: vm, host, ds)")
@click.option("--read-only/--read-write", "read_only", default=None, help="읽기 전용 모드")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="설정 YAML 경로")
@click.option("--actor", default=None, help="감사 기록 작업자 이름")
@click.option("--viewport-rows", type=int, default=None, help="테이블 본문 최대 행 수")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="파괴적 액션 확인 생략")
@click.option("-v", "--verbose", is_flag=True, help="상세 로그 출력")
@click.pass_context
def explore_command(
    ctx: Context,
    catalog_path: str | None,
    resource: str | None,
    read_only: bool | None,
    config_path: str | None,
    actor: str | None,
    viewport_rows: int | None,
    assume_yes: bool,
    verbose: bool,
) -> None:
    """대화형 명령 모드

    \b
    Examples:
        hs explore                          # 데모 카탈로그
        hs explore -c inventory.yaml -r host
        printf ':host\\n!enter-maintenance\\n' | hs explore -y
    """
    obj = ctx.find_root().obj or {}
    settings = _resolve(
        {
            "resource": resource,
            "read_only": read_only,
            "actor": actor,
            "viewport_rows": viewport_rows,
            "lang": obj.get("lang"),
        },
        config_path,
    )
    set_lang(settings.lang)

    if verbose:
        get_logger("core", logging.DEBUG)
        get_logger("cli", logging.DEBUG)
        logger.info(t("cli.verbose_enabled"))

    session = _build_session(settings, _load_catalog(catalog_path))
    try:
        contexts = ContextManager(settings.contexts)
    except HSError as e:
        print_error(t("cli.config_error", error=format_error_for_user(e)))
        raise SystemExit(1) from e

    stdin = click.get_text_stream("stdin")
    runner = ExplorerRunner(
        session,
        PromptState(settings.history_size),
        contexts,
        CliActionExecutor(),
        confirm=_confirm_callback(assume_yes, stdin),
    )

    print_explorer_banner(
        t("explorer.banner_title"),
        t(
            "explorer.banner_subtitle",
            context=contexts.active,
            mode="RO" if session.read_only else "RW",
            actor=session.actor,
        ),
    )
    runner.run(stdin, click.echo)


@cli.command("view")
@click.argument("alias")
@click.option("-c", "--catalog", "catalog_path", type=click.Path(dir_okay=False), help="카탈로그 YAML/JSON 경로")
@click.option("-f", "--filter", "filter_expr", default=None, help="필터 식 (정규식, !역, -t 태그, -f 퍼지)")
@click.option("--columns", default=None, help="표시할 컬럼 (쉼표 구분)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="설정 YAML 경로")
def view_command(
    alias: str,
    catalog_path: str | None,
    filter_expr: str | None,
    columns: str | None,
    config_path: str | None,
) -> None:
    """리소스 뷰 한 번 출력

    \b
    Examples:
        hs view vm
        hs view host --columns NAME,CONNECTION
        hs view lun -f "!silver"
    """
    settings = _resolve({}, config_path)
    catalog = _load_catalog(catalog_path)
    try:
        resource = parse_resource_command(f":{alias}")
        settings.resource = resource
        session = _build_session(settings, catalog)
        if columns:
            session.set_visible_columns([c for c in columns.split(",") if c.strip()])
        if filter_expr:
            session.apply_filter_expression(filter_expr)
    except HSError as e:
        print_error(t("cli.view_error", error=format_error_for_user(e)))
        raise SystemExit(1) from e

    click.echo(session.render().rstrip("\n"))


@cli.command("resources")
def resources_command() -> None:
    """리소스 종류와 별칭 목록

    \b
    Examples:
        hs resources
    """
    table = build_resource_table(
        t("cli.resources_title"),
        (t("cli.col_kind"), t("cli.col_aliases"), t("cli.col_columns"), t("cli.col_actions")),
    )
    console.print(table)
    console.print()
    console.print(f"[dim]{t('cli.usage_hint')}[/dim]")


if __name__ == "__main__":
    cli()
