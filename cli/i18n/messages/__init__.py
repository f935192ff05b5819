"""
cli/i18n/messages/__init__.py - 메시지 레지스트리

하위 모듈의 메시지 딕셔너리를 모아 하나의 레지스트리로 등록합니다.

구조:
    MESSAGES = {
        "cli.catalog_loaded": {"ko": "...", "en": "..."},
        "explorer.ready": {"ko": "...", "en": "..."},
        ...
    }
"""

from __future__ import annotations

from typing import TypedDict


class MessageDict(TypedDict):
    """언어별 메시지"""

    ko: str
    en: str


MESSAGES: dict[str, MessageDict] = {}


def register_messages(namespace: str, messages: dict[str, MessageDict]) -> None:
    """네임스페이스 단위로 메시지 등록

    Args:
        namespace: 네임스페이스 접두사 (예: "cli", "explorer")
        messages: 키 → 번역
    """
    for key, value in messages.items():
        MESSAGES[f"{namespace}.{key}"] = value


# register_messages 정의 이후에 import
from cli.i18n.messages.cli_commands import CLI_MESSAGES  # noqa: E402
from cli.i18n.messages.explorer import EXPLORER_MESSAGES  # noqa: E402

register_messages("cli", CLI_MESSAGES)
register_messages("explorer", EXPLORER_MESSAGES)

__all__ = ["MESSAGES", "register_messages", "MessageDict"]
