"""
cli/i18n/__init__.py - 다국어(i18n) 모듈

탐색기 CLI 메시지 번역을 제공합니다.
기본 언어는 한국어(ko)이며 영어(en)를 선택할 수 있습니다.

구조:
    - 메시지는 네임스페이스로 구분 (cli, explorer)
    - t()는 format 문자열 치환을 지원
    - 현재 언어는 ContextVar에 보관 (hs --lang, HYPERSPHERE_LANG)

Usage:
    from cli.i18n import t, set_lang

    print(t("explorer.ready"))                 # "명령 모드 준비 완료."
    print(t("cli.catalog_loaded", path="x"))   # 치환

    set_lang("en")
    print(t("explorer.ready"))                 # "Command mode ready."
"""

from __future__ import annotations

import contextlib
from contextvars import ContextVar
from typing import Any

_current_lang: ContextVar[str] = ContextVar("lang", default="ko")

SUPPORTED_LANGS = ("ko", "en")
DEFAULT_LANG = "ko"


def get_lang() -> str:
    """현재 언어 코드 반환"""
    return _current_lang.get()


def set_lang(lang: str) -> None:
    """현재 언어 설정 (지원하지 않는 코드는 기본 언어로 대체)

    Args:
        lang: 언어 코드 ("ko" 또는 "en")
    """
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG
    _current_lang.set(lang)


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """메시지 키를 현재 언어로 번역

    Args:
        key: "namespace.key" 형식의 메시지 키
        lang: 언어 지정 (없으면 현재 언어)
        **kwargs: format 치환 인자

    Returns:
        번역된 문자열, 키가 없으면 키 자체

    Examples:
        >>> t("cli.unknown_resource", name="vmz")
        "알 수 없는 리소스: vmz"

        >>> t("cli.unknown_resource", lang="en", name="vmz")
        "Unknown resource: vmz"
    """
    from cli.i18n.messages import MESSAGES

    if lang is None:
        lang = get_lang()
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG

    msg_dict = MESSAGES.get(key)
    if msg_dict is None:
        return key

    text = msg_dict.get(lang)
    if text is None:
        text = msg_dict.get(DEFAULT_LANG, key)

    if kwargs:
        with contextlib.suppress(KeyError, ValueError):
            text = text.format(**kwargs)

    return text


__all__ = [
    "t",
    "get_lang",
    "set_lang",
    "SUPPORTED_LANGS",
    "DEFAULT_LANG",
]
