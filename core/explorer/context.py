"""
core/explorer/context.py - 엔드포인트 컨텍스트 관리

':ctx'로 나열하고 ':ctx <name>'으로 전환하는 메모리 내 엔드포인트 목록입니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.exceptions import ContextError

logger = logging.getLogger(__name__)

DEFAULT_CONTEXTS: tuple[str, ...] = ("vc-primary", "vc-lab")


class ContextManager:
    """엔드포인트 목록과 활성 엔드포인트

    Args:
        endpoints: 엔드포인트 이름 (비어 있으면 기본 목록)
        active: 초기 활성 엔드포인트 (없으면 첫 번째)
    """

    def __init__(self, endpoints: Sequence[str] | None = None, active: str | None = None):
        self._endpoints = list(endpoints) if endpoints else list(DEFAULT_CONTEXTS)
        if active is not None and active not in self._endpoints:
            raise ContextError(active)
        self._active = active or self._endpoints[0]

    @property
    def active(self) -> str:
        return self._active

    def list(self) -> list[str]:
        return list(self._endpoints)

    def switch(self, name: str) -> None:
        """활성 엔드포인트 전환

        Raises:
            ContextError: 알 수 없는 엔드포인트
        """
        value = name.strip()
        if value not in self._endpoints:
            raise ContextError(value)
        logger.info("컨텍스트 전환: %s → %s", self._active, value)
        self._active = value
