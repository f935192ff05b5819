"""
core/explorer/navigator.py - 명령 모드 리소스 전환

활성 리소스 종류를 추적하고 카탈로그로부터 뷰를 만듭니다.
"""

from __future__ import annotations

import logging

from core.exceptions import UnknownResourceError

from .catalog import VIEW_SPECS, build_view
from .command import parse_resource_command
from .types import Catalog, ResourceKind, ResourceView

logger = logging.getLogger(__name__)


class Navigator:
    """':' 명령으로 활성 리소스 뷰를 전환하는 네비게이터

    Args:
        catalog: 행 카탈로그
        active: 초기 리소스 종류 (기본 vm)
    """

    def __init__(self, catalog: Catalog, active: ResourceKind = ResourceKind.VM):
        self._catalog = catalog
        self._active = active

    @property
    def active_view(self) -> ResourceKind:
        return self._active

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @catalog.setter
    def catalog(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def execute(self, command: str) -> ResourceView:
        """':alias' 명령을 해석해 활성 뷰를 전환

        Raises:
            MissingCommandPrefixError: ':' 접두사 없음
            UnknownResourceError: 알 수 없는 별칭
        """
        resource = parse_resource_command(command)
        view = build_view(resource, self._catalog)
        self._active = resource
        logger.debug("활성 뷰 전환: %s (%d행)", resource, len(view.rows))
        return view

    def table_for(self, resource: ResourceKind | str) -> ResourceView:
        """상태를 바꾸지 않고 특정 리소스 종류의 뷰 생성

        Raises:
            UnknownResourceError: 빌더가 없는 종류
        """
        try:
            kind = ResourceKind(resource)
        except ValueError as e:
            raise UnknownResourceError(str(resource)) from e
        if kind not in VIEW_SPECS:
            raise UnknownResourceError(kind.value)
        return build_view(kind, self._catalog)
