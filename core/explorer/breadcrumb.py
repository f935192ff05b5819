"""
core/explorer/breadcrumb.py - 선택 행의 계층 경로

    vm         → home > datacenter > cluster > host > vm
    host       → home > datacenter > cluster > host
    cluster    → home > datacenter > cluster
    datacenter → home > datacenter
    그 외 / 선택 없음 / 행 없음 → home > <kind>
"""

from __future__ import annotations

from .types import Catalog, ResourceKind

HOME = "home"
SEPARATOR = " > "


def join_breadcrumb(*parts: str) -> str:
    """빈 부분을 건너뛰고 ' > '로 연결"""
    return SEPARATOR.join(part.strip() for part in parts if part.strip())


def fallback_breadcrumb(resource: ResourceKind) -> str:
    return join_breadcrumb(HOME, resource.value)


def breadcrumb_path(resource: ResourceKind, row_id: str | None, catalog: Catalog) -> str:
    """선택 행 식별자로 계층 경로 생성

    Args:
        resource: 현재 뷰 종류
        row_id: 선택 행 식별자 (선택 없으면 None)
        catalog: 부모 관계 조회용 카탈로그
    """
    if row_id is None:
        return fallback_breadcrumb(resource)

    if resource is ResourceKind.VM:
        vm = catalog.find_vm(row_id)
        if vm is None:
            return fallback_breadcrumb(resource)
        datacenter = catalog.datacenter_for_cluster(vm.cluster)
        return join_breadcrumb(HOME, datacenter, vm.cluster, vm.host, vm.name)

    if resource is ResourceKind.HOST:
        host = catalog.find_host(row_id)
        if host is None:
            return fallback_breadcrumb(resource)
        datacenter = catalog.datacenter_for_cluster(host.cluster)
        return join_breadcrumb(HOME, datacenter, host.cluster, host.name)

    if resource is ResourceKind.CLUSTER:
        cluster = catalog.find_cluster(row_id)
        if cluster is None:
            return fallback_breadcrumb(resource)
        return join_breadcrumb(HOME, cluster.datacenter, cluster.name)

    if resource is ResourceKind.DATACENTER:
        datacenter_row = catalog.find_datacenter(row_id)
        if datacenter_row is None:
            return fallback_breadcrumb(resource)
        return join_breadcrumb(HOME, datacenter_row.name)

    return fallback_breadcrumb(resource)
