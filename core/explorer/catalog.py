"""
core/explorer/catalog.py - 리소스 종류별 뷰 빌더

종류마다 컬럼, 셀 변환, 행 식별자, 정렬 단축키, 액션 목록을 정의하고
카탈로그의 행 목록으로 ResourceView를 만듭니다. 모든 빌더는 상태가 없으며
같은 입력에 대해 항상 같은 컬럼 순서와 셀 값을 돌려줍니다.

행 식별자:
    - 대부분: 이름
    - snapshot: "vm:snapshot"
    - task: "entity:action:started"
    - event: "time:entity:message"
    - alarm: "entity:alarm"
    - folder: 경로, tag: 태그 이름
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from core.exceptions import InvalidColumnsError

from .types import (
    AlarmRow,
    Catalog,
    ClusterRow,
    DatacenterRow,
    DatastoreRow,
    EventRow,
    FolderRow,
    HostRow,
    LUNRow,
    NetworkRow,
    ResourceKind,
    ResourcePoolRow,
    ResourceView,
    SnapshotRow,
    TableRow,
    TagRow,
    TaskRow,
    TemplateRow,
    VMRow,
)

EMPTY_CELL = "-"


def default_cell(value: str) -> str:
    """빈 문자열 셀은 '-'로 표시"""
    if not value or not value.strip():
        return EMPTY_CELL
    return value


def lun_util_percent(capacity_gb: int, used_gb: int) -> int:
    """LUN 사용률 (0~100, 용량이 0 이하면 0)"""
    if capacity_gb <= 0:
        return 0
    percent = (used_gb * 100) // capacity_gb
    return max(0, min(100, percent))


# =============================================================================
# 셀 변환 (id, cells)
# =============================================================================


def vm_cells(row: VMRow) -> tuple[str, list[str]]:
    attached_storage = default_cell(row.attached_storage)
    if attached_storage == EMPTY_CELL:
        attached_storage = default_cell(row.datastore)
    return row.name, [
        row.name,
        default_cell(row.power_state),
        str(row.used_cpu_percent),
        str(row.used_memory_mb),
        str(row.used_storage_gb),
        default_cell(row.ip_address),
        default_cell(row.dns_name),
        default_cell(row.cluster),
        default_cell(row.host),
        default_cell(row.network),
        str(row.cpu_count),
        str(row.memory_mb),
        str(row.largest_disk_gb),
        str(row.effective_snapshot_count),
        str(row.snapshot_total_gb),
        attached_storage,
    ]


def lun_cells(row: LUNRow) -> tuple[str, list[str]]:
    free_gb = max(0, row.capacity_gb - row.used_gb)
    return row.name, [
        row.name,
        default_cell(row.tags),
        default_cell(row.cluster),
        default_cell(row.datastore),
        str(row.capacity_gb),
        str(row.used_gb),
        str(free_gb),
        str(lun_util_percent(row.capacity_gb, row.used_gb)),
    ]


def cluster_cells(row: ClusterRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.tags),
        default_cell(row.datacenter),
        str(row.hosts),
        str(row.vm_count),
        str(row.cpu_usage_percent),
        str(row.mem_usage_percent),
        str(row.resource_pool_count),
        str(row.network_count),
    ]


def datacenter_cells(row: DatacenterRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        str(row.cluster_count),
        str(row.host_count),
        str(row.vm_count),
        str(row.datastore_count),
        str(row.cpu_usage_percent),
        str(row.mem_usage_percent),
    ]


def resource_pool_cells(row: ResourcePoolRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.cluster),
        str(row.cpu_reservation_mhz),
        str(row.mem_reservation_mb),
        str(row.vm_count),
        str(row.cpu_limit_mhz),
        str(row.mem_limit_mb),
    ]


def network_cells(row: NetworkRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.type),
        default_cell(row.vlan),
        default_cell(row.switch),
        str(row.attached_vms),
        str(row.mtu),
        str(row.uplinks),
    ]


def template_cells(row: TemplateRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.os),
        default_cell(row.datastore),
        default_cell(row.folder),
        default_cell(row.age),
        str(row.cpu_count),
        str(row.memory_mb),
    ]


def snapshot_cells(row: SnapshotRow) -> tuple[str, list[str]]:
    row_id = f"{default_cell(row.vm)}:{default_cell(row.snapshot)}"
    return row_id, [
        default_cell(row.vm),
        default_cell(row.snapshot),
        default_cell(row.size),
        default_cell(row.created),
        default_cell(row.age),
        default_cell(row.quiesced),
        default_cell(row.owner),
    ]


def task_cells(row: TaskRow) -> tuple[str, list[str]]:
    row_id = f"{default_cell(row.entity)}:{default_cell(row.action)}:{default_cell(row.started)}"
    return row_id, [
        default_cell(row.entity),
        default_cell(row.action),
        default_cell(row.state),
        default_cell(row.started),
        default_cell(row.duration),
        default_cell(row.owner),
    ]


def event_cells(row: EventRow) -> tuple[str, list[str]]:
    row_id = f"{default_cell(row.time)}:{default_cell(row.entity)}:{default_cell(row.message)}"
    return row_id, [
        default_cell(row.time),
        default_cell(row.severity),
        default_cell(row.entity),
        default_cell(row.message),
        default_cell(row.user),
    ]


def alarm_cells(row: AlarmRow) -> tuple[str, list[str]]:
    row_id = f"{default_cell(row.entity)}:{default_cell(row.alarm)}"
    return row_id, [
        default_cell(row.entity),
        default_cell(row.alarm),
        default_cell(row.status),
        default_cell(row.triggered),
        default_cell(row.acked_by),
    ]


def folder_cells(row: FolderRow) -> tuple[str, list[str]]:
    return default_cell(row.path), [
        default_cell(row.path),
        default_cell(row.type),
        str(row.children),
        str(row.vm_count),
    ]


def tag_cells(row: TagRow) -> tuple[str, list[str]]:
    return default_cell(row.tag), [
        default_cell(row.tag),
        default_cell(row.category),
        default_cell(row.cardinality),
        str(row.attached_objects),
    ]


def host_cells(row: HostRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.tags),
        default_cell(row.cluster),
        str(row.cpu_usage_percent),
        str(row.mem_usage_percent),
        default_cell(row.connection_state),
        str(row.core_count),
        str(row.thread_count),
        str(row.vm_count),
    ]


def datastore_cells(row: DatastoreRow) -> tuple[str, list[str]]:
    return row.name, [
        row.name,
        default_cell(row.tags),
        default_cell(row.cluster),
        str(row.capacity_gb),
        str(row.used_gb),
        str(row.free_gb),
        default_cell(row.type),
        str(row.latency_ms),
    ]


# =============================================================================
# 종류별 뷰 정의
# =============================================================================


@dataclass(frozen=True)
class ViewSpec:
    """리소스 종류 하나의 뷰 정의

    Attributes:
        columns: 컬럼 이름 (표시 순서)
        sort_hotkeys: 정렬 단축키 → 컬럼 이름
        actions: 실행 가능한 액션 이름
        rows_of: 카탈로그에서 이 종류의 행 목록을 꺼내는 함수
        to_cells: 행 → (식별자, 셀)
    """

    columns: tuple[str, ...]
    sort_hotkeys: dict[str, str]
    actions: tuple[str, ...]
    rows_of: Callable[[Catalog], Sequence[Any]]
    to_cells: Callable[[Any], tuple[str, list[str]]]


VIEW_SPECS: dict[ResourceKind, ViewSpec] = {
    ResourceKind.VM: ViewSpec(
        columns=(
            "NAME",
            "POWER",
            "USED_CPU_PERCENT",
            "USED_MEMORY_MB",
            "USED_STORAGE_GB",
            "IP_ADDRESS",
            "DNS_NAME",
            "CLUSTER",
            "HOST",
            "NETWORK",
            "TOTAL_CPU_CORES",
            "TOTAL_RAM_MB",
            "LARGEST_DISK_GB",
            "SNAPSHOT_COUNT",
            "SNAPSHOT_TOTAL_GB",
            "ATTACHED_STORAGE",
        ),
        sort_hotkeys={
            "N": "NAME",
            "P": "POWER",
            "U": "USED_CPU_PERCENT",
            "M": "USED_MEMORY_MB",
            "G": "USED_STORAGE_GB",
            "I": "IP_ADDRESS",
            "D": "DNS_NAME",
            "C": "CLUSTER",
            "H": "HOST",
            "W": "NETWORK",
            "T": "TOTAL_CPU_CORES",
            "R": "TOTAL_RAM_MB",
            "L": "LARGEST_DISK_GB",
            "S": "SNAPSHOT_COUNT",
            "Z": "SNAPSHOT_TOTAL_GB",
            "A": "ATTACHED_STORAGE",
        },
        actions=("power-on", "power-off", "reset", "suspend", "migrate", "edit-tags"),
        rows_of=lambda catalog: catalog.vms,
        to_cells=vm_cells,
    ),
    ResourceKind.LUN: ViewSpec(
        columns=("NAME", "TAGS", "CLUSTER", "DATASTORE", "CAPACITY_GB", "USED_GB", "FREE_GB", "UTIL_PERCENT"),
        sort_hotkeys={
            "N": "NAME",
            "T": "TAGS",
            "C": "CLUSTER",
            "D": "DATASTORE",
            "G": "CAPACITY_GB",
            "U": "USED_GB",
            "F": "FREE_GB",
            "P": "UTIL_PERCENT",
        },
        actions=("rescan", "expand", "edit-tags"),
        rows_of=lambda catalog: catalog.luns,
        to_cells=lun_cells,
    ),
    ResourceKind.CLUSTER: ViewSpec(
        columns=(
            "NAME",
            "TAGS",
            "DATACENTER",
            "HOSTS",
            "VMS",
            "CPU_PERCENT",
            "MEM_PERCENT",
            "RESOURCE_POOLS",
            "NETWORKS",
        ),
        sort_hotkeys={
            "N": "NAME",
            "T": "TAGS",
            "D": "DATACENTER",
            "H": "HOSTS",
            "V": "VMS",
            "C": "CPU_PERCENT",
            "M": "MEM_PERCENT",
            "R": "RESOURCE_POOLS",
            "W": "NETWORKS",
        },
        actions=("enter-maintenance", "exit-maintenance", "rebalance", "edit-tags"),
        rows_of=lambda catalog: catalog.clusters,
        to_cells=cluster_cells,
    ),
    ResourceKind.DATACENTER: ViewSpec(
        columns=("NAME", "CLUSTERS", "HOSTS", "VMS", "DATASTORES", "CPU_PERCENT", "MEM_PERCENT"),
        sort_hotkeys={
            "N": "NAME",
            "C": "CLUSTERS",
            "H": "HOSTS",
            "V": "VMS",
            "D": "DATASTORES",
            "P": "CPU_PERCENT",
            "M": "MEM_PERCENT",
        },
        actions=("refresh", "edit-tags"),
        rows_of=lambda catalog: catalog.datacenters,
        to_cells=datacenter_cells,
    ),
    ResourceKind.RESOURCE_POOL: ViewSpec(
        columns=("NAME", "CLUSTER", "CPU_RES", "MEM_RES", "VM_COUNT", "CPU_LIMIT", "MEM_LIMIT"),
        sort_hotkeys={
            "N": "NAME",
            "C": "CLUSTER",
            "P": "CPU_RES",
            "M": "MEM_RES",
            "V": "VM_COUNT",
            "L": "CPU_LIMIT",
            "R": "MEM_LIMIT",
        },
        actions=("set-reservation", "rebalance", "edit-tags"),
        rows_of=lambda catalog: catalog.resource_pools,
        to_cells=resource_pool_cells,
    ),
    ResourceKind.NETWORK: ViewSpec(
        columns=("NAME", "TYPE", "VLAN", "SWITCH", "ATTACHED_VMS", "MTU", "UPLINKS"),
        sort_hotkeys={
            "N": "NAME",
            "T": "TYPE",
            "V": "VLAN",
            "S": "SWITCH",
            "A": "ATTACHED_VMS",
            "M": "MTU",
            "U": "UPLINKS",
        },
        actions=("attach-vm", "detach-vm", "edit-tags"),
        rows_of=lambda catalog: catalog.networks,
        to_cells=network_cells,
    ),
    ResourceKind.TEMPLATE: ViewSpec(
        columns=("NAME", "OS", "DATASTORE", "FOLDER", "AGE", "CPU_COUNT", "MEMORY_MB"),
        sort_hotkeys={
            "N": "NAME",
            "O": "OS",
            "D": "DATASTORE",
            "F": "FOLDER",
            "A": "AGE",
            "C": "CPU_COUNT",
            "M": "MEMORY_MB",
        },
        actions=("clone", "edit-tags"),
        rows_of=lambda catalog: catalog.templates,
        to_cells=template_cells,
    ),
    ResourceKind.SNAPSHOT: ViewSpec(
        columns=("VM", "SNAPSHOT", "SIZE", "CREATED", "AGE", "QUIESCED", "OWNER"),
        sort_hotkeys={
            "V": "VM",
            "S": "SNAPSHOT",
            "Z": "SIZE",
            "C": "CREATED",
            "A": "AGE",
            "Q": "QUIESCED",
            "O": "OWNER",
        },
        actions=("create", "remove", "revert", "edit-tags"),
        rows_of=lambda catalog: catalog.snapshots,
        to_cells=snapshot_cells,
    ),
    ResourceKind.TASK: ViewSpec(
        columns=("ENTITY", "ACTION", "STATE", "STARTED", "DURATION", "OWNER"),
        sort_hotkeys={"E": "ENTITY", "A": "ACTION", "S": "STATE", "T": "STARTED", "D": "DURATION", "O": "OWNER"},
        actions=("cancel", "retry"),
        rows_of=lambda catalog: catalog.tasks,
        to_cells=task_cells,
    ),
    ResourceKind.EVENT: ViewSpec(
        columns=("TIME", "SEVERITY", "ENTITY", "MESSAGE", "USER"),
        sort_hotkeys={"T": "TIME", "S": "SEVERITY", "E": "ENTITY", "M": "MESSAGE", "U": "USER"},
        actions=("acknowledge",),
        rows_of=lambda catalog: catalog.events,
        to_cells=event_cells,
    ),
    ResourceKind.ALARM: ViewSpec(
        columns=("ENTITY", "ALARM", "STATUS", "TRIGGERED", "ACKED_BY"),
        sort_hotkeys={"E": "ENTITY", "A": "ALARM", "S": "STATUS", "T": "TRIGGERED", "K": "ACKED_BY"},
        actions=("acknowledge", "clear"),
        rows_of=lambda catalog: catalog.alarms,
        to_cells=alarm_cells,
    ),
    ResourceKind.FOLDER: ViewSpec(
        columns=("PATH", "TYPE", "CHILDREN", "VM_COUNT"),
        sort_hotkeys={"P": "PATH", "T": "TYPE", "C": "CHILDREN", "V": "VM_COUNT"},
        actions=("open", "rename"),
        rows_of=lambda catalog: catalog.folders,
        to_cells=folder_cells,
    ),
    ResourceKind.TAG: ViewSpec(
        columns=("TAG", "CATEGORY", "CARDINALITY", "ATTACHED_OBJECTS"),
        sort_hotkeys={"T": "TAG", "C": "CATEGORY", "R": "CARDINALITY", "A": "ATTACHED_OBJECTS"},
        actions=("assign", "unassign"),
        rows_of=lambda catalog: catalog.tags,
        to_cells=tag_cells,
    ),
    ResourceKind.HOST: ViewSpec(
        columns=(
            "NAME",
            "TAGS",
            "CLUSTER",
            "CPU_PERCENT",
            "MEM_PERCENT",
            "CONNECTION",
            "CORES",
            "THREADS",
            "VMS",
        ),
        sort_hotkeys={
            "N": "NAME",
            "T": "TAGS",
            "C": "CLUSTER",
            "P": "CPU_PERCENT",
            "M": "MEM_PERCENT",
            "S": "CONNECTION",
            "O": "CORES",
            "H": "THREADS",
            "V": "VMS",
        },
        actions=("enter-maintenance", "exit-maintenance", "disconnect", "reconnect", "edit-tags"),
        rows_of=lambda catalog: catalog.hosts,
        to_cells=host_cells,
    ),
    ResourceKind.DATASTORE: ViewSpec(
        columns=("NAME", "TAGS", "CLUSTER", "CAPACITY_GB", "USED_GB", "FREE_GB", "TYPE", "LATENCY_MS"),
        sort_hotkeys={
            "N": "NAME",
            "T": "TAGS",
            "C": "CLUSTER",
            "A": "CAPACITY_GB",
            "U": "USED_GB",
            "F": "FREE_GB",
            "Y": "TYPE",
            "L": "LATENCY_MS",
        },
        actions=("enter-maintenance", "exit-maintenance", "evacuate", "refresh", "edit-tags"),
        rows_of=lambda catalog: catalog.datastores,
        to_cells=datastore_cells,
    ),
}


def build_view(resource: ResourceKind, catalog: Catalog) -> ResourceView:
    """카탈로그로부터 리소스 종류의 전체 뷰 생성

    Args:
        resource: 리소스 종류
        catalog: 행 카탈로그

    Returns:
        새 ResourceView (호출마다 독립된 복사본)
    """
    spec = VIEW_SPECS[resource]
    rows: list[TableRow] = []
    for record in spec.rows_of(catalog):
        row_id, cells = spec.to_cells(record)
        rows.append(TableRow(id=row_id, cells=cells))
    return ResourceView(
        resource=resource,
        columns=list(spec.columns),
        rows=rows,
        sort_hotkeys=dict(spec.sort_hotkeys),
        actions=list(spec.actions),
    )


# =============================================================================
# 컬럼 선택
# =============================================================================


def normalize_column_selection(columns: Sequence[str]) -> list[str]:
    """대문자 변환, 공백 제거, 중복 제거 (입력 순서 유지)"""
    normalized: list[str] = []
    for raw in columns:
        value = raw.strip().upper()
        if value and value not in normalized:
            normalized.append(value)
    return normalized


def select_visible_columns(view: ResourceView, columns: Sequence[str]) -> tuple[ResourceView, list[str]]:
    """표시할 컬럼만 남긴 뷰 생성

    정렬 단축키는 남은 컬럼을 가리키는 것만 유지합니다.

    Args:
        view: 전체 컬럼 뷰
        columns: 표시할 컬럼 이름 (대소문자 무시)

    Returns:
        (컬럼이 선택된 새 뷰, 정규화된 컬럼 이름)

    Raises:
        InvalidColumnsError: 빈 선택 또는 알 수 없는 컬럼
    """
    normalized = normalize_column_selection(columns)
    if not normalized:
        raise InvalidColumnsError("empty selection")

    index_by_column = {column.upper(): index for index, column in enumerate(view.columns)}
    indexes: list[int] = []
    for column in normalized:
        if column not in index_by_column:
            raise InvalidColumnsError(f"unknown column {column}")
        indexes.append(index_by_column[column])

    visible_columns = [view.columns[index] for index in indexes]
    rows = [TableRow(id=row.id, cells=[row.cells[index] for index in indexes]) for row in view.rows]
    sort_hotkeys = {key: column for key, column in view.sort_hotkeys.items() if column in visible_columns}
    selected = ResourceView(
        resource=view.resource,
        columns=visible_columns,
        rows=rows,
        sort_hotkeys=sort_hotkeys,
        actions=list(view.actions),
    )
    return selected, normalized
