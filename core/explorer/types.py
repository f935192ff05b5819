"""
core/explorer/types.py - 탐색기 데이터 타입

리소스 종류, 종류별 행 레코드, 카탈로그, 화면용 ResourceView,
액션 기록(전이/감사) 타입을 정의합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResourceKind(str, Enum):
    """탐색기가 표시할 수 있는 리소스 종류"""

    VM = "vm"
    LUN = "lun"
    CLUSTER = "cluster"
    DATACENTER = "datacenter"
    RESOURCE_POOL = "resourcepool"
    NETWORK = "network"
    TEMPLATE = "template"
    SNAPSHOT = "snapshot"
    TASK = "task"
    EVENT = "event"
    ALARM = "alarm"
    FOLDER = "folder"
    TAG = "tag"
    HOST = "host"
    DATASTORE = "datastore"

    def __str__(self) -> str:
        return self.value

    @property
    def aliases(self) -> tuple[str, ...]:
        """이 종류로 해석되는 별칭 목록"""
        return tuple(alias for alias, kind in RESOURCE_ALIASES.items() if kind is self)

    @classmethod
    def resolve(cls, name: str) -> ResourceKind | None:
        """별칭(대소문자 무시)을 리소스 종류로 변환

        Args:
            name: 별칭 또는 정식 이름 (예: "vms", "DS")

        Returns:
            ResourceKind 또는 알 수 없으면 None
        """
        return RESOURCE_ALIASES.get(name.strip().lower())


RESOURCE_ALIASES: dict[str, ResourceKind] = {
    "vm": ResourceKind.VM,
    "vms": ResourceKind.VM,
    "lun": ResourceKind.LUN,
    "luns": ResourceKind.LUN,
    "cluster": ResourceKind.CLUSTER,
    "clusters": ResourceKind.CLUSTER,
    "cl": ResourceKind.CLUSTER,
    "dc": ResourceKind.DATACENTER,
    "datacenter": ResourceKind.DATACENTER,
    "datacenters": ResourceKind.DATACENTER,
    "rp": ResourceKind.RESOURCE_POOL,
    "resourcepool": ResourceKind.RESOURCE_POOL,
    "resourcepools": ResourceKind.RESOURCE_POOL,
    "nw": ResourceKind.NETWORK,
    "network": ResourceKind.NETWORK,
    "networks": ResourceKind.NETWORK,
    "tp": ResourceKind.TEMPLATE,
    "template": ResourceKind.TEMPLATE,
    "templates": ResourceKind.TEMPLATE,
    "ss": ResourceKind.SNAPSHOT,
    "snap": ResourceKind.SNAPSHOT,
    "snapshot": ResourceKind.SNAPSHOT,
    "snapshots": ResourceKind.SNAPSHOT,
    "task": ResourceKind.TASK,
    "tasks": ResourceKind.TASK,
    "event": ResourceKind.EVENT,
    "events": ResourceKind.EVENT,
    "alarm": ResourceKind.ALARM,
    "alarms": ResourceKind.ALARM,
    "folder": ResourceKind.FOLDER,
    "folders": ResourceKind.FOLDER,
    "tag": ResourceKind.TAG,
    "tags": ResourceKind.TAG,
    "host": ResourceKind.HOST,
    "hosts": ResourceKind.HOST,
    "datastore": ResourceKind.DATASTORE,
    "datastores": ResourceKind.DATASTORE,
    "ds": ResourceKind.DATASTORE,
}


def resource_command_aliases() -> list[str]:
    """모든 별칭을 ':' 명령 형태로 정렬해 반환"""
    return sorted(f":{alias}" for alias in RESOURCE_ALIASES)


# =============================================================================
# 종류별 행 레코드
# =============================================================================


@dataclass
class VMSnapshot:
    """VM 스냅샷 요약"""

    identifier: str
    timestamp: str = ""


@dataclass
class VMRow:
    """VM 행"""

    name: str
    tags: str = ""
    cluster: str = ""
    host: str = ""
    network: str = ""
    power_state: str = ""
    datastore: str = ""
    attached_storage: str = ""
    ip_address: str = ""
    dns_name: str = ""
    cpu_count: int = 0
    memory_mb: int = 0
    used_cpu_percent: int = 0
    used_memory_mb: int = 0
    used_storage_gb: int = 0
    largest_disk_gb: int = 0
    snapshot_total_gb: int = 0
    owner: str = ""
    comments: str = ""
    description: str = ""
    snapshot_count: int = 0
    snapshots: list[VMSnapshot] = field(default_factory=list)

    @property
    def effective_snapshot_count(self) -> int:
        if self.snapshot_count > 0:
            return self.snapshot_count
        return len(self.snapshots)


@dataclass
class LUNRow:
    """LUN 행"""

    name: str
    tags: str = ""
    cluster: str = ""
    datastore: str = ""
    capacity_gb: int = 0
    used_gb: int = 0


@dataclass
class ClusterRow:
    """클러스터 행"""

    name: str
    tags: str = ""
    datacenter: str = ""
    hosts: int = 0
    vm_count: int = 0
    cpu_usage_percent: int = 0
    mem_usage_percent: int = 0
    resource_pool_count: int = 0
    network_count: int = 0


@dataclass
class DatacenterRow:
    """데이터센터 행"""

    name: str
    cluster_count: int = 0
    host_count: int = 0
    vm_count: int = 0
    datastore_count: int = 0
    cpu_usage_percent: int = 0
    mem_usage_percent: int = 0


@dataclass
class ResourcePoolRow:
    """리소스 풀 행"""

    name: str
    cluster: str = ""
    cpu_reservation_mhz: int = 0
    mem_reservation_mb: int = 0
    vm_count: int = 0
    cpu_limit_mhz: int = 0
    mem_limit_mb: int = 0


@dataclass
class NetworkRow:
    """네트워크 행"""

    name: str
    type: str = ""
    vlan: str = ""
    switch: str = ""
    attached_vms: int = 0
    mtu: int = 0
    uplinks: int = 0


@dataclass
class TemplateRow:
    """VM 템플릿 행"""

    name: str
    os: str = ""
    datastore: str = ""
    folder: str = ""
    age: str = ""
    cpu_count: int = 0
    memory_mb: int = 0


@dataclass
class SnapshotRow:
    """VM 스냅샷 행"""

    vm: str
    snapshot: str
    size: str = ""
    created: str = ""
    age: str = ""
    quiesced: str = ""
    owner: str = ""


@dataclass
class TaskRow:
    """작업 스트림 행"""

    entity: str
    action: str
    state: str = ""
    started: str = ""
    duration: str = ""
    owner: str = ""


@dataclass
class EventRow:
    """이벤트 스트림 행"""

    time: str
    severity: str = ""
    entity: str = ""
    message: str = ""
    user: str = ""


@dataclass
class AlarmRow:
    """활성 알람 행"""

    entity: str
    alarm: str
    status: str = ""
    triggered: str = ""
    acked_by: str = ""


@dataclass
class FolderRow:
    """인벤토리 폴더 행"""

    path: str
    type: str = ""
    children: int = 0
    vm_count: int = 0


@dataclass
class TagRow:
    """태그/카테고리 행"""

    tag: str
    category: str = ""
    cardinality: str = ""
    attached_objects: int = 0


@dataclass
class HostRow:
    """호스트 행"""

    name: str
    tags: str = ""
    cluster: str = ""
    cpu_usage_percent: int = 0
    mem_usage_percent: int = 0
    connection_state: str = ""
    core_count: int = 0
    thread_count: int = 0
    vm_count: int = 0


@dataclass
class DatastoreRow:
    """데이터스토어 행"""

    name: str
    tags: str = ""
    cluster: str = ""
    capacity_gb: int = 0
    used_gb: int = 0
    free_gb: int = 0
    type: str = ""
    latency_ms: int = 0


@dataclass
class Catalog:
    """리소스 종류별 행 모음

    세션 생성 시 외부에서 주입되며, 호스트 유지보수 액션의 후처리는
    새 스냅샷(dataclasses.replace)으로 교체하는 방식으로만 반영됩니다.
    """

    vms: list[VMRow] = field(default_factory=list)
    luns: list[LUNRow] = field(default_factory=list)
    clusters: list[ClusterRow] = field(default_factory=list)
    datacenters: list[DatacenterRow] = field(default_factory=list)
    resource_pools: list[ResourcePoolRow] = field(default_factory=list)
    networks: list[NetworkRow] = field(default_factory=list)
    templates: list[TemplateRow] = field(default_factory=list)
    snapshots: list[SnapshotRow] = field(default_factory=list)
    tasks: list[TaskRow] = field(default_factory=list)
    events: list[EventRow] = field(default_factory=list)
    alarms: list[AlarmRow] = field(default_factory=list)
    folders: list[FolderRow] = field(default_factory=list)
    tags: list[TagRow] = field(default_factory=list)
    hosts: list[HostRow] = field(default_factory=list)
    datastores: list[DatastoreRow] = field(default_factory=list)

    def find_vm(self, name: str) -> VMRow | None:
        return next((row for row in self.vms if row.name == name), None)

    def find_host(self, name: str) -> HostRow | None:
        return next((row for row in self.hosts if row.name == name), None)

    def find_cluster(self, name: str) -> ClusterRow | None:
        return next((row for row in self.clusters if row.name == name), None)

    def find_datacenter(self, name: str) -> DatacenterRow | None:
        return next((row for row in self.datacenters if row.name == name), None)

    def has_datastore(self, name: str) -> bool:
        return any(row.name == name for row in self.datastores)

    def has_snapshot(self, snapshot_id: str) -> bool:
        return any(row.snapshot == snapshot_id for row in self.snapshots)

    def datacenter_for_cluster(self, cluster: str) -> str:
        """클러스터가 속한 데이터센터 이름 (없으면 빈 문자열)"""
        row = self.find_cluster(cluster)
        return row.datacenter if row else ""

    def first_resource_pool_for_cluster(self, cluster: str) -> str | None:
        return next((row.name for row in self.resource_pools if row.cluster == cluster), None)


# =============================================================================
# 화면 타입
# =============================================================================


@dataclass
class TableRow:
    """정렬/필터 후에도 유지되는 (식별자, 셀) 쌍"""

    id: str
    cells: list[str]

    def copy(self) -> TableRow:
        return TableRow(id=self.id, cells=list(self.cells))


@dataclass
class ResourceView:
    """화면에 표시할 리소스 테이블

    Attributes:
        resource: 리소스 종류
        columns: 컬럼 이름 (표시 순서)
        rows: (식별자, 셀) 행 목록
        sort_hotkeys: 정렬 단축키 → 컬럼 이름
        actions: 이 종류에서 실행 가능한 액션 이름
    """

    resource: ResourceKind
    columns: list[str] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)
    sort_hotkeys: dict[str, str] = field(default_factory=dict)
    actions: list[str] = field(default_factory=list)

    @property
    def ids(self) -> list[str]:
        return [row.id for row in self.rows]

    @property
    def cells(self) -> list[list[str]]:
        return [row.cells for row in self.rows]

    def column_index(self, name: str) -> int:
        """컬럼 위치 (없으면 -1)"""
        try:
            return self.columns.index(name)
        except ValueError:
            return -1

    def with_rows(self, rows: list[TableRow]) -> ResourceView:
        """같은 메타데이터에 다른 행 목록을 가진 새 뷰"""
        return ResourceView(
            resource=self.resource,
            columns=list(self.columns),
            rows=rows,
            sort_hotkeys=dict(self.sort_hotkeys),
            actions=list(self.actions),
        )

    def copy(self) -> ResourceView:
        return self.with_rows([row.copy() for row in self.rows])


@dataclass
class DetailField:
    """상세 패널의 키/값 한 쌍"""

    key: str
    value: str


@dataclass
class ResourceDetails:
    """선택된 행의 상세 패널"""

    title: str
    fields: list[DetailField] = field(default_factory=list)


# =============================================================================
# 액션 기록
# =============================================================================


@dataclass(frozen=True)
class ActionRequest:
    """디스패치 시점에 고정된 액션 요청 (재시도/확인/취소 상관용)"""

    resource: ResourceKind
    action: str
    ids: tuple[str, ...]


@dataclass(frozen=True)
class ActionTransition:
    """액션 수명주기 전이 한 건"""

    resource: ResourceKind
    action: str
    status: str
    timestamp: str


@dataclass(frozen=True)
class ActionAudit:
    """완료된 액션의 책임 추적 기록"""

    resource: ResourceKind
    actor: str
    timestamp: str
    action: str
    targets: tuple[str, ...]
    outcome: str
    failed_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActionPreview:
    """실행 전 대상과 영향 요약"""

    resource: ResourceKind
    action: str
    target_count: int
    target_ids: tuple[str, ...]
    side_effects: tuple[str, ...]


@dataclass(frozen=True)
class ActionProposal:
    """명시적 확인 대기 핸들 (propose → confirm)"""

    token: str
    action_text: str
    request: ActionRequest
    destructive: bool
