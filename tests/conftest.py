"""
tests/conftest.py - pytest 공통 픽스처

데모 카탈로그, 고정 시계, 기록용 실행기/취소기를 제공합니다.

Usage:
    def test_something(session, executor):
        session.apply_action("power-on", executor)
        assert executor.calls
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.explorer.loader import default_catalog  # noqa: E402
from core.explorer.session import Session  # noqa: E402
from core.explorer.types import (  # noqa: E402
    Catalog,
    ClusterRow,
    DatacenterRow,
    FolderRow,
    HostRow,
    ResourcePoolRow,
    SnapshotRow,
    TagRow,
    VMRow,
    VMSnapshot,
)

FIXED_NOW = datetime(2026, 2, 14, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# 테스트 헬퍼
# =============================================================================


class FakeClock:
    """호출할 때마다 step만큼 진행하는 시계"""

    def __init__(self, start: datetime = FIXED_NOW, step: timedelta = timedelta(0)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class RecordingExecutor:
    """실행 요청을 기록하고, 지정된 오류를 순서대로 발생시키는 실행기"""

    def __init__(self, errors=None, on_execute=None):
        self.calls = []
        self.errors = list(errors or [])
        self.on_execute = on_execute

    def execute(self, resource, action, ids):
        self.calls.append((resource, action, list(ids)))
        if self.on_execute is not None:
            self.on_execute()
        if self.errors:
            error = self.errors.pop(0)
            if error is not None:
                raise error


class RecordingCanceler:
    def __init__(self):
        self.calls = []

    def cancel(self, resource, action, ids):
        self.calls.append((resource, action, list(ids)))


# =============================================================================
# 픽스처
# =============================================================================


@pytest.fixture
def catalog() -> Catalog:
    """내장 데모 카탈로그 (vm-a/b, esxi-01/02 등)"""
    return default_catalog()


@pytest.fixture
def rich_catalog() -> Catalog:
    """계층/스냅샷/폴더/태그가 채워진 카탈로그"""
    return Catalog(
        vms=[
            VMRow(
                name="vm-a",
                cluster="cluster-east",
                host="esxi-01",
                power_state="on",
                datastore="vsan-east",
                comments="web tier",
                snapshots=[VMSnapshot("snap-1", "2026-01-10T08:00:00Z")],
            ),
            VMRow(name="vm-b", cluster="cluster-west", power_state="off", datastore="nfs-west"),
            VMRow(name="prod-db", cluster="cluster-east", host="esxi-01", power_state="on"),
        ],
        clusters=[
            ClusterRow(name="cluster-east", datacenter="dc-1"),
            ClusterRow(name="cluster-west", datacenter="dc-2"),
        ],
        datacenters=[DatacenterRow(name="dc-1"), DatacenterRow(name="dc-2")],
        resource_pools=[ResourcePoolRow(name="rp-west", cluster="cluster-west")],
        hosts=[
            HostRow(name="esxi-01", tags="env=prod,gpu", cluster="cluster-east", connection_state="connected"),
            HostRow(name="esxi-02", tags="env=dev", cluster="cluster-west", connection_state="connected"),
        ],
        snapshots=[SnapshotRow(vm="vm-a", snapshot="snap-1", size="2G")],
        folders=[FolderRow(path="/dc-1/vm/prod", type="vm", vm_count=1)],
        tags=[TagRow(tag="prod", category="env")],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> list:
    """재시도 대기 기록"""
    return []


@pytest.fixture
def session(catalog, clock, sleeps) -> Session:
    """데모 카탈로그의 vm 뷰 세션"""
    return Session(catalog, clock=clock, sleep=sleeps.append)


@pytest.fixture
def rich_session(rich_catalog, clock, sleeps) -> Session:
    return Session(rich_catalog, clock=clock, sleep=sleeps.append)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def canceler() -> RecordingCanceler:
    return RecordingCanceler()


@pytest.fixture
def make_executor():
    """오류 시나리오용 실행기 팩토리"""
    return RecordingExecutor


@pytest.fixture
def make_clock():
    """간격을 지정하는 시계 팩토리"""
    return FakeClock


@pytest.fixture(autouse=True)
def reset_lang():
    """테스트마다 기본 언어(ko)로 시작"""
    from cli.i18n import set_lang

    set_lang("ko")
    yield
    set_lang("ko")
