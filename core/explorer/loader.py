"""
core/explorer/loader.py - 카탈로그 로더

YAML/JSON 문서 또는 내장 데모 데이터로 Catalog를 만듭니다.
JSON은 YAML의 부분집합이므로 두 형식 모두 yaml.safe_load로 읽습니다.

문서 형식:
    vms:
      - name: vm-a
        cluster: cluster-east
        power_state: "on"
        snapshots:
          - {identifier: snap-1, timestamp: "2026-01-10T08:00:00Z"}
    hosts:
      - {name: esxi-01, cluster: cluster-east, connection_state: connected}

최상위 키는 Catalog 필드 이름(vms, luns, clusters, datacenters, resource_pools,
networks, templates, snapshots, tasks, events, alarms, folders, tags, hosts,
datastores)이고, 각 항목의 키는 해당 행 타입의 필드 이름입니다.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ValidationError

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
    ResourcePoolRow,
    SnapshotRow,
    TagRow,
    TaskRow,
    TemplateRow,
    VMRow,
    VMSnapshot,
)

logger = logging.getLogger(__name__)

ROW_TYPES: dict[str, type] = {
    "vms": VMRow,
    "luns": LUNRow,
    "clusters": ClusterRow,
    "datacenters": DatacenterRow,
    "resource_pools": ResourcePoolRow,
    "networks": NetworkRow,
    "templates": TemplateRow,
    "snapshots": SnapshotRow,
    "tasks": TaskRow,
    "events": EventRow,
    "alarms": AlarmRow,
    "folders": FolderRow,
    "tags": TagRow,
    "hosts": HostRow,
    "datastores": DatastoreRow,
}


def load_catalog(path: str | Path) -> Catalog:
    """YAML/JSON 파일에서 카탈로그 로드

    Args:
        path: 카탈로그 문서 경로

    Returns:
        Catalog

    Raises:
        ValidationError: 파일을 읽을 수 없거나 문서 형식이 잘못된 경우
    """
    catalog_path = Path(path)
    try:
        with catalog_path.open(encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ValidationError("catalog", str(catalog_path), "readable file", e) from e
    except yaml.YAMLError as e:
        raise ValidationError("catalog", str(catalog_path), "YAML/JSON document", e) from e

    catalog = catalog_from_dict(document or {})
    logger.debug("카탈로그 로드: %s (vm %d, host %d)", catalog_path, len(catalog.vms), len(catalog.hosts))
    return catalog


def catalog_from_dict(document: Any) -> Catalog:
    """파싱된 문서(dict)를 Catalog로 변환

    Raises:
        ValidationError: 알 수 없는 키, 잘못된 타입, 필수 필드 누락
    """
    if not isinstance(document, dict):
        raise ValidationError("catalog", type(document).__name__, "mapping")

    sections: dict[str, list[Any]] = {}
    for key, entries in document.items():
        row_type = ROW_TYPES.get(key)
        if row_type is None:
            raise ValidationError("catalog", key, f"one of {', '.join(ROW_TYPES)}")
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ValidationError(key, type(entries).__name__, "list")
        sections[key] = [_build_row(row_type, entry, f"{key}[{index}]") for index, entry in enumerate(entries)]

    return Catalog(**sections)


def _build_row(row_type: type, entry: Any, location: str) -> Any:
    if not isinstance(entry, dict):
        raise ValidationError(location, type(entry).__name__, "mapping")

    known = {field.name: field for field in dataclasses.fields(row_type)}
    values: dict[str, Any] = {}
    for key, value in entry.items():
        field = known.get(key)
        if field is None:
            raise ValidationError(f"{location}.{key}", value, f"one of {', '.join(known)}")
        values[key] = _coerce(field, value, f"{location}.{key}")

    for name, field in known.items():
        required = field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING
        if required and name not in values:
            raise ValidationError(f"{location}.{name}", None, "required value")

    return row_type(**values)


def _coerce(field: dataclasses.Field, value: Any, location: str) -> Any:
    # from __future__ annotations 때문에 field.type은 문자열
    if field.type == "int":
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValidationError(location, value, "integer")
        try:
            return int(value)
        except ValueError as e:
            raise ValidationError(location, value, "integer", e) from e
    if field.type == "str":
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            raise ValidationError(location, value, "string")
        # YAML의 on/off는 bool로 읽힘
        if isinstance(value, bool):
            return "on" if value else "off"
        return str(value)
    if field.name == "snapshots":
        if not isinstance(value, list):
            raise ValidationError(location, value, "list")
        return [_build_row(VMSnapshot, item, f"{location}[{index}]") for index, item in enumerate(value)]
    return value


def default_catalog() -> Catalog:
    """내장 데모 카탈로그"""
    return Catalog(
        vms=[
            VMRow(
                name="vm-a",
                tags="prod,linux",
                cluster="cluster-east",
                power_state="on",
                datastore="ds-1",
                owner="a@example.com",
            ),
            VMRow(
                name="vm-b",
                tags="dev,windows",
                cluster="cluster-west",
                power_state="off",
                datastore="ds-2",
                owner="b@example.com",
            ),
        ],
        luns=[
            LUNRow(
                name="lun-001",
                tags="gold",
                cluster="cluster-east",
                datastore="san-a",
                capacity_gb=1000,
                used_gb=450,
            ),
            LUNRow(
                name="lun-002",
                tags="silver",
                cluster="cluster-west",
                datastore="san-b",
                capacity_gb=2000,
                used_gb=900,
            ),
        ],
        clusters=[
            ClusterRow(
                name="cluster-east",
                tags="prod",
                datacenter="dc-1",
                hosts=8,
                vm_count=120,
                cpu_usage_percent=63,
                mem_usage_percent=58,
            ),
            ClusterRow(
                name="cluster-west",
                tags="dev",
                datacenter="dc-2",
                hosts=6,
                vm_count=90,
                cpu_usage_percent=52,
                mem_usage_percent=49,
            ),
        ],
        hosts=[
            HostRow(
                name="esxi-01",
                tags="gpu",
                cluster="cluster-east",
                cpu_usage_percent=72,
                mem_usage_percent=67,
                connection_state="connected",
            ),
            HostRow(
                name="esxi-02",
                tags="general",
                cluster="cluster-west",
                cpu_usage_percent=44,
                mem_usage_percent=52,
                connection_state="connected",
            ),
        ],
        datastores=[
            DatastoreRow(
                name="vsan-east",
                tags="flash",
                cluster="cluster-east",
                capacity_gb=8000,
                used_gb=4200,
                free_gb=3800,
            ),
            DatastoreRow(
                name="nfs-west",
                tags="archive",
                cluster="cluster-west",
                capacity_gb=12000,
                used_gb=7200,
                free_gb=4800,
            ),
        ],
    )
