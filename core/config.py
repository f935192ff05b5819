"""
core/config.py - 탐색기 설정

탐색기 실행 설정을 하나의 dataclass로 모으고 여러 출처를 병합합니다.

우선순위 (높은 것부터):
    1. CLI 옵션으로 명시한 값
    2. 환경 변수 (HYPERSPHERE_RESOURCE, HYPERSPHERE_READ_ONLY, HYPERSPHERE_ACTOR,
       HYPERSPHERE_VIEWPORT_ROWS, HYPERSPHERE_LANG)
    3. YAML 설정 파일 (--config)
    4. 기본값

설정 파일 예:
    resource: host
    read_only: true
    actor: alice
    viewport_rows: 15
    history_size: 100
    lang: en
    contexts: [vc-primary, vc-lab]
    action_timeouts: {power-off: 30}
    action_retries: {power-on: 2}

Usage:
    from core.config import resolve_settings

    settings = resolve_settings({"read_only": True}, config_path="hs.yaml")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from importlib import metadata
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ConfigError
from core.explorer.context import DEFAULT_CONTEXTS
from core.explorer.prompt import DEFAULT_HISTORY_MAX
from core.explorer.render import DEFAULT_VIEWPORT_ROWS
from core.explorer.session import DEFAULT_ACTOR
from core.explorer.types import ResourceKind

logger = logging.getLogger(__name__)

# 환경 변수 → 설정 키
ENV_KEYS: dict[str, str] = {
    "HYPERSPHERE_RESOURCE": "resource",
    "HYPERSPHERE_READ_ONLY": "read_only",
    "HYPERSPHERE_ACTOR": "actor",
    "HYPERSPHERE_VIEWPORT_ROWS": "viewport_rows",
    "HYPERSPHERE_LANG": "lang",
}

SUPPORTED_LANGS = ("ko", "en")

DIST_NAME = "hypersphere"
FALLBACK_VERSION = "0.1.0"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ExplorerSettings:
    """탐색기 실행 설정

    Attributes:
        resource: 초기 리소스 종류
        read_only: 읽기 전용 모드로 시작
        actor: 감사 기록 작업자 이름
        viewport_rows: 렌더링 본문 최대 행 수
        history_size: 프롬프트 기록 최대 개수
        lang: 출력 언어 ("ko" 또는 "en")
        contexts: 엔드포인트 컨텍스트 이름
        action_timeouts: 액션별 타임아웃 (초)
        action_retries: 액션별 재시도 횟수
    """

    resource: ResourceKind = ResourceKind.VM
    read_only: bool = False
    actor: str = DEFAULT_ACTOR
    viewport_rows: int = DEFAULT_VIEWPORT_ROWS
    history_size: int = DEFAULT_HISTORY_MAX
    lang: str = "ko"
    contexts: list[str] = field(default_factory=lambda: list(DEFAULT_CONTEXTS))
    action_timeouts: dict[str, float] = field(default_factory=dict)
    action_retries: dict[str, int] = field(default_factory=dict)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(key, f"불리언 값이 아닙니다: {value!r}")


def _parse_positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(key, f"정수 값이 아닙니다: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(key, f"정수 값이 아닙니다: {value!r}", e) from e
    if number < 1:
        raise ConfigError(key, f"1 이상이어야 합니다: {number}")
    return number


def _parse_resource(key: str, value: Any) -> ResourceKind:
    if isinstance(value, ResourceKind):
        return value
    resource = ResourceKind.resolve(str(value))
    if resource is None:
        raise ConfigError(key, f"알 수 없는 리소스: {value!r}")
    return resource


def _parse_lang(key: str, value: Any) -> str:
    lang = str(value).strip().lower()
    if lang not in SUPPORTED_LANGS:
        raise ConfigError(key, f"지원하지 않는 언어: {value!r}")
    return lang


def _parse_actor(key: str, value: Any) -> str:
    actor = str(value).strip()
    if not actor:
        raise ConfigError(key, "빈 작업자 이름")
    return actor


def _parse_contexts(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not value:
        raise ConfigError(key, "비어 있지 않은 목록이어야 합니다")
    return [str(item).strip() for item in value]


def _parse_action_map(key: str, value: Any, convert: type) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(key, "매핑이어야 합니다")
    parsed: dict[str, Any] = {}
    for action, raw in value.items():
        try:
            parsed[str(action).strip().lower()] = convert(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key}.{action}", f"숫자 값이 아닙니다: {raw!r}", e) from e
    return parsed


_PARSERS = {
    "resource": _parse_resource,
    "read_only": _parse_bool,
    "actor": _parse_actor,
    "viewport_rows": _parse_positive_int,
    "history_size": _parse_positive_int,
    "lang": _parse_lang,
    "contexts": _parse_contexts,
    "action_timeouts": lambda key, value: _parse_action_map(key, value, float),
    "action_retries": lambda key, value: _parse_action_map(key, value, int),
}


def _apply(settings: ExplorerSettings, values: Mapping[str, Any], source: str) -> ExplorerSettings:
    known = {f.name for f in fields(ExplorerSettings)}
    updates: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if key not in known:
            raise ConfigError(key, f"알 수 없는 설정 키 ({source})")
        updates[key] = _PARSERS[key](key, value)
    if updates:
        logger.debug("설정 적용 (%s): %s", source, ", ".join(sorted(updates)))
    return replace(settings, **updates)


def load_settings_file(path: str | Path) -> dict[str, Any]:
    """YAML 설정 파일 로드

    Raises:
        ConfigError: 파일을 읽을 수 없거나 최상위가 매핑이 아닌 경우
    """
    config_path = Path(path)
    try:
        with config_path.open(encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError("config", f"설정 파일을 읽을 수 없습니다: {config_path}", e) from e
    except yaml.YAMLError as e:
        raise ConfigError("config", f"YAML 파싱 실패: {config_path}", e) from e
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError("config", "최상위는 매핑이어야 합니다")
    return document


def settings_from_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """HYPERSPHERE_* 환경 변수에서 설정 값 추출"""
    env = os.environ if environ is None else environ
    return {setting: env[name] for name, setting in ENV_KEYS.items() if env.get(name, "").strip()}


def resolve_settings(
    overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExplorerSettings:
    """기본값 ← 설정 파일 ← 환경 변수 ← CLI 값 순서로 병합

    Args:
        overrides: CLI에서 명시한 값 (None 값은 무시)
        config_path: YAML 설정 파일 경로
        environ: 환경 변수 (None이면 os.environ)

    Returns:
        ExplorerSettings

    Raises:
        ConfigError: 잘못된 설정 값
    """
    settings = ExplorerSettings()
    if config_path is not None:
        settings = _apply(settings, load_settings_file(config_path), "file")
    settings = _apply(settings, settings_from_env(environ), "env")
    if overrides:
        settings = _apply(settings, overrides, "cli")
    return settings


def get_version() -> str:
    """설치된 배포판 버전 (소스 트리에서 직접 실행하면 기본값)"""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        logger.debug("배포판 메타데이터 없음: %s", DIST_NAME)
        return FALLBACK_VERSION
