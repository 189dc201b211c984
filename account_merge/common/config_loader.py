"""Configuration loading and validation."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from account_merge.common.constants import DEFAULT_ENCODING, SUPPORTED_ENCODINGS
from account_merge.common.errors import ConfigError
from account_merge.common.fs import read_yaml
from account_merge.common.http import RetryConfig, TimeoutConfig
from account_merge.common.schema import validate_app_config

DEFAULT_CONFIG: dict[str, Any] = {
    "application": {
        "encoding": "UTF-8",
        "status_api_url": "http://localhost:8080",
        "max_inbound_file_size_mb": 10,
    },
    "pipeline": {
        "worker_count": 4,
        "queue_capacity": 50,
        "preserve_order": False,
        "poll_interval_seconds": 0.1,
    },
    "http": {
        "timeout": {"connect": 5.0, "read": 30.0},
        "retry": {"max_attempts": 3, "multiplier": 0.5, "max_wait": 10.0},
        "rate_per_sec": None,
    },
}


@dataclass(frozen=True)
class PipelineSettings:
    encoding: str = DEFAULT_ENCODING
    worker_count: int = 4
    queue_capacity: int = 50
    preserve_order: bool = False
    poll_interval_seconds: float = 0.1


@dataclass(frozen=True)
class HttpSettings:
    timeout: TimeoutConfig = TimeoutConfig()
    retry: RetryConfig = RetryConfig()
    rate_per_sec: float | None = None


@dataclass(frozen=True)
class AppConfig:
    status_api_url: str
    max_inbound_file_size_mb: int
    pipeline: PipelineSettings
    http: HttpSettings


def resolve_encoding(name: str | None) -> str:
    """Map a configured charset name to a codec name, defaulting to UTF-8."""
    if not name:
        return DEFAULT_ENCODING
    return SUPPORTED_ENCODINGS.get(name.strip().upper(), DEFAULT_ENCODING)


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _merge_yaml(base: dict, path: Path | None) -> dict:
    if path is None or not path.exists():
        return base
    loaded = read_yaml(path)
    if not loaded:
        return base
    return _deep_merge(base, loaded)


def _build_app_config(cfg: dict) -> AppConfig:
    app = cfg["application"]
    pipeline = cfg["pipeline"]
    http = cfg["http"]
    return AppConfig(
        status_api_url=str(app["status_api_url"]).rstrip("/"),
        max_inbound_file_size_mb=int(app["max_inbound_file_size_mb"]),
        pipeline=PipelineSettings(
            encoding=resolve_encoding(app["encoding"]),
            worker_count=int(pipeline["worker_count"]),
            queue_capacity=int(pipeline["queue_capacity"]),
            preserve_order=bool(pipeline["preserve_order"]),
            poll_interval_seconds=float(pipeline["poll_interval_seconds"]),
        ),
        http=HttpSettings(
            timeout=TimeoutConfig(
                connect=float(http["timeout"]["connect"]),
                read=float(http["timeout"]["read"]),
            ),
            retry=RetryConfig(
                max_attempts=int(http["retry"]["max_attempts"]),
                multiplier=float(http["retry"]["multiplier"]),
                max_wait=float(http["retry"]["max_wait"]),
            ),
            rate_per_sec=float(http["rate_per_sec"]) if http["rate_per_sec"] is not None else None,
        ),
    )


def load_config(
    config_path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> AppConfig:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        cfg = _merge_yaml(cfg, config_path)
    cfg = _merge_yaml(cfg, overlay_path)
    validate_app_config(cfg, allow_unknown=allow_unknown)
    return _build_app_config(cfg)
