"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from urllib.parse import urlparse

from account_merge.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"Expected a mapping for {ctx}")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number, got {value!r}")


def _assert_positive_int(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive integer, got {value!r}")


def validate_app_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top = {"application", "pipeline", "http"}
    _assert_required_keys(cfg, top, "config")
    _assert_no_unknown_keys(cfg, top, "config", allow_unknown)

    app_keys = {"encoding", "status_api_url", "max_inbound_file_size_mb"}
    _assert_required_keys(cfg["application"], app_keys, "application")
    _assert_no_unknown_keys(cfg["application"], app_keys, "application", allow_unknown)
    _assert_positive_int(cfg["application"]["max_inbound_file_size_mb"], "application.max_inbound_file_size_mb")

    url = cfg["application"]["status_api_url"]
    parsed = urlparse(url) if isinstance(url, str) else None
    if parsed is None or parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"application.status_api_url must be an http(s) URL, got {url!r}")

    pipeline_keys = {"worker_count", "queue_capacity", "preserve_order", "poll_interval_seconds"}
    _assert_required_keys(cfg["pipeline"], pipeline_keys, "pipeline")
    _assert_no_unknown_keys(cfg["pipeline"], pipeline_keys, "pipeline", allow_unknown)
    _assert_positive_int(cfg["pipeline"]["worker_count"], "pipeline.worker_count")
    _assert_positive_int(cfg["pipeline"]["queue_capacity"], "pipeline.queue_capacity")
    _assert_positive(cfg["pipeline"]["poll_interval_seconds"], "pipeline.poll_interval_seconds")
    if not isinstance(cfg["pipeline"]["preserve_order"], bool):
        raise ConfigError("pipeline.preserve_order must be true or false")

    http_keys = {"timeout", "retry", "rate_per_sec"}
    _assert_required_keys(cfg["http"], http_keys, "http")
    _assert_no_unknown_keys(cfg["http"], http_keys, "http", allow_unknown)
    _assert_required_keys(cfg["http"]["timeout"], {"connect", "read"}, "http.timeout")
    _assert_positive(cfg["http"]["timeout"]["connect"], "http.timeout.connect")
    _assert_positive(cfg["http"]["timeout"]["read"], "http.timeout.read")
    _assert_required_keys(cfg["http"]["retry"], {"max_attempts", "multiplier", "max_wait"}, "http.retry")
    _assert_positive_int(cfg["http"]["retry"]["max_attempts"], "http.retry.max_attempts")
    if cfg["http"]["rate_per_sec"] is not None:
        _assert_positive(cfg["http"]["rate_per_sec"], "http.rate_per_sec")

    return cfg
