"""Settings from configs/api.yaml, overridden by environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PATH = Path("configs/api.yaml")


@dataclass(frozen=True)
class SiteConfig:
    site_id: int
    hostname: str | None = None
    wpcom: bool = True


@dataclass(frozen=True)
class Settings:
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    cache_key_prefix: str = "wpsuggest:cache"
    cache_ttl_seconds: int | None = None
    api_base_url: str = "https://public-api.wordpress.com"
    api_token: str | None = None
    api_timeout_seconds: float = 10.0
    fetch_timeout_seconds: float = 15.0
    log_level: str = "INFO"
    log_path: str | None = None
    sites: tuple[SiteConfig, ...] = field(default_factory=tuple)


def load_config(config_path: str | Path) -> dict:
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _lookup(env_var: str, config_value: Any) -> Any:
    """Environment wins over YAML; blank or null counts as unset."""
    for value in (os.getenv(env_var), config_value):
        if value is not None and str(value).strip() != "":
            return value
    return None


def _number(kind: type, env_var: str, config_value: Any, default: Any) -> Any:
    value = _lookup(env_var, config_value)
    if value is None:
        return default
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{env_var} must be a {kind.__name__}, got {value!r}") from e


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Build Settings from the YAML file (if present) and the environment."""
    config = load_config(config_path or os.getenv("SUGGEST_CONFIG", DEFAULT_CONFIG_PATH))
    redis_cfg = config.get("redis", {}) or {}
    api_cfg = config.get("wpcom", {}) or {}

    sites = tuple(
        SiteConfig(
            site_id=int(s["site_id"]),
            hostname=s.get("hostname"),
            wpcom=bool(s.get("wpcom", True)),
        )
        for s in config.get("sites", []) or []
    )

    prefix = redis_cfg.get("prefix") or "wpsuggest"
    cache_key = redis_cfg.get("cache_key_prefix") or "cache"

    return Settings(
        redis_host=_lookup("REDIS_HOST", redis_cfg.get("host")) or "localhost",
        redis_port=_number(int, "REDIS_PORT", redis_cfg.get("port"), 6379),
        redis_db=_number(int, "REDIS_DB", redis_cfg.get("db"), 0),
        cache_key_prefix=_lookup("REDIS_CACHE_PREFIX", None) or f"{prefix}:{cache_key}",
        cache_ttl_seconds=_number(int, "CACHE_TTL_SECONDS", redis_cfg.get("ttl_seconds"), None),
        api_base_url=_lookup("WPCOM_API_BASE", api_cfg.get("base_url")) or "https://public-api.wordpress.com",
        api_token=_lookup("WPCOM_TOKEN", api_cfg.get("token")),
        api_timeout_seconds=_number(float, "WPCOM_TIMEOUT_SECONDS", api_cfg.get("timeout_seconds"), 10.0),
        fetch_timeout_seconds=_number(float, "FETCH_TIMEOUT_SECONDS", api_cfg.get("fetch_timeout_seconds"), 15.0),
        log_level=_lookup("LOG_LEVEL", config.get("log_level")) or "INFO",
        log_path=_lookup("LOG_PATH", config.get("log_path")),
        sites=sites,
    )
