"""Configuration settings for the trade history fetcher."""

import os
import re
import yaml
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ApiConfig:
    """Polymarket data API configuration."""
    base_url: str = "https://data-api.polymarket.com/trades"
    request_timeout_seconds: Optional[float] = None  # aiohttp default when unset
    user_agent: str = "trade-history/1.0"


@dataclass(frozen=True)
class PaginationConfig:
    """Paging limits imposed by the remote endpoint."""
    page_size: int = 1000
    max_offset: int = 3000
    request_delay_seconds: float = 0.055
    dedup_key: str = "transactionHash"

    def __post_init__(self):
        if not 1 <= self.page_size <= 1000:
            raise ValueError("page_size must be between 1 and 1000")
        if self.max_offset < 0:
            raise ValueError("max_offset must be non-negative")
        if self.request_delay_seconds < 0:
            raise ValueError("request_delay_seconds must be non-negative")
        if not self.dedup_key:
            raise ValueError("dedup_key must be a non-empty field name")


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for transient API failures."""
    max_retries: int = 3
    backoff_multiplier: float = 2.0
    max_backoff_seconds: Optional[float] = None
    jitter: bool = False

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be at least 1")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"  # "text" or "json"
    output: str = "stderr"  # "stdout", "stderr" or a file path

    def __post_init__(self):
        if self.format.lower() not in ("text", "json"):
            raise ValueError("logging format must be 'text' or 'json'")


@dataclass(frozen=True)
class TradeHistoryConfig:
    """Main configuration for the trade history fetcher."""
    api: ApiConfig = field(default_factory=ApiConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def load_config(config_file: Optional[str] = None) -> TradeHistoryConfig:
    """Load configuration from YAML file, falling back to defaults."""

    if not config_file:
        return TradeHistoryConfig()

    with open(config_file, 'r') as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping")

    # Environment variable substitution
    config_data = _substitute_env_vars(config_data)

    return TradeHistoryConfig(
        api=_build_section(ApiConfig, config_data.get('api')),
        pagination=_build_section(PaginationConfig, config_data.get('pagination')),
        retry=_build_section(RetryConfig, config_data.get('retry')),
        logging=_build_section(LoggingConfig, config_data.get('logging')),
    )


def _build_section(cls, data: Optional[Dict[str, Any]]):
    """Instantiate a config dataclass, coercing env-substituted strings."""
    if not data:
        return cls()

    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")

    kwargs = {}
    for name, value in data.items():
        target = known[name].type
        value = _coerce(value, target)
        if value is None and not _is_optional(target):
            # Unset ${VAR} or empty YAML value: keep the field default
            continue
        kwargs[name] = value
    return cls(**kwargs)


def _is_optional(target: Any) -> bool:
    return type(None) in getattr(target, '__args__', ())


def _coerce(value: Any, target: Any) -> Any:
    """Coerce a scalar value to the declared field type."""
    if value is None or not isinstance(value, str):
        return value

    if target is bool:
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    if target is int:
        return int(value) if value.strip() else None
    if target in (float, Optional[float]):
        return float(value) if value.strip() else None
    return value


def _expand_env(value: str) -> Optional[str]:
    """
    Expand ${VAR} and ${VAR:default} references inside a string.

    A value that is a single reference to an unset variable without a
    default expands to None; references embedded in longer strings expand
    to the empty string.
    """
    reference = _ENV_REFERENCE.fullmatch(value)
    if reference:
        name, default = reference.groups()
        return os.environ.get(name, default)

    return _ENV_REFERENCE.sub(
        lambda m: os.environ.get(m.group(1), m.group(2) or ""), value
    )


def _substitute_env_vars(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: _substitute_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    if isinstance(data, str) and '${' in data:
        return _expand_env(data)
    return data
