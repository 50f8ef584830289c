"""Widget configuration management helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict

from bounty_widget.domain.exceptions import ConfigurationError
from bounty_widget.domain.models import Theme


def _str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer value: {value}") from exc


def _str_to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid number value: {value}") from exc


@dataclass(frozen=True)
class WidgetConfig:
    """Immutable configuration object loaded from env or files."""

    api_base: str = "https://bounty.owockibot.xyz"
    public_url: str = "http://localhost:3000"
    board_url: str = "https://bounty.owockibot.xyz"
    host: str = "0.0.0.0"
    port: int = 3000
    cache_ttl_seconds: int = 300
    timeout_seconds: float = 10.0
    single_flight: bool = True
    default_theme: str = Theme.DARK.value
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)

    @property
    def theme(self) -> Theme:
        return Theme(self.default_theme)

    @classmethod
    def from_env(cls) -> "WidgetConfig":
        defaults = cls()
        return cls(
            api_base=os.getenv("API_BASE", defaults.api_base),
            public_url=os.getenv("PUBLIC_URL", defaults.public_url),
            board_url=os.getenv("WIDGET_BOARD_URL", defaults.board_url),
            host=os.getenv("HOST", defaults.host),
            port=_str_to_int(os.getenv("PORT"), defaults.port),
            cache_ttl_seconds=_str_to_int(
                os.getenv("WIDGET_CACHE_TTL_SECONDS"), defaults.cache_ttl_seconds
            ),
            timeout_seconds=_str_to_float(
                os.getenv("WIDGET_TIMEOUT_SECONDS"), defaults.timeout_seconds
            ),
            single_flight=_str_to_bool(
                os.getenv("WIDGET_SINGLE_FLIGHT"), defaults.single_flight
            ),
            default_theme=os.getenv("WIDGET_DEFAULT_THEME", defaults.default_theme),
            log_level=os.getenv("WIDGET_LOG_LEVEL", defaults.log_level),
        )

    @classmethod
    def from_file(cls, path: str) -> "WidgetConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ConfigurationError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def validate(self) -> None:
        if not self.api_base:
            raise ConfigurationError("api_base must be provided")
        if not self.public_url:
            raise ConfigurationError("public_url must be provided")
        if not 0 < self.port < 65536:
            raise ConfigurationError("port must be between 1 and 65535")
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError("cache_ttl_seconds must be greater than zero")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be greater than zero")
        if self.default_theme not in {theme.value for theme in Theme}:
            raise ConfigurationError(
                f"default_theme must be one of {sorted(theme.value for theme in Theme)}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown log level '{self.log_level}'")

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        defaults = cls()
        return {
            name: data.get(name, getattr(defaults, name))
            for name in cls.__dataclass_fields__
        }

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
