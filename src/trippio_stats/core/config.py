"""Statistics configuration management helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from trippio_stats.transport.client import DEFAULT_BASE_URL, ClientConfig


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


def _str_to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid number value: {value}") from exc


@dataclass(frozen=True)
class StatsConfig:
    """Immutable configuration object loaded from env or files."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 10.0
    access_token: Optional[str] = None
    user_page_size: int = 100
    sample_cap: int = 10
    fanout_width: int = 10

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "StatsConfig":
        defaults = cls()
        return cls(
            base_url=os.getenv("TRIPPIO_BASE_URL", defaults.base_url),
            timeout_seconds=_str_to_float(
                os.getenv("TRIPPIO_TIMEOUT_SECONDS"), defaults.timeout_seconds
            ),
            access_token=os.getenv("TRIPPIO_ACCESS_TOKEN") or defaults.access_token,
            user_page_size=_str_to_int(
                os.getenv("TRIPPIO_USER_PAGE_SIZE"), defaults.user_page_size
            ),
            sample_cap=_str_to_int(
                os.getenv("TRIPPIO_SAMPLE_CAP"), defaults.sample_cap
            ),
            fanout_width=_str_to_int(
                os.getenv("TRIPPIO_FANOUT_WIDTH"), defaults.fanout_width
            ),
        )

    @classmethod
    def from_file(cls, path: str) -> "StatsConfig":
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
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        if not 1 <= self.user_page_size <= 100:
            raise ValueError("user_page_size must be between 1 and 100")
        if self.sample_cap < 1:
            raise ValueError("sample_cap must be at least 1")
        if self.fanout_width < 1:
            raise ValueError("fanout_width must be at least 1")

    def client_config(self) -> ClientConfig:
        return ClientConfig(base_url=self.base_url, timeout=self.timeout_seconds)

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        return {
            "base_url": data.get("base_url", defaults.base_url),
            "timeout_seconds": data.get("timeout_seconds", defaults.timeout_seconds),
            "access_token": data.get("access_token", defaults.access_token),
            "user_page_size": data.get("user_page_size", defaults.user_page_size),
            "sample_cap": data.get("sample_cap", defaults.sample_cap),
            "fanout_width": data.get("fanout_width", defaults.fanout_width),
        }

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
