"""Classifier configuration management helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict


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
        raise ValueError(f"Invalid integer value: {value}") from exc


def _str_to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid float value: {value}") from exc


@dataclass(frozen=True)
class ClassifierConfig:
    """Immutable configuration object loaded from env or files."""

    use_mock_ai: bool = False
    monthly_cost_limit: float = 50.0
    cache_ttl_seconds: float = 24 * 60 * 60
    cache_max_entries: int = 50
    provider_timeout_seconds: float = 10.0
    provider_max_retries: int = 1
    retry_delay_seconds: float = 0.5
    premium_model: str = "gpt-4o"
    economy_model: str = "gpt-3.5-turbo"
    complexity_length_threshold: int = 100
    usage_db_path: str = "usage.db"
    openai_base_url: str = "https://api.openai.com"

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "ClassifierConfig":
        defaults = cls()
        return cls(
            use_mock_ai=_str_to_bool(os.getenv("USE_MOCK_AI"), defaults.use_mock_ai),
            monthly_cost_limit=_str_to_float(
                os.getenv("CLASSIFIER_MONTHLY_COST_LIMIT"), defaults.monthly_cost_limit
            ),
            cache_ttl_seconds=_str_to_float(
                os.getenv("CLASSIFIER_CACHE_TTL_SECONDS"), defaults.cache_ttl_seconds
            ),
            cache_max_entries=_str_to_int(
                os.getenv("CLASSIFIER_CACHE_MAX_ENTRIES"), defaults.cache_max_entries
            ),
            provider_timeout_seconds=_str_to_float(
                os.getenv("CLASSIFIER_PROVIDER_TIMEOUT_SECONDS"),
                defaults.provider_timeout_seconds,
            ),
            provider_max_retries=_str_to_int(
                os.getenv("CLASSIFIER_PROVIDER_MAX_RETRIES"),
                defaults.provider_max_retries,
            ),
            retry_delay_seconds=_str_to_float(
                os.getenv("CLASSIFIER_RETRY_DELAY_SECONDS"),
                defaults.retry_delay_seconds,
            ),
            premium_model=os.getenv(
                "CLASSIFIER_PREMIUM_MODEL", defaults.premium_model
            ),
            economy_model=os.getenv(
                "CLASSIFIER_ECONOMY_MODEL", defaults.economy_model
            ),
            complexity_length_threshold=_str_to_int(
                os.getenv("CLASSIFIER_COMPLEXITY_LENGTH_THRESHOLD"),
                defaults.complexity_length_threshold,
            ),
            usage_db_path=os.getenv(
                "CLASSIFIER_USAGE_DB_PATH", defaults.usage_db_path
            ),
            openai_base_url=os.getenv("OPENAI_BASE_URL", defaults.openai_base_url),
        )

    @classmethod
    def from_file(cls, path: str) -> "ClassifierConfig":
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
        if self.monthly_cost_limit <= 0:
            raise ValueError("monthly_cost_limit must be greater than zero")
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be greater than zero")
        if self.cache_max_entries < 1:
            raise ValueError("cache_max_entries must be at least 1")
        if self.provider_timeout_seconds <= 0:
            raise ValueError("provider_timeout_seconds must be greater than zero")
        if self.provider_max_retries < 0:
            raise ValueError("provider_max_retries must be non-negative")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must be non-negative")
        if self.complexity_length_threshold < 0:
            raise ValueError("complexity_length_threshold must be non-negative")
        if not self.premium_model or not self.economy_model:
            raise ValueError("premium_model and economy_model must be set")

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        known = {field.name for field in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return {name: data.get(name, getattr(defaults, name)) for name in known}

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
