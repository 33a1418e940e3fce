"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env(key: str, default: str = "") -> str:
    """Return an environment variable or a default."""
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    """Return an integer environment variable or a default."""
    raw = _env(key)
    return int(raw) if raw else default


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "pika"))


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    secret_key: str = field(default_factory=lambda: _env("APP_SECRET_KEY"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class AutosaveProfile:
    """Timing for one autosaved editor: quiet period and minimum spacing."""

    debounce_ms: int
    min_interval_ms: int

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")
        if self.min_interval_ms < self.debounce_ms:
            raise ValueError(
                f"min_interval_ms ({self.min_interval_ms}) must be >= "
                f"debounce_ms ({self.debounce_ms})"
            )


@dataclass(frozen=True)
class AutosaveConfig:
    response_debounce_ms: int = field(
        default_factory=lambda: _env_int("AUTOSAVE_RESPONSE_DEBOUNCE_MS", 5000)
    )
    response_min_interval_ms: int = field(
        default_factory=lambda: _env_int("AUTOSAVE_RESPONSE_MIN_INTERVAL_MS", 15000)
    )
    instructions_debounce_ms: int = field(
        default_factory=lambda: _env_int("AUTOSAVE_INSTRUCTIONS_DEBOUNCE_MS", 3000)
    )
    instructions_min_interval_ms: int = field(
        default_factory=lambda: _env_int("AUTOSAVE_INSTRUCTIONS_MIN_INTERVAL_MS", 10000)
    )

    @property
    def response(self) -> AutosaveProfile:
        """Profile for a student's assignment response."""
        return AutosaveProfile(self.response_debounce_ms, self.response_min_interval_ms)

    @property
    def instructions(self) -> AutosaveProfile:
        """Profile for a teacher's assignment instructions."""
        return AutosaveProfile(self.instructions_debounce_ms, self.instructions_min_interval_ms)


@dataclass(frozen=True)
class HistoryConfig:
    snapshot_interval: int = field(
        default_factory=lambda: _env_int("HISTORY_SNAPSHOT_INTERVAL", 20)
    )


@dataclass(frozen=True)
class ServiceBusConfig:
    connection_string: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_CONNECTION_STRING")
    )
    topic_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_TOPIC", "document-events")
    )


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = field(
        default_factory=lambda: _env("PIKA_API_BASE_URL", "http://localhost:8000")
    )
    timeout: float = field(default_factory=lambda: float(_env("PIKA_API_TIMEOUT", "10")))


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    app: AppConfig = field(default_factory=AppConfig)
    autosave: AutosaveConfig = field(default_factory=AutosaveConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    servicebus: ServiceBusConfig = field(default_factory=ServiceBusConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
