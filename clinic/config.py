from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(Enum):
    MEMORY = "memory"
    SQL = "sql"


class DatabaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    url: str = "sqlite+aiosqlite:///./clinic.db"
    echo: bool = False


class NotificationConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOTIFICATIONS_", env_file=".env", extra="ignore")

    workers: int = Field(default=2, ge=1)
    queue_size: int = Field(default=100, ge=1)
    # Stand-in for real delivery latency.
    delay_seconds: float = Field(default=2.0, ge=0)
    timeout_seconds: float | None = None


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    store_backend: StoreBackend = StoreBackend.MEMORY
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
