from typing import Callable

from loguru import logger

from clinic.config import AppConfig, StoreBackend
from clinic.store.adapters.memory import InMemoryEntityStore
from clinic.store.adapters.sql import SqlEntityStore
from clinic.store.ports import AbstractEntityStore


def _build_memory(config: AppConfig) -> AbstractEntityStore:
    return InMemoryEntityStore()


def _build_sql(config: AppConfig) -> AbstractEntityStore:
    return SqlEntityStore(config.database.url, echo=config.database.echo)


_BUILDERS: dict[StoreBackend, Callable[[AppConfig], AbstractEntityStore]] = {
    StoreBackend.MEMORY: _build_memory,
    StoreBackend.SQL: _build_sql,
}


def build_entity_store(config: AppConfig) -> AbstractEntityStore:
    """Build the entity store selected by config."""
    backend = config.store_backend
    logger.info("Building entity store with backend: {}", backend.value)
    return _BUILDERS[backend](config)
