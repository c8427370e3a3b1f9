"""Infrastructure domain: index store, configuration."""

from archsearch.infrastructure.config import SearchConfig, load_config
from archsearch.infrastructure.store import (
    IndexStore,
    StoreUnavailableError,
    WriteSession,
    create_schema,
    open_db,
)

__all__ = [
    "IndexStore",
    "SearchConfig",
    "StoreUnavailableError",
    "WriteSession",
    "create_schema",
    "load_config",
    "open_db",
]
