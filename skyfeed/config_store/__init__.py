"""Per-source configuration storage backends."""

from .base import ConfigStore, SourceConfigStore
from .factory import build_config_store
from .memory import InMemoryConfigStore
from .redis import RedisConfigStore

__all__ = [
    "ConfigStore",
    "SourceConfigStore",
    "InMemoryConfigStore",
    "RedisConfigStore",
    "build_config_store",
]
