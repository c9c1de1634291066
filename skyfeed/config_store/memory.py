"""In-memory config store, used by default and in tests."""

import threading
from typing import Dict, Optional

from skyfeed.config_store.base import ConfigStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="config_store/in_memory_config_store")


class InMemoryConfigStore(ConfigStore):
    """Thread-safe dict of dicts; lost on restart."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryConfigStore")
        self._data: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(namespace, {}).get(key)

    def set(self, namespace: str, key: str, value: str) -> None:
        with self._lock:
            if not value:
                self._data.get(namespace, {}).pop(key, None)
                return
            self._data.setdefault(namespace, {})[key] = value

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            self._data.get(namespace, {}).pop(key, None)

    def items(self, namespace: str) -> Dict[str, str]:
        with self._lock:
            return dict(self._data.get(namespace, {}))
