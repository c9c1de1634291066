"""Redis-backed config store: one hash per source namespace."""

from typing import Dict, Optional

from skyfeed.config_store.base import ConfigStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="config_store/redis_config_store")


def _text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisConfigStore(ConfigStore):
    """Stores each source's settings in the hash `<prefix><namespace>`."""

    def __init__(self, client, prefix: str = "source_config:") -> None:
        logger.debug("Initializing RedisConfigStore")
        self.client = client
        self.prefix = prefix

    def _key(self, namespace: str) -> str:
        return f"{self.prefix}{namespace}"

    def get(self, namespace: str, key: str) -> Optional[str]:
        return _text(self.client.hget(self._key(namespace), key))

    def set(self, namespace: str, key: str, value: str) -> None:
        if not value:
            self.delete(namespace, key)
            return
        self.client.hset(self._key(namespace), key, value)

    def delete(self, namespace: str, key: str) -> None:
        self.client.hdel(self._key(namespace), key)

    def items(self, namespace: str) -> Dict[str, str]:
        raw = self.client.hgetall(self._key(namespace)) or {}
        return {_text(k): _text(v) for k, v in raw.items()}
