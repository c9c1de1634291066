"""Pick the config store backend from settings."""

from __future__ import annotations

from skyfeed import config
from skyfeed.config_store.base import ConfigStore
from skyfeed.config_store.memory import InMemoryConfigStore
from skyfeed.config_store.redis import RedisConfigStore
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="config_store/factory")


def build_config_store(settings: config.Settings | None = None) -> ConfigStore:
    """Redis when `config_redis_url` is set, in-memory otherwise."""
    settings = settings or config.settings
    if not settings.config_redis_url:
        logger.info("Using in-memory source config store")
        return InMemoryConfigStore()

    import redis

    client = redis.Redis.from_url(settings.config_redis_url)
    logger.info("Using Redis source config store", extra={"redis_url": mask_url_secrets(settings.config_redis_url)})
    return RedisConfigStore(client, prefix=settings.config_redis_prefix)
