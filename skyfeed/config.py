"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather adapters."""
    model_config = SettingsConfigDict(env_prefix="SKYFEED_", extra="ignore")

    log_level: str = "INFO"
    default_source: str = "mf"
    default_language: str = "en"
    default_units: str = "metric"  # options: metric, imperial
    http_timeout_seconds: float = 15.0

    # Build-time default credentials; per-source overrides live in the config store.
    mf_wsft_key: str = ""
    mf_jwt_key: str = ""
    pirateweather_api_key: str = ""
    owm_api_key: str = ""
    owm_one_call_version: str = "3.0"

    config_redis_url: str | None = None
    config_redis_prefix: str = "source_config:"

    api_key: str | None = None
    api_key_redis_url: str | None = None
    api_key_redis_set: str = "api_keys"

    @field_validator("default_language", mode="after")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        """Providers expect lowercase two-letter codes."""
        return str(v).strip().lower() or "en"

    @field_validator("default_units", mode="after")
    @classmethod
    def check_units(cls, v: str) -> str:
        """Only the unit systems the domain can produce are accepted."""
        lowered = str(v).strip().lower()
        if lowered not in ("metric", "imperial"):
            raise ValueError(f"Unsupported unit system '{v}'")
        return lowered


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
