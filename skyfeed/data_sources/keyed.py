"""Credential handling for sources authenticated by a plain API key."""
from __future__ import annotations

from typing import Dict

from skyfeed.config_store import SourceConfigStore
from skyfeed.exceptions import AuthenticationMissing

API_KEY_PREFERENCE = "api_key"


class ApiKeySource:
    """Stored override key, falling back to the build-time default."""

    id: str = ""
    name: str = ""

    def __init__(self, config: SourceConfigStore, default_api_key: str = "") -> None:
        self.config = config
        self.default_api_key = default_api_key or ""

    @property
    def api_key(self) -> str:
        return self.config.get_string(API_KEY_PREFERENCE, "") or ""

    def get_api_key_or_default(self) -> str:
        return self.api_key or self.default_api_key

    @property
    def is_configured(self) -> bool:
        return bool(self.get_api_key_or_default())

    def require_api_key(self) -> str:
        key = self.get_api_key_or_default()
        if not key:
            raise AuthenticationMissing(f"No API key configured for {self.name}")
        return key

    def get_preferences(self) -> Dict[str, str]:
        return {API_KEY_PREFERENCE: self.api_key}

    def set_preference(self, key: str, value: str) -> None:
        if key != API_KEY_PREFERENCE:
            raise KeyError(f"Unknown preference '{key}' for {self.id}")
        self.config.put_string(API_KEY_PREFERENCE, value)
