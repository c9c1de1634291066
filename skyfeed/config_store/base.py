"""Shared protocol for per-source configuration storage."""

from typing import Dict, Optional, Protocol


class ConfigStore(Protocol):
    """Key/value settings partitioned by source namespace."""

    def get(self, namespace: str, key: str) -> Optional[str]:
        """Return the stored value, or None when unset."""

    def set(self, namespace: str, key: str, value: str) -> None:
        """Store a value; an empty string clears the key."""

    def delete(self, namespace: str, key: str) -> None:
        """Remove a key without raising if it is absent."""

    def items(self, namespace: str) -> Dict[str, str]:
        """All stored values of one namespace."""


class SourceConfigStore:
    """View of a ConfigStore scoped to a single source id."""

    def __init__(self, store: ConfigStore, namespace: str) -> None:
        self.store = store
        self.namespace = namespace

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.store.get(self.namespace, key)
        return default if value is None else value

    def put_string(self, key: str, value: Optional[str]) -> None:
        if not value:
            self.store.delete(self.namespace, key)
            return
        self.store.set(self.namespace, key, value)

    def as_dict(self) -> Dict[str, str]:
        return self.store.items(self.namespace)
