"""
Key-Value JSON Storage.

Policies and profiles are persisted as JSON blobs keyed by name, with no
schema migration beyond a version tag. Two backends:
- InMemoryStore: process-local, used for tests and the demo session
- RedisStore: shared persistent store
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

from pydantic import BaseModel
from redis import Redis
from redis.exceptions import RedisError

from policywallet.core.config import WalletSettings, get_settings
from policywallet.utils.errors import StorageError
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# Backends
# =============================================================================


class KeyValueStore(ABC):
    """Minimal string key -> string value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the raw value or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Create or replace a value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys."""

    def exists(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class RedisStore(KeyValueStore):
    """
    Redis-backed store. Values are kept as plain UTF-8 strings.

    Source: https://redis.io/docs/connect/clients/python/
    """

    def __init__(self, url: Optional[str] = None, client: Optional[Redis] = None):
        if client is not None:
            self._redis = client
        else:
            self._redis = Redis.from_url(
                url or get_settings().REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
            )

    def ping(self) -> bool:
        """Check the connection; raises StorageError when Redis is unreachable."""
        try:
            return bool(self._redis.ping())
        except RedisError as e:
            raise StorageError(f"Redis unreachable: {e}", original_error=e) from e

    def get(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(key)
        except RedisError as e:
            raise StorageError(f"Failed to read {key}", key=key, original_error=e) from e

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(key, value)
        except RedisError as e:
            raise StorageError(f"Failed to write {key}", key=key, original_error=e) from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except RedisError as e:
            raise StorageError(f"Failed to delete {key}", key=key, original_error=e) from e

    def keys(self) -> list[str]:
        try:
            return sorted(self._redis.scan_iter(match="*"))
        except RedisError as e:
            raise StorageError(f"Failed to list keys: {e}", original_error=e) from e

    def exists(self, key: str) -> bool:
        try:
            return bool(self._redis.exists(key))
        except RedisError as e:
            raise StorageError(f"Failed to check {key}", key=key, original_error=e) from e

    def close(self) -> None:
        self._redis.close()


def create_store(settings: Optional[WalletSettings] = None) -> KeyValueStore:
    """Build the backend selected by ``STORAGE_BACKEND``."""
    settings = settings or get_settings()
    if settings.STORAGE_BACKEND == "redis":
        logger.info("Using Redis store")
        return RedisStore(settings.REDIS_URL)
    return InMemoryStore()


# =============================================================================
# JSON helpers
# =============================================================================


def to_jsonable(data: Any) -> Any:
    """Pydantic models (also inside lists/dicts) to their wire-format dicts."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


def dumps(data: Any) -> str:
    try:
        return json.dumps(to_jsonable(data), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Value is not JSON serializable: {e}", original_error=e) from e


# =============================================================================
# Storage Manager
# =============================================================================


class StorageManager:
    """
    Namespaced JSON access to a key-value store with a data version tag.

    Keys are ``<prefix><name>``, e.g. ``pw_policies``.
    """

    POLICIES = "policies"
    PROFILE = "profile"
    SCORE = "protection_score"
    SESSION = "session"
    VERSION = "data_version"
    USERS = "users"

    ALL_KEYS = (POLICIES, PROFILE, SCORE, SESSION, VERSION, USERS)

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        prefix: Optional[str] = None,
        version: Optional[str] = None,
    ):
        settings = get_settings()
        self.store = store if store is not None else create_store(settings)
        self.prefix = prefix if prefix is not None else settings.STORAGE_KEY_PREFIX
        self.version = version if version is not None else settings.DATA_VERSION

    def key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def init(self) -> None:
        """Tag fresh storage with the current version; re-tag older data."""
        version_key = self.key(self.VERSION)
        stored_version = self.store.get(version_key)

        if stored_version is None:
            self.store.set(version_key, self.version)
            return

        if stored_version != self.version:
            # Field changes in Policy or UserProfile would be migrated here.
            logger.info(f"Migrating data from {stored_version} to {self.version}")
            self.store.set(version_key, self.version)

    def save(self, name: str, data: Any) -> None:
        self.store.set(self.key(name), dumps(data))
        logger.debug(f"Saved {self.key(name)}")

    def load(self, name: str, default: T) -> Any | T:
        """Decoded value, or ``default`` when missing or unreadable."""
        raw = self.store.get(self.key(name))
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to load from storage: {self.key(name)}. Returning default. ({e})")
            return default

    def load_model(self, name: str, model: type[BaseModel], default: T) -> Any | T:
        """Load and validate as ``model`` (a list of models when the value is a list)."""
        data = self.load(name, None)
        if data is None:
            return default
        if isinstance(data, list):
            return [model.model_validate(item) for item in data]
        return model.model_validate(data)

    def clear_session(self) -> None:
        self.store.delete(self.key(self.SESSION))

    def wipe_all(self) -> None:
        for name in self.ALL_KEYS:
            self.store.delete(self.key(name))
        logger.warning(f"Wiped all {self.prefix}* keys")

    def stats(self) -> dict[str, str]:
        """Version tag and approximate size of the namespaced data."""
        size = sum(
            len(value.encode("utf-8"))
            for key in self.store.keys()
            if key.startswith(self.prefix)
            for value in [self.store.get(key) or ""]
        )
        return {
            "version": self.store.get(self.key(self.VERSION)) or "Unknown",
            "size": f"{size / 1024:.2f} KB",
        }
