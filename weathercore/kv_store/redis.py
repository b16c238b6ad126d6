"""Redis-backed key-value store."""

from typing import Optional

from weathercore.kv_store.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kv_store/redis")


class RedisKeyValueStore(KeyValueStore):
    """Stores UTF-8 string values under a key prefix, without expiry."""

    def __init__(self, client, prefix: str = "weather:") -> None:
        """Initialize with a Redis client and key prefix."""
        logger.debug("Initializing RedisKeyValueStore")
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the namespaced Redis key."""
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        """Read a value; unreadable entries and connection errors read as absent."""
        try:
            raw = self.client.get(self._key(key))
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to read key from Redis: %s", exc)
            return None
        if raw is None:
            return None
        if isinstance(raw, bytes):
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                logger.error("Failed to decode Redis value for %s: %s", key, exc)
                return None
        return str(raw)

    def set(self, key: str, value: str) -> None:
        """Write a value, re-raising connection errors after logging them."""
        try:
            self.client.set(self._key(key), value.encode("utf-8"))
        except Exception as exc:
            logger.error("Failed to write key to Redis: %s", exc)
            raise

    def delete(self, key: str) -> None:
        """Delete a key if present."""
        try:
            self.client.delete(self._key(key))
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to delete key from Redis: %s", exc)

    def clear(self) -> None:
        """Best-effort clear for all keys under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to clear keys from Redis: %s", exc)
