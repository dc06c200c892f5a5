"""
RedisCache - Redis-backed cache layer for deployments sharing one cache.

Values are stored as plain strings. Backend failures are raised as
CacheError so the catalog can apply its cache fault policy.
"""

import logging
from typing import List, Optional

import redis

from ..errors import CacheError

logger = logging.getLogger(__name__)


class RedisCache:
    """
    Redis-based cache implementation.

    Key enumeration uses SCAN with a MATCH pattern rather than KEYS so a
    large keyspace does not block the server.
    """

    def __init__(self, url: str = None, client: "redis.Redis" = None):
        """
        Initialize Redis cache.

        Args:
            url: Redis connection URL (redis://host:port/db)
            client: Pre-built client; takes precedence over ``url``
        """
        if client is None:
            if url is None:
                raise ValueError("either url or client is required")
            client = redis.Redis.from_url(url, decode_responses=True)
            logger.info(f"Redis cache initialized: {url}")
        self.client = client

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            raise CacheError(f"Redis get error: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except redis.RedisError as e:
            raise CacheError(f"Redis set error: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            return bool(self.client.delete(key))
        except redis.RedisError as e:
            raise CacheError(f"Redis delete error: {e}") from e

    def keys_with_prefix(self, prefix: str) -> List[str]:
        pattern = f"{_escape_glob(prefix)}*"
        try:
            return list(self.client.scan_iter(match=pattern))
        except redis.RedisError as e:
            raise CacheError(f"Redis scan error: {e}") from e

    def ping(self) -> bool:
        """Check Redis connection."""
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False


def _escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so ``text`` matches literally."""
    return "".join(f"\\{ch}" if ch in "*?[]\\" else ch for ch in text)
