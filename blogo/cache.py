"""
Redis-backed entity cache.

The cache is a read accelerator in front of the database, never a source of
truth. ``RedisClient`` wraps the connection and turns backend failures into
``CacheError``; ``EntityCache`` stores serialized user and blog snapshots;
``NullCache`` is used when Redis is disabled or unreachable at startup.
"""

import json
import logging
from typing import Optional, Union

import redis

from blogo.config import ENABLE_REDIS_CACHE, REDIS_URL
from blogo.entities import Blog, User
from blogo.errors import CacheError

logger = logging.getLogger(__name__)

USER_KEY = "user:{}"
BLOG_KEY = "blog:{}"
# Namespace for cached blog listings; bulk-invalidated on blog create/update/delete.
BLOG_LIST_PATTERN = "blogs:*"


class RedisClient:
    """Thin wrapper around a synchronous Redis connection."""

    def __init__(self, url: str = REDIS_URL, enabled: bool = ENABLE_REDIS_CACHE):
        self._enabled = enabled
        self._client: Optional[redis.Redis] = None
        if enabled:
            try:
                self._client = redis.Redis.from_url(
                    url,
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5,
                )
            except (redis.RedisError, ValueError) as e:
                logger.warning("Invalid Redis configuration %s: %s", url, e)

    @property
    def is_available(self) -> bool:
        return self._enabled and self._client is not None

    def ping(self) -> bool:
        if not self.is_available:
            return False
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    def get(self, key: str) -> Optional[str]:
        if not self.is_available:
            return None
        try:
            return self._client.get(key)
        except redis.RedisError as e:
            raise CacheError(f"get {key}", e)

    def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        if not self.is_available:
            return False
        try:
            return bool(self._client.setex(key, ttl_seconds, value))
        except redis.RedisError as e:
            raise CacheError(f"set {key}", e)

    def delete(self, key: str) -> bool:
        if not self.is_available:
            return False
        try:
            self._client.delete(key)
            return True
        except redis.RedisError as e:
            raise CacheError(f"delete {key}", e)

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the number deleted."""
        if not self.is_available:
            return 0
        deleted = 0
        try:
            for key in self._client.scan_iter(match=pattern):
                deleted += self._client.delete(key)
        except redis.RedisError as e:
            raise CacheError(f"delete pattern {pattern}", e)
        return deleted


class EntityCache:
    """Stores full user and blog snapshots as JSON under ``user:<id>`` / ``blog:<id>``."""

    def __init__(self, client: RedisClient):
        self.client = client

    def _load(self, key: str) -> Optional[dict]:
        raw = self.client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt cache entry %s", key)
            return None

    def set_user(self, user: User, ttl_seconds: int) -> None:
        self.client.set(USER_KEY.format(user.id), json.dumps(user.to_dict()), ttl_seconds)

    def get_user(self, user_id: int) -> Optional[User]:
        data = self._load(USER_KEY.format(user_id))
        if data is None:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed cached user %s", user_id)
            return None

    def delete_user(self, user_id: int) -> None:
        self.client.delete(USER_KEY.format(user_id))

    def set_blog(self, blog: Blog, ttl_seconds: int) -> None:
        self.client.set(BLOG_KEY.format(blog.id), json.dumps(blog.to_dict()), ttl_seconds)

    def get_blog(self, blog_id: int) -> Optional[Blog]:
        data = self._load(BLOG_KEY.format(blog_id))
        if data is None:
            return None
        try:
            return Blog.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed cached blog %s", blog_id)
            return None

    def delete_blog(self, blog_id: int) -> None:
        self.client.delete(BLOG_KEY.format(blog_id))

    def delete_by_prefix(self, pattern: str) -> None:
        self.client.delete_pattern(pattern)


class NullCache:
    """Cache that never holds anything."""

    def set_user(self, user: User, ttl_seconds: int) -> None:
        pass

    def get_user(self, user_id: int) -> Optional[User]:
        return None

    def delete_user(self, user_id: int) -> None:
        pass

    def set_blog(self, blog: Blog, ttl_seconds: int) -> None:
        pass

    def get_blog(self, blog_id: int) -> Optional[Blog]:
        return None

    def delete_blog(self, blog_id: int) -> None:
        pass

    def delete_by_prefix(self, pattern: str) -> None:
        pass


def build_cache(client: RedisClient) -> Union[EntityCache, NullCache]:
    """Return an entity cache if Redis answers, otherwise run without caching."""
    if not client._enabled:
        logger.info("Redis cache disabled")
        return NullCache()
    if not client.ping():
        logger.warning("Redis connection failed, continuing without caching")
        return NullCache()
    logger.info("Redis cache connected")
    return EntityCache(client)


redis_client = RedisClient()
