"""
FastAPI dependency providers wiring repositories, cache and services together.
"""

from functools import lru_cache

from blogo.auth import token_issuer
from blogo.cache import build_cache, redis_client
from blogo.config import BLOG_CACHE_TTL_SECONDS, USER_CACHE_TTL_SECONDS
from blogo.db import get_session
from blogo.repositories import BlogRepository, UserRepository
from blogo.services.blogs import BlogService
from blogo.services.users import UserService


@lru_cache(maxsize=1)
def get_cache():
    """Entity cache, resolved once per process."""
    return build_cache(redis_client)


def get_user_service() -> UserService:
    return UserService(
        UserRepository(get_session),
        cache=get_cache(),
        token_issuer=token_issuer,
        user_ttl=USER_CACHE_TTL_SECONDS,
    )


def get_blog_service() -> BlogService:
    return BlogService(
        BlogRepository(get_session),
        cache=get_cache(),
        blog_ttl=BLOG_CACHE_TTL_SECONDS,
    )
