"""Shared fixtures: in-memory SQLite store and a dict-backed Redis stand-in."""

import fnmatch

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blogo.cache import EntityCache
from blogo.db import session_scope
from blogo.errors import CacheError
from blogo.models import Base
from blogo.repositories import BlogRepository, UserRepository


class InMemoryRedis:
    """Mimics the RedisClient surface used by EntityCache and the health checks."""

    def __init__(self):
        self._enabled = True
        self.store = {}
        self.ttls = {}
        self.failing = False

    @property
    def is_available(self):
        return True

    def _check(self, operation):
        if self.failing:
            raise CacheError(operation, ConnectionError("redis unreachable"))

    def ping(self):
        return not self.failing

    def get(self, key):
        self._check(f"get {key}")
        return self.store.get(key)

    def set(self, key, value, ttl_seconds):
        self._check(f"set {key}")
        self.store[key] = value
        self.ttls[key] = ttl_seconds
        return True

    def delete(self, key):
        self._check(f"delete {key}")
        self.store.pop(key, None)
        return True

    def delete_pattern(self, pattern):
        self._check(f"delete pattern {pattern}")
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for key in keys:
            del self.store[key]
        return len(keys)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return session_scope(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))


@pytest.fixture
def user_repo(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def blog_repo(session_factory):
    return BlogRepository(session_factory)


@pytest.fixture
def redis_double():
    return InMemoryRedis()


@pytest.fixture
def cache(redis_double):
    return EntityCache(redis_double)
