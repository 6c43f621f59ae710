"""
Health check endpoints for monitoring system status.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from blogo.cache import redis_client
from blogo.db import get_session
from blogo.errors import CacheError
from blogo.models import Blog, Follow, Like, User

router = APIRouter(prefix="/health", tags=["health"])

VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_database_health() -> Dict[str, str]:
    """
    Check database connectivity.

    Returns:
        Dict with status and optional error details
    """
    try:
        with get_session() as db:
            if db.execute(text("SELECT 1")).scalar() == 1:
                return {"status": "ok"}
            return {"status": "down", "error": "Unexpected query result"}
    except SQLAlchemyError as e:
        return {"status": "down", "error": f"Database error: {e}"}


def check_redis_health() -> Dict[str, str]:
    """
    Check Redis connectivity.

    A disabled cache is reported as such rather than as a failure.
    """
    if not redis_client._enabled:
        return {"status": "disabled"}
    if not redis_client.is_available:
        return {"status": "down", "error": "Redis client not available"}
    if redis_client.ping():
        return {"status": "ok"}
    return {"status": "down", "error": "Redis ping failed"}


@router.get("/")
def health_check() -> Dict[str, Any]:
    """
    Overall service health.

    ``status`` is "down" when the database is unreachable and "degraded" when
    only Redis is; the API keeps serving from the database without a cache.
    """
    db_health = check_database_health()
    redis_health = check_redis_health()

    overall_status = "ok"
    if db_health["status"] == "down":
        overall_status = "down"
    elif redis_health["status"] == "down":
        overall_status = "degraded"

    return {
        "status": overall_status,
        "db": db_health,
        "redis": redis_health,
        "version": VERSION,
        "timestamp": _now(),
    }


@router.get("/db")
def database_health() -> Dict[str, Any]:
    """Database health plus row counts for each table."""
    health_status = check_database_health()
    if health_status["status"] != "ok":
        return health_status

    try:
        with get_session() as db:
            health_status["tables"] = {
                "users": db.execute(select(func.count(User.id))).scalar(),
                "blogs": db.execute(select(func.count(Blog.id))).scalar(),
                "followers": db.execute(select(func.count(Follow.id))).scalar(),
                "likes": db.execute(select(func.count(Like.id))).scalar(),
            }
    except SQLAlchemyError as e:
        health_status["error"] = f"Extended check failed: {e}"
    health_status["timestamp"] = _now()
    return health_status


@router.get("/redis")
def redis_health() -> Dict[str, Any]:
    """Redis health plus a set/get/delete round trip on a scratch key."""
    health_status = check_redis_health()
    if health_status["status"] != "ok":
        return health_status

    test_key = "health_check_test"
    test_value = "test_value"
    try:
        set_success = redis_client.set(test_key, test_value, 60)
        retrieved_value = redis_client.get(test_key)
        delete_success = redis_client.delete(test_key)
        health_status["operations"] = {
            "set": set_success,
            "get": retrieved_value == test_value,
            "delete": delete_success,
        }
    except CacheError as e:
        health_status["error"] = f"Redis operations test failed: {e}"
    health_status["timestamp"] = _now()
    return health_status
