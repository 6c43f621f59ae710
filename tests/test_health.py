"""
Tests for health check endpoints.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from blogo.entities import User
from blogo.errors import CacheError
from blogo.main import app
from blogo.routes import health


class TestHealthEndpoints:
    """Test health check endpoints."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    @pytest.mark.parametrize(
        "db_status,redis_status,overall",
        [
            ("ok", "ok", "ok"),
            ("down", "ok", "down"),
            ("ok", "down", "degraded"),
            ("ok", "disabled", "ok"),
        ],
    )
    def test_overall_status(self, client, db_status, redis_status, overall):
        with patch("blogo.routes.health.check_database_health") as mock_db, \
             patch("blogo.routes.health.check_redis_health") as mock_redis:
            mock_db.return_value = {"status": db_status}
            mock_redis.return_value = {"status": redis_status}

            response = client.get("/health/")

            assert response.status_code == 200
            data = response.json()
            assert data["status"] == overall
            assert data["db"]["status"] == db_status
            assert data["redis"]["status"] == redis_status
            assert "version" in data
            assert "timestamp" in data

    def test_db_endpoint_counts_tables(self, client, session_factory, user_repo):
        user_repo.create_user(User.new("alice", "alice@example.com", "Alice"))
        with patch("blogo.routes.health.get_session", session_factory):
            response = client.get("/health/db")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["tables"] == {"users": 1, "blogs": 0, "followers": 0, "likes": 0}

    def test_db_endpoint_when_down(self, client):
        def broken():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        with patch("blogo.routes.health.get_session", broken):
            data = client.get("/health/db").json()

        assert data["status"] == "down"
        assert "error" in data
        assert "tables" not in data

    def test_redis_endpoint_round_trip(self, client, redis_double):
        with patch.object(health, "redis_client", redis_double):
            data = client.get("/health/redis").json()

        assert data["status"] == "ok"
        assert data["operations"] == {"set": True, "get": True, "delete": True}
        assert "health_check_test" not in redis_double.store

    def test_redis_endpoint_operation_failure(self, client):
        fake = MagicMock()
        fake._enabled = True
        fake.is_available = True
        fake.ping.return_value = True
        fake.set.side_effect = CacheError("set health_check_test", Exception("read only"))

        with patch.object(health, "redis_client", fake):
            data = client.get("/health/redis").json()

        assert data["status"] == "ok"
        assert "Redis operations test failed" in data["error"]


class TestRedisHealthCheck:

    def test_disabled(self):
        fake = MagicMock(_enabled=False)
        with patch.object(health, "redis_client", fake):
            assert health.check_redis_health() == {"status": "disabled"}

    def test_unavailable(self):
        fake = MagicMock(_enabled=True, is_available=False)
        with patch.object(health, "redis_client", fake):
            assert health.check_redis_health()["status"] == "down"

    def test_ping_failure(self):
        fake = MagicMock(_enabled=True, is_available=True)
        fake.ping.return_value = False
        with patch.object(health, "redis_client", fake):
            result = health.check_redis_health()
        assert result == {"status": "down", "error": "Redis ping failed"}
