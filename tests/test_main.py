"""Tests for main application setup."""

from fastapi.testclient import TestClient

from pr_code_reviewer.main import app

client = TestClient(app)


def test_health_check() -> None:
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "app" in data
    assert "version" in data


def test_database_info() -> None:
    """Test the database info endpoint."""
    response = client.get("/database-info")
    assert response.status_code == 200
    data = response.json()
    assert "database_url" in data
    assert "driver" in data


def test_api_docs() -> None:
    """Test that API docs are accessible."""
    response = client.get("/docs")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_unknown_route_returns_json() -> None:
    """Test JSON error responses."""
    response = client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    assert "detail" in response.json()
