"""Tests for main application endpoints."""

from fastapi.testclient import TestClient

from smartmeter.main import app

client = TestClient(app)


def test_health_check():
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "smartmeter"
