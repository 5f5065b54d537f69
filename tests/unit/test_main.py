"""
Unit tests for FastAPI application.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import VERSION, app


@pytest.fixture
def client():
    """Create a test client for the FastAPI application."""
    return TestClient(app)


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == VERSION


def test_root_is_the_webhook(client):
    """Test the root path is reserved for webhook deliveries."""
    response = client.get("/")
    assert response.status_code == 405
