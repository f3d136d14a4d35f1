from fastapi.testclient import TestClient
from unittest.mock import patch
from src.main import app

client = TestClient(app)


def test_health_envelope():
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["version"] == "2.0.0"
    assert body["timestamp"]


def test_health_live():
    response = client.get("/api/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@patch("src.api.health.check_all_infrastructure")
def test_health_ready_success(mock_check):
    mock_check.return_value = {"redis": True}

    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json() == {"redis": "ok"}


@patch("src.api.health.check_all_infrastructure")
def test_health_ready_redis_down(mock_check):
    mock_check.return_value = {"redis": "Connection refused"}

    response = client.get("/api/health/ready")
    assert response.status_code == 503
    assert response.json() == {"redis": "error"}
