"""
Tests for the health endpoints.
"""


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_root(client):
    assert client.get("/").json() == {"status": "CareerPath API running"}
