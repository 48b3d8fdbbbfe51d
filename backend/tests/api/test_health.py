"""Tests for GET /health and the request-id middleware."""


def test_health_check_should_return_ok(client):
    # Act
    resp = client.get("/health")

    # Assert
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["service"] == "crossrate-backend"


def test_response_should_echo_incoming_request_id(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert resp.headers["X-Request-ID"] == "abc123"


def test_response_should_generate_request_id_when_missing(client):
    resp = client.get("/health")

    assert resp.headers["X-Request-ID"]
