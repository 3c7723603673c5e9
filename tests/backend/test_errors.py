from fastapi.testclient import TestClient

from backend.app.main import create_app


def test_unknown_route(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route not found"}


def test_method_not_allowed(client):
    resp = client.patch("/api/skills")

    assert resp.status_code == 405
    assert resp.json()["message"] == "Method not allowed"


def test_missing_body(client):
    resp = client.post("/api/auth/login")

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_non_integer_path_parameter(client):
    resp = client.get("/api/projects/abc")

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "project_id"


def test_request_too_large(client):
    body = b"x" * (10 * 1024 * 1024 + 1)

    resp = client.post(
        "/api/auth/login", content=body, headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 413
    assert resp.json()["success"] is False


def test_unhandled_error_is_500(test_settings):
    app = create_app(test_settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/boom")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}


def test_debug_details_outside_production(test_settings):
    settings = test_settings.model_copy(update={"debug": True})
    app = create_app(settings)

    with TestClient(app) as client:
        resp = client.get("/api/skills/nothing-here")

    body = resp.json()
    assert resp.status_code == 404
    assert body["error"] == "No profiles found with this skill"
    assert "NotFoundError" in body["stack"]


def test_request_id_header(client):
    echoed = client.get("/health", headers={"X-Request-ID": "abc-123"})
    minted = client.get("/health", headers={"X-Request-ID": "bad id with spaces"})

    assert echoed.headers["X-Request-ID"] == "abc-123"
    assert minted.headers["X-Request-ID"] != "bad id with spaces"
    assert len(minted.headers["X-Request-ID"]) == 36
