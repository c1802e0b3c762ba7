from fastapi.testclient import TestClient

from conftest import build_settings
from expense_api.core.errors import StoreError
from expense_api.main import create_app


def _failing_app(tmp_path, environment, exc):
    app = create_app(settings_override=build_settings(tmp_path, environment=environment))
    db = app.state.db

    def boom():
        raise exc

    db.list_expenses = boom
    return app


def test_store_error_in_production_hides_details(tmp_path):
    app = _failing_app(tmp_path, "production", StoreError("relation expenses does not exist"))
    resp = TestClient(app).get("/expenses")
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "server error"}}


def test_store_error_in_development_exposes_details(tmp_path):
    app = _failing_app(tmp_path, "development", StoreError("relation expenses does not exist"))
    resp = TestClient(app).get("/expenses")
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "relation expenses does not exist"
    assert body["error"]["type"] == "StoreError"


def test_unexpected_error_goes_through_boundary_handler(tmp_path):
    app = _failing_app(tmp_path, "production", RuntimeError("kaboom"))
    resp = TestClient(app, raise_server_exceptions=False).get("/expenses")
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "server error"}}


def test_unexpected_error_details_outside_production(tmp_path):
    app = _failing_app(tmp_path, "test", RuntimeError("kaboom"))
    resp = TestClient(app, raise_server_exceptions=False).get("/expenses")
    assert resp.status_code == 500
    assert resp.json()["message"] == "kaboom"
    assert resp.json()["error"]["type"] == "RuntimeError"


def test_closed_connection_surfaces_as_500(tmp_path):
    app = create_app(settings_override=build_settings(tmp_path, environment="production"))
    app.state.db.close()
    resp = TestClient(app).post(
        "/expenses",
        json={"name": "coffee", "amount": "4.50", "type_id": "3", "category": "Food"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "server error"}}


def test_unexpected_error_response_keeps_request_headers(tmp_path):
    app = _failing_app(tmp_path, "production", RuntimeError("kaboom"))
    resp = TestClient(app).get("/expenses", headers={"X-Request-ID": "req-500"})
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "server error"}}
    assert resp.headers["x-request-id"] == "req-500"
    assert resp.headers["x-content-type-options"] == "nosniff"
