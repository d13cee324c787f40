from __future__ import annotations

from starlette.testclient import TestClient

from mcp_paperless.asgi import create_app

# Without text/event-stream the MCP endpoint answers at once instead of streaming.
JSON_ONLY = {"accept": "application/json"}


def _env(monkeypatch) -> None:
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless.test")
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    monkeypatch.setenv("MCP_TRANSPORT", "http")


def test_requires_bearer_token(monkeypatch) -> None:
    _env(monkeypatch)
    monkeypatch.setenv("MCP_AUTH_TOKEN", "k")
    app = create_app()
    with TestClient(app) as client:
        # Health checks are intentionally unauthenticated.
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {
            "status": "ok",
            "server": "Paperless MCP Server",
            "version": "1.0.0",
        }

        r2 = client.get("/mcp")
        assert r2.status_code == 401
        assert r2.json() == {"error": "unauthorized"}

        r3 = client.get("/mcp", headers={"authorization": "Bearer wrong"})
        assert r3.status_code == 401

        r4 = client.get("/mcp", headers={"authorization": "k"})
        assert r4.status_code == 401

        r5 = client.get("/mcp", headers={"authorization": "Bearer k", **JSON_ONLY})
        assert r5.status_code != 401


def test_no_gate_without_token(monkeypatch) -> None:
    _env(monkeypatch)
    monkeypatch.delenv("MCP_AUTH_TOKEN", raising=False)
    app = create_app()
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/mcp", headers=JSON_ONLY).status_code != 401


def test_health_rejects_other_methods(monkeypatch) -> None:
    _env(monkeypatch)
    monkeypatch.setenv("MCP_AUTH_TOKEN", "k")
    with TestClient(create_app()) as client:
        assert client.post("/health").status_code == 405
