from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from mcp_paperless.mcp_server import PaperlessMcpServer
from mcp_paperless.paperless_client import PaperlessClient
from mcp_paperless.settings import Settings

BASE_URL = "http://paperless.test"
RESOURCES = (
    "documents",
    "correspondents",
    "document_types",
    "tags",
    "storage_paths",
    "custom_fields",
)


class FakePaperless:
    """In-memory stand-in for the Paperless REST API that records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.store: dict[str, dict[int, dict[str, Any]]] = {r: {} for r in RESOURCES}
        self.notes: dict[int, list[dict[str, Any]]] = {}
        self.next_id = 42
        self.cursors: tuple[str | None, str | None] = (None, None)
        self.count: int | None = None

    @property
    def calls(self) -> int:
        return len(self.requests)

    def add(self, resource: str, item: dict[str, Any]) -> dict[str, Any]:
        self.store[resource][item["id"]] = item
        return item

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        if len(parts) < 2 or parts[0] != "api" or parts[1] not in RESOURCES:
            return httpx.Response(404, json={"detail": "Not found."})
        resource = parts[1]
        rest = parts[2:]
        method = request.method

        if resource == "documents" and rest == ["bulk_edit"] and method == "POST":
            return httpx.Response(200, json={"result": "OK"})
        if resource == "documents" and rest == ["post_document"] and method == "POST":
            return httpx.Response(200, json="0f6a1b2c-task")

        if not rest:
            if method == "GET":
                return self._list(resource)
            if method == "POST":
                item = {**json.loads(request.content), "id": self.next_id}
                return httpx.Response(201, json=self.add(resource, item))
            return httpx.Response(405, json={"detail": "Method not allowed."})

        item_id = int(rest[0])
        if resource == "documents" and rest[1:] == ["notes"]:
            return self._notes(item_id, request)
        item = self.store[resource].get(item_id)
        if item is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if method == "GET":
            return httpx.Response(200, json=item)
        if method == "PATCH":
            item.update(json.loads(request.content))
            return httpx.Response(200, json=item)
        if method == "DELETE":
            del self.store[resource][item_id]
            return httpx.Response(204)
        return httpx.Response(405, json={"detail": "Method not allowed."})

    def _list(self, resource: str) -> httpx.Response:
        results = list(self.store[resource].values())
        nxt, prev = self.cursors
        return httpx.Response(
            200,
            json={
                "count": self.count if self.count is not None else len(results),
                "next": nxt,
                "previous": prev,
                "results": results,
            },
        )

    def _notes(self, document_id: int, request: httpx.Request) -> httpx.Response:
        notes = self.notes.setdefault(document_id, [])
        if request.method == "POST":
            text = json.loads(request.content)["note"]
            notes.append({"id": len(notes) + 1, "note": text, "document": document_id})
        return httpx.Response(200, json=notes)


@pytest.fixture
def fake() -> FakePaperless:
    return FakePaperless()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("PAPERLESS_URL", BASE_URL)
    monkeypatch.setenv("PAPERLESS_TOKEN", "secret-token")
    monkeypatch.delenv("MCP_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("MCP_TRANSPORT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return Settings()


@pytest.fixture
async def client(fake: FakePaperless) -> AsyncIterator[PaperlessClient]:
    c = PaperlessClient(
        base_url=BASE_URL,
        token="secret-token",
        transport=httpx.MockTransport(fake.handler),
    )
    yield c
    await c.aclose()


@pytest.fixture
def server(settings: Settings, client: PaperlessClient) -> PaperlessMcpServer:
    return PaperlessMcpServer(settings, client=client)
