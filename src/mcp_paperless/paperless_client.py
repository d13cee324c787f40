"""Async client for the Paperless-ngx REST API."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import PaperlessApiError, PaperlessTransportError
from .models import PaginatedEnvelope

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def _error_from_response(resp: httpx.Response, method: str) -> PaperlessApiError:
    text = (resp.text or "").strip()
    try:
        data = resp.json()
    except ValueError:
        return PaperlessApiError(
            status_code=resp.status_code,
            message=text or resp.reason_phrase,
            method=method,
            url=str(resp.request.url),
        )

    if not isinstance(data, dict):
        return PaperlessApiError(
            status_code=resp.status_code,
            message=text,
            method=method,
            url=str(resp.request.url),
        )

    message = "API request failed"
    for key in ("detail", "message", "error"):
        if isinstance(data.get(key), str):
            message = data[key]
            break
    return PaperlessApiError(
        status_code=resp.status_code,
        message=message,
        method=method,
        url=str(resp.request.url),
        details=data,
    )


class PaperlessClient:
    """Thin wrapper around the Paperless-ngx REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Token {token}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )
        self.documents = DocumentsApi(self)
        self.correspondents = ResourceApi(self, "correspondents")
        self.document_types = ResourceApi(self, "document_types")
        self.tags = ResourceApi(self, "tags")
        self.storage_paths = ResourceApi(self, "storage_paths")
        self.custom_fields = ResourceApi(self, "custom_fields")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        method = method.upper()
        url_path = path if path.startswith("/") else f"/{path}"
        logger.debug("Paperless request %s %s", method, url_path)
        try:
            resp = await self._client.request(method, url_path, **kwargs)
        except httpx.HTTPError as exc:
            raise PaperlessTransportError(
                f"request {method} {url_path} failed: {exc}"
            ) from exc
        logger.debug("Paperless response %s %s -> %s", method, url_path, resp.status_code)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise _error_from_response(resp, method)
        return resp

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise PaperlessTransportError(
                f"invalid JSON in response from {resp.request.method} {resp.request.url}"
            ) from exc

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = dict(params)
        if json_body is not None:
            kwargs["json"] = json_body
        resp = await self._send(method, path, **kwargs)
        return self._decode(resp)

    async def request_multipart(
        self,
        path: str,
        *,
        files: Mapping[str, Any],
        data: Mapping[str, Any] | None = None,
    ) -> Any:
        resp = await self._send("POST", path, files=dict(files), data=dict(data or {}))
        return self._decode(resp)

    async def get_paged(
        self,
        path: str,
        *,
        page: int = 1,
        page_size: int = 25,
        params: Mapping[str, Any] | None = None,
    ) -> PaginatedEnvelope:
        q = dict(params or {})
        q.update({"page": page, "page_size": page_size})
        raw = await self.request_json("GET", path, params=q)
        try:
            return PaginatedEnvelope.model_validate(raw)
        except ValidationError as exc:
            raise PaperlessTransportError(f"unexpected list response from {path}: {exc}") from exc

    async def get_object(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        raw = await self.request_json("GET", path, params=params)
        return _expect_object(raw, path)


def _expect_object(raw: Any, path: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise PaperlessTransportError(
            f"unexpected JSON type from {path}: {type(raw).__name__}"
        )
    return raw


class ResourceApi:
    """CRUD calls for one collection under ``/api/<resource>/``."""

    def __init__(self, client: PaperlessClient, resource: str) -> None:
        self._client = client
        self.resource = resource

    @property
    def collection_path(self) -> str:
        return f"/api/{self.resource}/"

    def item_path(self, item_id: int) -> str:
        return f"/api/{self.resource}/{item_id}/"

    async def list(
        self,
        page: int = 1,
        page_size: int = 25,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> PaginatedEnvelope:
        return await self._client.get_paged(
            self.collection_path, page=page, page_size=page_size, params=params
        )

    async def get(self, item_id: int) -> dict[str, Any]:
        return await self._client.get_object(self.item_path(item_id))

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        raw = await self._client.request_json(
            "POST", self.collection_path, json_body=dict(payload)
        )
        return _expect_object(raw, self.collection_path)

    async def update(self, item_id: int, partial: Mapping[str, Any]) -> dict[str, Any]:
        path = self.item_path(item_id)
        raw = await self._client.request_json("PATCH", path, json_body=dict(partial))
        return _expect_object(raw, path)

    async def delete(self, item_id: int) -> None:
        await self._client.request_json("DELETE", self.item_path(item_id))


class DocumentsApi(ResourceApi):
    """Document calls: CRUD plus search, similarity, upload, bulk edit and notes."""

    def __init__(self, client: PaperlessClient) -> None:
        super().__init__(client, "documents")

    async def search(self, query: str, page: int = 1, page_size: int = 25) -> PaginatedEnvelope:
        return await self.list(page, page_size, params={"query": query})

    async def similar(
        self, document_id: int, page: int = 1, page_size: int = 25
    ) -> PaginatedEnvelope:
        return await self.list(page, page_size, params={"more_like_id": document_id})

    async def upload(
        self,
        *,
        filename: str,
        data: bytes,
        mime: str,
        fields: Mapping[str, Any] | None = None,
    ) -> str:
        """Upload a file for consumption and return the consumption task id."""
        path = "/api/documents/post_document/"
        form: dict[str, Any] = {}
        for key, value in (fields or {}).items():
            if isinstance(value, Sequence) and not isinstance(value, str):
                form[key] = [str(v) for v in value]
            else:
                form[key] = str(value)
        raw = await self._client.request_multipart(
            path,
            files={"document": (filename, data, mime)},
            data=form,
        )
        if isinstance(raw, dict) and "task_id" in raw:
            raw = raw["task_id"]
        if not isinstance(raw, str):
            raise PaperlessTransportError(
                f"unexpected JSON type from {path}: {type(raw).__name__}"
            )
        return raw

    async def bulk_edit(
        self,
        document_ids: Sequence[int],
        method: str,
        parameters: Mapping[str, Any],
    ) -> Any:
        return await self._client.request_json(
            "POST",
            "/api/documents/bulk_edit/",
            json_body={
                "documents": list(document_ids),
                "method": method,
                "parameters": dict(parameters),
            },
        )

    async def notes(self, document_id: int) -> list[Any]:
        path = f"{self.item_path(document_id)}notes/"
        raw = await self._client.request_json("GET", path)
        return _expect_notes(raw, path)

    async def add_note(self, document_id: int, note: str) -> list[Any]:
        path = f"{self.item_path(document_id)}notes/"
        raw = await self._client.request_json("POST", path, json_body={"note": note})
        return _expect_notes(raw, path)


def _expect_notes(raw: Any, path: str) -> list[Any]:
    # Some Paperless versions paginate notes, others return a bare list.
    if isinstance(raw, dict) and isinstance(raw.get("results"), list):
        return raw["results"]
    if not isinstance(raw, list):
        raise PaperlessTransportError(
            f"unexpected JSON type from {path}: {type(raw).__name__}"
        )
    return raw
