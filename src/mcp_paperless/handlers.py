"""Tool handlers.

Handlers are stateless. Each receives the typed input record produced by the
dispatcher, makes its own request(s) to Paperless and reshapes the JSON into
a result model.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic

from pydantic import BaseModel, ValidationError

from .arguments import (
    AddDocumentNoteArgs,
    BulkEditDocumentsArgs,
    DocumentIdArgs,
    FindSimilarDocumentsArgs,
    ListArgs,
    SearchDocumentsArgs,
    UploadDocumentArgs,
    create_payload,
    update_payload,
)
from .errors import PaperlessApiError, PaperlessError, PaperlessTransportError, ToolValidationError
from .models import (
    BulkEditOperation,
    BulkEditResult,
    DeleteResult,
    Document,
    DocumentContent,
    EntityT,
    ListResult,
    Note,
    NotesResult,
    PaginatedEnvelope,
    SearchResult,
    SimilarResult,
    UploadResult,
)
from .paperless_client import DocumentsApi, ResourceApi

logger = logging.getLogger(__name__)


@contextmanager
def backing_call(action: str, **context: Any) -> Iterator[None]:
    """Log Paperless failures with operation context, then let them propagate."""
    try:
        yield
    except PaperlessApiError as exc:
        logger.error(
            "Failed to %s (status %s): %s %s",
            action,
            exc.status_code,
            exc.message,
            _format_context(context),
        )
        raise
    except PaperlessError as exc:
        logger.error("Failed to %s: %s %s", action, exc, _format_context(context))
        raise


def _format_context(context: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in context.items())


def _decode(model: type[EntityT], raw: Any, action: str) -> EntityT:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise PaperlessTransportError(f"failed to parse {action} response: {exc}") from exc


def _page_result(
    model: type[EntityT],
    envelope: PaginatedEnvelope,
    params: ListArgs,
    action: str,
) -> dict[str, Any]:
    items = [_decode(model, item, action) for item in envelope.results]
    return {
        "count": envelope.count,
        "page": params.page,
        "page_size": params.page_size,
        "has_next": envelope.next is not None,
        "has_prev": envelope.previous is not None,
        "items": items,
    }


class ResourceHandlers(Generic[EntityT]):
    """List/Get/Create/Update/Delete handlers for one Paperless collection."""

    def __init__(
        self,
        api: ResourceApi,
        *,
        entity: type[EntityT],
        label: str,
        id_field: str,
    ) -> None:
        self.api = api
        self.entity = entity
        self.label = label
        self.id_field = id_field

    def _id(self, params: BaseModel) -> int:
        return getattr(params, self.id_field)

    async def list(self, params: ListArgs) -> ListResult[EntityT]:
        logger.debug("Listing %ss page=%s page_size=%s", self.label, params.page, params.page_size)
        with backing_call(f"list {self.label}s", page=params.page):
            envelope = await self.api.list(params.page, params.page_size)
            result = ListResult[self.entity](
                **_page_result(self.entity, envelope, params, f"list {self.label}s")
            )
        logger.info(
            "Listed %ss count=%s returned=%s", self.label, result.count, len(result.items)
        )
        return result

    async def get(self, params: BaseModel) -> EntityT:
        item_id = self._id(params)
        with backing_call(f"get {self.label}", **{self.id_field: item_id}):
            raw = await self.api.get(item_id)
            return _decode(self.entity, raw, f"get {self.label}")

    async def create(self, params: BaseModel) -> EntityT:
        payload = create_payload(params)
        with backing_call(f"create {self.label}", name=payload.get("name")):
            raw = await self.api.create(payload)
            created = _decode(self.entity, raw, f"create {self.label}")
        logger.info("Created %s %s=%s", self.label, self.id_field, getattr(created, "id", None))
        return created

    async def update(self, params: BaseModel) -> EntityT:
        item_id = self._id(params)
        payload = update_payload(params, self.id_field)
        with backing_call(f"update {self.label}", **{self.id_field: item_id}):
            raw = await self.api.update(item_id, payload)
            updated = _decode(self.entity, raw, f"update {self.label}")
        logger.info("Updated %s %s=%s fields=%s", self.label, self.id_field, item_id, sorted(payload))
        return updated

    async def delete(self, params: BaseModel) -> DeleteResult:
        item_id = self._id(params)
        with backing_call(f"delete {self.label}", **{self.id_field: item_id}):
            await self.api.delete(item_id)
        logger.info("Deleted %s %s=%s", self.label, self.id_field, item_id)
        return DeleteResult(
            success=True,
            id=item_id,
            message=f"{self.label.capitalize()} {item_id} deleted successfully",
        )


class DocumentHandlers(ResourceHandlers[Document]):
    """Document CRUD plus the handlers that only make sense for documents."""

    api: DocumentsApi

    def __init__(self, api: DocumentsApi) -> None:
        super().__init__(api, entity=Document, label="document", id_field="document_id")

    async def search(self, params: SearchDocumentsArgs) -> SearchResult:
        logger.debug(
            "Searching documents page=%s page_size=%s", params.page, params.page_size
        )
        with backing_call("search documents", page=params.page):
            envelope = await self.api.search(params.query, params.page, params.page_size)
            result = SearchResult(
                query=params.query,
                **_page_result(Document, envelope, params, "search documents"),
            )
        logger.info(
            "Document search completed found=%s returned=%s", result.count, len(result.items)
        )
        return result

    async def find_similar(self, params: FindSimilarDocumentsArgs) -> SimilarResult:
        with backing_call("find similar documents", document_id=params.document_id):
            envelope = await self.api.similar(params.document_id, params.page, params.page_size)
            result = SimilarResult(
                document_id=params.document_id,
                **_page_result(Document, envelope, params, "find similar documents"),
            )
        logger.info(
            "Similar documents search completed document_id=%s found=%s",
            params.document_id,
            result.count,
        )
        return result

    async def content(self, params: DocumentIdArgs) -> DocumentContent:
        document = await self.get(params)
        return DocumentContent(id=document.id, title=document.title, content=document.content or "")

    async def upload(self, params: UploadDocumentArgs) -> UploadResult:
        try:
            data = base64.b64decode(params.data_base64, validate=True)
        except binascii.Error:
            raise ToolValidationError(
                "data_base64: invalid base64 data", fields=["data_base64"]
            ) from None

        fields = create_payload(params)
        for key in ("filename", "data_base64", "mime"):
            fields.pop(key, None)
        with backing_call("upload document", filename=params.filename):
            task_id = await self.api.upload(
                filename=params.filename, data=data, mime=params.mime, fields=fields
            )
        logger.info("Uploaded document filename=%s task_id=%s", params.filename, task_id)
        return UploadResult(task_id=task_id, filename=params.filename)

    async def bulk_edit(self, params: BulkEditDocumentsArgs) -> BulkEditResult:
        operations = _bulk_operations(params)
        if not operations:
            raise ToolValidationError(
                "at least one of add_tags, remove_tags, set_correspondent, "
                "set_document_type or set_storage_path must be provided",
                fields=["add_tags", "remove_tags", "set_correspondent",
                        "set_document_type", "set_storage_path"],
            )

        done: list[BulkEditOperation] = []
        for method, parameters in operations:
            with backing_call(
                "bulk edit documents", method=method, documents=len(params.document_ids)
            ):
                outcome = await self.api.bulk_edit(params.document_ids, method, parameters)
            done.append(BulkEditOperation(method=method, parameters=parameters, result=outcome))
        logger.info(
            "Bulk edited documents count=%s methods=%s",
            len(params.document_ids),
            [op.method for op in done],
        )
        return BulkEditResult(document_ids=params.document_ids, operations=done)

    async def notes(self, params: DocumentIdArgs) -> NotesResult:
        with backing_call("list document notes", document_id=params.document_id):
            raw = await self.api.notes(params.document_id)
            notes = [_decode(Note, item, "list document notes") for item in raw]
        return NotesResult(document_id=params.document_id, notes=notes)

    async def add_note(self, params: AddDocumentNoteArgs) -> NotesResult:
        with backing_call("add document note", document_id=params.document_id):
            raw = await self.api.add_note(params.document_id, params.note)
            notes = [_decode(Note, item, "add document note") for item in raw]
        logger.info("Added note to document document_id=%s", params.document_id)
        return NotesResult(document_id=params.document_id, notes=notes)


def _bulk_operations(params: BulkEditDocumentsArgs) -> list[tuple[str, dict[str, Any]]]:
    """Translate the requested mutations into Paperless bulk_edit calls."""
    operations: list[tuple[str, dict[str, Any]]] = []
    if params.add_tags or params.remove_tags:
        operations.append(
            (
                "modify_tags",
                {"add_tags": params.add_tags or [], "remove_tags": params.remove_tags or []},
            )
        )
    supplied = params.model_fields_set
    for arg, target in (
        ("set_correspondent", "correspondent"),
        ("set_document_type", "document_type"),
        ("set_storage_path", "storage_path"),
    ):
        if arg in supplied:
            operations.append((arg, {target: getattr(params, arg)}))
    return operations
