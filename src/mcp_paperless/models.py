"""Structured models for Paperless API payloads and MCP tool results."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

EntityT = TypeVar("EntityT", bound=BaseModel)


class PaginatedEnvelope(BaseModel):
    """A page of a Paperless list endpoint."""

    count: int = Field(ge=0)
    next: str | None = None
    previous: str | None = None
    all: list[int] | None = None
    results: list[Any]


class Note(BaseModel):
    id: int
    note: str = ""
    created: str | None = None
    document: int | None = None
    user: int | dict[str, Any] | None = None


class CustomFieldValue(BaseModel):
    field: int
    value: Any = None


class Document(BaseModel):
    id: int
    title: str = ""
    content: str | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] = Field(default_factory=list)
    created: str | None = None
    created_date: str | None = None
    modified: str | None = None
    added: str | None = None
    archive_serial_number: int | None = None
    original_file_name: str | None = None
    archived_file_name: str | None = None
    owner: int | None = None
    user_can_change: bool | None = None
    notes: list[Note] = Field(default_factory=list)
    custom_fields: list[CustomFieldValue] = Field(default_factory=list)


class Correspondent(BaseModel):
    id: int
    slug: str | None = None
    name: str
    match: str = ""
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    last_correspondence: str | None = None
    owner: int | None = None
    user_can_change: bool | None = None


class DocumentType(BaseModel):
    id: int
    slug: str | None = None
    name: str
    match: str = ""
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    owner: int | None = None
    user_can_change: bool | None = None


class Tag(BaseModel):
    id: int
    slug: str | None = None
    name: str
    color: str | None = None
    text_color: str | None = None
    match: str = ""
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    is_inbox_tag: bool | None = None
    parent: int | None = None
    document_count: int | None = None
    owner: int | None = None
    user_can_change: bool | None = None


class StoragePath(BaseModel):
    id: int
    slug: str | None = None
    name: str
    path: str = ""
    match: str = ""
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    owner: int | None = None
    user_can_change: bool | None = None


class CustomField(BaseModel):
    id: int
    name: str
    data_type: str
    extra_data: dict[str, Any] | None = None
    document_count: int | None = None


class ListResult(BaseModel, Generic[EntityT]):
    count: int
    page: int = Field(ge=1)
    page_size: int = Field(ge=1, le=100)
    has_next: bool
    has_prev: bool
    items: list[EntityT]


class SearchResult(ListResult[Document]):
    query: str


class SimilarResult(ListResult[Document]):
    document_id: int


class DeleteResult(BaseModel):
    success: bool
    id: int
    message: str


class BulkEditOperation(BaseModel):
    method: str
    parameters: dict[str, Any]
    result: Any = None


class BulkEditResult(BaseModel):
    document_ids: list[int]
    operations: list[BulkEditOperation]


class UploadResult(BaseModel):
    task_id: str
    filename: str


class DocumentContent(BaseModel):
    id: int
    title: str
    content: str


class NotesResult(BaseModel):
    document_id: int
    notes: list[Note]
