"""Input records for MCP tools.

Every tool declares one pydantic model here. The dispatcher decodes the raw
argument bag through it exactly once, so handlers only ever see typed values.

Coercion rules shared by all tools:

* ``page`` falls back to 1 and ``page_size`` to 25 when absent, null, not a
  number or below 1; ``page_size`` is clamped to 100.
* Resource ids must be integers >= 1. Floats with an integral value are
  accepted since JSON numbers arrive as floats; booleans are rejected.
* Create records drop unknown keys. Update records keep them, so that every
  supplied key except the id is forwarded as the partial update.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
)

from .errors import ToolValidationError

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100


def _as_number(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _page(value: Any) -> int:
    page = _as_number(value)
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def _page_size(value: Any) -> int:
    size = _as_number(value)
    if size is None or size < 1:
        return DEFAULT_PAGE_SIZE
    return min(size, MAX_PAGE_SIZE)


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    return value


Page = Annotated[
    int,
    BeforeValidator(_page),
    Field(description="Page number (default 1)"),
]
PageSize = Annotated[
    int,
    BeforeValidator(_page_size),
    Field(description="Results per page (default 25, max 100)"),
]
ResourceId = Annotated[int, BeforeValidator(_reject_bool), Field(ge=1)]
RequiredText = Annotated[str, StringConstraints(min_length=1)]


def decode_arguments(model: type[BaseModel], args: dict[str, Any] | None) -> BaseModel:
    """Validate a raw argument bag against ``model``.

    Raises ToolValidationError naming the offending fields. Caller-supplied
    values are never echoed back.
    """
    try:
        return model.model_validate(args or {})
    except ValidationError as exc:
        fields: list[str] = []
        problems: list[str] = []
        for err in exc.errors(include_url=False, include_input=False):
            name = ".".join(str(part) for part in err["loc"]) or "arguments"
            if name not in fields:
                fields.append(name)
            problems.append(f"{name}: {err['msg']}")
        raise ToolValidationError("; ".join(problems), fields=fields) from None


def create_payload(params: BaseModel) -> dict[str, Any]:
    """Only the fields the caller actually supplied, nulls dropped."""
    return params.model_dump(exclude_unset=True, exclude_none=True)


def update_payload(params: BaseModel, id_field: str) -> dict[str, Any]:
    """Every supplied key except the id, verbatim."""
    payload = params.model_dump(exclude_unset=True, exclude={id_field})
    if not payload:
        raise ToolValidationError(
            "at least one field must be provided for update", fields=[id_field]
        )
    return payload


class NoArgs(BaseModel):
    pass


class ListArgs(BaseModel):
    page: Page = DEFAULT_PAGE
    page_size: PageSize = DEFAULT_PAGE_SIZE


class _UpdateArgs(BaseModel):
    model_config = ConfigDict(extra="allow")


class _MatchingFields(BaseModel):
    match: str | None = Field(default=None, description="Text used for automatic matching")
    matching_algorithm: int | None = Field(
        default=None,
        description="0 none, 1 any, 2 all, 3 literal, 4 regex, 5 fuzzy, 6 auto",
    )
    is_insensitive: bool | None = Field(default=None, description="Case-insensitive matching")
    owner: int | None = Field(default=None, description="Owner user id")


# Documents


class SearchDocumentsArgs(ListArgs):
    query: RequiredText = Field(description="Full-text search query")


class FindSimilarDocumentsArgs(ListArgs):
    document_id: ResourceId = Field(description="Document to find similar documents for")


class DocumentIdArgs(BaseModel):
    document_id: ResourceId = Field(description="Document id")


class UploadDocumentArgs(BaseModel):
    filename: RequiredText = Field(description="File name, including extension")
    data_base64: RequiredText = Field(description="File bytes, base64 encoded")
    mime: str = Field(default="application/octet-stream", description="MIME type of the file")
    title: str | None = None
    created: str | None = Field(default=None, description="Creation date (ISO 8601)")
    correspondent: ResourceId | None = None
    document_type: ResourceId | None = None
    storage_path: ResourceId | None = None
    tags: list[ResourceId] | None = None
    archive_serial_number: int | None = None


class UpdateDocumentArgs(_UpdateArgs):
    document_id: ResourceId = Field(description="Document id")
    title: str | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] | None = None
    archive_serial_number: int | None = None
    created: str | None = None
    custom_fields: list[dict[str, Any]] | None = None


class BulkEditDocumentsArgs(BaseModel):
    document_ids: list[ResourceId] = Field(min_length=1, description="Documents to modify")
    add_tags: list[ResourceId] | None = Field(default=None, description="Tag ids to add")
    remove_tags: list[ResourceId] | None = Field(default=None, description="Tag ids to remove")
    set_correspondent: ResourceId | None = Field(
        default=None, description="Correspondent id to set (null clears it)"
    )
    set_document_type: ResourceId | None = Field(
        default=None, description="Document type id to set (null clears it)"
    )
    set_storage_path: ResourceId | None = Field(
        default=None, description="Storage path id to set (null clears it)"
    )


class AddDocumentNoteArgs(DocumentIdArgs):
    note: RequiredText = Field(description="Note text")


# Correspondents


class CorrespondentIdArgs(BaseModel):
    correspondent_id: ResourceId = Field(description="Correspondent id")


class CreateCorrespondentArgs(_MatchingFields):
    name: RequiredText = Field(description="Correspondent name")


class UpdateCorrespondentArgs(_UpdateArgs, _MatchingFields):
    correspondent_id: ResourceId = Field(description="Correspondent id")
    name: str | None = None


# Document types


class DocumentTypeIdArgs(BaseModel):
    document_type_id: ResourceId = Field(description="Document type id")


class CreateDocumentTypeArgs(_MatchingFields):
    name: RequiredText = Field(description="Document type name")


class UpdateDocumentTypeArgs(_UpdateArgs, _MatchingFields):
    document_type_id: ResourceId = Field(description="Document type id")
    name: str | None = None


# Tags


class TagIdArgs(BaseModel):
    tag_id: ResourceId = Field(description="Tag id")


class CreateTagArgs(_MatchingFields):
    name: RequiredText = Field(description="Tag name")
    color: RequiredText = Field(description="Hex colour, e.g. #ff0000")
    is_inbox_tag: bool | None = Field(default=None, description="Mark as inbox tag")
    parent: ResourceId | None = Field(default=None, description="Parent tag id")


class UpdateTagArgs(_UpdateArgs, _MatchingFields):
    tag_id: ResourceId = Field(description="Tag id")
    name: str | None = None
    color: str | None = None
    is_inbox_tag: bool | None = None
    parent: int | None = None


# Storage paths


class StoragePathIdArgs(BaseModel):
    storage_path_id: ResourceId = Field(description="Storage path id")


class CreateStoragePathArgs(_MatchingFields):
    name: RequiredText = Field(description="Storage path name")
    path: RequiredText = Field(description="Path template, e.g. {created_year}/{correspondent}")


class UpdateStoragePathArgs(_UpdateArgs, _MatchingFields):
    storage_path_id: ResourceId = Field(description="Storage path id")
    name: str | None = None
    path: str | None = None


# Custom fields


class CustomFieldIdArgs(BaseModel):
    field_id: ResourceId = Field(description="Custom field id")


class CreateCustomFieldArgs(BaseModel):
    name: RequiredText = Field(description="Custom field name")
    data_type: RequiredText = Field(
        description="string, url, date, boolean, integer, float, monetary, documentlink or select"
    )
    extra_data: dict[str, Any] | None = Field(
        default=None, description="Type specific options, e.g. select options"
    )


class UpdateCustomFieldArgs(_UpdateArgs):
    field_id: ResourceId = Field(description="Custom field id")
    name: str | None = None
    data_type: str | None = None
    extra_data: dict[str, Any] | None = None
