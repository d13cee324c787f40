"""The catalogue of MCP tools exposed by this server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from . import arguments as a
from .handlers import DocumentHandlers, ResourceHandlers
from .models import Correspondent, CustomField, DocumentType, StoragePath, Tag
from .paperless_client import PaperlessClient
from .registry import Tool, ToolRegistry
from .settings import Settings

SERVER_NAME = "Paperless MCP Server"
SERVER_VERSION = "1.0.0"


def _resource_tools(
    handlers: ResourceHandlers[Any],
    *,
    singular: str,
    plural: str,
    id_args: type[BaseModel],
    create_args: type[BaseModel],
    update_args: type[BaseModel],
    create_hint: str,
) -> list[Tool]:
    title = singular.replace("_", " ")
    titles = plural.replace("_", " ")
    return [
        Tool(
            name=f"list_{plural}",
            description=f"List {titles} with pagination.",
            arguments=a.ListArgs,
            handler=handlers.list,
        ),
        Tool(
            name=f"get_{singular}",
            description=f"Get a single {title} by id.",
            arguments=id_args,
            handler=handlers.get,
        ),
        Tool(
            name=f"create_{singular}",
            description=f"Create a new {title}. {create_hint}",
            arguments=create_args,
            handler=handlers.create,
        ),
        Tool(
            name=f"update_{singular}",
            description=(
                f"Update an existing {title}. Every supplied field except "
                f"{handlers.id_field} is sent as a partial update."
            ),
            arguments=update_args,
            handler=handlers.update,
        ),
        Tool(
            name=f"delete_{singular}",
            description=f"Delete a {title}.",
            arguments=id_args,
            handler=handlers.delete,
        ),
    ]


def _document_tools(documents: DocumentHandlers) -> list[Tool]:
    return [
        Tool(
            name="list_documents",
            description="List documents with pagination.",
            arguments=a.ListArgs,
            handler=documents.list,
        ),
        Tool(
            name="search_documents",
            description="Full-text search across documents.",
            arguments=a.SearchDocumentsArgs,
            handler=documents.search,
        ),
        Tool(
            name="find_similar_documents",
            description="Find documents similar to the given document.",
            arguments=a.FindSimilarDocumentsArgs,
            handler=documents.find_similar,
        ),
        Tool(
            name="get_document",
            description="Get a document's metadata by id.",
            arguments=a.DocumentIdArgs,
            handler=documents.get,
        ),
        Tool(
            name="get_document_content",
            description="Get the OCR text content of a document.",
            arguments=a.DocumentIdArgs,
            handler=documents.content,
        ),
        Tool(
            name="upload_document",
            description=(
                "Upload a file (base64 encoded) for consumption. Returns the "
                "consumption task id; the document appears once processing finishes."
            ),
            arguments=a.UploadDocumentArgs,
            handler=documents.upload,
        ),
        Tool(
            name="update_document",
            description=(
                "Update document metadata. Every supplied field except "
                "document_id is sent as a partial update."
            ),
            arguments=a.UpdateDocumentArgs,
            handler=documents.update,
        ),
        Tool(
            name="delete_document",
            description="Delete a document.",
            arguments=a.DocumentIdArgs,
            handler=documents.delete,
        ),
        Tool(
            name="bulk_edit_documents",
            description=(
                "Apply tag, correspondent, document type or storage path changes "
                "to several documents at once."
            ),
            arguments=a.BulkEditDocumentsArgs,
            handler=documents.bulk_edit,
        ),
        Tool(
            name="list_document_notes",
            description="List the notes attached to a document.",
            arguments=a.DocumentIdArgs,
            handler=documents.notes,
        ),
        Tool(
            name="add_document_note",
            description="Add a note to a document.",
            arguments=a.AddDocumentNoteArgs,
            handler=documents.add_note,
        ),
    ]


def _system_tools(settings: Settings) -> list[Tool]:
    async def ping(_: a.NoArgs) -> dict[str, str]:
        return {"status": "ok", "message": "pong"}

    async def server_info(_: a.NoArgs) -> dict[str, str]:
        return {
            "server_name": SERVER_NAME,
            "server_version": SERVER_VERSION,
            "paperless_url": settings.paperless_base_url,
            "transport": settings.mcp_transport,
            "status": "ok",
        }

    return [
        Tool(
            name="ping",
            description="Returns pong. Useful for verifying the MCP server is working.",
            arguments=a.NoArgs,
            handler=ping,
        ),
        Tool(
            name="server_info",
            description="Returns information about the MCP server and Paperless connection.",
            arguments=a.NoArgs,
            handler=server_info,
        ),
    ]


def build_registry(client: PaperlessClient, settings: Settings) -> ToolRegistry:
    """Register every tool and seal the registry."""
    registry = ToolRegistry()
    tools: list[Tool] = [
        *_system_tools(settings),
        *_document_tools(DocumentHandlers(client.documents)),
        *_resource_tools(
            ResourceHandlers(
                client.correspondents,
                entity=Correspondent,
                label="correspondent",
                id_field="correspondent_id",
            ),
            singular="correspondent",
            plural="correspondents",
            id_args=a.CorrespondentIdArgs,
            create_args=a.CreateCorrespondentArgs,
            update_args=a.UpdateCorrespondentArgs,
            create_hint="Requires name; match, matching_algorithm and is_insensitive are optional.",
        ),
        *_resource_tools(
            ResourceHandlers(
                client.document_types,
                entity=DocumentType,
                label="document type",
                id_field="document_type_id",
            ),
            singular="document_type",
            plural="document_types",
            id_args=a.DocumentTypeIdArgs,
            create_args=a.CreateDocumentTypeArgs,
            update_args=a.UpdateDocumentTypeArgs,
            create_hint="Requires name; match, matching_algorithm and is_insensitive are optional.",
        ),
        *_resource_tools(
            ResourceHandlers(client.tags, entity=Tag, label="tag", id_field="tag_id"),
            singular="tag",
            plural="tags",
            id_args=a.TagIdArgs,
            create_args=a.CreateTagArgs,
            update_args=a.UpdateTagArgs,
            create_hint="Requires name and color; matching options and is_inbox_tag are optional.",
        ),
        *_resource_tools(
            ResourceHandlers(
                client.storage_paths,
                entity=StoragePath,
                label="storage path",
                id_field="storage_path_id",
            ),
            singular="storage_path",
            plural="storage_paths",
            id_args=a.StoragePathIdArgs,
            create_args=a.CreateStoragePathArgs,
            update_args=a.UpdateStoragePathArgs,
            create_hint="Requires name and path; matching options are optional.",
        ),
        *_resource_tools(
            ResourceHandlers(
                client.custom_fields,
                entity=CustomField,
                label="custom field",
                id_field="field_id",
            ),
            singular="custom_field",
            plural="custom_fields",
            id_args=a.CustomFieldIdArgs,
            create_args=a.CreateCustomFieldArgs,
            update_args=a.UpdateCustomFieldArgs,
            create_hint="Requires name and data_type.",
        ),
    ]
    for tool in tools:
        registry.register(tool)
    registry.seal()
    return registry
