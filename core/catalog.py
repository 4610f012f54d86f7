# =============================================================================
# core/catalog.py  —  Tool Catalog
# =============================================================================
#
# The fixed list of tools this server offers, each with a JSON-schema input
# description that any generic tool-calling client can consume.  The
# dispatcher uses the catalog to decide which names exist; the MCP layer
# serves each descriptor as-is on discovery.
# =============================================================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from core.models import (
    DEFAULT_LIMIT,
    FILTER_OPERATORS,
    SORT_DIRECTIONS,
    AddDocumentRequest,
    ListCollectionsRequest,
    ListDocumentsRequest,
)


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and input schema of one tool."""

    name: str
    description: str
    input_schema: Mapping[str, Any] = field(default_factory=dict)


ADD_DOCUMENT = ToolDescriptor(
    name=AddDocumentRequest.tool_name,
    description="Add a document to a Firestore collection",
    input_schema=MappingProxyType({
        "type": "object",
        "properties": {
            "collection": {"type": "string", "description": "Collection name"},
            "data": {"type": "object", "description": "Document data"},
        },
        "required": ["collection", "data"],
    }),
)

LIST_DOCUMENTS = ToolDescriptor(
    name=ListDocumentsRequest.tool_name,
    description="List documents from a Firestore collection with filtering and ordering",
    input_schema=MappingProxyType({
        "type": "object",
        "properties": {
            "collection": {"type": "string", "description": "Collection name"},
            "filters": {
                "type": "array",
                "description": "Array of filter conditions",
                "items": {
                    "type": "object",
                    "properties": {
                        "field": {"type": "string", "description": "Field name to filter"},
                        "operator": {
                            "type": "string",
                            "description": "Comparison operator",
                            "enum": list(FILTER_OPERATORS),
                        },
                        "value": {"description": "Value to compare against (use ISO format for dates)"},
                    },
                    "required": ["field", "operator", "value"],
                },
            },
            "limit": {
                "type": "number",
                "description": "Number of documents to return (1-100)",
                "default": DEFAULT_LIMIT,
            },
            "pageToken": {
                "type": "string",
                "description": "Token for pagination to get the next page of results",
            },
            "orderBy": {
                "type": "array",
                "description": "Array of fields to order by",
                "items": {
                    "type": "object",
                    "properties": {
                        "field": {"type": "string", "description": "Field name to order by"},
                        "direction": {
                            "type": "string",
                            "description": "Sort direction (asc or desc)",
                            "enum": list(SORT_DIRECTIONS),
                            "default": "asc",
                        },
                    },
                    "required": ["field"],
                },
            },
        },
        "required": ["collection"],
    }),
)

LIST_COLLECTIONS = ToolDescriptor(
    name=ListCollectionsRequest.tool_name,
    description="List root collections in Firestore",
    input_schema=MappingProxyType({"type": "object", "properties": {}, "required": []}),
)

TOOL_CATALOG: tuple[ToolDescriptor, ...] = (ADD_DOCUMENT, LIST_DOCUMENTS, LIST_COLLECTIONS)


def get_descriptor(name: str) -> ToolDescriptor | None:
    for descriptor in TOOL_CATALOG:
        if descriptor.name == name:
            return descriptor
    return None
