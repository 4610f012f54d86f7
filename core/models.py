# =============================================================================
# core/models.py  —  Data Models (requests, clauses, results)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that
# flows between the MCP layer and Firestore.
#
# REQUEST MODELS:
#   Each tool has one request class with a from_arguments() constructor.
#   That constructor is the validation boundary: raw tool arguments go in,
#   a typed request comes out, or InvalidArgumentsError is raised.  The
#   dispatcher never touches the raw mapping after that point.
#
#   from_arguments() accepts FilterClause / OrderClause instances as well as
#   plain dicts, because the FastMCP layer hands over already-parsed clauses.
# =============================================================================

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Mapping, Optional, get_args

from core.errors import InvalidArgumentsError


FilterOperator = Literal[
    "==", "!=", "<", "<=", ">", ">=",
    "array-contains", "array-contains-any", "in", "not-in",
]
SortDirection = Literal["asc", "desc"]

FILTER_OPERATORS: tuple[str, ...] = get_args(FilterOperator)
SORT_DIRECTIONS: tuple[str, ...] = get_args(SortDirection)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def normalize_limit(raw: Any) -> int:
    """Effective page size for list_documents.

    Absent, zero, negative and non-numeric values fall back to
    DEFAULT_LIMIT; everything else is truncated and clamped to [1, MAX_LIMIT].
    """
    if raw is None or isinstance(raw, bool):
        return DEFAULT_LIMIT
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    if math.isnan(value) or value <= 0:
        return DEFAULT_LIMIT
    if math.isinf(value):
        return MAX_LIMIT
    return min(max(1, int(value)), MAX_LIMIT)


def _require_text(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentsError(f"'{name}' must be a non-empty string")
    return value


def _optional_list(arguments: Mapping[str, Any], name: str) -> list:
    value = arguments.get(name)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidArgumentsError(f"'{name}' must be an array")
    return list(value)


# -----------------------------------------------------------------------------
# FilterClause — one "where" condition
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FilterClause:
    """A single comparison applied to a query."""

    field: str                         # Field path, e.g. "status" or "address.city"
    operator: FilterOperator           # One of FILTER_OPERATORS
    value: Any                         # Compared as-is (ISO strings stay strings)

    @classmethod
    def coerce(cls, raw: Any) -> "FilterClause":
        if isinstance(raw, cls):
            candidate = {"field": raw.field, "operator": raw.operator, "value": raw.value}
        elif isinstance(raw, Mapping):
            candidate = raw
        else:
            raise InvalidArgumentsError("each filter must be an object")

        field_name = candidate.get("field")
        if not isinstance(field_name, str) or not field_name:
            raise InvalidArgumentsError("filter 'field' must be a non-empty string")
        operator = candidate.get("operator")
        if operator not in FILTER_OPERATORS:
            raise InvalidArgumentsError(
                f"filter 'operator' must be one of {', '.join(FILTER_OPERATORS)}"
            )
        if "value" not in candidate:
            raise InvalidArgumentsError(f"filter on '{field_name}' is missing 'value'")
        return cls(field=field_name, operator=operator, value=candidate["value"])


# -----------------------------------------------------------------------------
# OrderClause — one "order by" term
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class OrderClause:
    """A sort key applied to a query."""

    field: str
    direction: SortDirection = "asc"

    @classmethod
    def coerce(cls, raw: Any) -> "OrderClause":
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            raise InvalidArgumentsError("each orderBy entry must be an object")

        field_name = raw.get("field")
        if not isinstance(field_name, str) or not field_name:
            raise InvalidArgumentsError("orderBy 'field' must be a non-empty string")
        direction = raw.get("direction") or "asc"
        if direction not in SORT_DIRECTIONS:
            raise InvalidArgumentsError("orderBy 'direction' must be 'asc' or 'desc'")
        return cls(field=field_name, direction=direction)


# -----------------------------------------------------------------------------
# Requests — one per tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AddDocumentRequest:
    tool_name: ClassVar[str] = "firestore_add_document"

    collection: str
    data: dict[str, Any]

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "AddDocumentRequest":
        collection = _require_text(arguments, "collection")
        data = arguments.get("data")
        if not isinstance(data, Mapping):
            raise InvalidArgumentsError("'data' must be an object")
        return cls(collection=collection, data=dict(data))


@dataclass(frozen=True)
class ListDocumentsRequest:
    tool_name: ClassVar[str] = "firestore_list_documents"

    collection: str
    filters: tuple[FilterClause, ...] = ()
    order_by: tuple[OrderClause, ...] = ()
    limit: int = DEFAULT_LIMIT
    page_token: Optional[str] = None   # Path of the last document already seen

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "ListDocumentsRequest":
        collection = _require_text(arguments, "collection")
        filters = tuple(FilterClause.coerce(item) for item in _optional_list(arguments, "filters"))
        order_by = tuple(OrderClause.coerce(item) for item in _optional_list(arguments, "orderBy"))

        page_token = arguments.get("pageToken")
        if page_token is not None and not isinstance(page_token, str):
            raise InvalidArgumentsError("'pageToken' must be a string")

        return cls(
            collection=collection,
            filters=filters,
            order_by=order_by,
            limit=normalize_limit(arguments.get("limit")),
            page_token=page_token or None,
        )


@dataclass(frozen=True)
class ListCollectionsRequest:
    tool_name: ClassVar[str] = "firestore_list_collections"

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "ListCollectionsRequest":
        return cls()


# -----------------------------------------------------------------------------
# Results — what each tool hands back (before JSON encoding)
# -----------------------------------------------------------------------------
@dataclass
class DocumentSummary:
    """One listed document with its sanitized fields."""

    id: str
    path: str                          # "users/abc123"
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionSummary:
    id: str
    path: str


@dataclass
class DocumentPage:
    """One page of list_documents output."""

    documents: list[DocumentSummary] = field(default_factory=list)
    next_page_token: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "documents": [
                {"id": doc.id, "path": doc.path, "data": doc.data} for doc in self.documents
            ],
            "nextPageToken": self.next_page_token,
        }
