# =============================================================================
# core/dispatcher.py  —  Tool Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Routes one tool call (name + raw arguments) to exactly one Firestore
#   operation and returns a JSON-safe payload dict.
#
# HOW A CALL FLOWS:
#   1. Unknown name              → MethodNotFoundError (raised)
#   2. No Firestore handle       → {"error": "Firebase initialization failed"}
#   3. Arguments don't fit model → {"error": "Invalid arguments", "details": ...}
#   4. Run the operation         → success payload
#   5. Store raised              → translate_error() payload
#
#   Only step 1 raises.  Everything else is a normal return value, so the
#   caller must look at the payload to tell success from failure.
# =============================================================================

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from google.cloud.firestore_v1.base_query import BaseQuery, FieldFilter

from core.catalog import get_descriptor
from core.errors import (
    InvalidArgumentsError,
    MethodNotFoundError,
    init_failed_payload,
    invalid_arguments_payload,
    translate_error,
)
from core.firebase import FirestoreHandle
from core.models import (
    AddDocumentRequest,
    CollectionSummary,
    DocumentPage,
    DocumentSummary,
    ListCollectionsRequest,
    ListDocumentsRequest,
)
from core.sanitize import sanitize_document


logger = logging.getLogger(__name__)

# The Python SDK spells the array operators with underscores.
_SDK_OPERATORS = {
    "array-contains": "array_contains",
    "array-contains-any": "array_contains_any",
}

_SDK_DIRECTIONS = {
    "asc": BaseQuery.ASCENDING,
    "desc": BaseQuery.DESCENDING,
}


class Dispatcher:
    """Maps tool names to Firestore calls against one fixed handle."""

    def __init__(self, handle: Optional[FirestoreHandle]) -> None:
        self._handle = handle
        self._routes: dict[str, tuple[Any, Callable[[Any], Awaitable[dict]]]] = {
            AddDocumentRequest.tool_name: (AddDocumentRequest, self.add_document),
            ListDocumentsRequest.tool_name: (ListDocumentsRequest, self.list_documents),
            ListCollectionsRequest.tool_name: (ListCollectionsRequest, self.list_collections),
        }

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> dict:
        """Run one tool call and return its payload.

        Raises:
            MethodNotFoundError: if ``name`` is not a known tool.
        """
        if get_descriptor(name) is None:
            raise MethodNotFoundError(name)

        if self._handle is None:
            logger.warning(f"{name}: Firestore is not initialized")
            return init_failed_payload()

        request_type, operation = self._routes[name]
        try:
            request = request_type.from_arguments(arguments or {})
        except InvalidArgumentsError as exc:
            logger.warning(f"{name}: invalid arguments: {exc}")
            return invalid_arguments_payload(exc)

        try:
            return await operation(request)
        except Exception as exc:
            logger.error(f"{name} failed: {exc}")
            return translate_error(exc)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    # These assume an initialized handle and a validated request; call() is
    # what guarantees both.

    @property
    def _client(self) -> Any:
        return self._handle.client

    async def add_document(self, request: AddDocumentRequest) -> dict:
        _, doc_ref = await self._client.collection(request.collection).add(request.data)
        logger.info(f"Added document {doc_ref.path}")
        return {"id": doc_ref.id, "path": doc_ref.path}

    async def list_documents(self, request: ListDocumentsRequest) -> dict:
        query = self._client.collection(request.collection)

        for clause in request.filters:
            operator = _SDK_OPERATORS.get(clause.operator, clause.operator)
            query = query.where(filter=FieldFilter(clause.field, operator, clause.value))

        for clause in request.order_by:
            query = query.order_by(clause.field, direction=_SDK_DIRECTIONS[clause.direction])

        if request.page_token:
            cursor = await self._client.document(request.page_token).get()
            if cursor.exists:
                query = query.start_after(cursor)
            else:
                # TODO: surface stale cursors to callers once clients can handle a restart signal.
                logger.info(f"Page token {request.page_token} no longer exists; starting from the beginning")

        snapshots = await query.limit(request.limit).get()

        page = DocumentPage(
            documents=[
                DocumentSummary(
                    id=snapshot.id,
                    path=snapshot.reference.path,
                    data=sanitize_document(snapshot.to_dict()),
                )
                for snapshot in snapshots
            ],
        )
        if page.documents:
            page.next_page_token = page.documents[-1].path
        return page.to_payload()

    async def list_collections(self, request: ListCollectionsRequest) -> dict:
        collections = []
        async for collection in self._client.collections():
            # Root collections only, so the path is the id.
            collections.append(CollectionSummary(id=collection.id, path=collection.id))
        return {"collections": [{"id": c.id, "path": c.path} for c in collections]}
