# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the Firestore tools over MCP.  Each tool is a thin wrapper that
#   logs the call, hands the arguments to core.dispatcher.Dispatcher, and
#   returns the resulting payload as one JSON text block.
#
# HOW IT WORKS (the flow):
#   1. An MCP client lists tools and sees the three firestore_* tools
#   2. It calls one by name, e.g. "firestore_list_documents"
#   3. FastMCP routes to the function below (unknown names are rejected
#      with a method-not-found protocol error)
#   4. The function calls Dispatcher.call(), which talks to Firestore
#   5. The payload (success or {"error": ...}) goes back as JSON text
#
# TOOL NAMES & DESCRIPTIONS:
#   Names, descriptions and input schemas all come from core/catalog.py.
#
# RUNNING THIS SERVER:
#   python main.py                      (stdio, the usual MCP client setup)
#   MCP_TRANSPORT=http python main.py   (streamable HTTP)
# =============================================================================

import copy
import json
import logging
from typing import Any, Callable

from fastmcp import FastMCP
from fastmcp.tools.tool import FunctionTool
from mcp.shared.exceptions import McpError
from mcp.types import CallToolRequest, ErrorData

from core.catalog import ADD_DOCUMENT, LIST_COLLECTIONS, LIST_DOCUMENTS, ToolDescriptor, get_descriptor
from core.dispatcher import Dispatcher
from core.errors import MethodNotFoundError
from core.models import DEFAULT_LIMIT


SERVER_NAME = "firestore-mcp"

# =============================================================================
# Logging helpers
# =============================================================================
# Log lines go to STDERR (see core/logs.py).  Colours make tool calls and
# responses easy to tell apart in a terminal:
#   CYAN   incoming call + parameters
#   YELLOW intermediate status
#   GREEN  response JSON
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> str:
    """Log the payload as compact JSON in GREEN and return it as tool text."""
    text = json.dumps(result, separators=(",", ":"))
    logging.info(f"{_GREEN}  ← {tool_name} response: {text}{_RESET}")
    return text


def _summarize(result: dict) -> str:
    if "error" in result:
        return f"error: {result['error']}"
    if "documents" in result:
        return f"{len(result['documents'])} documents, nextPageToken={result['nextPageToken']}"
    if "collections" in result:
        return f"{len(result['collections'])} collections"
    return f"created {result.get('path')}"


# =============================================================================
# Server factory
# =============================================================================
# The dispatcher (and the Firestore handle inside it) is built once by the
# caller and captured here.  Tests build a server around a fake client the
# same way.
#
# SCHEMAS:
#   Each tool is served with the input schema from core/catalog.py.  The
#   wrapper parameters are untyped, so FastMCP only checks argument names;
#   shape checks, the degraded-mode short-circuit and limit normalization
#   all happen in the dispatcher.
# =============================================================================
def _add_tool(mcp: FastMCP, fn: Callable[..., Any], descriptor: ToolDescriptor) -> None:
    tool = FunctionTool.from_function(fn, name=descriptor.name, description=descriptor.description)
    schema = copy.deepcopy(dict(descriptor.input_schema))
    mcp.add_tool(tool.model_copy(update={"parameters": schema}))


def _reject_unknown_tools(mcp: FastMCP) -> None:
    """Answer calls to undeclared tools with a JSON-RPC method-not-found error.

    The low-level call_tool handler turns every failure into an isError
    result, so unknown names are caught before it runs.
    """
    handlers = mcp._mcp_server.request_handlers
    call_tool = handlers[CallToolRequest]

    async def handle_call_tool(request: CallToolRequest):
        name = request.params.name
        if get_descriptor(name) is None:
            exc = MethodNotFoundError(name)
            _log_status(str(exc))
            raise McpError(ErrorData(code=exc.code, message=str(exc)))
        return await call_tool(request)

    handlers[CallToolRequest] = handle_call_tool


def create_server(dispatcher: Dispatcher) -> FastMCP:
    """Create a FastMCP server whose tools delegate to ``dispatcher``."""
    mcp = FastMCP(SERVER_NAME)

    async def _run(tool_name: str, arguments: dict[str, Any]) -> str:
        result = await dispatcher.call(tool_name, arguments)
        _log_status(_summarize(result))
        return _log_response(tool_name, result)

    # -------------------------------------------------------------------------
    # TOOL 1: firestore_add_document
    # -------------------------------------------------------------------------
    async def add_document(collection: Any = None, data: Any = None) -> str:
        """Add a document with a generated id.

        Returns {"id", "path"} of the new document.
        """
        _log_request(ADD_DOCUMENT.name, collection=collection, data=data)
        return await _run(ADD_DOCUMENT.name, {"collection": collection, "data": data})

    # -------------------------------------------------------------------------
    # TOOL 2: firestore_list_documents
    # -------------------------------------------------------------------------
    async def list_documents(
        collection: Any = None,
        filters: Any = None,
        limit: Any = DEFAULT_LIMIT,
        pageToken: Any = None,
        orderBy: Any = None,
    ) -> str:
        """List documents with optional filters, ordering and pagination.

        Returns {"documents": [{id, path, data}], "nextPageToken"}.  Pass
        nextPageToken back as pageToken to fetch the following page; it is
        null once a page comes back empty.
        """
        _log_request(
            LIST_DOCUMENTS.name,
            collection=collection, filters=filters, limit=limit,
            pageToken=pageToken, orderBy=orderBy,
        )
        return await _run(LIST_DOCUMENTS.name, {
            "collection": collection,
            "filters": filters,
            "limit": limit,
            "pageToken": pageToken,
            "orderBy": orderBy,
        })

    # -------------------------------------------------------------------------
    # TOOL 3: firestore_list_collections
    # -------------------------------------------------------------------------
    async def list_collections() -> str:
        """List root collections as {"collections": [{id, path}]}."""
        _log_request(LIST_COLLECTIONS.name)
        return await _run(LIST_COLLECTIONS.name, {})

    _add_tool(mcp, add_document, ADD_DOCUMENT)
    _add_tool(mcp, list_documents, LIST_DOCUMENTS)
    _add_tool(mcp, list_collections, LIST_COLLECTIONS)
    _reject_unknown_tools(mcp)

    return mcp
