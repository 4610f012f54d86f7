# =============================================================================
# core/errors.py  —  Error Kinds & Error Translation
# =============================================================================
#
# ERROR TAXONOMY:
#   MethodNotFoundError     Unknown tool name.  The only failure that leaves
#                           the dispatcher as an exception, so the MCP layer
#                           can report it as a protocol error.
#   InvalidArgumentsError   Arguments did not fit the tool's request model.
#                           Turned into an {"error", "details"} payload.
#   Everything else         Raised by the Firestore SDK and turned into a
#                           payload by translate_error().
#
# translate_error() is the ONE place that recognises the missing composite
# index failure.  If the SDK ever exposes a dedicated error code for it,
# only _is_missing_index() has to change.
# =============================================================================

import re

from google.api_core import exceptions as core_exceptions


METHOD_NOT_FOUND = -32601

INIT_FAILED_MESSAGE = "Firebase initialization failed"
INVALID_ARGUMENTS_MESSAGE = "Invalid arguments"
INDEX_REQUIRED_MESSAGE = "This query requires a composite index."
INDEX_REQUIRED_DETAILS = (
    "When ordering by multiple fields or combining filters with ordering, "
    "you need to create a composite index."
)

_PRECONDITION_MARKER = "FAILED_PRECONDITION"
_INDEX_PHRASE = "requires an index"
_URL_PATTERN = re.compile(r"https://[^\s]+")


class FirestoreToolError(Exception):
    """Base class for errors raised by the tool layer itself."""


class MethodNotFoundError(FirestoreToolError):
    """Raised when a caller asks for a tool the catalog does not declare."""

    code = METHOD_NOT_FOUND

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class InvalidArgumentsError(FirestoreToolError):
    """Raised when tool arguments do not match the request model."""


def error_message(exc: BaseException) -> str:
    """Best human-readable message for an exception."""
    # google.api_core errors keep the bare server message on .message;
    # str() prefixes it with the HTTP code.
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or "Unknown error"


def _is_missing_index(exc: BaseException, message: str) -> bool:
    if _INDEX_PHRASE not in message:
        return False
    return isinstance(exc, core_exceptions.FailedPrecondition) or _PRECONDITION_MARKER in message


def extract_index_url(message: str) -> str | None:
    """Return the first https URL embedded in an error message, if any."""
    match = _URL_PATTERN.search(message)
    return match.group(0) if match else None


def translate_error(exc: BaseException) -> dict:
    """Turn a failed store call into the error payload returned to callers."""
    message = error_message(exc)
    # api_core drops the status name from .message, so check str() as well.
    full_text = f"{exc} {message}"

    if _is_missing_index(exc, full_text):
        return {
            "error": INDEX_REQUIRED_MESSAGE,
            "details": INDEX_REQUIRED_DETAILS,
            "indexUrl": extract_index_url(full_text),
        }

    return {"error": message}


def invalid_arguments_payload(exc: InvalidArgumentsError) -> dict:
    return {"error": INVALID_ARGUMENTS_MESSAGE, "details": str(exc)}


def init_failed_payload() -> dict:
    return {"error": INIT_FAILED_MESSAGE}
