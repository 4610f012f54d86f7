# =============================================================================
# core/sanitize.py  —  Field Value Sanitizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the fields of a stored document into values that always survive
#   json.dumps().  Each field is handled on its own, in this order:
#
#     1. None / str / int / float / bool   → unchanged (NaN, ±inf → None)
#     2. datetime / date                   → ISO-8601 text
#     3. list / tuple                      → "[a, b, c]" (one string)
#     4. mapping, GeoPoint, DocumentRef    → "[Object]"
#     5. anything else                     → str(value)
#
#   The conversion is lossy on purpose: arrays lose their element types and
#   nested objects lose their contents.  Callers get a flat, predictable
#   shape they can always print.
# =============================================================================

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from google.cloud.firestore import GeoPoint
from google.cloud.firestore_v1.base_document import BaseDocumentReference


OBJECT_PLACEHOLDER = "[Object]"

_PASSTHROUGH_TYPES = (str, int, float, bool)
_STRUCTURED_TYPES = (Mapping, GeoPoint, BaseDocumentReference)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with milliseconds, e.g. 2024-05-01T09:30:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _element_text(element: Any) -> str:
    if element is None:
        return ""
    if isinstance(element, bool):
        return "true" if element else "false"
    return str(element)


def sanitize_value(value: Any) -> Any:
    """Convert one field value according to the fixed narrowing policy."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, _PASSTHROUGH_TYPES):
        return value

    # datetime is a subclass of date, so it has to be checked first.
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_element_text(element) for element in value) + "]"

    if isinstance(value, _STRUCTURED_TYPES):
        return OBJECT_PLACEHOLDER

    return str(value)


def sanitize_document(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Sanitize every top-level field of a document."""
    if not data:
        return {}
    return {key: sanitize_value(value) for key, value in data.items()}
