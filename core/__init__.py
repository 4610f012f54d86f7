# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains all Firestore-facing logic: the tool catalog,
# request models, the dispatcher, the value sanitizer and error translation.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP type.  The dispatcher
#   takes a tool name and a plain argument mapping and returns a plain dict,
#   so it can be driven (and tested) without a protocol runtime.
# =============================================================================
