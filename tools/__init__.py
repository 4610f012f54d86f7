# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP runtime and core/.
#   Each tool:
#     1. Takes typed parameters from FastMCP
#     2. Hands them to core.dispatcher.Dispatcher
#     3. Returns the payload as one JSON text block
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk to Firestore directly (that's in core/)
#   - They do NOT decide error shapes (core/errors.py does)
# =============================================================================
