# =============================================================================
# main.py  —  Entry Point for the Firestore MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#   (or `firestore-mcp` once the package is installed)
#
# WHAT HAPPENS:
#   1. Loads .env and reads Settings (core/config.py)
#   2. Configures logging to stderr (+ optional DEBUG_LOG_FILE)
#   3. Initializes Firebase once; a missing key means degraded mode
#   4. Builds the Dispatcher and the FastMCP server around it
#   5. Serves on stdio (or HTTP) until interrupted, then releases Firebase
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from core.config import load_settings
from core.dispatcher import Dispatcher
from core.firebase import init_firestore
from core.logs import configure_logging
from tools.mcp_server import create_server


def run_server() -> int:
    """Start the server and block until it is interrupted."""
    # Must run before load_settings() so .env values are visible.
    load_dotenv()

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.debug_log_file)

    handle = init_firestore(settings)
    mcp = create_server(Dispatcher(handle))

    try:
        if settings.transport == "http":
            logging.info(f"Serving over HTTP on {settings.http_host}:{settings.http_port}")
            mcp.run(transport="http", host=settings.http_host, port=settings.http_port)
        else:
            logging.info("Serving over stdio")
            mcp.run()
    except KeyboardInterrupt:
        logging.info("Interrupted, shutting down")
    finally:
        if handle is not None:
            handle.close()

    return 0


def main() -> None:
    sys.exit(run_server())


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
