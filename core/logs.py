# =============================================================================
# core/logs.py  —  Logging Setup
# =============================================================================
#
# All log output goes to STDERR.  With the stdio transport, STDOUT carries
# the MCP JSON-RPC stream, and a stray log line there would corrupt it.
#
# DEBUG_LOG_FILE adds a second handler that appends to a file.
# =============================================================================

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s [MCP] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    if not log_file:
        return

    try:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        logging.warning(f"Cannot write to log file {log_file}: {exc}")
        return

    # The file has no terminal, so it gets the level name instead of colours.
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logging.getLogger().addHandler(handler)
    logging.info(f"Logging to file: {log_file}")
