# =============================================================================
# core/config.py  —  Process Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads every environment setting the server cares about into one frozen
#   Settings object.  main.py calls load_dotenv() first, so values from a
#   local .env file are visible here too.
#
# SETTINGS:
#   SERVICE_ACCOUNT_KEY_PATH  Path to the service account JSON.  Unset means
#                             degraded mode (every tool reports init failure).
#   FIREBASE_PROJECT_ID       Optional project override for the Firebase app.
#   FIREBASE_STORAGE_BUCKET   Optional default bucket for the Firebase app.
#   MCP_TRANSPORT             "stdio" (default) or "http".
#   MCP_HTTP_HOST / PORT      Bind address for the http transport.
#   LOG_LEVEL                 Root log level (default INFO).
#   DEBUG_LOG_FILE            "true" → ./debug.log, or an explicit path.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional


SUPPORTED_TRANSPORTS = {"stdio", "http"}


def _get(env: Mapping[str, str], name: str, default: str = "") -> str:
    return env.get(name, default).strip()


def _optional(env: Mapping[str, str], name: str) -> Optional[str]:
    value = _get(env, name)
    return value or None


def _debug_log_file(env: Mapping[str, str]) -> Optional[str]:
    raw = _get(env, "DEBUG_LOG_FILE")
    if not raw or raw.lower() in ("false", "undefined"):
        return None
    if raw.lower() == "true":
        return os.path.join(os.getcwd(), "debug.log")
    return raw


@dataclass(frozen=True)
class Settings:
    """Everything the server reads from its environment."""

    service_account_key_path: Optional[str] = None
    project_id: Optional[str] = None
    storage_bucket: Optional[str] = None

    transport: str = "stdio"
    http_host: str = "127.0.0.1"
    http_port: int = 3000

    log_level: str = "INFO"
    debug_log_file: Optional[str] = None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or an explicit mapping).

    Raises:
        ValueError: if MCP_TRANSPORT or MCP_HTTP_PORT hold unusable values.
    """
    env = os.environ if env is None else env

    transport = _get(env, "MCP_TRANSPORT", "stdio").lower() or "stdio"
    if transport not in SUPPORTED_TRANSPORTS:
        raise ValueError(
            f"Invalid MCP_TRANSPORT: {transport}. Supported values: {sorted(SUPPORTED_TRANSPORTS)}"
        )

    raw_port = _get(env, "MCP_HTTP_PORT", "3000") or "3000"
    try:
        http_port = int(raw_port)
    except ValueError:
        raise ValueError(f"Invalid MCP_HTTP_PORT: {raw_port!r}") from None

    return Settings(
        service_account_key_path=_optional(env, "SERVICE_ACCOUNT_KEY_PATH"),
        project_id=_optional(env, "FIREBASE_PROJECT_ID"),
        storage_bucket=_optional(env, "FIREBASE_STORAGE_BUCKET"),
        transport=transport,
        http_host=_get(env, "MCP_HTTP_HOST", "127.0.0.1") or "127.0.0.1",
        http_port=http_port,
        log_level=(_get(env, "LOG_LEVEL", "INFO") or "INFO").upper(),
        debug_log_file=_debug_log_file(env),
    )
