# =============================================================================
# core/firebase.py  —  Firestore Handle
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds the one Firestore handle the server uses for its whole life.
#   init_firestore() is called exactly once, from main.py, and its result
#   is passed into the Dispatcher.  Nothing else looks the client up.
#
# DEGRADED MODE:
#   If SERVICE_ACCOUNT_KEY_PATH is unset, or the key cannot be loaded,
#   init_firestore() returns None.  The server still starts and lists its
#   tools, but every call answers "Firebase initialization failed".
#
# EMULATOR:
#   The Firestore client reads FIRESTORE_EMULATOR_HOST on its own, so
#   pointing the server at a local emulator needs no code here.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async

from core.config import Settings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirestoreHandle:
    """An initialized Firebase app and its async Firestore client."""

    client: Any                        # google.cloud.firestore.AsyncClient
    app: Optional[firebase_admin.App] = None

    def close(self) -> None:
        """Release the Firebase app (and with it the client's channels)."""
        if self.app is not None:
            firebase_admin.delete_app(self.app)


def _app_options(settings: Settings) -> dict[str, str]:
    options = {}
    if settings.project_id:
        options["projectId"] = settings.project_id
    if settings.storage_bucket:
        options["storageBucket"] = settings.storage_bucket
    return options


def init_firestore(settings: Settings) -> FirestoreHandle | None:
    """Initialize Firebase from the service account key, or return None."""
    key_path = settings.service_account_key_path
    if not key_path:
        logger.warning("SERVICE_ACCOUNT_KEY_PATH is not set; running in degraded mode")
        return None

    try:
        app = firebase_admin.get_app()
        logger.info("Reusing existing Firebase app")
    except ValueError:
        app = None

    try:
        if app is None:
            credential = credentials.Certificate(key_path)
            app = firebase_admin.initialize_app(credential, _app_options(settings) or None)
        client = firestore_async.client(app)
    except (OSError, ValueError) as exc:
        logger.error(f"Firebase initialization failed for {key_path}: {exc}")
        return None

    logger.info(f"Connected to Firestore project: {app.project_id}")
    return FirestoreHandle(client=client, app=app)
