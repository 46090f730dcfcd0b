"""Build a SessionStore wired to the production collaborators."""

import logging

from waterwise.api.client import WaterWiseClient
from waterwise.auth.firebase import FirebaseAuthClient
from waterwise.config import Settings, configure_logging, get_settings
from waterwise.session.store import SessionStore
from waterwise.storage import FileStorage

logger = logging.getLogger(__name__)


def build_session_store(settings: Settings | None = None) -> SessionStore:
    """Create a SessionStore backed by Firebase, the WaterWise API and files.

    The returned store is not initialized; use it as an async context
    manager or call ``initialize()``.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger.info(f"Debug mode: {settings.debug}")

    auth = FirebaseAuthClient(
        api_key=settings.firebase_api_key,
        auth_url=settings.firebase_auth_url,
        token_url=settings.firebase_token_url,
        timeout=settings.api_timeout,
    )
    api = WaterWiseClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
        token_provider=auth.valid_id_token,
    )
    storage = FileStorage(settings.storage_dir)
    return SessionStore(auth=auth, storage=storage, properties=api)
