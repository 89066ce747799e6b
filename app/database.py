# app/database.py
# Process-wide relational store used by the demo-mode server
import logging
from typing import Any, Dict, List, Optional

from app.config.settings import settings
from app.services.local_storage import FileStorage
from app.services.notification_service import NotificationService
from app.store import RelationalStore

logger = logging.getLogger(__name__)

# Toasts of the global store; the WebSocket manager subscribes here
notifier = NotificationService()

store: Optional[RelationalStore] = None


def init_store(seed: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> RelationalStore:
    """Load the global store from the storage directory, seeding it when empty"""
    global store
    storage = FileStorage(settings.STORAGE_DIR)
    store = RelationalStore.load(
        storage,
        seed=seed if settings.SEED_DEMO_DATA else None,
        notifier=notifier,
    )
    logger.info(f"Relational store ready (storage: {settings.STORAGE_DIR})")
    return store


# ✅ This is required to be imported wherever the store is needed
def get_store() -> RelationalStore:
    if store is None:
        return init_store()
    return store
