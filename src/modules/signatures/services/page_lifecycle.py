import logging
from typing import Optional

from modules.signatures.repositories.signature_repository import SignatureRepository

logger = logging.getLogger(__name__)

TRASHED_EVENTS = {"page.trashed", "avi:confluence:trashed:page"}
DELETED_EVENTS = {"page.deleted", "avi:confluence:deleted:page"}


def handle_page_event(repository: SignatureRepository, event: dict) -> Optional[int]:
    """
    Apply a host page lifecycle event to the contracts of that page.

    Trashed pages are soft deleted and purged later by the retention job;
    permanently deleted pages are purged right away.

    Returns the number of contracts affected, or None if the event was ignored.
    """
    event_type = event.get("eventType")
    page_id = (event.get("content") or {}).get("id")

    if not page_id:
        logger.warning("Page lifecycle event %s received without page id", event_type)
        return None

    page_id = str(page_id)
    if event_type in TRASHED_EVENTS:
        affected = repository.set_deleted(page_id)
        logger.info("Soft deleted %d contract(s) for trashed page %s", affected, page_id)
        return affected

    if event_type in DELETED_EVENTS:
        affected = repository.hard_delete(page_id)
        logger.info("Hard deleted %d contract(s) for purged page %s", affected, page_id)
        return affected

    logger.debug("Ignoring page lifecycle event %s", event_type)
    return None
