# modules/events/services/event_publisher.py
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

import httpx

from database import SessionLocal
from modules.events.repositories.webhook_repository import WebhookRepository
from settings import WEBHOOK_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Automation-Webhook-Token"


class EventTemplate:
    def __init__(self, event_type: str, data: dict):
        self.event_type = event_type
        self.data = data

    def to_payload(self) -> dict:
        return {
            'eventType': self.event_type,
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            **self.data,
        }


class SignatureAddedEvent(EventTemplate):
    def __init__(self, contract, account_id: str):
        signature = next(s for s in contract.signatures if s.account_id == account_id)
        super().__init__('signature.added', {
            'pageId': contract.page_id,
            'contractHash': contract.hash,
            'accountId': account_id,
            'signedAt': signature.signed_at.isoformat(),
            'totalSignatures': len(contract.signatures),
        })


class WebhookTestEvent(EventTemplate):
    def __init__(self):
        super().__init__('test', {'message': 'Test event from the content signatures service'})


class EventPublisher:
    """
    Delivers events to the configured webhooks.

    Publishing happens after the signing transaction has committed and its
    outcome never flows back into it: failures are logged, never raised.
    """

    def __init__(self, session_factory=SessionLocal,
                 client_factory: Optional[Callable[[], httpx.Client]] = None):
        self.session_factory = session_factory
        self.client_factory = client_factory or (lambda: httpx.Client(timeout=WEBHOOK_TIMEOUT_SECONDS))

    def _webhooks(self) -> List[Tuple[str, Optional[str]]]:
        with self.session_factory() as session:
            return [(w.url, w.secret) for w in WebhookRepository(session).find_all()]

    @staticmethod
    def _post(client: httpx.Client, url: str, secret: Optional[str], payload: dict) -> None:
        headers = {'Accept': 'application/json'}
        if secret:
            headers[SECRET_HEADER] = secret
        response = client.post(url, json=payload, headers=headers)
        response.raise_for_status()

    def publish(self, event: EventTemplate) -> int:
        """Post the event to every webhook. Returns how many deliveries succeeded."""
        try:
            webhooks = self._webhooks()
        except Exception:
            logger.exception("Failed to read webhook config")
            return 0

        if not webhooks:
            return 0

        payload = event.to_payload()
        logger.info("Publishing event %s to %d webhook(s)", event.event_type, len(webhooks))

        delivered = 0
        with self.client_factory() as client:
            for url, secret in webhooks:
                try:
                    self._post(client, url, secret, payload)
                    delivered += 1
                except httpx.HTTPError as e:
                    logger.error("Webhook %s failed: %s", url, e)
        return delivered

    def send_test_event(self, url: str, secret: Optional[str] = None) -> dict:
        """Send a test event to a single webhook. Returns {success, error?}."""
        try:
            with self.client_factory() as client:
                self._post(client, url, secret, WebhookTestEvent().to_payload())
        except httpx.HTTPError as e:
            return {'success': False, 'error': str(e)}
        return {'success': True}
