# modules/events/controllers/webhook_controller.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import require_admin
from modules.events.repositories.webhook_repository import WebhookRepository
from modules.events.services.event_publisher import EventPublisher
from modules.events.models.schemas import (
    WebhookConfigRequest,
    WebhookConfigResponse,
    WebhookIn,
    WebhookResponse,
    WebhookTestResponse,
)

router = APIRouter(dependencies=[Depends(require_admin)])


def get_webhook_repository(db: Session = Depends(get_db)) -> WebhookRepository:
    return WebhookRepository(db)


def get_event_publisher() -> EventPublisher:
    return EventPublisher()


@router.get(
    "/webhooks",
    response_model=WebhookConfigResponse,
    summary="List configured webhooks"
)
def list_webhooks(repo: WebhookRepository = Depends(get_webhook_repository)):
    return WebhookConfigResponse(webhooks=[WebhookResponse.model_validate(w) for w in repo.find_all()])


@router.put(
    "/webhooks",
    response_model=WebhookConfigResponse,
    summary="Replace the webhook configuration"
)
def replace_webhooks(
    payload: WebhookConfigRequest,
    repo: WebhookRepository = Depends(get_webhook_repository)
):
    webhooks = repo.replace_all((w.url, w.secret) for w in payload.webhooks)
    return WebhookConfigResponse(webhooks=[WebhookResponse.model_validate(w) for w in webhooks])


@router.post(
    "/webhooks/test",
    response_model=WebhookTestResponse,
    summary="Send a test event to one webhook"
)
def send_test_webhook(
    payload: WebhookIn,
    publisher: EventPublisher = Depends(get_event_publisher)
):
    return publisher.send_test_event(payload.url, payload.secret)
