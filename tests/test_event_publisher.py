from datetime import datetime

import httpx

from database import SessionLocal
from modules.events.repositories.webhook_repository import WebhookRepository
from modules.events.services.event_publisher import SECRET_HEADER, EventPublisher, SignatureAddedEvent
from modules.signatures.repositories.signature_repository import SignatureRepository


def publisher_with(handler, sent):
    def recording(request):
        sent.append(request)
        return handler(request)

    return EventPublisher(
        session_factory=SessionLocal,
        client_factory=lambda: httpx.Client(transport=httpx.MockTransport(recording)),
    )


def test_signature_added_payload(session):
    contract = SignatureRepository(session).put_signature("d" * 64, "123", "alice")
    payload = SignatureAddedEvent(contract, "alice").to_payload()

    assert payload["eventType"] == "signature.added"
    assert payload["pageId"] == "123"
    assert payload["contractHash"] == "d" * 64
    assert payload["accountId"] == "alice"
    assert payload["totalSignatures"] == 1
    assert payload["timestamp"].endswith("Z")


def test_publish_without_webhooks_sends_nothing(session):
    sent = []
    publisher = publisher_with(lambda request: httpx.Response(200), sent)
    contract = SignatureRepository(session).put_signature("d" * 64, "123", "alice")

    assert publisher.publish(SignatureAddedEvent(contract, "alice")) == 0
    assert sent == []


def test_publish_to_every_webhook_and_swallow_failures(session):
    WebhookRepository(session).replace_all([
        ("http://hooks.test/ok", "token-1"),
        ("http://hooks.test/broken", None),
    ])
    contract = SignatureRepository(session).put_signature("d" * 64, "123", "alice")

    def handler(request):
        return httpx.Response(500 if request.url.path == "/broken" else 200)

    sent = []
    delivered = publisher_with(handler, sent).publish(SignatureAddedEvent(contract, "alice"))

    assert delivered == 1
    assert len(sent) == 2
    assert sent[0].headers[SECRET_HEADER] == "token-1"
    assert SECRET_HEADER not in sent[1].headers


def test_send_test_event():
    sent = []
    ok = publisher_with(lambda request: httpx.Response(204), sent).send_test_event("http://hooks.test/x", "t")
    assert ok == {"success": True}

    failing = publisher_with(lambda request: httpx.Response(404), []).send_test_event("http://hooks.test/x")
    assert failing["success"] is False
    assert "404" in failing["error"]


def test_webhook_replace_all(session):
    repo = WebhookRepository(session)
    repo.replace_all([("http://a.test", None)])
    webhooks = repo.replace_all([("http://b.test", "s"), ("http://c.test", None)])

    assert [w.url for w in webhooks] == ["http://b.test", "http://c.test"]
    assert webhooks[0].has_secret
    assert isinstance(webhooks[0].created_at, datetime)
