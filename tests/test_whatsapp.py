import json
from datetime import date

import httpx
import pytest

from src.dairyops.models.domain import Customer, Order, OrderLine
from src.dairyops.services.notifications import whatsapp
from src.dairyops.services.notifications.whatsapp import (
    WhatsAppClient,
    notify_order_scheduled,
    order_scheduled_message,
    to_whatsapp_number,
)


def _client(handler, **kwargs) -> WhatsAppClient:
    return WhatsAppClient(
        base_url="https://graph.example.test/v17.0",
        phone_number_id="12345",
        access_token="secret",
        max_retries=kwargs.pop("max_retries", 2),
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _customer() -> Customer:
    return Customer(
        id="c1",
        name="Asha",
        phone_number="9876543210",
        address="12 Lake Road",
        subscription_plan="Monthly",
        subscription_status="active",
        start_date="2025-01-01",
        end_date="2025-01-31",
    )


def _order() -> Order:
    return Order(
        id="o1",
        order_number="ORD-20250105-0001",
        customer_id="c1",
        delivery_boy_id="d1",
        delivery_date=date(2025, 1, 5),
        lines=[OrderLine("milk", "Cow Milk", 20, "1/2ltr", 2, 40)],
        total_amount=40,
    )


def test_send_text_posts_to_messages_endpoint() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

    result = _client(handler).send_text("919876543210", "hello")

    assert result["messages"][0]["id"] == "wamid.1"
    assert seen["url"] == "https://graph.example.test/v17.0/12345/messages"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["to"] == "919876543210"
    assert seen["body"]["text"] == {"body": "hello"}


def test_server_errors_are_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"ok": True})

    assert _client(handler).send_text("91", "hi") == {"ok": True}
    assert len(calls) == 3


def test_client_errors_are_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400, json={"error": "bad number"})

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).send_text("91", "hi")
    assert len(calls) == 1


def test_network_failure_becomes_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ConnectionError):
        _client(handler, max_retries=1).send_text("91", "hi")


def test_unconfigured_client_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(whatsapp.settings, "whatsapp_phone_number_id", None)
    monkeypatch.setattr(whatsapp.settings, "whatsapp_access_token", None)
    with pytest.raises(ValueError):
        WhatsAppClient()


def test_number_and_message_formatting() -> None:
    assert to_whatsapp_number("98765 43210") == "919876543210"
    assert to_whatsapp_number("+44 7700 900123") == "447700900123"
    message = order_scheduled_message(_customer(), _order())
    assert "ORD-20250105-0001" in message
    assert "05/01/2025" in message
    assert "2 x Cow Milk (1/2ltr)" in message


def test_notification_failure_is_swallowed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "expired token"})

    assert notify_order_scheduled(_customer(), _order(), client=_client(handler)) is False


def test_notification_skipped_when_not_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(whatsapp.settings, "whatsapp_phone_number_id", None)
    assert notify_order_scheduled(_customer(), _order()) is False


def test_notification_sent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"messages": []})

    assert notify_order_scheduled(_customer(), _order(), client=_client(handler)) is True


def test_dispatch_is_skipped_when_unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(whatsapp.settings, "whatsapp_phone_number_id", None)
    assert whatsapp.dispatch_order_notification(_customer(), _order()) is None
