"""WhatsApp Cloud API client for customer notifications."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import Customer, Order
from ..scheduling.dates import format_ddmmyyyy

logger = logging.getLogger(__name__)

# Sends run off the request and job threads; order persistence never waits on them.
_executor = ThreadPoolExecutor(max_workers=settings.whatsapp_notify_workers, thread_name_prefix="whatsapp")


class WhatsAppClient:
    def __init__(
        self,
        base_url: str | None = None,
        phone_number_id: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.whatsapp_api_url).rstrip("/")
        self.phone_number_id = phone_number_id or settings.whatsapp_phone_number_id
        self.access_token = access_token or settings.whatsapp_access_token
        if not self.phone_number_id or not self.access_token:
            raise ValueError("WhatsApp phone number id and access token are not configured.")
        self.timeout = timeout if timeout is not None else settings.whatsapp_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.whatsapp_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.whatsapp_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.access_token}"},
        )

    def send_text(self, to: str, body: str) -> dict:
        """Send a plain text message; retries transport errors and 5xx responses."""
        url = f"{self.base_url}/{self.phone_number_id}/messages"
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.post(url, json=payload)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # 4xx means the request itself is wrong; retrying will not help
                    if e.response.status_code < 500:
                        raise
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(f"WhatsApp API not reachable at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"WhatsApp request failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
        finally:
            client.close()


def to_whatsapp_number(phone_number: str) -> str:
    digits = "".join(ch for ch in str(phone_number) if ch.isdigit())
    if len(digits) == 10:
        return f"{settings.whatsapp_country_code}{digits}"
    return digits


def order_scheduled_message(customer: Customer, order: Order) -> str:
    items = ", ".join(f"{line.quantity} x {line.product_name} ({line.product_size})" for line in order.lines)
    return (
        f"Hello {customer.name}! Your order {order.order_number} is scheduled for "
        f"{format_ddmmyyyy(order.delivery_date)}: {items}. Total: Rs {order.total_amount:.2f}."
    )


def notify_order_scheduled(customer: Customer, order: Order, client: WhatsAppClient | None = None) -> bool:
    """Fire-and-forget notification; returns whether a message was sent."""
    if client is None:
        if not settings.whatsapp_configured:
            logger.debug("WhatsApp not configured - skipping order notification")
            return False
        client = WhatsAppClient()
    try:
        client.send_text(to_whatsapp_number(customer.phone_number), order_scheduled_message(customer, order))
        return True
    except Exception as exc:
        logger.warning(f"Failed to send WhatsApp notification for order {order.order_number}: {exc}")
        return False


def dispatch_order_notification(customer: Customer, order: Order) -> Optional[Future]:
    """Queue ``notify_order_scheduled`` on the background pool and return immediately."""
    if not settings.whatsapp_configured:
        return None
    return _executor.submit(notify_order_scheduled, customer, order)