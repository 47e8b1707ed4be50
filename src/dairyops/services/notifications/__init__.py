"""Outbound customer notifications."""

from .whatsapp import WhatsAppClient, dispatch_order_notification, notify_order_scheduled

__all__ = ["WhatsAppClient", "dispatch_order_notification", "notify_order_scheduled"]
