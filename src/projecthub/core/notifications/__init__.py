"""Outbound alert channels."""

from src.projecthub.core.notifications.telegram import DeliveryResult, TelegramNotifier

__all__ = [
    "DeliveryResult",
    "TelegramNotifier",
]
