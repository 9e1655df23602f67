"""Sinks that surface fetch failures to the person browsing the directory."""

from __future__ import annotations

from typing import Protocol

from aiogram import Bot

from devfinder.bot.utils.telegram import bot_send_with_retry
from devfinder.logging import logger

FETCH_ERROR_PREFIX = "Error fetching developers: "


def format_fetch_error(detail: str) -> str:
    return f"{FETCH_ERROR_PREFIX}{detail}"


class NotificationSink(Protocol):
    async def notify_error(self, message: str) -> None: ...


class LoggingNotificationSink:
    """Fallback sink for sessions without a user-facing channel."""

    async def notify_error(self, message: str) -> None:
        logger.error("user_notification", message=message)


class TelegramNotificationSink:
    """Send error notices to one chat. Delivery failures are logged, never raised."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self.chat_id = chat_id

    async def notify_error(self, message: str) -> None:
        try:
            await bot_send_with_retry(self._bot, chat_id=self.chat_id, text=message, parse_mode=None)
        except Exception:
            logger.exception("notification_delivery_failed", chat_id=self.chat_id)


__all__ = [
    "FETCH_ERROR_PREFIX",
    "LoggingNotificationSink",
    "NotificationSink",
    "TelegramNotificationSink",
    "format_fetch_error",
]
