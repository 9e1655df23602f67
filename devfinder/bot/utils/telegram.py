"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest, TelegramNetworkError, TelegramRetryAfter
from aiogram.types import Message

from devfinder.logging import logger
from devfinder.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3


async def _with_retry(operation, name: str) -> Any:
    return await retry_async(
        operation,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=(TelegramNetworkError, TelegramRetryAfter),
        logger=logger,
        operation_name=name,
    )


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    async def _send():
        return await message.answer(text, **kwargs)

    return await _with_retry(_send, "telegram_answer")


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await _with_retry(_send, "telegram_send_message")


async def edit_text_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Edit a previously sent message in place.

    Telegram rejects edits that leave the message unchanged; those are
    treated as success since the chat already shows the right content.
    """

    async def _edit():
        try:
            return await message.edit_text(text, **kwargs)
        except TelegramBadRequest as exc:
            if "message is not modified" in str(exc):
                return None
            raise

    return await _with_retry(_edit, "telegram_edit_message")


__all__ = ["answer_with_retry", "bot_send_with_retry", "edit_text_with_retry"]
