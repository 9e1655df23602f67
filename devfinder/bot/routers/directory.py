"""Telegram handlers driving one directory session per chat."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, InaccessibleMessage, Message

from devfinder.bot.rendering import (
    BUCKET_CALLBACK_PREFIX,
    parse_bucket_callback,
    price_keyboard,
    render_state,
)
from devfinder.bot.utils.telegram import answer_with_retry, bot_send_with_retry, edit_text_with_retry
from devfinder.i18n import I18nService
from devfinder.logging import logger
from devfinder.services.directory import DirectorySessions, FetchOrchestrator, FetchState

router = Router()


def _locale(message: Message | CallbackQuery) -> str | None:
    user = message.from_user
    return getattr(user, "language_code", None) if user is not None else None


async def _reply(
    message: Message,
    orchestrator: FetchOrchestrator,
    state: FetchState,
    i18n: I18nService,
) -> None:
    if state.is_loading:
        # A newer query for this chat is still running and will reply itself.
        return
    locale = _locale(message)
    await answer_with_retry(
        message,
        render_state(state, i18n, locale),
        parse_mode=None,
        reply_markup=price_keyboard(i18n, locale, selected=orchestrator.price_bucket),
    )


@router.message(CommandStart())
@router.message(Command("developers"))
async def handle_developers(message: Message, sessions: DirectorySessions, i18n: I18nService) -> None:
    orchestrator = sessions.get(message.chat.id)
    logger.info("directory_opened", chat_id=message.chat.id, activated=orchestrator.activated)
    state = await orchestrator.activate()
    await _reply(message, orchestrator, state, i18n)


@router.message(Command("search"))
async def handle_search(
    message: Message,
    command: CommandObject,
    sessions: DirectorySessions,
    i18n: I18nService,
) -> None:
    orchestrator = sessions.get(message.chat.id)
    state = await orchestrator.search((command.args or "").strip())
    await _reply(message, orchestrator, state, i18n)


@router.message(F.text & ~F.text.startswith("/"))
async def handle_search_text(message: Message, sessions: DirectorySessions, i18n: I18nService) -> None:
    orchestrator = sessions.get(message.chat.id)
    state = await orchestrator.search(message.text)
    await _reply(message, orchestrator, state, i18n)


@router.callback_query(F.data.startswith(BUCKET_CALLBACK_PREFIX))
async def handle_price_bucket(callback: CallbackQuery, sessions: DirectorySessions, i18n: I18nService) -> None:
    try:
        bucket = parse_bucket_callback(callback.data)
    except ValueError:
        logger.warning("price_bucket_callback_invalid", data=callback.data)
        await callback.answer()
        return

    message = callback.message
    if message is None:
        await callback.answer()
        return

    orchestrator = sessions.get(message.chat.id)
    await callback.answer()
    state = await orchestrator.select_price_bucket(bucket)
    if state.is_loading:
        return
    locale = _locale(callback)
    text = render_state(state, i18n, locale)
    keyboard = price_keyboard(i18n, locale, selected=orchestrator.price_bucket)
    if isinstance(message, InaccessibleMessage):
        # Too old to edit; post the results as a new message instead.
        await bot_send_with_retry(
            callback.bot,
            chat_id=message.chat.id,
            text=text,
            parse_mode=None,
            reply_markup=keyboard,
        )
        return
    await edit_text_with_retry(message, text, parse_mode=None, reply_markup=keyboard)


__all__ = [
    "handle_developers",
    "handle_price_bucket",
    "handle_search",
    "handle_search_text",
    "router",
]
