"""Application entrypoint."""

from __future__ import annotations

import asyncio
from typing import Hashable

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from devfinder.bot.routers import setup_routers
from devfinder.config import DirectorySettings, get_settings
from devfinder.i18n import I18nService
from devfinder.logging import configure_logging, logger
from devfinder.services.directory import DirectorySessions, FetchOrchestrator
from devfinder.services.exceptions import ConfigurationError
from devfinder.services.listings import ListingService, build_listing_service
from devfinder.services.notifications import TelegramNotificationSink


def build_sessions(bot: Bot, listing_service: ListingService) -> DirectorySessions:
    def _factory(chat_id: Hashable) -> FetchOrchestrator:
        return FetchOrchestrator(
            listing_service,
            TelegramNotificationSink(bot, chat_id),
            session_key=chat_id,
        )

    return DirectorySessions(_factory)


def build_bot(settings: DirectorySettings) -> Bot:
    if settings.telegram_token is None:
        raise ConfigurationError("DEVFINDER_TELEGRAM_TOKEN is not configured.")
    session = AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    return Bot(token=settings.telegram_token.get_secret_value(), session=session)


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    bot = build_bot(settings)
    dp = Dispatcher()
    dp.include_router(setup_routers())

    async with httpx.AsyncClient() as http_client:
        listing_service = build_listing_service(settings.listing, http_client)
        sessions = build_sessions(bot, listing_service)
        i18n = I18nService(default_locale=settings.default_language)

        logger.info(
            "bot_starting",
            environment=settings.environment,
            listing_backend=settings.listing.backend,
        )
        await dp.start_polling(bot, sessions=sessions, i18n=i18n)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
