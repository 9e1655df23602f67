from aiogram import Router

from devfinder.bot.routers import directory


def setup_routers() -> Router:
    router = Router()
    router.include_router(directory.router)
    return router


__all__ = ["setup_routers"]
