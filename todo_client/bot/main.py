import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from ..auth_client import AuthClient
from ..token_repo import TokenRepo
from .handlers import router
from .profiles import Profiles


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    from ..config import settings

    if not settings.BOT_TOKEN:
        raise SystemExit("BOT_TOKEN is not set")

    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher(storage=MemoryStorage())

    repo = TokenRepo(settings.REDIS_HOST, settings.REDIS_PORT, settings.TOKEN_SLOT)
    auth = AuthClient(settings.API_BASE_URL, settings.HTTP_TIMEOUT_SEC)
    profiles = Profiles(repo, auth, settings.API_BASE_URL, settings.HTTP_TIMEOUT_SEC)

    dp["profiles"] = profiles

    dp.include_router(router)

    logger.info("resource service at %s", settings.API_BASE_URL)
    try:
        await dp.start_polling(bot, profiles=profiles)
    finally:
        await repo.close()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
