import asyncio
import logging
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from shop_pos.bot.handlers import router, setup_store
from shop_pos.config import require_bot_settings, settings
from shop_pos.core.errors import FetchError
from shop_pos.core.store import ShopStore
from shop_pos.services.shop_client import HttpShopService

logger = logging.getLogger(__name__)


async def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    require_bot_settings()

    store = ShopStore(HttpShopService())
    try:
        await store.refresh()
    except FetchError as e:
        # the operator can retry with /refresh once the service is up
        logger.warning("Initial catalog load failed: %s", e)
    setup_store(store)

    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    dp.include_router(router)

    await dp.start_polling(bot)

def run() -> None:
    asyncio.run(main())

if __name__ == "__main__":
    run()
