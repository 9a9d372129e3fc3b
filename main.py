import sys

from fastapi import FastAPI
from loguru import logger

from expense_bot.api.routes import router
from expense_bot.config import get_settings

settings = get_settings()

# Configure loguru
logger.remove()
logger.add(sys.stderr, level=settings.log_level, format="{time:HH:mm:ss} | {level:<7} | {message}")

app = FastAPI(title="Expense Bot", version="0.1.0")
app.include_router(router)


@app.on_event("startup")
async def startup():
    """Prepare the ledger sheet and start the Telegram bot alongside FastAPI."""
    if not settings.telegram_bot_token:
        logger.warning("TELEGRAM_BOT_TOKEN not set — bot will not start")
        return

    from expense_bot.bot.handler import build_bot_app
    from expense_bot.deps import ledger, parser

    if not await ledger.initialize():
        logger.warning("Sheet initialization failed; appends will retry authorization")

    bot_app = build_bot_app(
        settings.telegram_bot_token, parser, ledger, sheet_url=ledger.sheet_url
    )
    app.state.bot = bot_app

    # Initialize and start polling in the background
    await bot_app.initialize()
    await bot_app.start()
    await bot_app.updater.start_polling(drop_pending_updates=True)
    logger.info("Telegram bot started (polling), listening for {}", parser.prefix)


@app.on_event("shutdown")
async def shutdown():
    """Gracefully stop the Telegram bot."""
    bot_app = getattr(app.state, "bot", None)
    if bot_app:
        await bot_app.updater.stop()
        await bot_app.stop()
        await bot_app.shutdown()
        logger.info("Telegram bot stopped")


if __name__ == "__main__":
    import uvicorn

    logger.info("Health check server running on port {}", settings.port)
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
