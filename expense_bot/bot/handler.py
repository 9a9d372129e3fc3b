from loguru import logger
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from expense_bot.ledger.sheets import LedgerGateway
from expense_bot.models.schemas import RawCommand
from expense_bot.parsing.command import ExpenseParser, prefix_pattern
from expense_bot.service import record_expense, usage_text


def _author_name(update: Update) -> str:
    user = update.effective_user
    if user is None:
        return "Unknown"
    return user.username or user.full_name or "Unknown"


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start and /help."""
    prefix = context.bot_data["prefix"]
    await update.message.reply_text(usage_text(prefix), parse_mode="Markdown")


async def handle_expense(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a message starting with the expense command prefix."""
    user = update.effective_user
    if user is not None and user.is_bot:
        return

    raw = RawCommand(text=update.effective_message.text, author_name=_author_name(update))
    logger.info("Expense command from {}: {}", raw.author_name, raw.text)

    try:
        reply = await record_expense(
            raw,
            context.bot_data["parser"],
            context.bot_data["ledger"],
            prefix=context.bot_data["prefix"],
            sheet_url=context.bot_data.get("sheet_url"),
        )
    except Exception as e:
        logger.exception("Error handling expense command")
        reply = f"🔥 Something went wrong: {e}"

    await update.effective_message.reply_text(reply)


def build_bot_app(
    token: str,
    parser: ExpenseParser,
    ledger: LedgerGateway,
    sheet_url: str | None = None,
) -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(token).build()
    app.bot_data.update(
        parser=parser,
        ledger=ledger,
        prefix=parser.prefix,
        sheet_url=sheet_url,
    )

    command_filter = filters.Regex(prefix_pattern(parser.prefix))

    app.add_handler(CommandHandler(["start", "help"], help_command))
    # New messages only; an edited command must not log a second row
    app.add_handler(
        MessageHandler(filters.UpdateType.MESSAGE & filters.TEXT & command_filter, handle_expense)
    )

    return app
