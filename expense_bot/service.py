from loguru import logger

from expense_bot.ledger.sheets import LedgerGateway
from expense_bot.models.schemas import AppendStatus, RawCommand, Rejected
from expense_bot.parsing.command import ExpenseParser


def _format_amount(amount: float) -> str:
    """'$15', '$12.50', '$1,200'."""
    if amount == int(amount):
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def usage_hint(prefix: str) -> str:
    return f'Invalid format. Try: `{prefix} 5.99 coffee "latte"`'


def usage_text(prefix: str) -> str:
    return (
        "Log an expense to the shared sheet:\n\n"
        f"`{prefix} <amount> <category> [description] [YYYY-MM-DD]`\n\n"
        "Examples:\n"
        f'• `{prefix} 12.50 food "lunch with team"`\n'
        f"• `{prefix} 5.99 coffee latte break 2023-05-20`\n"
        f"• `{prefix} $15 transport Uber`\n\n"
        "The date defaults to today and the description to \"No description\"."
    )


async def record_expense(
    raw: RawCommand,
    parser: ExpenseParser,
    ledger: LedgerGateway,
    *,
    prefix: str,
    sheet_url: str | None = None,
) -> str:
    """Parse one command, append it to the ledger and return the reply text."""
    outcome = parser.parse(raw)
    if isinstance(outcome, Rejected):
        logger.info("Format validation failed ({}) for {}", outcome.reason.value, raw.author_name)
        return usage_hint(prefix)

    record = outcome.record
    logger.info("Parsed expense: {}", record.to_row())
    result = await ledger.append(record)

    if result.status is AppendStatus.AUTH_FAILED:
        return f"🔥 Could not reach the expense sheet: {result.error}"
    if result.status is AppendStatus.APPEND_FAILED:
        return "❌ Failed to record the expense. Check the bot logs."

    reply = f"✅ Logged {_format_amount(record.amount)} for {record.category}"
    if sheet_url:
        reply += f"\nOpen your sheet: {sheet_url}"
    return reply
