from expense_bot.config import get_settings
from expense_bot.ledger.sheets import SheetsLedger
from expense_bot.parsing.clock import system_clock
from expense_bot.parsing.command import ExpenseParser

settings = get_settings()

parser = ExpenseParser(prefix=settings.command_prefix, clock=system_clock(settings.timezone))
ledger = SheetsLedger(
    spreadsheet_id=settings.sheet_id,
    credentials_path=settings.google_credentials_path,
    sheet_name=settings.sheet_name,
)
