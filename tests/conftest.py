from datetime import date
from unittest.mock import MagicMock

import pytest

from expense_bot.models.schemas import AppendResult, AppendStatus
from expense_bot.parsing.clock import fixed_clock
from expense_bot.parsing.command import ExpenseParser

TODAY = date(2024, 3, 15)


# ============== Shared Dummy / Mock Objects ==============


class DummyMessage:
    """Mock telegram message collecting replies."""
    def __init__(self, text=""):
        self.text = text
        self.texts = []

    async def reply_text(self, text, **kwargs):
        self.texts.append({"text": text, "kwargs": kwargs})
        return MagicMock()


class DummyUser:
    """Mock telegram user."""
    def __init__(self, username="test_user", full_name="Test User", is_bot=False):
        self.id = 12345
        self.username = username
        self.full_name = full_name
        self.is_bot = is_bot


class DummyUpdate:
    """Mock update object for testing."""
    def __init__(self, text="", user=None):
        self.message = DummyMessage(text)
        self.effective_message = self.message
        self.effective_user = user if user is not None else DummyUser()


class DummyContext:
    """Mock context carrying bot_data like the Application does."""
    def __init__(self, bot_data=None):
        self.bot_data = bot_data or {}
        self.user_data = {}


class FakeLedger:
    """In-memory ledger returning a canned AppendResult."""
    def __init__(self, result=None, sheet_url=None):
        self.result = result or AppendResult(
            status=AppendStatus.OK, updated_range="Expenses!A2:E2"
        )
        self.sheet_url = sheet_url
        self.appended = []
        self.initialized = False

    async def initialize(self):
        self.initialized = True
        return True

    async def append(self, record):
        self.appended.append(record)
        return self.result


# ============== Shared Fixtures ==============


@pytest.fixture()
def today():
    return TODAY


@pytest.fixture()
def parser():
    """Parser with a clock frozen at TODAY."""
    return ExpenseParser(clock=fixed_clock(TODAY))


@pytest.fixture()
def ledger():
    return FakeLedger()
