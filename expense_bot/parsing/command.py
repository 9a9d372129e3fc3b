"""Turns ``!expense <amount> <category> [description] [YYYY-MM-DD]`` into a record.

The parser is pure: it does no I/O, keeps no state between calls and only
reads the current date through the injected clock.
"""

import math
import re

from loguru import logger

from expense_bot.models.schemas import (
    DATE_PATTERN,
    ExpenseRecord,
    ParseOutcome,
    RawCommand,
    Rejected,
    RejectReason,
    Valid,
)
from expense_bot.parsing.clock import Clock, system_clock

DEFAULT_PREFIX = "!expense"
DEFAULT_DESCRIPTION = "No description"
CURRENCY_SYMBOLS = "$€£₪₹¥"

# A token glues together bare runs and quoted runs: 'abc', "a b", x"y z"w
TOKEN_RE = re.compile(r"""(?:[^\s"']+|["'][^"']*["'])+""")
QUOTES_RE = re.compile(r"""["']""")
AMOUNT_RE = re.compile(r"^(?:[0-9]+\.?[0-9]*|\.[0-9]+)$")
DATE_RE = re.compile(DATE_PATTERN)


def prefix_pattern(prefix: str) -> re.Pattern:
    return re.compile(r"^\s*" + re.escape(prefix) + r"(?=\s|$)", re.IGNORECASE)


def is_command(text: str, prefix: str = DEFAULT_PREFIX) -> bool:
    """True when ``text`` starts with the command prefix as a whole word."""
    return bool(prefix_pattern(prefix).match(text or ""))


def tokenize(text: str) -> list[str]:
    """Split argument text into tokens, honoring quotes and dropping quote chars."""
    return [QUOTES_RE.sub("", part) for part in TOKEN_RE.findall(text)]


def parse_amount(token: str) -> float | None:
    """Plain decimal with an optional leading currency symbol, else None."""
    if token[:1] and token[0] in CURRENCY_SYMBOLS:
        token = token[1:]
    if not AMOUNT_RE.fullmatch(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


class ExpenseParser:
    def __init__(self, prefix: str = DEFAULT_PREFIX, clock: Clock | None = None):
        self.prefix = prefix
        self.clock = clock or system_clock()
        self._prefix_re = prefix_pattern(prefix)

    def strip_prefix(self, text: str) -> str:
        return self._prefix_re.sub("", text or "", count=1).strip()

    def parse(self, raw: RawCommand) -> ParseOutcome:
        body = self.strip_prefix(raw.text)
        if not body:
            return self._reject(RejectReason.EMPTY_OR_PREFIX_ONLY, raw)

        tokens = tokenize(body)
        if len(tokens) < 2:
            return self._reject(RejectReason.TOO_FEW_FIELDS, raw)

        amount = parse_amount(tokens[0])
        if amount is None:
            return self._reject(RejectReason.INVALID_AMOUNT, raw)

        category = tokens[1]
        if not category.strip():
            return self._reject(RejectReason.TOO_FEW_FIELDS, raw)

        rest = tokens[2:]
        if rest and DATE_RE.fullmatch(rest[-1]):
            date = rest.pop()
        else:
            date = self.clock().isoformat()

        description = " ".join(token for token in rest if token.strip()) or DEFAULT_DESCRIPTION

        return Valid(
            record=ExpenseRecord(
                date=date,
                amount=amount,
                category=category,
                description=description,
                author=raw.author_name,
            )
        )

    @staticmethod
    def _reject(reason: RejectReason, raw: RawCommand) -> Rejected:
        logger.debug("Rejected command {!r}: {}", raw.text, reason.value)
        return Rejected(reason=reason)
