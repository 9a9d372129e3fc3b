import math
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LEDGER_COLUMNS = ["Date", "Amount", "Category", "Description", "User"]
DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"


class RawCommand(BaseModel):
    text: str
    author_name: str


class ExpenseRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str = Field(pattern=DATE_PATTERN)
    amount: float = Field(ge=0)
    category: str = Field(min_length=1)
    description: str
    author: str

    @field_validator("amount")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("amount must be finite")
        return value

    def to_row(self) -> list:
        """Ledger row in sheet column order."""
        return [self.date, self.amount, self.category, self.description, self.author]


class RejectReason(str, Enum):
    EMPTY_OR_PREFIX_ONLY = "empty_or_prefix_only"
    TOO_FEW_FIELDS = "too_few_fields"
    INVALID_AMOUNT = "invalid_amount"


class Valid(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["valid"] = "valid"
    record: ExpenseRecord


class Rejected(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    reason: RejectReason


ParseOutcome = Annotated[Valid | Rejected, Field(discriminator="kind")]


class AppendStatus(str, Enum):
    OK = "ok"
    APPEND_FAILED = "append_failed"
    AUTH_FAILED = "auth_failed"


class AppendResult(BaseModel):
    status: AppendStatus
    updated_range: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is AppendStatus.OK
