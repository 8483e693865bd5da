"""
Core Data Models for Personal Ledger

These models define the strict schemas for everything the ledger stores.
They are designed to:
1. Enforce positive amounts and durations at construction
2. Be immutable once created (records are append-only)
3. Form closed tagged unions, so every consumer can match exhaustively

DESIGN DECISION: Direction (income vs. expenditure) is carried by the
variant tag, never by the sign of the amount. Amounts are always
positive magnitudes.
"""

from datetime import date as calendar_date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Record categories.

    The values are the exact display strings used in the ledger file.
    """
    INCOME = "Income"
    FOOD = "Food"
    HOUSING = "Housing"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def parse(cls, text: str) -> "Category":
        """Map a display string to a category; anything unknown is Other."""
        try:
            return cls(text)
        except ValueError:
            return cls.OTHER

    @classmethod
    def expense_categories(cls) -> list["Category"]:
        """The eight categories an expenditure may be filed under."""
        return [category for category in cls if category is not cls.INCOME]


# =============================================================================
# DATE VALUE
# =============================================================================

class DateValue(BaseModel):
    """
    Immutable day/month/year triple.

    Construction never checks the calendar; use is_valid for that.
    Ordering is chronological: year, then month, then day.
    """
    model_config = ConfigDict(frozen=True)

    day: int
    month: int
    year: int

    @classmethod
    def today(cls) -> "DateValue":
        return cls.from_date(calendar_date.today())

    @classmethod
    def from_date(cls, value: calendar_date) -> "DateValue":
        return cls(day=value.day, month=value.month, year=value.year)

    @classmethod
    def from_fields(cls, tokens: Sequence[str]) -> "DateValue":
        """
        Build from the three "day month year" tokens of a ledger line.

        Raises ValueError if there are not exactly three integer tokens.
        """
        if len(tokens) != 3:
            raise ValueError(f"Expected 3 date fields, got {len(tokens)}")
        day, month, year = (int(token) for token in tokens)
        return cls(day=day, month=month, year=year)

    @classmethod
    def parse(cls, text: str) -> "DateValue":
        """Parse the "d/m/y" display form."""
        return cls.from_fields(text.strip().split("/"))

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    @property
    def is_valid(self) -> bool:
        """Is this a real Gregorian calendar date?"""
        try:
            calendar_date(self.year, self.month, self.day)
        except ValueError:
            return False
        return True

    def in_month(self, month: int, year: int) -> bool:
        return self.month == month and self.year == year

    def to_fields(self) -> str:
        """Render as the "day month year" tokens used in ledger files."""
        return f"{self.day} {self.month} {self.year}"

    def __str__(self) -> str:
        return f"{self.day}/{self.month}/{self.year}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key >= other.sort_key


# =============================================================================
# FINANCIAL RECORDS
# =============================================================================

class Income(BaseModel):
    """Money received. Filed under Income unless overridden."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["income"] = "income"
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude of the income"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )
    date: DateValue = Field(default_factory=DateValue.today)
    category: Category = Category.INCOME


class Expenditure(BaseModel):
    """Money spent. Filed under Other unless a category is chosen."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["expenditure"] = "expenditure"
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude of the expenditure"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )
    date: DateValue = Field(default_factory=DateValue.today)
    category: Category = Category.OTHER


FinancialRecord = Annotated[
    Union[Income, Expenditure],
    Field(discriminator="kind"),
]


# =============================================================================
# INVESTMENTS
# =============================================================================

class SIP(BaseModel):
    """
    Systematic investment plan.

    A lump-sum principal plus a fixed monthly contribution.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["sip"] = "sip"
    principal: Decimal = Field(..., gt=0)
    duration_years: int = Field(..., gt=0)
    start_date: DateValue = Field(default_factory=DateValue.today)
    monthly_contribution: Decimal = Field(..., gt=0)


class FD(BaseModel):
    """Fixed deposit."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fd"] = "fd"
    principal: Decimal = Field(..., gt=0)
    duration_years: int = Field(..., gt=0)
    start_date: DateValue = Field(default_factory=DateValue.today)


InvestmentRecord = Annotated[
    Union[SIP, FD],
    Field(discriminator="kind"),
]


# =============================================================================
# SCHEDULED OBLIGATIONS
# =============================================================================

class ScheduledObligation(BaseModel):
    """A payment or investment due-date kept as a reminder."""
    model_config = ConfigDict(frozen=True)

    due_date: DateValue
    description: str = ""
    amount: Decimal
    is_investment: bool = False

    @property
    def label(self) -> str:
        return "Investment" if self.is_investment else "Payment"


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Everything a ledger persists, in insertion order.

    This is the unit exchanged with storage backends.
    """

    records: list[FinancialRecord] = Field(default_factory=list)
    investments: list[InvestmentRecord] = Field(default_factory=list)
    obligations: list[ScheduledObligation] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.records or self.investments or self.obligations)


def describe_record(record: Union[Income, Expenditure]) -> str:
    """Short human-readable label for a record, used in audit messages."""
    if isinstance(record, Income):
        return f"Income {record.amount} ({record.description})"
    if isinstance(record, Expenditure):
        return f"Expenditure {record.amount} [{record.category.value}] ({record.description})"
    raise TypeError(f"Unsupported record type: {type(record).__name__}")
