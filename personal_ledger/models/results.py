"""
Result Models for Personal Ledger

Every public ledger operation answers with a value or one of these
result objects. Failures are reported through `success` and
`error_message`, never by raising across the ledger boundary.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from personal_ledger.models.records import Category, InvestmentRecord


class MonthlyReport(BaseModel):
    """
    Income and expenditure totals for one calendar month.

    Only expenditures contribute to the per-category breakdown.
    Percentages are derived on demand, not stored.
    """

    month: int
    year: int
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    per_category_expense: dict[Category, Decimal] = Field(default_factory=dict)
    record_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def net_savings(self) -> Decimal:
        return self.total_income - self.total_expense

    def category_percentages(self) -> dict[Category, Decimal]:
        """
        Share of total expense per category, rounded to one decimal place.

        Empty when nothing was spent, so callers never divide by zero.
        """
        if self.total_expense <= 0:
            return {}
        return {
            category: (amount / self.total_expense * 100).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            )
            for category, amount in self.per_category_expense.items()
        }


class MaturityQuote(BaseModel):
    """An investment together with its projected maturity value."""

    investment: InvestmentRecord
    maturity_amount: Decimal

    @property
    def gain(self) -> Decimal:
        return self.maturity_amount - self.investment.principal


class PersistenceResult(BaseModel):
    """Outcome of a save or load."""

    operation: str = Field(
        ...,
        pattern="^(save|load)$",
        description="Which persistence operation ran"
    )
    success: bool
    target: str = Field(
        ...,
        description="Human-readable description of the storage target"
    )
    error_message: Optional[str] = None

    record_count: int = Field(default=0, ge=0)
    investment_count: int = Field(default=0, ge=0)
    obligation_count: int = Field(default=0, ge=0)

    # Only meaningful for loads: the caller's balance after replaying
    # the file, or the untouched input balance on failure.
    balance: Optional[Decimal] = None


class OperationResult(BaseModel):
    """Outcome of a balance-affecting account operation."""

    success: bool
    balance: Decimal = Field(
        ...,
        description="Account balance after the operation"
    )
    record_id: Optional[str] = None
    error_message: Optional[str] = None
