"""
Report Aggregation

DESIGN DECISION: Reports are computed from the stored records every time.
Nothing derived (totals, percentages) is cached or persisted, so a report
can never disagree with the records it summarizes.
"""

from decimal import Decimal
from typing import Iterable, Union

from personal_ledger.models.records import Category, Expenditure, Income
from personal_ledger.models.results import MonthlyReport


def build_monthly_report(
    records: Iterable[Union[Income, Expenditure]],
    month: int,
    year: int,
) -> MonthlyReport:
    """
    Sum income and expenditure for one month.

    Expenditures are also grouped by category. The breakdown follows the
    declaration order of Category and only lists categories with spending.
    """
    total_income = Decimal("0")
    total_expense = Decimal("0")
    by_category: dict[Category, Decimal] = {}
    count = 0

    for record in records:
        if not record.date.in_month(month, year):
            continue
        count += 1
        if isinstance(record, Income):
            total_income += record.amount
        elif isinstance(record, Expenditure):
            total_expense += record.amount
            by_category[record.category] = (
                by_category.get(record.category, Decimal("0")) + record.amount
            )
        else:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")

    ordered = {
        category: by_category[category]
        for category in Category
        if category in by_category
    }

    return MonthlyReport(
        month=month,
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        per_category_expense=ordered,
        record_count=count,
    )


def balance_effect(record: Union[Income, Expenditure]) -> Decimal:
    """Signed change a record makes to the running balance."""
    if isinstance(record, Income):
        return record.amount
    if isinstance(record, Expenditure):
        return -record.amount
    raise TypeError(f"Unsupported record type: {type(record).__name__}")
