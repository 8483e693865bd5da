"""Reporting and valuation queries."""

from personal_ledger.queries.reports import balance_effect, build_monthly_report
from personal_ledger.queries.valuation import (
    FD_ANNUAL_RATE,
    SIP_ANNUAL_RATE,
    maturity_amount,
)

__all__ = [
    "FD_ANNUAL_RATE",
    "SIP_ANNUAL_RATE",
    "balance_effect",
    "build_monthly_report",
    "maturity_amount",
]
