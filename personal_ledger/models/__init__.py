"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from personal_ledger.models.records import (
    FD,
    SIP,
    Category,
    DateValue,
    Expenditure,
    FinancialRecord,
    Income,
    InvestmentRecord,
    LedgerSnapshot,
    ScheduledObligation,
    describe_record,
)
from personal_ledger.models.results import (
    MaturityQuote,
    MonthlyReport,
    OperationResult,
    PersistenceResult,
)
from personal_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "Category",
    "DateValue",
    "Expenditure",
    "FD",
    "FinancialRecord",
    "Income",
    "InvestmentRecord",
    "LedgerSnapshot",
    "SIP",
    "ScheduledObligation",
    "describe_record",
    # Result models
    "MaturityQuote",
    "MonthlyReport",
    "OperationResult",
    "PersistenceResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
