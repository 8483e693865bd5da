"""
Audit Logger

DESIGN DECISION: Every mutation and persistence step of a ledger is logged.
This provides:
1. Complete traceability of the running balance
2. Debugging capability when a ledger file is rejected
3. User can see history of their interactions

The audit logger:
- Is synchronous, like the rest of the ledger
- Gracefully handles failures (a broken audit file never breaks the ledger)
"""

import logging
from decimal import Decimal
from typing import Optional, Union

import structlog

from personal_ledger.config import get_settings
from personal_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from personal_ledger.models.records import (
    FD,
    SIP,
    Expenditure,
    Income,
    ScheduledObligation,
    describe_record,
)
from personal_ledger.models.results import MonthlyReport
from personal_ledger.services.storage import AuditStorageInterface, StorageError


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog on top of the standard library logger."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("personal_ledger").setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog once per process, from LEDGER_LOG_* settings
_log_settings = get_settings().logging
configure_logging(_log_settings.level, _log_settings.json_output)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("personal_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_record_added(
        self,
        record_id: str,
        record: Union[Income, Expenditure],
    ) -> None:
        """Log a new income or expenditure."""
        kind = "Income" if isinstance(record, Income) else "Expenditure"
        self.log(AuditEventBuilder.record_added(
            record_id=record_id,
            kind=kind,
            amount=str(record.amount),
            category=record.category.value,
            label=describe_record(record),
        ))

    def log_investment_added(self, investment: Union[SIP, FD]) -> None:
        """Log a new investment."""
        self.log(AuditEventBuilder.investment_added(
            kind="SIP" if isinstance(investment, SIP) else "FD",
            principal=str(investment.principal),
            duration_years=investment.duration_years,
        ))

    def log_obligation_scheduled(self, obligation: ScheduledObligation) -> None:
        """Log a scheduled obligation."""
        self.log(AuditEventBuilder.obligation_scheduled(
            due_date=str(obligation.due_date),
            amount=str(obligation.amount),
            is_investment=obligation.is_investment,
        ))

    def log_operation_rejected(self, operation: str, reason: str) -> None:
        """Log an account operation that was refused."""
        self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            reason=reason,
        ))

    def log_ledger_saved(
        self,
        target: str,
        record_count: int,
        investment_count: int,
        obligation_count: int,
    ) -> None:
        """Log a successful save."""
        self.log(AuditEventBuilder.ledger_saved(
            target=target,
            record_count=record_count,
            investment_count=investment_count,
            obligation_count=obligation_count,
        ))

    def log_ledger_loaded(
        self,
        target: str,
        record_count: int,
        investment_count: int,
        obligation_count: int,
        balance: Decimal,
    ) -> None:
        """Log a successful load."""
        event = AuditEventBuilder.ledger_loaded(
            target=target,
            record_count=record_count,
            investment_count=investment_count,
            obligation_count=obligation_count,
        )
        event.details["balance"] = str(balance)
        self.log(event)

    def log_save_failed(self, target: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(target, error_message))

    def log_load_failed(self, target: str, error_message: str) -> None:
        self.log(AuditEventBuilder.load_failed(target, error_message))

    def log_malformed_ledger(self, target: str, error_message: str) -> None:
        self.log(AuditEventBuilder.malformed_ledger(target, error_message))

    def log_report_generated(self, report: MonthlyReport) -> None:
        self.log(AuditEventBuilder.report_generated(
            month=report.month,
            year=report.year,
            record_count=report.record_count,
        ))
