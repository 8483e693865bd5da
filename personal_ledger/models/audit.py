"""
Audit Models for Personal Ledger

Every mutation and persistence step of a ledger is described by an
audit event. This provides:
1. Traceability of how a balance came to be
2. Debugging information when a ledger file fails to load
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    RECORD_ADDED = "record_added"
    INVESTMENT_ADDED = "investment_added"
    OBLIGATION_SCHEDULED = "obligation_scheduled"
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_LOADED = "ledger_loaded"
    LOAD_FAILED = "load_failed"
    MALFORMED_LEDGER = "malformed_ledger"

    # Queries
    REPORT_GENERATED = "report_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant ledger action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about? ("record", "investment", "ledger", ...)
    entity_type: Optional[str] = None
    entity_id: Optional[str] = Field(
        default=None,
        description="Record identifier or storage target"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("TXN1", "Income", "500")
        event = AuditEventBuilder.load_failed("alice_finance_data.txt", "missing")
    """

    @staticmethod
    def record_added(
        record_id: str,
        kind: str,
        amount: str,
        category: str,
        label: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type="record",
            entity_id=record_id,
            description=(label or f"{kind} of {amount} recorded")[:500],
            details={
                "kind": kind,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def investment_added(
        kind: str,
        principal: str,
        duration_years: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVESTMENT_ADDED,
            entity_type="investment",
            description=f"{kind} investment of {principal} for {duration_years} years",
            details={
                "kind": kind,
                "principal": principal,
                "duration_years": duration_years,
            },
        )

    @staticmethod
    def obligation_scheduled(
        due_date: str,
        amount: str,
        is_investment: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OBLIGATION_SCHEDULED,
            entity_type="obligation",
            description=f"Obligation of {amount} scheduled for {due_date}",
            details={
                "due_date": due_date,
                "amount": amount,
                "is_investment": is_investment,
            },
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"{operation} rejected",
            details={"operation": operation},
            error_message=reason,
        )

    @staticmethod
    def ledger_saved(
        target: str,
        record_count: int,
        investment_count: int,
        obligation_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger",
            entity_id=target,
            description=f"Ledger saved to {target}",
            details={
                "records": record_count,
                "investments": investment_count,
                "obligations": obligation_count,
            },
        )

    @staticmethod
    def ledger_loaded(
        target: str,
        record_count: int,
        investment_count: int,
        obligation_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            entity_id=target,
            description=f"Ledger loaded from {target}",
            details={
                "records": record_count,
                "investments": investment_count,
                "obligations": obligation_count,
            },
        )

    @staticmethod
    def save_failed(target: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            entity_id=target,
            description=f"Could not save ledger to {target}",
            error_message=error_message,
        )

    @staticmethod
    def load_failed(target: str, error_message: str) -> AuditEvent:
        # A missing file is the normal first-run path, hence INFO
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            entity_type="ledger",
            entity_id=target,
            description=f"No ledger data available at {target}",
            error_message=error_message,
        )

    @staticmethod
    def malformed_ledger(target: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MALFORMED_LEDGER,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=target,
            description=f"Ledger file at {target} is malformed; load rejected",
            error_message=error_message,
        )

    @staticmethod
    def report_generated(
        month: int,
        year: int,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            severity=AuditSeverity.DEBUG,
            entity_type="report",
            description=f"Monthly report for {month}/{year} covered {record_count} records",
            details={
                "month": month,
                "year": year,
                "record_count": record_count,
            },
        )
