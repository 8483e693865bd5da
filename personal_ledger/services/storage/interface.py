"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger independent of where its file lives
2. Use in-memory storage for testing
3. Swap the flat text file for something else later

The interface is intentionally tiny: a ledger is always read and written
as one whole snapshot.
"""

from abc import ABC, abstractmethod

from personal_ledger.models.audit import AuditEvent
from personal_ledger.models.records import LedgerSnapshot


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read_snapshot(self) -> LedgerSnapshot:
        """
        Read the complete persisted ledger.

        Raises:
            StorageUnavailableError: If the target cannot be opened
                (including "nothing saved yet")
            MalformedLedgerError: If the data cannot be decoded
        """
        pass

    @abstractmethod
    def write_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """
        Replace the persisted ledger with snapshot.

        Raises:
            StorageUnavailableError: If the target cannot be written
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable name of the target, for logs and results."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully

        Raises:
            StorageError: If the log cannot be written
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage target could not be opened for reading or writing."""
    pass


class MalformedLedgerError(StorageError):
    """Persisted ledger data could not be decoded."""

    def __init__(self, message: str, line_number: int = 0):
        self.line_number = line_number
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)
