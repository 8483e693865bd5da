"""Services package."""

from personal_ledger.services.storage import (
    AuditStorageInterface,
    InMemoryLedgerStorage,
    JsonlAuditStorage,
    LedgerStorageInterface,
    MalformedLedgerError,
    StorageError,
    StorageUnavailableError,
    TextFileLedgerStorage,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryLedgerStorage",
    "JsonlAuditStorage",
    "LedgerStorageInterface",
    "MalformedLedgerError",
    "StorageError",
    "StorageUnavailableError",
    "TextFileLedgerStorage",
]
