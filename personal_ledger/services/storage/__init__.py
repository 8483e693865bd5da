"""
Storage Services Package

Provides abstract interfaces and concrete implementations for ledger
storage. The flat text file is the default backend; the interface keeps
it swappable.
"""

from personal_ledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    MalformedLedgerError,
    StorageError,
    StorageUnavailableError,
)
from personal_ledger.services.storage.audit_file import JsonlAuditStorage
from personal_ledger.services.storage.memory import InMemoryLedgerStorage
from personal_ledger.services.storage.text_file import TextFileLedgerStorage
from personal_ledger.services.storage.text_format import (
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "MalformedLedgerError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonlAuditStorage",
    "TextFileLedgerStorage",
    # Codec
    "decode_snapshot",
    "encode_snapshot",
]
