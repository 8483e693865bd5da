"""
In-Memory Storage Implementation

Keeps the encoded ledger text in memory. It goes through the same text
codec as the file backend, so anything that survives here survives on
disk too. Used for tests and throwaway ledgers.
"""

from typing import Optional

from personal_ledger.models.records import LedgerSnapshot
from personal_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageUnavailableError,
)
from personal_ledger.services.storage.text_format import (
    decode_snapshot,
    encode_snapshot,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger text held in a string instead of a file."""

    def __init__(self, text: Optional[str] = None, name: str = "memory"):
        self._text = text
        self._name = name

    @property
    def text(self) -> Optional[str]:
        """The last saved text, or None if nothing was ever saved."""
        return self._text

    def describe(self) -> str:
        return f"<{self._name}>"

    def read_snapshot(self) -> LedgerSnapshot:
        if self._text is None:
            raise StorageUnavailableError(f"Nothing saved in {self.describe()}")
        return decode_snapshot(self._text)

    def write_snapshot(self, snapshot: LedgerSnapshot) -> None:
        self._text = encode_snapshot(snapshot)
