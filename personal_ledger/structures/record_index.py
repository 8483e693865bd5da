"""
Identifier registry for ledger records.

Identifiers look like "TXN<n>". The counter is shared by every index in
the process, so an identifier is never issued twice in one run, even
across several ledgers or after a reload.
"""

import itertools
from typing import Optional


class RecordIndex:
    """
    Maps identifiers to handles (positions in the owning ledger's record list).

    The index never holds records itself. When the owning ledger replaces
    its records, it calls invalidate() and every identifier issued so far
    resolves to None from then on.
    """

    PREFIX = "TXN"

    _id_sequence = itertools.count(1)

    def __init__(self):
        self._handles: dict[str, int] = {}

    def register(self, handle: int) -> str:
        """Issue a fresh identifier bound to handle."""
        record_id = f"{self.PREFIX}{next(RecordIndex._id_sequence)}"
        self._handles[record_id] = handle
        return record_id

    def resolve(self, record_id: str) -> Optional[int]:
        """The handle bound to record_id, or None if unknown or stale."""
        return self._handles.get(record_id)

    def items(self) -> list[tuple[str, int]]:
        """(identifier, handle) pairs, ordered by handle."""
        return sorted(self._handles.items(), key=lambda item: item[1])

    def invalidate(self) -> None:
        """Forget every binding. Issued identifiers are never reissued."""
        self._handles.clear()

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
