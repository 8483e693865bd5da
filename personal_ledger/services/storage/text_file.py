"""
Text File Storage Implementation

DESIGN DECISION: A ledger is a single human-readable text file per user.
1. No database setup required
2. The file can be inspected or backed up with ordinary tools
3. Easy to export/migrate later

TRADEOFFS:
- The whole file is rewritten on every save
- No atomicity: a crash mid-write can leave a truncated file,
  which the next load rejects as malformed
"""

from pathlib import Path
from typing import Union

from personal_ledger.models.records import LedgerSnapshot
from personal_ledger.services.storage.interface import (
    LedgerStorageInterface,
    MalformedLedgerError,
    StorageUnavailableError,
)
from personal_ledger.services.storage.text_format import (
    decode_snapshot,
    encode_snapshot,
)


class TextFileLedgerStorage(LedgerStorageInterface):
    """Reads and writes a ledger as one flat text file."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path)

    def read_snapshot(self) -> LedgerSnapshot:
        try:
            text = self._path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            raise StorageUnavailableError(f"Ledger file not found: {self._path}")
        except UnicodeDecodeError as e:
            raise MalformedLedgerError(f"Ledger file is not valid {self._encoding}: {e.reason}")
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read ledger file {self._path}: {e}")

        return decode_snapshot(text)

    def write_snapshot(self, snapshot: LedgerSnapshot) -> None:
        text = encode_snapshot(snapshot)
        try:
            with open(self._path, "w", encoding=self._encoding, newline="\n") as handle:
                handle.write(text)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write ledger file {self._path}: {e}")
