"""
JSON Lines audit trail.

One AuditEvent per line, appended. The file is never rewritten.
"""

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from personal_ledger.models.audit import AuditEvent
from personal_ledger.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)


class JsonlAuditStorage(AuditStorageInterface):
    """Append-only audit log stored as JSON lines."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        try:
            with open(self._path, "a", encoding="utf-8") as handle:
                handle.write(event.model_dump_json() + "\n")
        except OSError as e:
            raise StorageError(f"Cannot append to audit log {self._path}: {e}")
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Cannot read audit log {self._path}: {e}")

        events = []
        for line in reversed(lines):
            if len(events) >= limit:
                break
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError:
                # A torn final line from an interrupted append
                continue
        return events
