"""In-memory indexes owned by the ledger."""

from personal_ledger.structures.record_index import RecordIndex
from personal_ledger.structures.schedule_queue import ScheduleQueue
from personal_ledger.structures.trie import Trie

__all__ = ["RecordIndex", "ScheduleQueue", "Trie"]
