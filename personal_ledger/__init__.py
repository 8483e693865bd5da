"""
Personal Ledger - Source Package

A personal finance ledger: income, expenditure and investment records,
persisted to a per-user text file and queried by month, description
prefix and due date.

DESIGN PRINCIPLES:
1. Records are append-only and immutable
2. The balance is never stored; it is replayed from the records
3. Failures are reported as results, not raised
4. Every mutation is auditable
5. Storage layer is swappable
"""

from personal_ledger.account import Account
from personal_ledger.ledger import Ledger

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"

__all__ = ["Account", "Ledger"]
