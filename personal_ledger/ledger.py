"""
Ledger: the record store for one user.

This module ties together the record lists, the description trie, the
identifier index and the obligation schedule, and defines how the whole
state is saved and reloaded.

DESIGN DECISION: The ledger owns every record. The trie keeps its own
copies of descriptions, and the identifier index keeps integer handles
into the record list rather than references. A reload replaces the
record list, so it also rebuilds the trie and invalidates every handle.

DESIGN DECISION: The ledger never holds the balance. load() receives the
caller's balance and hands back the adjusted value; every other balance
change is the caller's business.

No exception crosses the public operations for expected failures:
save()/load() report through PersistenceResult, lookups return None.
"""

from decimal import Decimal
from typing import Optional, Sequence, Union

from personal_ledger.audit import AuditLogger
from personal_ledger.config import get_settings
from personal_ledger.models.records import (
    FD,
    SIP,
    DateValue,
    Expenditure,
    Income,
    LedgerSnapshot,
    ScheduledObligation,
)
from personal_ledger.models.results import (
    MaturityQuote,
    MonthlyReport,
    PersistenceResult,
)
from personal_ledger.queries import balance_effect, build_monthly_report, maturity_amount
from personal_ledger.services.storage import (
    LedgerStorageInterface,
    MalformedLedgerError,
    StorageError,
)
from personal_ledger.structures import RecordIndex, ScheduleQueue, Trie


def _net_effect(
    records: Sequence[Union[Income, Expenditure]],
    investments: Sequence[Union[SIP, FD]],
) -> Decimal:
    """
    Income minus expenditure minus investment principals.

    Raises decimal.Overflow when the totals leave the decimal context's range.
    """
    delta = sum((balance_effect(record) for record in records), Decimal("0"))
    delta -= sum((investment.principal for investment in investments), Decimal("0"))
    return delta


class Ledger:
    """
    Append-only store of financial records, investments and obligations.

    Records and investments are never edited or deleted individually;
    they are only replaced wholesale by load().
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        fd_annual_rate: Optional[Decimal] = None,
        sip_annual_rate: Optional[Decimal] = None,
    ):
        """
        Initialize an empty ledger.

        Args:
            storage: Default target for save() and load().
            audit_logger: Where ledger events go. Defaults to local logging only.
            fd_annual_rate / sip_annual_rate: Override the configured rates.
        """
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        if fd_annual_rate is None or sip_annual_rate is None:
            rates = get_settings().rates
            if fd_annual_rate is None:
                fd_annual_rate = rates.fd_annual_rate
            if sip_annual_rate is None:
                sip_annual_rate = rates.sip_annual_rate
        self._fd_annual_rate = fd_annual_rate
        self._sip_annual_rate = sip_annual_rate

        self._records: list[Union[Income, Expenditure]] = []
        self._investments: list[Union[SIP, FD]] = []
        self._descriptions = Trie()
        self._index = RecordIndex()
        self._schedule = ScheduleQueue()

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def records(self) -> tuple[Union[Income, Expenditure], ...]:
        return tuple(self._records)

    @property
    def investments(self) -> tuple[Union[SIP, FD], ...]:
        return tuple(self._investments)

    @property
    def storage(self) -> Optional[LedgerStorageInterface]:
        return self._storage

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_financial_record(self, record: Union[Income, Expenditure]) -> str:
        """
        Append an income or expenditure and return its new identifier.

        The record's description becomes searchable. The caller's balance
        is not touched.
        """
        record_id = self._append_record(record)
        self._audit.log_record_added(record_id, record)
        return record_id

    def add_investment_record(self, investment: Union[SIP, FD]) -> None:
        """Append an investment."""
        self._investments.append(investment)
        self._audit.log_investment_added(investment)

    def schedule_obligation(
        self,
        due_date: DateValue,
        description: str,
        amount: Decimal,
        is_investment: bool = False,
    ) -> ScheduledObligation:
        """Remember a future payment or investment due-date."""
        obligation = ScheduledObligation(
            due_date=due_date,
            description=description,
            amount=amount,
            is_investment=is_investment,
        )
        self._schedule.schedule(obligation)
        self._audit.log_obligation_scheduled(obligation)
        return obligation

    def _append_record(self, record: Union[Income, Expenditure]) -> str:
        handle = len(self._records)
        self._records.append(record)
        self._descriptions.insert(record.description)
        return self._index.register(handle)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_record(self, record_id: str) -> Optional[Union[Income, Expenditure]]:
        """The record behind an identifier, or None if unknown or stale."""
        handle = self._index.resolve(record_id)
        if handle is None:
            return None
        return self._records[handle]

    def identified_records(self) -> list[tuple[str, Union[Income, Expenditure]]]:
        """Every record with its current identifier, in insertion order."""
        return [(record_id, self._records[handle]) for record_id, handle in self._index.items()]

    def suggest_descriptions(self, prefix: str) -> list[str]:
        """Recorded descriptions starting with prefix, in lexicographic order."""
        return self._descriptions.suggestions(prefix)

    def upcoming_obligations(self) -> list[ScheduledObligation]:
        """Every scheduled obligation, soonest first."""
        return self._schedule.snapshot_in_order()

    def next_obligation(self) -> Optional[ScheduledObligation]:
        return self._schedule.peek()

    def monthly_report(self, month: int, year: int) -> MonthlyReport:
        report = build_monthly_report(self._records, month, year)
        self._audit.log_report_generated(report)
        return report

    def maturity_amount(self, investment: Union[SIP, FD]) -> Decimal:
        return maturity_amount(
            investment,
            fd_annual_rate=self._fd_annual_rate,
            sip_annual_rate=self._sip_annual_rate,
        )

    def maturities(self) -> list[MaturityQuote]:
        """Projected maturity value of every investment, in insertion order."""
        return [
            MaturityQuote(investment=investment, maturity_amount=self.maturity_amount(investment))
            for investment in self._investments
        ]

    def balance_delta(self) -> Decimal:
        """
        Net effect of the whole ledger on a balance.

        Income adds, expenditure subtracts, every investment principal
        subtracts.
        """
        return _net_effect(self._records, self._investments)

    def snapshot(self) -> LedgerSnapshot:
        """Copy of everything save() would persist."""
        return LedgerSnapshot(
            records=list(self._records),
            investments=list(self._investments),
            obligations=self._schedule.snapshot_in_order(),
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _resolve_storage(
        self,
        storage: Optional[LedgerStorageInterface],
    ) -> Optional[LedgerStorageInterface]:
        return storage if storage is not None else self._storage

    def save(self, storage: Optional[LedgerStorageInterface] = None) -> PersistenceResult:
        """
        Write the full ledger to storage (the default target if none is given).

        Fails only when the target cannot be written.
        """
        target = self._resolve_storage(storage)
        if target is None:
            return PersistenceResult(
                operation="save",
                success=False,
                target="<none>",
                error_message="No storage configured",
            )

        snapshot = self.snapshot()
        try:
            target.write_snapshot(snapshot)
        except StorageError as e:
            self._audit.log_save_failed(target.describe(), str(e))
            return PersistenceResult(
                operation="save",
                success=False,
                target=target.describe(),
                error_message=str(e),
            )

        self._audit.log_ledger_saved(
            target=target.describe(),
            record_count=len(snapshot.records),
            investment_count=len(snapshot.investments),
            obligation_count=len(snapshot.obligations),
        )
        return PersistenceResult(
            operation="save",
            success=True,
            target=target.describe(),
            record_count=len(snapshot.records),
            investment_count=len(snapshot.investments),
            obligation_count=len(snapshot.obligations),
        )

    def load(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        balance: Decimal = Decimal("0"),
    ) -> PersistenceResult:
        """
        Replace the whole ledger with what storage holds.

        On success, result.balance is `balance` adjusted by every loaded
        record and investment. On failure (nothing saved yet, unreadable
        or malformed data) the ledger is left exactly as it was and
        result.balance is `balance` unchanged.
        """
        balance = Decimal(str(balance))
        target = self._resolve_storage(storage)
        if target is None:
            return PersistenceResult(
                operation="load",
                success=False,
                target="<none>",
                error_message="No storage configured",
                balance=balance,
            )

        try:
            snapshot = target.read_snapshot()
        except MalformedLedgerError as e:
            self._audit.log_malformed_ledger(target.describe(), str(e))
            return PersistenceResult(
                operation="load",
                success=False,
                target=target.describe(),
                error_message=str(e),
                balance=balance,
            )
        except StorageError as e:
            self._audit.log_load_failed(target.describe(), str(e))
            return PersistenceResult(
                operation="load",
                success=False,
                target=target.describe(),
                error_message=str(e),
                balance=balance,
            )

        try:
            new_balance = balance + _net_effect(snapshot.records, snapshot.investments)
        except ArithmeticError:
            message = "Ledger totals exceed the supported decimal range"
            self._audit.log_malformed_ledger(target.describe(), message)
            return PersistenceResult(
                operation="load",
                success=False,
                target=target.describe(),
                error_message=message,
                balance=balance,
            )

        self._replace_state(snapshot)

        self._audit.log_ledger_loaded(
            target=target.describe(),
            record_count=len(snapshot.records),
            investment_count=len(snapshot.investments),
            obligation_count=len(snapshot.obligations),
            balance=new_balance,
        )
        return PersistenceResult(
            operation="load",
            success=True,
            target=target.describe(),
            record_count=len(snapshot.records),
            investment_count=len(snapshot.investments),
            obligation_count=len(snapshot.obligations),
            balance=new_balance,
        )

    def _replace_state(self, snapshot: LedgerSnapshot) -> None:
        # Stale identifiers must stop resolving before the list is swapped
        self._index.invalidate()
        self._records = []
        self._descriptions = Trie()
        for record in snapshot.records:
            self._append_record(record)

        self._investments = list(snapshot.investments)

        self._schedule = ScheduleQueue()
        for obligation in snapshot.obligations:
            self._schedule.schedule(obligation)
