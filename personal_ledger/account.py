"""
Account session for one user.

The account is the ledger's caller: it holds the running balance,
applies each operation's effect on it, and enforces the minimum-balance
policy before spending or investing. It mirrors what an interactive
front end needs:

    with Account("alice") as account:
        account.record_income(Decimal("5000"), "salary")
        account.record_expenditure(Decimal("1200"), "rent", Category.HOUSING)
        report = account.monthly_report(3, 2024)

Construction loads the user's ledger file; close() (or leaving the
with-block) saves it.
"""

from decimal import Decimal
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from personal_ledger.audit import AuditLogger
from personal_ledger.config import Settings, get_settings
from personal_ledger.ledger import Ledger
from personal_ledger.models.records import (
    FD,
    SIP,
    Category,
    DateValue,
    Expenditure,
    Income,
    ScheduledObligation,
)
from personal_ledger.models.results import (
    MaturityQuote,
    MonthlyReport,
    OperationResult,
    PersistenceResult,
)
from personal_ledger.services.storage import (
    JsonlAuditStorage,
    LedgerStorageInterface,
    TextFileLedgerStorage,
)


logger = structlog.get_logger("personal_ledger.account")


def _first_error(error: ValidationError) -> str:
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"])
    return f"{location}: {detail['msg']}" if location else detail["msg"]


class Account:
    """
    A user's balance plus their ledger.

    Every balance-affecting operation returns an OperationResult; invalid
    input and policy violations are reported there, not raised.
    """

    def __init__(
        self,
        username: str = "",
        initial_balance: Optional[Decimal] = None,
        storage: Optional[LedgerStorageInterface] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Open (and load) a user's account.

        Args:
            username: Determines the ledger file. Empty means the default user.
            initial_balance: Balance before the ledger is replayed.
            storage: Use this instead of the per-user text file.
            settings: Defaults to get_settings().
        """
        settings = settings or get_settings()
        storage_settings = settings.storage
        account_settings = settings.account

        self.username = storage_settings.safe_username(username)
        self.minimum_balance = account_settings.minimum_balance
        if initial_balance is None:
            initial_balance = account_settings.initial_balance

        audit_storage = None
        if storage_settings.audit_log_enabled:
            audit_storage = JsonlAuditStorage(storage_settings.audit_file_for(self.username))

        if storage is None:
            storage = TextFileLedgerStorage(storage_settings.data_file_for(self.username))

        rates = settings.rates
        self._audit = AuditLogger(audit_storage)
        self.ledger = Ledger(
            storage=storage,
            audit_logger=self._audit,
            fd_annual_rate=rates.fd_annual_rate,
            sip_annual_rate=rates.sip_annual_rate,
        )

        self.load_result = self.ledger.load(balance=Decimal(str(initial_balance)))
        self.balance: Decimal = self.load_result.balance
        if self.load_result.success:
            logger.info("account_loaded", username=self.username, balance=str(self.balance))
        else:
            logger.info("account_started_fresh", username=self.username, reason=self.load_result.error_message)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def save(self) -> PersistenceResult:
        return self.ledger.save()

    def close(self) -> PersistenceResult:
        """Save on normal shutdown."""
        return self.save()

    def __enter__(self) -> "Account":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Balance-affecting operations
    # -------------------------------------------------------------------------

    def _reject(self, operation: str, reason: str) -> OperationResult:
        self._audit.log_operation_rejected(operation, reason)
        return OperationResult(
            success=False,
            balance=self.balance,
            error_message=reason,
        )

    def _below_minimum(self, amount: Decimal) -> bool:
        return self.balance - amount < self.minimum_balance

    def record_income(
        self,
        amount: Decimal,
        description: str,
        date: Optional[DateValue] = None,
    ) -> OperationResult:
        """Record money received and add it to the balance."""
        try:
            record = Income(
                amount=amount,
                description=description,
                date=date or DateValue.today(),
            )
        except ValidationError as e:
            return self._reject("record_income", _first_error(e))

        try:
            new_balance = self.balance + record.amount
        except ArithmeticError:
            return self._reject("record_income", "Amount exceeds the supported decimal range")

        record_id = self.ledger.add_financial_record(record)
        self.balance = new_balance
        return OperationResult(success=True, balance=self.balance, record_id=record_id)

    def record_expenditure(
        self,
        amount: Decimal,
        description: str,
        category: Category = Category.OTHER,
        date: Optional[DateValue] = None,
    ) -> OperationResult:
        """
        Record money spent and take it off the balance.

        Refused when it would leave less than the minimum balance.
        """
        try:
            record = Expenditure(
                amount=amount,
                description=description,
                category=category,
                date=date or DateValue.today(),
            )
        except ValidationError as e:
            return self._reject("record_expenditure", _first_error(e))

        if self._below_minimum(record.amount):
            return self._reject(
                "record_expenditure",
                f"Balance cannot go below {self.minimum_balance}",
            )

        record_id = self.ledger.add_financial_record(record)
        self.balance -= record.amount
        return OperationResult(success=True, balance=self.balance, record_id=record_id)

    def make_investment(
        self,
        kind: str,
        amount: Decimal,
        duration_years: int,
        monthly_contribution: Optional[Decimal] = None,
        start_date: Optional[DateValue] = None,
    ) -> OperationResult:
        """
        Invest `amount` as an SIP or FD and take it off the balance.

        kind is "SIP" or "FD" (any case). SIPs need monthly_contribution.
        Refused when it would leave less than the minimum balance.
        """
        start_date = start_date or DateValue.today()
        kind = kind.strip().upper()
        try:
            investment: Union[SIP, FD]
            if kind == "SIP":
                investment = SIP(
                    principal=amount,
                    duration_years=duration_years,
                    start_date=start_date,
                    monthly_contribution=monthly_contribution,
                )
            elif kind == "FD":
                investment = FD(
                    principal=amount,
                    duration_years=duration_years,
                    start_date=start_date,
                )
            else:
                return self._reject("make_investment", f"Unknown investment kind: {kind}")
        except ValidationError as e:
            return self._reject("make_investment", _first_error(e))

        if self._below_minimum(investment.principal):
            return self._reject(
                "make_investment",
                f"Min Balance={self.minimum_balance}",
            )

        self.ledger.add_investment_record(investment)
        self.balance -= investment.principal
        return OperationResult(success=True, balance=self.balance)

    # -------------------------------------------------------------------------
    # Pass-through queries
    # -------------------------------------------------------------------------

    def schedule_obligation(
        self,
        due_date: DateValue,
        description: str,
        amount: Decimal,
        is_investment: bool = False,
    ) -> Optional[ScheduledObligation]:
        """Schedule a reminder. Returns None if the amount is not a number."""
        try:
            return self.ledger.schedule_obligation(due_date, description, amount, is_investment)
        except ValidationError as e:
            self._audit.log_operation_rejected("schedule_obligation", _first_error(e))
            return None

    def upcoming_obligations(self) -> list[ScheduledObligation]:
        return self.ledger.upcoming_obligations()

    def suggest_descriptions(self, prefix: str) -> list[str]:
        return self.ledger.suggest_descriptions(prefix)

    def monthly_report(self, month: int, year: int) -> MonthlyReport:
        return self.ledger.monthly_report(month, year)

    def maturities(self) -> list[MaturityQuote]:
        return self.ledger.maturities()
