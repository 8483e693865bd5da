"""
Tests for Personal Ledger

Test strategy:
1. Unit tests for individual components (models, structures, codec)
2. Integration tests for the ledger and account (in-memory or tmp_path storage)
3. No shared on-disk state between tests
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from personal_ledger.models.records import (
    FD,
    SIP,
    Category,
    DateValue,
    Expenditure,
    Income,
    LedgerSnapshot,
    ScheduledObligation,
    describe_record,
)
from personal_ledger.models.results import MonthlyReport, OperationResult, PersistenceResult
from personal_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestDateValue:
    """Tests for the day/month/year value."""

    def test_string_form(self):
        """Test the d/m/y display form."""
        assert str(DateValue(day=5, month=3, year=2024)) == "5/3/2024"

    def test_fields_form(self):
        """Test the space-separated file form."""
        assert DateValue(day=5, month=3, year=2024).to_fields() == "5 3 2024"

    def test_from_fields(self):
        """Test parsing the file form."""
        assert DateValue.from_fields(["5", "3", "2024"]) == DateValue(day=5, month=3, year=2024)

    def test_from_fields_wrong_count(self):
        """Test that a short date is rejected."""
        with pytest.raises(ValueError):
            DateValue.from_fields(["5", "3"])

    def test_parse_display_form(self):
        """Test parsing d/m/y."""
        assert DateValue.parse("31/12/2023") == DateValue(day=31, month=12, year=2023)

    def test_ordering_year_then_month_then_day(self):
        """Test chronological comparison."""
        early = DateValue(day=31, month=12, year=2023)
        mid = DateValue(day=1, month=1, year=2024)
        late = DateValue(day=2, month=1, year=2024)
        assert early < mid < late
        assert late > early
        assert mid <= mid
        assert sorted([late, early, mid]) == [early, mid, late]

    def test_invalid_calendar_date_does_not_crash(self):
        """Test that an impossible date constructs but reports invalid."""
        value = DateValue(day=31, month=2, year=2024)
        assert value.is_valid is False
        assert DateValue(day=29, month=2, year=2024).is_valid is True

    def test_is_immutable(self):
        """Test that dates are frozen."""
        value = DateValue(day=1, month=1, year=2024)
        with pytest.raises(ValidationError):
            value.day = 2

    def test_today(self):
        """Test that today() is a valid date."""
        assert DateValue.today().is_valid


class TestCategory:
    """Tests for the category enum."""

    def test_display_strings(self):
        """Test the exact strings written to files."""
        assert [c.value for c in Category] == [
            "Income", "Food", "Housing", "Transportation", "Entertainment",
            "Utilities", "Healthcare", "Education", "Other",
        ]

    def test_parse_known(self):
        """Test parsing a known category."""
        assert Category.parse("Healthcare") == Category.HEALTHCARE

    def test_parse_unknown_is_other(self):
        """Test that unknown text maps to Other."""
        assert Category.parse("Snacks") == Category.OTHER
        assert Category.parse("") == Category.OTHER

    def test_expense_categories(self):
        """Test that Income is not an expense category."""
        categories = Category.expense_categories()
        assert len(categories) == 8
        assert Category.INCOME not in categories


class TestRecordModels:
    """Tests for income and expenditure records."""

    def test_income_defaults_to_income_category(self):
        """Test Income default category."""
        record = Income(amount=Decimal("500"), description="salary")
        assert record.category == Category.INCOME
        assert record.kind == "income"

    def test_expenditure_defaults_to_other(self):
        """Test Expenditure default category."""
        record = Expenditure(amount=Decimal("20"), description="misc")
        assert record.category == Category.OTHER

    def test_expenditure_with_category(self):
        """Test Expenditure with an explicit category."""
        record = Expenditure(
            amount=Decimal("20"),
            description="lunch",
            category=Category.FOOD,
            date=DateValue(day=1, month=3, year=2024),
        )
        assert record.category == Category.FOOD
        assert record.date.month == 3

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    def test_rejects_non_positive_amount(self, amount):
        """Test that amounts must be positive."""
        with pytest.raises(ValidationError):
            Income(amount=amount, description="bad")
        with pytest.raises(ValidationError):
            Expenditure(amount=amount, description="bad")

    def test_records_are_immutable(self):
        """Test that records cannot be edited."""
        record = Income(amount=Decimal("500"), description="salary")
        with pytest.raises(ValidationError):
            record.amount = Decimal("1")

    def test_describe_record(self):
        """Test the short label used in audit messages."""
        record = Expenditure(amount=Decimal("20"), description="lunch", category=Category.FOOD)
        assert describe_record(record) == "Expenditure 20 [Food] (lunch)"


class TestInvestmentModels:
    """Tests for SIP and FD."""

    def test_sip_creation(self):
        """Test SIP model creation."""
        sip = SIP(principal=Decimal("1000"), duration_years=2, monthly_contribution=Decimal("100"))
        assert sip.kind == "sip"
        assert sip.monthly_contribution == Decimal("100")

    def test_sip_requires_monthly_contribution(self):
        """Test that an SIP needs a monthly amount."""
        with pytest.raises(ValidationError):
            SIP(principal=Decimal("1000"), duration_years=2)

    def test_fd_rejects_zero_duration(self):
        """Test that duration must be positive."""
        with pytest.raises(ValidationError):
            FD(principal=Decimal("1000"), duration_years=0)

    def test_fd_rejects_zero_principal(self):
        """Test that principal must be positive."""
        with pytest.raises(ValidationError):
            FD(principal=Decimal("0"), duration_years=1)


class TestSnapshotAndObligations:
    """Tests for obligations and snapshots."""

    def test_obligation_label(self):
        """Test Payment/Investment labels."""
        due = DateValue(day=1, month=4, year=2024)
        assert ScheduledObligation(due_date=due, amount=Decimal("10")).label == "Payment"
        assert ScheduledObligation(
            due_date=due, amount=Decimal("10"), is_investment=True
        ).label == "Investment"

    def test_snapshot_accepts_mixed_records(self):
        """Test that the tagged unions accept both variants."""
        snapshot = LedgerSnapshot(
            records=[
                Income(amount=Decimal("1"), description="a"),
                Expenditure(amount=Decimal("2"), description="b"),
            ],
            investments=[
                FD(principal=Decimal("3"), duration_years=1),
                SIP(principal=Decimal("4"), duration_years=1, monthly_contribution=Decimal("5")),
            ],
        )
        assert isinstance(snapshot.records[1], Expenditure)
        assert isinstance(snapshot.investments[1], SIP)
        assert snapshot.is_empty is False
        assert LedgerSnapshot().is_empty is True

    def test_snapshot_validates_from_dicts(self):
        """Test discriminated union parsing from plain data."""
        snapshot = LedgerSnapshot.model_validate({
            "records": [{"kind": "expenditure", "amount": "5", "description": "tea",
                         "date": {"day": 1, "month": 1, "year": 2024}}],
            "investments": [{"kind": "fd", "principal": "100", "duration_years": 2,
                             "start_date": {"day": 1, "month": 1, "year": 2024}}],
        })
        assert isinstance(snapshot.records[0], Expenditure)
        assert isinstance(snapshot.investments[0], FD)


class TestResultModels:
    """Tests for report and result models."""

    def test_net_savings(self):
        """Test net savings is derived."""
        report = MonthlyReport(
            month=3, year=2024,
            total_income=Decimal("500"),
            total_expense=Decimal("200"),
        )
        assert report.net_savings == Decimal("300")
        assert report.model_dump()["net_savings"] == Decimal("300")

    def test_category_percentages(self):
        """Test percentage breakdown."""
        report = MonthlyReport(
            month=3, year=2024,
            total_expense=Decimal("200"),
            per_category_expense={
                Category.FOOD: Decimal("150"),
                Category.HOUSING: Decimal("50"),
            },
        )
        assert report.category_percentages() == {
            Category.FOOD: Decimal("75.0"),
            Category.HOUSING: Decimal("25.0"),
        }

    def test_category_percentages_with_no_expense(self):
        """Test that zero expense never divides by zero."""
        report = MonthlyReport(month=3, year=2024, total_income=Decimal("10"))
        assert report.category_percentages() == {}

    def test_persistence_result_operation_pattern(self):
        """Test that only save/load are valid operations."""
        with pytest.raises(ValidationError):
            PersistenceResult(operation="delete", success=True, target="x")

    def test_operation_result(self):
        """Test OperationResult creation."""
        result = OperationResult(success=True, balance=Decimal("10"), record_id="TXN1")
        assert result.error_message is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            description="Income recorded",
        )
        assert event.event_type == AuditEventType.RECORD_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.record_added(
            record_id="TXN7", kind="Income", amount="500", category="Income",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "record_added"
        assert log_dict["entity_id"] == "TXN7"
        assert log_dict["details"]["amount"] == "500"

    def test_save_failed_is_error(self):
        """Test AuditEventBuilder.save_failed severity."""
        event = AuditEventBuilder.save_failed("ledger.txt", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_load_failed_is_informational(self):
        """Test that a missing ledger is not an error."""
        event = AuditEventBuilder.load_failed("ledger.txt", "not found")
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_json_round_trip(self):
        """Test that events survive JSON serialization."""
        event = AuditEventBuilder.malformed_ledger("ledger.txt", "line 2: bad tag")
        restored = AuditEvent.model_validate_json(event.model_dump_json())
        assert restored == event


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
