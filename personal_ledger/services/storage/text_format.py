"""
Flat Text Ledger Format

One ledger per file, UTF-8, one entry per line:

    <N>
    <I|E> <amount> <description> <day> <month> <year> <category>      x N
    <M>
    <SIP|FD> <amount> <years> <day> <month> <year> [<monthly>]        x M
    <K>
    <PAY|INV> <amount> <description> <day> <month> <year>             x K

The obligations section is optional; files written before it existed
simply end after the investments.

Descriptions are written as JSON string literals so that spaces, quotes
and newlines survive a round trip. When reading, an unquoted description
is accepted too: it is whatever sits between the amount and the fixed
trailing fields, which is how older files were laid out.

Amounts are written with str(Decimal), which is lossless.

Unknown categories read as Other. Anything else that does not fit
(unknown tags, missing, non-numeric or out-of-range fields, wrong
counts, trailing data) rejects the whole file with MalformedLedgerError.
"""

import json
from decimal import Decimal, InvalidOperation, getcontext
from typing import Union

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
)
from personal_ledger.services.storage.interface import MalformedLedgerError


INCOME_TAG = "I"
EXPENDITURE_TAG = "E"
SIP_TAG = "SIP"
FD_TAG = "FD"
PAYMENT_TAG = "PAY"
INVESTMENT_DUE_TAG = "INV"

_json_decoder = json.JSONDecoder()


# =============================================================================
# ENCODING
# =============================================================================

def encode_record(record: Union[Income, Expenditure]) -> str:
    if isinstance(record, Income):
        tag = INCOME_TAG
    elif isinstance(record, Expenditure):
        tag = EXPENDITURE_TAG
    else:
        raise TypeError(f"Unsupported record type: {type(record).__name__}")
    return " ".join([
        tag,
        str(record.amount),
        json.dumps(record.description),
        record.date.to_fields(),
        record.category.value,
    ])


def encode_investment(investment: Union[SIP, FD]) -> str:
    if isinstance(investment, SIP):
        return " ".join([
            SIP_TAG,
            str(investment.principal),
            str(investment.duration_years),
            investment.start_date.to_fields(),
            str(investment.monthly_contribution),
        ])
    if isinstance(investment, FD):
        return " ".join([
            FD_TAG,
            str(investment.principal),
            str(investment.duration_years),
            investment.start_date.to_fields(),
        ])
    raise TypeError(f"Unsupported investment type: {type(investment).__name__}")


def encode_obligation(obligation: ScheduledObligation) -> str:
    return " ".join([
        INVESTMENT_DUE_TAG if obligation.is_investment else PAYMENT_TAG,
        str(obligation.amount),
        json.dumps(obligation.description),
        obligation.due_date.to_fields(),
    ])


def encode_snapshot(snapshot: LedgerSnapshot) -> str:
    """Render a whole ledger as file text."""
    lines = [str(len(snapshot.records))]
    lines.extend(encode_record(record) for record in snapshot.records)
    lines.append(str(len(snapshot.investments)))
    lines.extend(encode_investment(inv) for inv in snapshot.investments)
    lines.append(str(len(snapshot.obligations)))
    lines.extend(encode_obligation(ob) for ob in snapshot.obligations)
    return "\n".join(lines) + "\n"


# =============================================================================
# DECODING
# =============================================================================

class _LineCursor:
    """Walks the non-blank lines of a file, remembering line numbers."""

    def __init__(self, text: str):
        self._lines = [
            (number, line.strip())
            for number, line in enumerate(text.splitlines(), start=1)
            if line.strip()
        ]
        self._position = 0

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._lines)

    def next_line(self, what: str) -> tuple[int, str]:
        if self.exhausted:
            raise MalformedLedgerError(f"Unexpected end of file, expected {what}")
        entry = self._lines[self._position]
        self._position += 1
        return entry

    def next_count(self, what: str) -> int:
        number, line = self.next_line(f"{what} count")
        try:
            count = int(line)
        except ValueError:
            raise MalformedLedgerError(f"Invalid {what} count: {line!r}", number)
        if count < 0:
            raise MalformedLedgerError(f"Negative {what} count: {count}", number)
        return count


def _parse_decimal(token: str, field: str, line_number: int) -> Decimal:
    try:
        value = Decimal(token)
    except InvalidOperation:
        raise MalformedLedgerError(f"Invalid {field}: {token!r}", line_number)
    if not value.is_finite():
        raise MalformedLedgerError(f"Invalid {field}: {token!r}", line_number)
    if value and value.adjusted() > getcontext().Emax:
        raise MalformedLedgerError(f"{field.capitalize()} out of range: {token!r}", line_number)
    return value


def _parse_int(token: str, field: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedLedgerError(f"Invalid {field}: {token!r}", line_number)


def _parse_date(tokens: list[str], line_number: int) -> DateValue:
    try:
        return DateValue.from_fields(tokens)
    except ValueError:
        raise MalformedLedgerError(f"Invalid date fields: {tokens!r}", line_number)


def _split_description(
    rest: str,
    trailing_fields: int,
    line_number: int,
) -> tuple[str, list[str]]:
    """
    Separate a description from the fixed fields that follow it.

    Returns (description, trailing_tokens).
    """
    rest = rest.lstrip()
    if rest.startswith('"'):
        try:
            description, end = _json_decoder.raw_decode(rest)
        except json.JSONDecodeError as e:
            raise MalformedLedgerError(f"Invalid quoted description: {e.msg}", line_number)
        if not isinstance(description, str):
            raise MalformedLedgerError("Description is not a string", line_number)
        tail = rest[end:]
        if tail and not tail[0].isspace():
            raise MalformedLedgerError("Missing separator after description", line_number)
        trailing = tail.split()
    else:
        tokens = rest.split()
        if len(tokens) < trailing_fields:
            raise MalformedLedgerError(
                f"Expected at least {trailing_fields} fields after the amount",
                line_number,
            )
        split_at = len(tokens) - trailing_fields
        description = " ".join(tokens[:split_at])
        trailing = tokens[split_at:]

    if len(trailing) != trailing_fields:
        raise MalformedLedgerError(
            f"Expected {trailing_fields} fields after the description, got {len(trailing)}",
            line_number,
        )
    return description, trailing


def _split_head(line: str, line_number: int) -> tuple[str, str]:
    parts = line.split(None, 1)
    if len(parts) < 2:
        raise MalformedLedgerError(f"Truncated line: {line!r}", line_number)
    return parts[0], parts[1]


def decode_record(line: str, line_number: int = 0) -> Union[Income, Expenditure]:
    tag, rest = _split_head(line, line_number)
    if tag not in (INCOME_TAG, EXPENDITURE_TAG):
        raise MalformedLedgerError(f"Unknown record tag: {tag!r}", line_number)
    amount_token, rest = _split_head(rest, line_number)
    amount = _parse_decimal(amount_token, "amount", line_number)
    description, trailing = _split_description(rest, 4, line_number)
    date = _parse_date(trailing[:3], line_number)
    category = Category.parse(trailing[3])

    model = Income if tag == INCOME_TAG else Expenditure
    try:
        return model(amount=amount, description=description, date=date, category=category)
    except ValidationError as e:
        raise MalformedLedgerError(f"Invalid record: {e.errors()[0]['msg']}", line_number)


def decode_investment(line: str, line_number: int = 0) -> Union[SIP, FD]:
    tokens = line.split()
    tag = tokens[0]
    if tag == SIP_TAG:
        expected = 7
    elif tag == FD_TAG:
        expected = 6
    else:
        raise MalformedLedgerError(f"Unknown investment tag: {tag!r}", line_number)
    if len(tokens) != expected:
        raise MalformedLedgerError(
            f"{tag} line needs {expected} fields, got {len(tokens)}", line_number
        )

    principal = _parse_decimal(tokens[1], "principal", line_number)
    duration = _parse_int(tokens[2], "duration", line_number)
    start_date = _parse_date(tokens[3:6], line_number)

    try:
        if tag == SIP_TAG:
            monthly = _parse_decimal(tokens[6], "monthly contribution", line_number)
            return SIP(
                principal=principal,
                duration_years=duration,
                start_date=start_date,
                monthly_contribution=monthly,
            )
        return FD(principal=principal, duration_years=duration, start_date=start_date)
    except ValidationError as e:
        raise MalformedLedgerError(f"Invalid investment: {e.errors()[0]['msg']}", line_number)


def decode_obligation(line: str, line_number: int = 0) -> ScheduledObligation:
    tag, rest = _split_head(line, line_number)
    if tag not in (PAYMENT_TAG, INVESTMENT_DUE_TAG):
        raise MalformedLedgerError(f"Unknown obligation tag: {tag!r}", line_number)
    amount_token, rest = _split_head(rest, line_number)
    amount = _parse_decimal(amount_token, "amount", line_number)
    description, trailing = _split_description(rest, 3, line_number)
    try:
        return ScheduledObligation(
            due_date=_parse_date(trailing, line_number),
            description=description,
            amount=amount,
            is_investment=(tag == INVESTMENT_DUE_TAG),
        )
    except ValidationError as e:
        raise MalformedLedgerError(f"Invalid obligation: {e.errors()[0]['msg']}", line_number)


def decode_snapshot(text: str) -> LedgerSnapshot:
    """
    Parse file text into a snapshot.

    Raises:
        MalformedLedgerError: On any structural problem; nothing partial
            is ever returned.
    """
    cursor = _LineCursor(text)

    records = []
    for _ in range(cursor.next_count("record")):
        number, line = cursor.next_line("a record line")
        records.append(decode_record(line, number))

    investments = []
    for _ in range(cursor.next_count("investment")):
        number, line = cursor.next_line("an investment line")
        investments.append(decode_investment(line, number))

    obligations = []
    if not cursor.exhausted:
        for _ in range(cursor.next_count("obligation")):
            number, line = cursor.next_line("an obligation line")
            obligations.append(decode_obligation(line, number))

    if not cursor.exhausted:
        number, line = cursor.next_line("nothing")
        raise MalformedLedgerError(f"Unexpected trailing data: {line!r}", number)

    return LedgerSnapshot(
        records=records,
        investments=investments,
        obligations=obligations,
    )
