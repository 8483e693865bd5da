"""
Investment maturity projections.

FD:  principal * (1 + r) ** years, compounded once a year.
SIP: principal * (1 + r/12) ** (years * 12) + monthly * 12 * years.

The SIP contribution leg is added without interest. That is the
projection the ledger has always shown, and it is kept as is.

Results are rounded to the cent. A value too large to hold cents at the
working precision is returned as computed.
"""

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, localcontext
from typing import Union

from personal_ledger.models.records import FD, SIP

FD_ANNUAL_RATE = Decimal("0.071")
SIP_ANNUAL_RATE = Decimal("0.096")

CENT = Decimal("0.01")


def maturity_amount(
    investment: Union[SIP, FD],
    fd_annual_rate: Decimal = FD_ANNUAL_RATE,
    sip_annual_rate: Decimal = SIP_ANNUAL_RATE,
) -> Decimal:
    """Value of an investment at the end of its duration, to the cent."""
    with localcontext() as context:
        # Long durations grow past the default exponent range
        context.Emax = MAX_EMAX
        context.Emin = MIN_EMIN

        if isinstance(investment, FD):
            value = investment.principal * (1 + fd_annual_rate) ** investment.duration_years
        elif isinstance(investment, SIP):
            months = investment.duration_years * 12
            grown = investment.principal * (1 + sip_annual_rate / 12) ** months
            value = grown + investment.monthly_contribution * months
        else:
            raise TypeError(f"Unsupported investment type: {type(investment).__name__}")

        # quantize() needs room for every integer digit plus two decimals
        if value.adjusted() + 3 > context.prec:
            return value
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
