"""
SAC (Sistema de Amortizacao Constante) financing engine.

Principal is repaid in equal monthly parts while interest is charged on the
outstanding balance, so installments decrease every month. The annual rate is
converted to a flat monthly rate (annual / 12), without compounding.
All arithmetic stays in full float precision; rounding happens only when the
values are presented.
"""
import math
import numbers
from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

from simulafin.core.config import settings
from simulafin.core.exceptions import InvalidInputError
from simulafin.core.utils import parse_brl

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class SacInstallment:
    """One month of a SAC schedule."""
    month: int
    installment: float
    interest: float
    principal: float
    balance: float


@dataclass(frozen=True)
class SacResult:
    """Summary of a SAC simulation. Immutable once computed."""
    property_value: float
    down_payment_percentage: float
    term_years: int
    annual_rate: float
    down_payment: float
    financed_amount: float
    monthly_amortization: float
    first_monthly_payment: float
    last_monthly_payment: float
    total_interest: float
    total_amount: float

    @property
    def total_months(self) -> int:
        return self.term_years * MONTHS_PER_YEAR

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / MONTHS_PER_YEAR

    @property
    def monthly_payment(self) -> float:
        """The payment surfaced to users: the first (and largest) installment."""
        return self.first_monthly_payment

    def schedule(self) -> Iterator[SacInstallment]:
        """Regenerates the month-by-month schedule behind this summary."""
        return sac_schedule(self.financed_amount, self.total_months, self.monthly_rate)


def sac_schedule(financed_amount: float, total_months: int, monthly_rate: float) -> Iterator[SacInstallment]:
    """
    Yields every installment of a SAC schedule.

    The balance is decremented by the fixed amortization each month; the
    reported balance is clamped at zero to hide float residue on the last month.
    """
    amortization = financed_amount / total_months
    remaining_balance = financed_amount

    for month in range(1, total_months + 1):
        interest = remaining_balance * monthly_rate
        remaining_balance -= amortization
        yield SacInstallment(
            month=month,
            installment=amortization + interest,
            interest=interest,
            principal=amortization,
            balance=max(remaining_balance, 0.0),
        )


def _as_float(value: Any, field: str, message: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        raise InvalidInputError(message, {"field": field})
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(message, {"field": field})
    return number


def _validate(
    property_value: Optional[float],
    down_payment_percentage: Any,
    term_years: Any,
    annual_rate: Any
) -> Tuple[float, int, float]:
    """Checks the inputs and returns (percentage, term_years, annual_rate) as plain numbers."""
    if property_value is None or not math.isfinite(property_value):
        raise InvalidInputError("Property value must be a valid number", {"field": "property_value"})
    if property_value <= 0:
        raise InvalidInputError("Property value must be greater than zero", {"field": "property_value"})

    percentage = _as_float(down_payment_percentage, "down_payment_percentage", "Down payment must be a valid number")
    if percentage < settings.MIN_DOWN_PAYMENT_PERCENTAGE:
        raise InvalidInputError(
            f"Minimum down payment is {settings.MIN_DOWN_PAYMENT_PERCENTAGE:g}%",
            {"field": "down_payment_percentage", "value": percentage}
        )
    if percentage > settings.MAX_DOWN_PAYMENT_PERCENTAGE:
        raise InvalidInputError(
            f"Maximum down payment is {settings.MAX_DOWN_PAYMENT_PERCENTAGE:g}%",
            {"field": "down_payment_percentage", "value": percentage}
        )

    years = _as_float(term_years, "term_years", "Term must be a whole number of years")
    if not years.is_integer():
        raise InvalidInputError("Term must be a whole number of years", {"field": "term_years"})
    if not settings.MIN_TERM_YEARS <= years <= settings.MAX_TERM_YEARS:
        raise InvalidInputError(
            f"Term must be between {settings.MIN_TERM_YEARS} and {settings.MAX_TERM_YEARS} years",
            {"field": "term_years", "value": years}
        )

    rate = _as_float(annual_rate, "annual_rate", "Interest rate must be a valid number")
    if rate < 0:
        raise InvalidInputError("Interest rate cannot be negative", {"field": "annual_rate"})

    return percentage, int(years), rate


def compute_sac(
    property_value: Union[str, int, float, Decimal],
    down_payment_percentage: float,
    term_years: int,
    annual_rate: Optional[float] = None
) -> SacResult:
    """
    Computes the SAC summary for a property financing.

    Formula:
        down_payment   = property_value * percentage / 100
        financed       = property_value - down_payment
        amortization   = financed / (term_years * 12)
        interest(n)    = balance(n) * annual_rate / 12
        payment(n)     = amortization + interest(n)

    Raises InvalidInputError when the value is not a positive number, the
    down payment is outside the allowed band or the term is out of range.
    """
    if annual_rate is None:
        annual_rate = settings.ANNUAL_INTEREST_RATE

    value = parse_brl(property_value)
    down_payment_percentage, term_years, annual_rate = _validate(
        value, down_payment_percentage, term_years, annual_rate
    )

    down_payment = (value * down_payment_percentage) / 100
    financed_amount = value - down_payment
    total_months = term_years * MONTHS_PER_YEAR
    monthly_rate = annual_rate / MONTHS_PER_YEAR

    total_interest = 0.0
    first_payment = last_payment = 0.0
    for row in sac_schedule(financed_amount, total_months, monthly_rate):
        total_interest += row.interest
        if row.month == 1:
            first_payment = row.installment
        last_payment = row.installment

    return SacResult(
        property_value=value,
        down_payment_percentage=down_payment_percentage,
        term_years=term_years,
        annual_rate=annual_rate,
        down_payment=down_payment,
        financed_amount=financed_amount,
        monthly_amortization=financed_amount / total_months,
        first_monthly_payment=first_payment,
        last_monthly_payment=last_payment,
        total_interest=total_interest,
        total_amount=financed_amount + total_interest,
    )
