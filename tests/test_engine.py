"""
Unit tests for the SAC financing engine.
Validates the reference scenario, accounting identities and input rules.
"""
from decimal import Decimal

import pytest
from simulafin.core.exceptions import InvalidInputError
from simulafin.financiamento.engine import compute_sac, sac_schedule


def test_reference_scenario():
    """R$ 500.000, 20% down, 30 years at 12% a year."""
    result = compute_sac(500000, 20, 30, 0.12)

    assert result.down_payment == pytest.approx(100000.0)
    assert result.financed_amount == pytest.approx(400000.0)
    assert result.total_months == 360
    assert round(result.monthly_amortization, 2) == 1111.11
    assert round(result.first_monthly_payment, 2) == 5111.11
    assert result.monthly_payment == result.first_monthly_payment
    # Interest on a linearly decreasing balance: r * F * (n + 1) / 2
    assert result.total_interest == pytest.approx(722000.0)
    assert result.total_amount == pytest.approx(1122000.0)
    assert round(result.last_monthly_payment, 2) == 1122.22


def test_default_rate_is_twelve_percent():
    result = compute_sac(500000, 20, 30)

    assert result.annual_rate == 0.12
    assert result.monthly_rate == pytest.approx(0.01)


@pytest.mark.parametrize("value, percentage, years", [
    (100000.0, 20, 1),
    (250000.0, 35.5, 15),
    (1234567.89, 90, 35),
    (80000.0, 50, 10),
])
def test_accounting_identities(value: float, percentage: float, years: int):
    result = compute_sac(value, percentage, years, 0.12)

    assert result.down_payment + result.financed_amount == pytest.approx(value)
    assert result.total_amount == pytest.approx(result.financed_amount + result.total_interest)

    payments = [row.installment for row in result.schedule()]
    assert len(payments) == years * 12
    assert sum(payments) == pytest.approx(result.total_amount)
    assert payments[0] == pytest.approx(result.first_monthly_payment)
    assert payments[-1] == pytest.approx(result.last_monthly_payment)


def test_payments_never_increase():
    result = compute_sac(750000, 25, 35, 0.12)
    payments = [row.installment for row in result.schedule()]

    for current, following in zip(payments, payments[1:]):
        assert current >= following


def test_schedule_pays_off_balance():
    rows = list(sac_schedule(400000.0, 360, 0.01))

    assert rows[0].interest == pytest.approx(4000.0)
    assert rows[-1].balance == pytest.approx(0.0, abs=1e-6)
    assert sum(row.principal for row in rows) == pytest.approx(400000.0)
    for current, following in zip(rows, rows[1:]):
        assert current.balance > following.balance or following.balance == 0.0


def test_zero_rate_has_no_interest():
    result = compute_sac(300000, 30, 10, 0.0)

    assert result.total_interest == 0.0
    assert result.total_amount == pytest.approx(result.financed_amount)
    assert result.first_monthly_payment == pytest.approx(result.monthly_amortization)


@pytest.mark.parametrize("display, expected", [
    ("R$ 500.000", 500000.0),
    ("500.000,50", 500000.5),
    ("  R$ 1.250.000,00 ", 1250000.0),
    ("350000.75", 350000.75),
])
def test_display_string_property_value(display: str, expected: float):
    result = compute_sac(display, 20, 30)

    assert result.property_value == pytest.approx(expected)


def test_down_payment_below_minimum_rejected():
    with pytest.raises(InvalidInputError) as exc:
        compute_sac(100000, 19, 10, 0.12)

    assert "20%" in exc.value.message


@pytest.mark.parametrize("value, percentage, years, rate", [
    (0, 20, 10, 0.12),            # Zero value
    (-100000, 20, 10, 0.12),      # Negative value
    ("abc", 20, 10, 0.12),        # Non-numeric value
    ("", 20, 10, 0.12),           # Empty value
    (None, 20, 10, 0.12),         # Missing value
    (100000, 91, 10, 0.12),       # Down payment above maximum
    (100000, 20, 0, 0.12),        # Term too short
    (100000, 20, 36, 0.12),       # Term too long
    (100000, 20, 10, -0.01),      # Negative rate
    (500000, "abc", 30, 0.12),    # Non-numeric down payment
    (500000, 20, "thirty", 0.12), # Non-numeric term
    (500000, 20, 30, "high"),     # Non-numeric rate
    ([500000], 20, 30, 0.12),     # Unsupported value type
])
def test_invalid_inputs_rejected(value, percentage, years, rate):
    with pytest.raises(InvalidInputError):
        compute_sac(value, percentage, years, rate)


def test_decimal_inputs_accepted():
    result = compute_sac(Decimal("500000"), Decimal("20"), 30, Decimal("0.12"))

    assert result.financed_amount == pytest.approx(400000.0)
    assert round(result.first_monthly_payment, 2) == 5111.11
    assert result.total_interest == pytest.approx(722000.0)


def test_boundaries_accepted():
    assert compute_sac(100000, 20, 1).total_months == 12
    assert compute_sac(100000, 90, 35).total_months == 420
