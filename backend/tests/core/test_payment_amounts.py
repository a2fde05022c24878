"""Payment amount conversion — currency units to integer minor units."""

from decimal import Decimal

from blood_center.infrastructure.payment_gateway import to_cents


def test_whole_amount():
    assert to_cents(Decimal("25")) == 2500


def test_two_decimal_amount():
    assert to_cents(Decimal("10.99")) == 1099


def test_half_cent_rounds_up():
    assert to_cents(Decimal("10.005")) == 1001
