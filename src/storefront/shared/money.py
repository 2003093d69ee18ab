"""Cent-exact money arithmetic.

Prices are stored in Float fields; every sum or product is computed in
``Decimal`` and quantised to the cent before it is written back.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
TAX_RATE = Decimal("0.08")


def to_money(value) -> Decimal:
    """Convert a float, int, str or Decimal amount to a cent-rounded Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return to_money(to_money(unit_price) * quantity)


def sum_lines(lines) -> Decimal:
    """Sum ``(unit_price, quantity)`` pairs to the cent."""
    total = Decimal("0.00")
    for unit_price, quantity in lines:
        total += line_total(unit_price, quantity)
    return to_money(total)


def tax_on(subtotal, rate: Decimal = TAX_RATE) -> Decimal:
    return to_money(to_money(subtotal) * rate)


def gross(subtotal, rate: Decimal = TAX_RATE) -> Decimal:
    """Subtotal with the flat tax rate applied: ``subtotal * (1 + rate)``."""
    return to_money(to_money(subtotal) * (Decimal("1") + rate))
