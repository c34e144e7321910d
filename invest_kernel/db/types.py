"""
Module: invest_kernel.db.types
Responsibility: Decimal coercion and rounding helpers for financial-grade
    amounts.  Centralizes precision so every model and service uses
    identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats anywhere in the kernel.  All monetary amounts use Decimal.
    - round_money() is applied at display/reporting time only.  Ledger
      writes carry full precision so repeated daily credits never drift.
"""

from decimal import Decimal, ROUND_HALF_UP

MONEY_DECIMAL_PLACES = 9
DISPLAY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    """
    Coerce a database or config value to Decimal.

    Floats (as returned by drivers without native decimal support) go
    through ``str`` so that 20.0 becomes Decimal("20.0"), not the binary
    expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(
    value: Decimal,
    decimal_places: int = DISPLAY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the specified decimal places.

    Only used for display and reporting; never before a ledger write.
    """
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def format_money(value: Decimal) -> str:
    """Render an amount as ``1,234.56`` for console and run-log output."""
    return f"{round_money(value):,.2f}"
