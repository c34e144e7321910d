"""
Profit calculator -- pure daily-profit and maturity computation.

Responsibility:
    Given an investment's principal, its schema's rate and duration, the
    investment's origin timestamp and the current instant, decide the day's
    profit amount and whether this event is the maturity event.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Maturity is derived from elapsed wall-clock days since ``created_at``,
      never from a count of prior distributions.  A skipped run is recovered
      on the next one.
    - No rounding: the result carries full Decimal precision.  Rounding to
      two places happens only when amounts are displayed.

Failure modes:
    - ValueError for a negative principal/rate, a duration below one day,
      or a ``now`` earlier than ``created_at``.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from invest_kernel.domain.clock import ensure_utc
from invest_kernel.domain.types import ProfitComputation

ONE_DAY = timedelta(days=1)
HUNDRED = Decimal("100")


def days_elapsed(created_at: datetime, now: datetime) -> int:
    """Whole days between ``created_at`` and ``now`` (floor)."""
    delta = ensure_utc(now) - ensure_utc(created_at)
    if delta < timedelta(0):
        raise ValueError(
            f"now ({now.isoformat()}) precedes created_at ({created_at.isoformat()})"
        )
    return delta // ONE_DAY


def daily_profit(invest_amount: Decimal, daily_rate: Decimal) -> Decimal:
    """``invest_amount * daily_rate / 100`` at full precision."""
    if invest_amount < 0:
        raise ValueError(f"invest_amount must be >= 0, got {invest_amount}")
    if daily_rate < 0:
        raise ValueError(f"daily_rate must be >= 0, got {daily_rate}")
    return invest_amount * daily_rate / HUNDRED


def scheduled_profit_time(created_at: datetime, profit_day: int) -> datetime:
    """
    When the credit after ``profit_day`` becomes due.

    Anchored to ``created_at`` so the schedule does not drift by the time a
    run spends reaching each investment.
    """
    if profit_day < 1:
        raise ValueError(f"profit_day must be >= 1, got {profit_day}")
    return ensure_utc(created_at) + profit_day * ONE_DAY


def compute_profit(
    invest_amount: Decimal,
    daily_rate: Decimal,
    created_at: datetime,
    duration_days: int,
    now: datetime,
) -> ProfitComputation:
    """
    Compute the profit event for one investment at ``now``.

    Returns:
        ProfitComputation with ``daily_profit``, ``is_maturity``
        (``days_elapsed >= duration_days``), ``days_elapsed`` and
        ``profit_day`` (``days_elapsed + 1``).
    """
    if duration_days < 1:
        raise ValueError(f"duration_days must be >= 1, got {duration_days}")

    elapsed = days_elapsed(created_at, now)
    return ProfitComputation(
        daily_profit=daily_profit(invest_amount, daily_rate),
        is_maturity=elapsed >= duration_days,
        days_elapsed=elapsed,
        profit_day=elapsed + 1,
    )
