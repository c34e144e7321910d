"""Pure domain layer - clock, typed records, profit calculator."""

from invest_kernel.domain.calculator import (
    compute_profit,
    daily_profit,
    days_elapsed,
    scheduled_profit_time,
)
from invest_kernel.domain.clock import Clock, DeterministicClock, SystemClock, ensure_utc
from invest_kernel.domain.types import (
    DistributionMode,
    Investment,
    InvestmentSchema,
    InvestmentStatus,
    ProfitComputation,
    ProfitType,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
    UserBalance,
)

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "ensure_utc",
    "compute_profit",
    "daily_profit",
    "days_elapsed",
    "scheduled_profit_time",
    "DistributionMode",
    "Investment",
    "InvestmentSchema",
    "InvestmentStatus",
    "ProfitComputation",
    "ProfitType",
    "TransactionRecord",
    "TransactionStatus",
    "TransactionType",
    "UserBalance",
]
