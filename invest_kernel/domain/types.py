"""
invest_kernel.domain.types -- Pure frozen records for the distribution core.

ZERO I/O.  The data layer converts ORM rows into these records (``to_dto()``)
so that services and the calculator work on typed, immutable values rather
than dynamic row mappings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


# =============================================================================
# Status enums
# =============================================================================


class InvestmentStatus(str, Enum):
    """Investment lifecycle.  ``completed`` and ``cancelled`` are terminal."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransactionType(str, Enum):
    """Money-movement kinds recorded in the transaction log."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INVESTMENT = "investment"
    PROFIT = "profit"
    PRINCIPAL_RETURN = "principal_return"
    REFERRAL = "referral"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DistributionMode(str, Enum):
    """Where profit lands until maturity.

    LOCKED: profit accrues to ``locked_balance`` and is released at maturity.
    IMMEDIATE: profit is added straight to the withdrawable ``balance``.
    """

    LOCKED = "locked"
    IMMEDIATE = "immediate"


class ProfitType(str, Enum):
    DAILY = "daily"
    FINAL = "final"


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class InvestmentSchema:
    """Immutable plan definition (read-only to the core)."""

    schema_id: UUID
    name: str
    daily_rate: Decimal  # percent: 2.0 == 2% of principal per day
    duration_days: int
    min_amount: Decimal
    max_amount: Decimal
    total_return: Decimal  # fractional: 0.60 == 60%
    is_active: bool = True


@dataclass(frozen=True)
class Investment:
    """Snapshot of a user's position in a schema."""

    investment_id: UUID
    user_id: UUID
    schema_id: UUID
    invest_amount: Decimal
    total_profit_amount: Decimal
    status: InvestmentStatus
    created_at: datetime
    last_profit_time: datetime | None = None
    next_profit_time: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == InvestmentStatus.ACTIVE


@dataclass(frozen=True)
class UserBalance:
    """The three user fields the core mutates."""

    user_id: UUID
    balance: Decimal
    locked_balance: Decimal
    total_earned: Decimal


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable ledger row as written by the transaction log."""

    transaction_id: UUID
    user_id: UUID
    transaction_type: TransactionType
    amount: Decimal
    fee: Decimal
    net_amount: Decimal
    status: TransactionStatus
    currency: str
    payment_method: str
    reference_id: UUID | None
    description: str | None
    processed_at: datetime | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProfitComputation:
    """Output of the profit calculator for one investment at one instant."""

    daily_profit: Decimal
    is_maturity: bool
    days_elapsed: int
    profit_day: int
