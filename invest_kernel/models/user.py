"""
Module: invest_kernel.models.user
Responsibility: ORM persistence for the user balance fields the core mutates.
Architecture position: Kernel > Models.  May import from db/ and domain/types.

The User entity is owned by the wider platform; only ``balance``,
``locked_balance`` and ``total_earned`` are written here, and only through
atomic ``UPDATE ... SET col = col + :amount`` statements issued by
BalanceLedger.  ``is_active`` gates whether the user's investments are due.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase
from invest_kernel.db.types import to_decimal
from invest_kernel.domain.types import UserBalance


class UserModel(TimestampedBase):
    """Platform user, reduced to identity plus the three ledger fields."""

    __tablename__ = "users"

    __table_args__ = (
        Index("idx_users_active", "is_active"),
    )

    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Withdrawable funds
    balance: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    # Profit held until a lock-release (maturity) event
    locked_balance: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    # Lifetime profit accrued; never decreases
    total_earned: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    def to_balance(self) -> UserBalance:
        return UserBalance(
            user_id=self.id,
            balance=to_decimal(self.balance),
            locked_balance=to_decimal(self.locked_balance),
            total_earned=to_decimal(self.total_earned),
        )
