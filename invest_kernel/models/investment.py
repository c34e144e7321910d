"""
Module: invest_kernel.models.investment
Responsibility: ORM persistence for investments -- a user's position in a
    schema, its profit timestamps and its lifecycle status.
Architecture position: Kernel > Models.

Invariants enforced:
    - invest_amount and created_at are fixed at creation.
    - total_profit_amount is the running sum of profit paid and is never
      negative (CHECK constraint).
    - status moves active -> completed exactly once; completed rows are
      immutable (state store guards + db/immutability.py listeners).
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase, UUIDString
from invest_kernel.db.types import to_decimal
from invest_kernel.domain.clock import ensure_utc
from invest_kernel.domain.types import Investment, InvestmentStatus


class InvestmentModel(TimestampedBase):
    """A user's investment in one schema."""

    __tablename__ = "investments"

    __table_args__ = (
        Index("idx_investments_due", "status", "next_profit_time"),
        Index("idx_investments_user", "user_id"),
        CheckConstraint(
            "total_profit_amount >= 0", name="ck_investments_profit_non_negative",
        ),
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("users.id"), nullable=False,
    )

    schema_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("investment_schemas.id"), nullable=False,
    )

    # Principal, fixed at creation
    invest_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    # Running sum of profit paid so far
    total_profit_amount: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvestmentStatus.ACTIVE.value,
    )

    last_profit_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    # NULL once completed
    next_profit_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    def to_dto(self) -> Investment:
        return Investment(
            investment_id=self.id,
            user_id=self.user_id,
            schema_id=self.schema_id,
            invest_amount=to_decimal(self.invest_amount),
            total_profit_amount=to_decimal(self.total_profit_amount),
            status=InvestmentStatus(self.status),
            created_at=ensure_utc(self.created_at),
            last_profit_time=(
                ensure_utc(self.last_profit_time)
                if self.last_profit_time is not None else None
            ),
            next_profit_time=(
                ensure_utc(self.next_profit_time)
                if self.next_profit_time is not None else None
            ),
        )
