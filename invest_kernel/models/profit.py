"""
Module: invest_kernel.models.profit
Responsibility: Detail rows for each distributed profit (day number, rate,
    principal at the time), linked to the profit transaction they explain.
Architecture position: Kernel > Models.

Invariants enforced:
    - Immutable from creation (db/immutability.py).
    - At most one row per (investment_id, profit_day).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase, UUIDString


class ProfitRecordModel(TimestampedBase):
    """Per-day profit detail for one investment."""

    __tablename__ = "profits"

    __table_args__ = (
        UniqueConstraint("investment_id", "profit_day", name="uq_profits_investment_day"),
    )

    transaction_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("transactions.id"), nullable=False,
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("users.id"), nullable=False,
    )

    investment_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("investments.id"), nullable=False,
    )

    schema_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("investment_schemas.id"), nullable=False,
    )

    profit_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    profit_rate: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    investment_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    profit_day: Mapped[int] = mapped_column(Integer, nullable=False)

    profit_type: Mapped[str] = mapped_column(String(20), nullable=False)

    is_final_profit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    calculation_date: Mapped[date] = mapped_column(Date, nullable=False)

    distribution_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default="automatic",
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="distributed")

    processed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    next_profit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
