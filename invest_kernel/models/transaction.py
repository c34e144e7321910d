"""
Module: invest_kernel.models.transaction
Responsibility: ORM persistence for immutable money-movement records.
Architecture position: Kernel > Models.

Invariants enforced:
    - Append-only: rows are never updated or deleted by the core
      (db/immutability.py listeners).
    - Core-generated profit and principal_return rows are always
      ``completed``, ``USD``, ``payment_method = system``, ``fee = 0``.

Audit relevance:
    For every completed investment, the sum of its ``profit`` rows equals
    the investment's ``total_profit_amount``.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase, UUIDString
from invest_kernel.db.types import to_decimal
from invest_kernel.domain.clock import ensure_utc
from invest_kernel.domain.types import (
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)


class TransactionModel(TimestampedBase):
    """One money movement for one user."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_user_type", "user_id", "type"),
        Index("idx_transactions_reference", "reference_id"),
        Index("idx_transactions_created", "created_at"),
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("users.id"), nullable=False,
    )

    type: Mapped[str] = mapped_column(String(30), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    fee: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    net_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False)

    payment_method: Mapped[str] = mapped_column(String(30), nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Investment id for profit / principal_return rows
    reference_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    def to_dto(self) -> TransactionRecord:
        return TransactionRecord(
            transaction_id=self.id,
            user_id=self.user_id,
            transaction_type=TransactionType(self.type),
            amount=to_decimal(self.amount),
            fee=to_decimal(self.fee),
            net_amount=to_decimal(self.net_amount),
            status=TransactionStatus(self.status),
            currency=self.currency,
            payment_method=self.payment_method,
            reference_id=self.reference_id,
            description=self.description,
            processed_at=(
                ensure_utc(self.processed_at) if self.processed_at is not None else None
            ),
            created_at=(
                ensure_utc(self.created_at) if self.created_at is not None else None
            ),
        )
