"""
Module: invest_kernel.models.investment_schema
Responsibility: ORM persistence for investment plans (daily rate, duration,
    amount limits).  Created and edited by administration; read-only here.
Architecture position: Kernel > Models.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase
from invest_kernel.db.types import to_decimal
from invest_kernel.domain.types import InvestmentSchema


class InvestmentSchemaModel(TimestampedBase):
    """A tiered plan users invest into."""

    __tablename__ = "investment_schemas"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Percent of principal credited per elapsed day
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)

    min_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    max_amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    # Fractional total return over the plan (0.60 == 60%)
    total_return: Mapped[Decimal] = mapped_column(
        Numeric(20, 8), nullable=False, default=Decimal("0"),
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_dto(self) -> InvestmentSchema:
        return InvestmentSchema(
            schema_id=self.id,
            name=self.name,
            daily_rate=to_decimal(self.daily_rate),
            duration_days=self.duration_days,
            min_amount=to_decimal(self.min_amount),
            max_amount=to_decimal(self.max_amount),
            total_return=to_decimal(self.total_return),
            is_active=self.is_active,
        )
