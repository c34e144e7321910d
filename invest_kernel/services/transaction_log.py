"""
TransactionLog -- append-only writer of profit and principal-return rows.

Responsibility:
    Inserts immutable ``transactions`` rows for every profit credit and
    principal return, plus the ``profits`` detail row that explains each
    profit (day number, rate, principal, daily/final).

Architecture position:
    Kernel > Services -- imperative shell.  Flushes within the caller's
    per-investment transaction.

Invariants enforced:
    - Rows are written with status ``completed``, currency ``USD``,
      payment method ``system``, ``fee = 0`` and ``net_amount = amount``.
    - ``reference_id`` is always the investment id, which is what the
      conservation check joins on.
    - No update or delete path exists; db/immutability.py rejects both.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from invest_kernel.db.types import ZERO
from invest_kernel.domain.clock import Clock, SystemClock
from invest_kernel.domain.types import (
    InvestmentSchema,
    ProfitType,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)
from invest_kernel.exceptions import InvalidAmountError
from invest_kernel.logging_config import get_logger
from invest_kernel.models.profit import ProfitRecordModel
from invest_kernel.models.transaction import TransactionModel
from invest_kernel.services.base import BaseService

logger = get_logger("services.transaction_log")

CURRENCY = "USD"
PAYMENT_METHOD = "system"


def daily_profit_description(schema_name: str) -> str:
    return f"Daily profit from {schema_name}"


def final_profit_description(schema_name: str) -> str:
    return f"Final profit from {schema_name}"


def principal_return_description(schema_name: str) -> str:
    return f"Principal return from completed {schema_name} investment"


class TransactionLog(BaseService):
    """Append-only writer for core-generated money movements."""

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def _append(
        self,
        user_id: UUID,
        transaction_type: TransactionType,
        amount: Decimal,
        investment_id: UUID,
        description: str,
    ) -> TransactionModel:
        if amount < ZERO:
            raise InvalidAmountError(f"{transaction_type.value} amount", str(amount))

        now = self._clock.now()
        row = TransactionModel(
            user_id=user_id,
            type=transaction_type.value,
            amount=amount,
            fee=ZERO,
            net_amount=amount,
            status=TransactionStatus.COMPLETED.value,
            payment_method=PAYMENT_METHOD,
            currency=CURRENCY,
            description=description,
            reference_id=investment_id,
            processed_at=now,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        self.session.flush()
        return row

    def record_profit(
        self,
        user_id: UUID,
        amount: Decimal,
        investment_id: UUID,
        *,
        schema: InvestmentSchema,
        invest_amount: Decimal,
        profit_day: int,
        is_final: bool = False,
        next_profit_time: datetime | None = None,
    ) -> TransactionRecord:
        """
        Append a profit transaction and its ``profits`` detail row.

        Args:
            user_id: Owner of the investment.
            amount: Profit credited, full precision.
            investment_id: Stored as the transaction's ``reference_id``.
            schema: Plan the profit was computed from (name, rate).
            invest_amount: Principal at the time of the credit.
            profit_day: ``days_elapsed + 1``.
            is_final: True for the maturity event's profit.
            next_profit_time: Next scheduled credit, None at maturity.
        """
        description = (
            final_profit_description(schema.name)
            if is_final else daily_profit_description(schema.name)
        )
        row = self._append(
            user_id, TransactionType.PROFIT, amount, investment_id, description,
        )

        self.session.add(
            ProfitRecordModel(
                transaction_id=row.id,
                user_id=user_id,
                investment_id=investment_id,
                schema_id=schema.schema_id,
                profit_amount=amount,
                profit_rate=schema.daily_rate,
                investment_amount=invest_amount,
                profit_day=profit_day,
                profit_type=(ProfitType.FINAL if is_final else ProfitType.DAILY).value,
                is_final_profit=is_final,
                calculation_date=row.processed_at.date(),
                distribution_method="automatic",
                status="distributed",
                processed_at=row.processed_at,
                next_profit_date=(
                    next_profit_time.date() if next_profit_time is not None else None
                ),
                created_at=row.processed_at,
                updated_at=row.processed_at,
            )
        )
        self.session.flush()

        logger.debug(
            "profit_transaction_recorded",
            extra={
                "transaction_id": str(row.id),
                "investment_id": str(investment_id),
                "amount": str(amount),
                "profit_day": profit_day,
                "is_final": is_final,
            },
        )
        return row.to_dto()

    def record_principal_return(
        self,
        user_id: UUID,
        amount: Decimal,
        investment_id: UUID,
        schema_name: str,
    ) -> TransactionRecord:
        """Append the principal-return transaction for a matured investment."""
        row = self._append(
            user_id,
            TransactionType.PRINCIPAL_RETURN,
            amount,
            investment_id,
            principal_return_description(schema_name),
        )
        logger.debug(
            "principal_return_recorded",
            extra={
                "transaction_id": str(row.id),
                "investment_id": str(investment_id),
                "amount": str(amount),
            },
        )
        return row.to_dto()
