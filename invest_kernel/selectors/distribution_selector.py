"""
Module: invest_kernel.selectors.distribution_selector
Responsibility: Read-only reporting over distribution output -- the daily
    summary printed after a run and the profit conservation check.
Architecture position: Kernel > Selectors.

Audit relevance:
    ``profit_conservation_mismatches`` is the reconciliation between the
    transaction log and the investment rows: for every investment the sum
    of its ``profit`` transactions must equal ``total_profit_amount``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from invest_kernel.db.types import MONEY_DECIMAL_PLACES, ZERO, round_money, to_decimal
from invest_kernel.domain.types import InvestmentStatus, TransactionType
from invest_kernel.models.investment import InvestmentModel
from invest_kernel.models.transaction import TransactionModel
from invest_kernel.models.user import UserModel
from invest_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class DailyDistributionSummary:
    """Snapshot of distribution activity for one calendar day (UTC)."""

    day: date
    profit_transactions: int
    total_profits: Decimal
    users_benefited: int
    active_investments: int
    total_locked_balance: Decimal
    users_with_locked_balance: int


@dataclass(frozen=True)
class ConservationMismatch:
    """An investment whose running total disagrees with its profit rows."""

    investment_id: UUID
    status: str
    total_profit_amount: Decimal
    transacted_profit: Decimal

    @property
    def difference(self) -> Decimal:
        return self.total_profit_amount - self.transacted_profit


class DistributionSelector(BaseSelector):
    """Reporting queries over transactions, investments and balances."""

    def daily_summary(self, day: date) -> DailyDistributionSummary:
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)

        profit_count, profit_sum, users = self.session.execute(
            select(
                func.count(TransactionModel.id),
                func.coalesce(func.sum(TransactionModel.amount), ZERO),
                func.count(func.distinct(TransactionModel.user_id)),
            ).where(
                TransactionModel.type == TransactionType.PROFIT.value,
                TransactionModel.created_at >= start,
                TransactionModel.created_at < end,
            )
        ).one()

        active = self.session.execute(
            select(func.count(InvestmentModel.id)).where(
                InvestmentModel.status == InvestmentStatus.ACTIVE.value,
            )
        ).scalar_one()

        locked_sum, locked_users = self.session.execute(
            select(
                func.coalesce(func.sum(UserModel.locked_balance), ZERO),
                func.count(UserModel.id),
            ).where(UserModel.locked_balance > 0)
        ).one()

        return DailyDistributionSummary(
            day=day,
            profit_transactions=profit_count,
            total_profits=to_decimal(profit_sum),
            users_benefited=users,
            active_investments=active,
            total_locked_balance=to_decimal(locked_sum),
            users_with_locked_balance=locked_users,
        )

    def profit_conservation_mismatches(
        self, completed_only: bool = False,
    ) -> list[ConservationMismatch]:
        """
        Investments whose ``total_profit_amount`` differs from the sum of
        their profit transactions (compared at ledger precision).
        """
        transacted = (
            select(
                TransactionModel.reference_id.label("investment_id"),
                func.sum(TransactionModel.amount).label("total"),
            )
            .where(TransactionModel.type == TransactionType.PROFIT.value)
            .group_by(TransactionModel.reference_id)
            .subquery()
        )

        stmt = (
            select(
                InvestmentModel.id,
                InvestmentModel.status,
                InvestmentModel.total_profit_amount,
                transacted.c.total,
            )
            .outerjoin(transacted, transacted.c.investment_id == InvestmentModel.id)
            .order_by(InvestmentModel.id)
        )
        if completed_only:
            stmt = stmt.where(
                InvestmentModel.status == InvestmentStatus.COMPLETED.value,
            )

        mismatches = []
        for investment_id, status, recorded, total in self.session.execute(stmt):
            recorded = to_decimal(recorded)
            total = to_decimal(total) if total is not None else ZERO
            if round_money(recorded, MONEY_DECIMAL_PLACES) != round_money(
                total, MONEY_DECIMAL_PLACES,
            ):
                mismatches.append(
                    ConservationMismatch(
                        investment_id=investment_id,
                        status=status,
                        total_profit_amount=recorded,
                        transacted_profit=total,
                    )
                )
        return mismatches
