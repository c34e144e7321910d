"""
InvestmentStore -- due selection and state transitions for investments.

Responsibility:
    Answers "which investments are due for a profit event now?", claims a
    single due investment under a row lock for the item transaction, and
    applies the two state writers: advance (daily credit) and complete
    (maturity).

Architecture position:
    Kernel > Services -- imperative shell.  The distributor calls
    ``find_due_for_distribution`` outside any item transaction and the
    remaining methods inside one.

Invariants enforced:
    - Due predicate: status ``active``, owning user active, and either
      ``next_profit_time <= now`` or (``next_profit_time IS NULL`` and
      ``created_at <= now - 1 day``).
    - ``claim_for_distribution`` re-checks the due predicate under
      ``SELECT ... FOR UPDATE SKIP LOCKED``; a row held by a concurrent run
      or no longer due is not returned, so it cannot be paid twice.
    - State writers are guarded by ``WHERE status = 'active'``: a completed
      investment is never advanced or completed again.
    - ``total_profit_amount`` is incremented by exactly the profit that the
      transaction log recorded in the same transaction, including the final
      profit at maturity.

Failure modes:
    - InvestmentNotFoundError / InvestmentNotActiveError when a state
      writer matches no row.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, and_, or_, select, update

from invest_kernel.db.types import ZERO
from invest_kernel.domain.calculator import ONE_DAY
from invest_kernel.domain.types import Investment, InvestmentStatus
from invest_kernel.exceptions import InvestmentNotActiveError, InvestmentNotFoundError
from invest_kernel.logging_config import get_logger
from invest_kernel.models.investment import InvestmentModel
from invest_kernel.models.user import UserModel
from invest_kernel.services.base import BaseService

logger = get_logger("services.investment_store")

_ACTIVE = InvestmentStatus.ACTIVE.value


def _due_predicate(now: datetime):
    return and_(
        InvestmentModel.status == _ACTIVE,
        UserModel.is_active.is_(True),
        or_(
            InvestmentModel.next_profit_time <= now,
            and_(
                InvestmentModel.next_profit_time.is_(None),
                InvestmentModel.created_at <= now - ONE_DAY,
            ),
        ),
    )


def claim_statement(investment_id: UUID, now: datetime) -> Select:
    """``SELECT ... FOR UPDATE OF investments SKIP LOCKED`` for one due row."""
    return (
        select(InvestmentModel)
        .join(UserModel, UserModel.id == InvestmentModel.user_id)
        .where(InvestmentModel.id == investment_id, _due_predicate(now))
        .with_for_update(skip_locked=True, of=InvestmentModel)
        .execution_options(populate_existing=True)
    )


class InvestmentStore(BaseService):
    """Due query, row claim and guarded state writers."""

    def find_due_for_distribution(self, now: datetime) -> list[Investment]:
        """
        Return every investment due at ``now``.

        Plain read: the row lock is taken per item by
        ``claim_for_distribution`` so the lock is held only for the
        duration of that item's transaction.
        """
        rows = self.session.execute(
            select(InvestmentModel)
            .join(UserModel, UserModel.id == InvestmentModel.user_id)
            .where(_due_predicate(now))
            .order_by(InvestmentModel.created_at, InvestmentModel.id)
        ).scalars().all()

        due = [row.to_dto() for row in rows]
        logger.info("due_investments_selected", extra={"count": len(due)})
        return due

    def claim_for_distribution(
        self, investment_id: UUID, now: datetime,
    ) -> Investment | None:
        """
        Lock ``investment_id`` for this transaction if it is still due.

        Returns:
            The locked investment, or None when another transaction holds
            the row or it is no longer active and due.
        """
        row = self.session.execute(
            claim_statement(investment_id, now)
        ).scalar_one_or_none()

        if row is None:
            logger.info(
                "investment_claim_skipped",
                extra={"investment_id": str(investment_id)},
            )
            return None
        return row.to_dto()

    def _guarded_update(
        self, investment_id: UUID, operation: str, values: dict,
    ) -> None:
        result = self.session.execute(
            update(InvestmentModel)
            .where(
                InvestmentModel.id == investment_id,
                InvestmentModel.status == _ACTIVE,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return

        exists = self.session.execute(
            select(InvestmentModel.id).where(InvestmentModel.id == investment_id)
        ).scalar_one_or_none()
        if exists is None:
            raise InvestmentNotFoundError(str(investment_id))
        raise InvestmentNotActiveError(str(investment_id), operation)

    def advance_profit(
        self,
        investment_id: UUID,
        last_profit_time: datetime,
        next_profit_time: datetime,
        profit_increment: Decimal,
    ) -> None:
        """Add ``profit_increment`` to the running total and move the timestamps."""
        self._guarded_update(
            investment_id,
            "advance",
            {
                "total_profit_amount": (
                    InvestmentModel.total_profit_amount + profit_increment
                ),
                "last_profit_time": last_profit_time,
                "next_profit_time": next_profit_time,
            },
        )
        logger.debug(
            "investment_advanced",
            extra={
                "investment_id": str(investment_id),
                "next_profit_time": next_profit_time.isoformat(),
            },
        )

    def mark_completed(
        self,
        investment_id: UUID,
        last_profit_time: datetime,
        final_profit: Decimal = ZERO,
    ) -> None:
        """
        Transition ``active -> completed``.

        Sets ``next_profit_time`` to NULL and adds ``final_profit`` to
        ``total_profit_amount`` so the running total still matches the
        profit transactions after the final credit.
        """
        self._guarded_update(
            investment_id,
            "complete",
            {
                "status": InvestmentStatus.COMPLETED.value,
                "total_profit_amount": (
                    InvestmentModel.total_profit_amount + final_profit
                ),
                "last_profit_time": last_profit_time,
                "next_profit_time": None,
            },
        )
        logger.debug(
            "investment_completed",
            extra={"investment_id": str(investment_id)},
        )
