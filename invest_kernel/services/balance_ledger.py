"""
BalanceLedger -- atomic mutator of a user's balance fields.

Responsibility:
    Credits daily profit and maturity payouts to ``users.balance``,
    ``users.locked_balance`` and ``users.total_earned``, branching on the
    distribution mode the caller passes in.

Architecture position:
    Kernel > Services -- imperative shell.  Called only by the distributor,
    inside the per-investment transaction.

Invariants enforced:
    - Every mutation is a single ``UPDATE users SET col = col + :amount``
      statement.  Balances are never read into Python, changed and written
      back, so a concurrent writer cannot cause a lost update.
    - ``total_earned`` only ever increases (amounts are validated >= 0).
    - Locked-mode maturity releases the whole locked balance in the same
      statement that zeroes it.

Failure modes:
    - InvalidAmountError for a negative amount.
    - UserNotFoundError when the UPDATE matches no row.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import update

from invest_kernel.db.types import ZERO
from invest_kernel.domain.types import DistributionMode
from invest_kernel.exceptions import InvalidAmountError, UserNotFoundError
from invest_kernel.logging_config import get_logger
from invest_kernel.models.user import UserModel
from invest_kernel.services.base import BaseService

logger = get_logger("services.balance_ledger")


def _require_non_negative(field: str, amount: Decimal) -> None:
    if amount < ZERO:
        raise InvalidAmountError(field, str(amount))


class BalanceLedger(BaseService):
    """
    Atomic increments on the three user balance fields.

    Contract:
        ``mode`` is decided by the caller (read from the settings gateway
        once per item) so the ledger itself holds no hidden state.
    """

    def _execute(self, user_id: UUID, values: dict) -> None:
        result = self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise UserNotFoundError(str(user_id))

    def apply_profit(
        self,
        user_id: UUID,
        amount: Decimal,
        mode: DistributionMode,
    ) -> None:
        """
        Credit one day's profit.

        locked:    locked_balance += amount, total_earned += amount
        immediate: balance += amount,        total_earned += amount
        """
        _require_non_negative("profit amount", amount)

        if mode == DistributionMode.LOCKED:
            values = {"locked_balance": UserModel.locked_balance + amount}
        else:
            values = {"balance": UserModel.balance + amount}
        values["total_earned"] = UserModel.total_earned + amount

        self._execute(user_id, values)

        logger.debug(
            "balance_profit_applied",
            extra={
                "user_id": str(user_id),
                "amount": str(amount),
                "mode": mode.value,
            },
        )

    def apply_maturity(
        self,
        user_id: UUID,
        final_profit: Decimal,
        principal: Decimal,
        mode: DistributionMode,
    ) -> None:
        """
        Pay the final profit and return the principal.

        locked:    balance += locked_balance + final_profit + principal,
                   locked_balance = 0, total_earned += final_profit
        immediate: balance += final_profit + principal,
                   total_earned += final_profit
        """
        _require_non_negative("final profit", final_profit)
        _require_non_negative("principal", principal)

        payout = final_profit + principal
        if mode == DistributionMode.LOCKED:
            values = {
                "balance": UserModel.balance + UserModel.locked_balance + payout,
                "locked_balance": ZERO,
            }
        else:
            values = {"balance": UserModel.balance + payout}
        values["total_earned"] = UserModel.total_earned + final_profit

        self._execute(user_id, values)

        logger.debug(
            "balance_maturity_applied",
            extra={
                "user_id": str(user_id),
                "final_profit": str(final_profit),
                "principal": str(principal),
                "mode": mode.value,
            },
        )
