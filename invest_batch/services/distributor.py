"""
ProfitDistributor -- transaction-per-item daily profit distribution.

Contract:
    ``run()`` selects every due investment and, for each one in turn, opens
    a database transaction, claims the row, computes the profit event and
    applies the ledger, transaction-log and state writes before committing.
    Returns a frozen ``DistributionRunResult``.

Architecture: invest_batch/services.  Imports kernel services and domain;
    nothing in the kernel imports from here.

Invariants enforced:
    - Failure isolation: every item runs in its own transaction.  An error
      rolls that transaction back, is logged with the investment id and
      counted, and the loop moves on.  The run always produces a summary.
    - No double payment: the item transaction re-claims its investment with
      ``FOR UPDATE SKIP LOCKED`` and re-checks the due predicate; rows held
      by a concurrent run are skipped.
    - Write order inside an item: transaction log, then balances, then the
      investment's state/timestamps, all committed together.
    - Clock injection: all timestamps come from the injected Clock.
    - Distribution mode is read once per item and passed to the ledger.

Failure modes:
    - FatalSetupError when the due list cannot be read.  Nothing has been
      committed at that point, so re-running is safe.
"""

from __future__ import annotations

import sys
import time
from dataclasses import replace
from datetime import datetime
from typing import Callable, TextIO
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invest_kernel.db.engine import session_scope
from invest_kernel.db.types import ZERO, format_money
from invest_kernel.domain.calculator import compute_profit, scheduled_profit_time
from invest_kernel.domain.clock import Clock, SystemClock
from invest_kernel.domain.types import DistributionMode, Investment
from invest_kernel.exceptions import (
    FatalSetupError,
    InvestKernelError,
    TransactionFailureError,
)
from invest_kernel.logging_config import LogContext, get_logger
from invest_kernel.services.balance_ledger import BalanceLedger
from invest_kernel.services.investment_store import InvestmentStore
from invest_kernel.services.schema_registry import SchemaRegistry
from invest_kernel.services.settings_gateway import SettingsGateway
from invest_kernel.services.transaction_log import TransactionLog

from invest_batch.domain.types import (
    DistributionItemResult,
    DistributionRunResult,
    ItemOutcome,
)

logger = get_logger("batch.distributor")

DEFAULT_ITEM_DELAY_SECONDS = 0.1

_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


class ProfitDistributor:
    """Daily profit distribution run.

    Contract:
        - ``run()`` executes one full pass over the due investments.
        - ``session_factory`` returns a new Session per call; the
          distributor owns commit/rollback of each item transaction.

    Non-goals:
        - Does NOT schedule itself -- an external cron triggers the run.
        - Does NOT parallelize items.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
        item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS,
        sleeper: Callable[[float], None] = time.sleep,
        out: TextIO | None = None,
    ):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._item_delay_seconds = item_delay_seconds
        self._sleep = sleeper
        self._out = out

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _echo(self, line: str = "") -> None:
        out = self._out if self._out is not None else sys.stdout
        out.write(line + "\n")
        out.flush()

    def _stamp(self) -> str:
        return self._clock.now().strftime(_TS_FORMAT)

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> DistributionRunResult:
        """Distribute profit to every due investment.

        Raises:
            FatalSetupError: If the due list cannot be fetched.
        """
        run_id = uuid4()
        start = time.monotonic()
        started_at = self._clock.now()

        with LogContext.bind(run_id=run_id):
            logger.info(
                "distribution_started",
                extra={"started_at": started_at.isoformat()},
            )
            self._echo(f"[{self._stamp()}] Starting daily profit distribution...")

            due = self._load_due()

            if not due:
                self._echo(f"[{self._stamp()}] No investments due for profit today.")

            item_results: list[DistributionItemResult] = []
            for investment in due:
                result = self._process_item(investment)
                item_results.append(result)
                if result.succeeded:
                    self._sleep(self._item_delay_seconds)

            result = self._summarize(run_id, item_results, started_at, start)

            if due:
                self._echo(f"[{self._stamp()}] Distribution complete!")
                self._echo(f"[STATS] Investments processed: {result.processed}")
                self._echo(
                    "[PROFIT] Total profits distributed: "
                    f"${format_money(result.total_distributed)}"
                )
                self._echo(f"[WARN] Errors encountered: {result.errors}")
                self._echo()

            logger.info(
                "distribution_completed",
                extra={
                    "due": len(due),
                    "processed": result.processed,
                    "matured": result.matured,
                    "errors": result.errors,
                    "skipped": result.skipped,
                    "total_distributed": str(result.total_distributed),
                    "total_profit": str(result.total_profit),
                    "duration_ms": result.duration_ms,
                },
            )
            return result

    def _load_due(self) -> list[Investment]:
        now = self._clock.now()
        try:
            session = self._session_factory()
        except SQLAlchemyError as exc:
            logger.error("distribution_setup_failed", exc_info=True)
            raise FatalSetupError("connect", str(exc)) from exc

        try:
            return InvestmentStore(session).find_due_for_distribution(now)
        except SQLAlchemyError as exc:
            logger.error("distribution_setup_failed", exc_info=True)
            raise FatalSetupError("due_selection", str(exc)) from exc
        finally:
            session.close()

    def _summarize(
        self,
        run_id: UUID,
        item_results: list[DistributionItemResult],
        started_at: datetime,
        start: float,
    ) -> DistributionRunResult:
        total_profit = sum((r.profit for r in item_results), ZERO)
        total_principal = sum((r.principal_returned for r in item_results), ZERO)
        return DistributionRunResult(
            run_id=run_id,
            processed=sum(1 for r in item_results if r.succeeded),
            errors=sum(1 for r in item_results if r.outcome == ItemOutcome.FAILED),
            skipped=sum(1 for r in item_results if r.outcome == ItemOutcome.SKIPPED),
            total_distributed=total_profit + total_principal,
            total_profit=total_profit,
            total_principal_returned=total_principal,
            item_results=tuple(item_results),
            started_at=started_at,
            completed_at=self._clock.now(),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    # -------------------------------------------------------------------------
    # Item
    # -------------------------------------------------------------------------

    def _process_item(self, investment: Investment) -> DistributionItemResult:
        item_start = time.monotonic()
        investment_id = investment.investment_id

        with LogContext.bind(
            investment_id=investment_id,
            user_id=investment.user_id,
        ):
            try:
                with session_scope(self._session_factory) as session:
                    result = self._distribute(session, investment)
            except InvestKernelError as exc:
                return self._failed(investment, exc, item_start)
            except Exception as exc:
                failure = TransactionFailureError(str(investment_id), str(exc))
                failure.__cause__ = exc
                return self._failed(investment, failure, item_start)

            result = replace(
                result, duration_ms=int((time.monotonic() - item_start) * 1000),
            )
            self._report_item(result)
            return result

    def _distribute(
        self, session: Session, candidate: Investment,
    ) -> DistributionItemResult:
        now = self._clock.now()
        store = InvestmentStore(session)

        investment = store.claim_for_distribution(candidate.investment_id, now)
        if investment is None:
            return DistributionItemResult(
                investment_id=candidate.investment_id,
                user_id=candidate.user_id,
                outcome=ItemOutcome.SKIPPED,
            )

        schema = SchemaRegistry(session).get_schema_by_id(
            investment.schema_id, investment.investment_id,
        )
        computation = compute_profit(
            invest_amount=investment.invest_amount,
            daily_rate=schema.daily_rate,
            created_at=investment.created_at,
            duration_days=schema.duration_days,
            now=now,
        )
        mode = SettingsGateway(session).get_distribution_mode()
        ledger = BalanceLedger(session)
        transactions = TransactionLog(session, clock=self._clock)
        profit = computation.daily_profit

        if computation.is_maturity:
            principal = investment.invest_amount
            transactions.record_profit(
                investment.user_id,
                profit,
                investment.investment_id,
                schema=schema,
                invest_amount=principal,
                profit_day=computation.profit_day,
                is_final=True,
            )
            transactions.record_principal_return(
                investment.user_id, principal, investment.investment_id, schema.name,
            )
            ledger.apply_maturity(investment.user_id, profit, principal, mode)
            store.mark_completed(investment.investment_id, now, final_profit=profit)

            logger.info(
                "investment_matured",
                extra={
                    "schema_id": str(schema.schema_id),
                    "final_profit": str(profit),
                    "principal": str(principal),
                    "days_elapsed": computation.days_elapsed,
                    "mode": mode.value,
                },
            )
            return DistributionItemResult(
                investment_id=investment.investment_id,
                user_id=investment.user_id,
                outcome=ItemOutcome.MATURED,
                amount=profit + principal,
                profit=profit,
                principal_returned=principal,
                profit_day=computation.profit_day,
                mode=mode,
            )

        next_profit_time = scheduled_profit_time(
            investment.created_at, computation.profit_day,
        )
        transactions.record_profit(
            investment.user_id,
            profit,
            investment.investment_id,
            schema=schema,
            invest_amount=investment.invest_amount,
            profit_day=computation.profit_day,
            next_profit_time=next_profit_time,
        )
        ledger.apply_profit(investment.user_id, profit, mode)
        store.advance_profit(investment.investment_id, now, next_profit_time, profit)

        logger.info(
            "investment_profit_credited",
            extra={
                "schema_id": str(schema.schema_id),
                "profit": str(profit),
                "profit_day": computation.profit_day,
                "mode": mode.value,
                "next_profit_time": next_profit_time.isoformat(),
            },
        )
        return DistributionItemResult(
            investment_id=investment.investment_id,
            user_id=investment.user_id,
            outcome=ItemOutcome.PROCESSED,
            amount=profit,
            profit=profit,
            profit_day=computation.profit_day,
            mode=mode,
        )

    def _report_item(self, result: DistributionItemResult) -> None:
        if result.outcome == ItemOutcome.SKIPPED:
            self._echo(
                f"[SKIP] Investment ID {result.investment_id} is locked by "
                "another run or no longer due"
            )
            return
        locked = result.mode == DistributionMode.LOCKED
        if result.outcome == ItemOutcome.PROCESSED:
            if locked:
                self._echo(
                    f"   [PROFIT] Locked Mode: Added ${format_money(result.profit)} "
                    f"to locked balance for user {result.user_id}"
                )
            else:
                self._echo(
                    f"   [PROFIT] Immediate Mode: Added ${format_money(result.profit)} "
                    f"to available balance for user {result.user_id}"
                )
        if result.outcome == ItemOutcome.MATURED:
            if locked:
                self._echo(
                    "   [DONE] Released all locked profits + final profit + "
                    f"principal for user {result.user_id}"
                )
            else:
                self._echo(
                    "   [DONE] Added final profit + principal to available "
                    f"balance for user {result.user_id}"
                )
            self._echo(
                f"[DONE] COMPLETED: Investment {result.investment_id} finished. "
                f"User {result.user_id} received ${format_money(result.profit)} "
                f"profit + ${format_money(result.principal_returned)} principal"
            )
        self._echo(
            f"[OK] Processed investment ID {result.investment_id}: "
            f"+${format_money(result.amount)} for user {result.user_id}"
        )

    def _failed(
        self,
        investment: Investment,
        exc: InvestKernelError,
        item_start: float,
    ) -> DistributionItemResult:
        logger.error(
            "investment_distribution_failed",
            extra={"error_code": exc.code},
            exc_info=exc,
        )
        self._echo(
            f"[ERROR] Error processing investment ID {investment.investment_id}: {exc}"
        )
        return DistributionItemResult(
            investment_id=investment.investment_id,
            user_id=investment.user_id,
            outcome=ItemOutcome.FAILED,
            error_code=exc.code,
            error_message=str(exc),
            duration_ms=int((time.monotonic() - item_start) * 1000),
        )
