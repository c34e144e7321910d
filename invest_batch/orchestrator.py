"""
DistributionOrchestrator -- DI container for the daily profit run.

Contract:
    Wires engine, session factory, clock and ProfitDistributor from a
    ``RuntimeConfig`` and runs the complete operator flow: distribute,
    print the daily report, append the run log line.

Architecture: invest_batch (top-level).  The only place that translates
    ``invest_config.RuntimeConfig`` into kernel arguments; the kernel never
    imports from ``invest_config``.

Invariants enforced:
    - Clock injection: distributor, transaction log and run log share one
      Clock.
    - The report and run log are written only after the distribution loop
      has finished; a report failure does not change the run result.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TextIO

from sqlalchemy.orm import Session

from invest_kernel.db.engine import get_session_factory, init_engine_from_url
from invest_kernel.db.immutability import register_immutability_listeners
from invest_kernel.domain.clock import Clock, SystemClock
from invest_kernel.logging_config import configure_logging, get_logger

from invest_batch.domain.types import DistributionRunResult
from invest_batch.report import print_summary_report
from invest_batch.run_log import append_run_log
from invest_batch.services.distributor import (
    DEFAULT_ITEM_DELAY_SECONDS,
    ProfitDistributor,
)

if TYPE_CHECKING:
    from invest_config.schema import RuntimeConfig

logger = get_logger("batch.orchestrator")


class DistributionOrchestrator:
    """DI container for the profit distribution run.

    Contract:
        - ``from_config()`` factory initializes the engine and returns a
          fully wired orchestrator.
        - ``create_distributor()`` returns a ProfitDistributor for ad-hoc use.
        - ``run()`` executes the full operator flow.

    Non-goals:
        - Does NOT create tables or migrate schemas.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
        item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS,
        sleeper: Callable[[float], None] = time.sleep,
        run_log_path: Path | str | None = None,
        report_after_run: bool = True,
        out: TextIO | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._item_delay_seconds = item_delay_seconds
        self._sleeper = sleeper
        self._run_log_path = Path(run_log_path) if run_log_path is not None else None
        self._report_after_run = report_after_run
        self._out = out

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        clock: Clock | None = None,
        sleeper: Callable[[float], None] = time.sleep,
        out: TextIO | None = None,
    ) -> DistributionOrchestrator:
        """Initialize logging, the engine and the immutability guards from
        ``config`` and wire the run."""
        configure_logging(level=config.log_level)
        init_engine_from_url(
            config.database_url,
            echo=config.echo_sql,
            pool_size=config.pool_size,
            statement_timeout_ms=config.statement_timeout_ms,
            lock_timeout_ms=config.lock_timeout_ms,
        )
        register_immutability_listeners()
        return cls(
            session_factory=get_session_factory(),
            clock=clock,
            item_delay_seconds=config.item_delay_seconds,
            sleeper=sleeper,
            run_log_path=config.run_log_path,
            report_after_run=config.report_after_run,
            out=out,
        )

    # -------------------------------------------------------------------------
    # Distributor
    # -------------------------------------------------------------------------

    def create_distributor(self) -> ProfitDistributor:
        return ProfitDistributor(
            session_factory=self._session_factory,
            clock=self._clock,
            item_delay_seconds=self._item_delay_seconds,
            sleeper=self._sleeper,
            out=self._out,
        )

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> DistributionRunResult:
        """Distribute, report and log.

        Raises:
            FatalSetupError: Propagated from the distributor.
        """
        out = self._out if self._out is not None else sys.stdout

        result = self.create_distributor().run()

        if self._report_after_run:
            print_summary_report(self._session_factory, self._clock.now().date(), out)

        if self._run_log_path is not None:
            path = append_run_log(self._run_log_path, result, self._clock.now())
            out.write(f"[LOG] Log written to: {path}\n")

        return result

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def clock(self) -> Clock:
        return self._clock
