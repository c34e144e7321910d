"""
invest_batch.domain.types -- Pure frozen dataclasses for the distribution run.

ZERO I/O.  Frozen dataclasses with enum outcome fields and tuples for
immutable collections.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from invest_kernel.domain.types import DistributionMode


class ItemOutcome(str, Enum):
    """What happened to one due investment during a run."""

    PROCESSED = "processed"  # Daily profit credited
    MATURED = "matured"  # Final profit paid, principal returned, completed
    FAILED = "failed"  # Item transaction rolled back
    SKIPPED = "skipped"  # Locked by a concurrent run or no longer due


@dataclass(frozen=True)
class DistributionItemResult:
    """Immutable result of processing a single investment.

    ``amount`` is what the item added to the run total: the daily profit,
    or final profit plus principal on maturity.  Zero for failed and
    skipped items.
    """

    investment_id: UUID
    user_id: UUID
    outcome: ItemOutcome
    amount: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    principal_returned: Decimal = Decimal("0")
    profit_day: int | None = None
    mode: DistributionMode | None = None
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome in (ItemOutcome.PROCESSED, ItemOutcome.MATURED)


@dataclass(frozen=True)
class DistributionRunResult:
    """Immutable summary of one distribution run.

    Returned by ``ProfitDistributor.run()``.  ``processed`` counts every
    successful item (daily and matured); ``total_distributed`` is profit
    plus returned principal.
    """

    run_id: UUID
    processed: int
    errors: int
    skipped: int
    total_distributed: Decimal
    total_profit: Decimal
    total_principal_returned: Decimal
    item_results: tuple[DistributionItemResult, ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0

    @property
    def matured(self) -> int:
        return sum(1 for r in self.item_results if r.outcome == ItemOutcome.MATURED)

    @property
    def due(self) -> int:
        return len(self.item_results)
