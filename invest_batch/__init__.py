"""
invest_batch -- the daily profit distribution run.

Entry points:
    - ``DistributionOrchestrator.from_config()`` wires engine, clock and
      distributor from a ``RuntimeConfig``.
    - ``ProfitDistributor.run()`` processes every due investment with one
      database transaction per item.
"""

from invest_batch.domain.types import (
    DistributionItemResult,
    DistributionRunResult,
    ItemOutcome,
)
from invest_batch.orchestrator import DistributionOrchestrator
from invest_batch.services.distributor import ProfitDistributor

__all__ = [
    "DistributionItemResult",
    "DistributionOrchestrator",
    "DistributionRunResult",
    "ItemOutcome",
    "ProfitDistributor",
]
