"""
invest_batch.domain -- Pure result types for the distribution run.

ZERO I/O.  All types are frozen dataclasses.
"""

from invest_batch.domain.types import (
    DistributionItemResult,
    DistributionRunResult,
    ItemOutcome,
)

__all__ = [
    "DistributionItemResult",
    "DistributionRunResult",
    "ItemOutcome",
]
