"""Read-only selectors."""

from invest_kernel.selectors.distribution_selector import (
    ConservationMismatch,
    DailyDistributionSummary,
    DistributionSelector,
)

__all__ = [
    "ConservationMismatch",
    "DailyDistributionSummary",
    "DistributionSelector",
]
