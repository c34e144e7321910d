"""Tests for the distribution run result types."""

from dataclasses import FrozenInstanceError
from decimal import Decimal
from uuid import uuid4

import pytest

from invest_batch.domain.types import (
    DistributionItemResult,
    DistributionRunResult,
    ItemOutcome,
)


def _item(outcome: ItemOutcome) -> DistributionItemResult:
    return DistributionItemResult(
        investment_id=uuid4(), user_id=uuid4(), outcome=outcome,
    )


class TestItemResult:
    @pytest.mark.parametrize(
        "outcome,succeeded",
        [
            (ItemOutcome.PROCESSED, True),
            (ItemOutcome.MATURED, True),
            (ItemOutcome.FAILED, False),
            (ItemOutcome.SKIPPED, False),
        ],
    )
    def test_succeeded(self, outcome, succeeded):
        assert _item(outcome).succeeded is succeeded

    def test_frozen(self):
        item = _item(ItemOutcome.PROCESSED)
        with pytest.raises(FrozenInstanceError):
            item.amount = Decimal("1")


class TestRunResult:
    def test_counts(self):
        items = (
            _item(ItemOutcome.PROCESSED),
            _item(ItemOutcome.MATURED),
            _item(ItemOutcome.MATURED),
            _item(ItemOutcome.FAILED),
            _item(ItemOutcome.SKIPPED),
        )
        result = DistributionRunResult(
            run_id=uuid4(),
            processed=3,
            errors=1,
            skipped=1,
            total_distributed=Decimal("0"),
            total_profit=Decimal("0"),
            total_principal_returned=Decimal("0"),
            item_results=items,
        )
        assert result.matured == 2
        assert result.due == 5
