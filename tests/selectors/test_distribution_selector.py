"""
Tests for DistributionSelector: daily summary and profit conservation.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from invest_kernel.selectors import DistributionSelector
from invest_kernel.services.schema_registry import SchemaRegistry
from invest_kernel.services.transaction_log import TransactionLog


@pytest.fixture
def record_profit(session_factory):
    def _record(clock, user, schema, investment, amount=Decimal("20"), day=1):
        with session_factory() as s:
            dto = SchemaRegistry(s).get_schema_by_id(schema.id)
            TransactionLog(s, clock=clock).record_profit(
                user.id,
                amount,
                investment.id,
                schema=dto,
                invest_amount=investment.invest_amount,
                profit_day=day,
            )
            s.commit()

    return _record


class TestDailySummary:
    def test_empty_day(self, session, clock):
        summary = DistributionSelector(session).daily_summary(clock.now().date())
        assert summary.profit_transactions == 0
        assert summary.total_profits == Decimal("0")
        assert summary.users_benefited == 0
        assert summary.active_investments == 0
        assert summary.users_with_locked_balance == 0

    def test_counts_todays_profits(
        self, session, clock, create_user, create_schema, create_investment, record_profit,
    ):
        schema = create_schema()
        alice = create_user(locked_balance=Decimal("40"))
        bob = create_user()
        inv_a = create_investment(alice, schema)
        inv_b = create_investment(bob, schema)
        record_profit(clock, alice, schema, inv_a)
        record_profit(clock, bob, schema, inv_b, day=2)

        summary = DistributionSelector(session).daily_summary(clock.now().date())
        assert summary.profit_transactions == 2
        assert summary.total_profits == Decimal("40")
        assert summary.users_benefited == 2
        assert summary.active_investments == 2
        assert summary.total_locked_balance == Decimal("40")
        assert summary.users_with_locked_balance == 1

    def test_other_days_excluded(
        self, session, clock, create_user, create_schema, create_investment, record_profit,
    ):
        schema = create_schema()
        user = create_user()
        investment = create_investment(user, schema)
        record_profit(clock, user, schema, investment)

        tomorrow = (clock.now() + timedelta(days=1)).date()
        summary = DistributionSelector(session).daily_summary(tomorrow)
        assert summary.profit_transactions == 0


class TestProfitConservation:
    def test_consistent_investment(
        self, session, clock, create_user, create_schema, create_investment, record_profit,
    ):
        schema = create_schema()
        user = create_user()
        investment = create_investment(user, schema, total_profit_amount=Decimal("40"))
        record_profit(clock, user, schema, investment)
        record_profit(clock, user, schema, investment, day=2)

        assert DistributionSelector(session).profit_conservation_mismatches() == []

    def test_mismatch_reported(
        self, session, clock, create_user, create_schema, create_investment, record_profit,
    ):
        schema = create_schema()
        user = create_user()
        investment = create_investment(user, schema, total_profit_amount=Decimal("60"))
        record_profit(clock, user, schema, investment)

        mismatches = DistributionSelector(session).profit_conservation_mismatches()
        assert len(mismatches) == 1
        assert mismatches[0].investment_id == investment.id
        assert mismatches[0].difference == Decimal("40")

    def test_completed_only_filter(
        self, session, create_user, create_schema, create_investment,
    ):
        schema = create_schema()
        user = create_user()
        create_investment(user, schema, total_profit_amount=Decimal("5"))

        selector = DistributionSelector(session)
        assert len(selector.profit_conservation_mismatches()) == 1
        assert selector.profit_conservation_mismatches(completed_only=True) == []
