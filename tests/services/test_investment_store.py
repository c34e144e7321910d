"""
Tests for InvestmentStore: due predicate, row claim and guarded transitions.
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql, sqlite

from invest_kernel.domain.types import InvestmentStatus
from invest_kernel.exceptions import InvestmentNotActiveError, InvestmentNotFoundError
from invest_kernel.models import InvestmentModel
from invest_kernel.services.investment_store import InvestmentStore, claim_statement


@pytest.fixture
def user(create_user):
    return create_user()


@pytest.fixture
def schema(create_schema):
    return create_schema()


def _ids(investments):
    return {i.investment_id for i in investments}


# =============================================================================
# Due predicate
# =============================================================================


class TestFindDue:
    def test_next_profit_time_in_past_is_due(
        self, session, clock, user, schema, create_investment,
    ):
        inv = create_investment(
            user, schema, next_profit_time=clock.now() - timedelta(minutes=1),
        )
        assert _ids(InvestmentStore(session).find_due_for_distribution(clock.now())) == {
            inv.id
        }

    def test_next_profit_time_in_future_not_due(
        self, session, clock, user, schema, create_investment,
    ):
        create_investment(user, schema, next_profit_time=clock.now() + timedelta(hours=1))
        assert InvestmentStore(session).find_due_for_distribution(clock.now()) == []

    def test_null_next_time_due_after_one_day(
        self, session, clock, user, schema, create_investment,
    ):
        old = create_investment(user, schema, created_at=clock.now() - timedelta(days=1))
        create_investment(user, schema, created_at=clock.now() - timedelta(hours=23))

        due = InvestmentStore(session).find_due_for_distribution(clock.now())
        assert _ids(due) == {old.id}

    def test_completed_not_due(self, session, clock, user, schema, create_investment):
        create_investment(
            user,
            schema,
            status=InvestmentStatus.COMPLETED.value,
            next_profit_time=clock.now() - timedelta(days=1),
        )
        assert InvestmentStore(session).find_due_for_distribution(clock.now()) == []

    def test_inactive_user_excluded(
        self, session, clock, schema, create_user, create_investment,
    ):
        inactive = create_user(is_active=False)
        create_investment(
            inactive, schema, next_profit_time=clock.now() - timedelta(days=1),
        )
        assert InvestmentStore(session).find_due_for_distribution(clock.now()) == []


# =============================================================================
# Claim
# =============================================================================


class TestClaim:
    def test_claims_due_investment(self, session, clock, user, schema, create_investment):
        inv = create_investment(user, schema, created_at=clock.now() - timedelta(days=2))
        claimed = InvestmentStore(session).claim_for_distribution(inv.id, clock.now())
        assert claimed is not None
        assert claimed.investment_id == inv.id
        assert claimed.invest_amount == Decimal("1000")

    def test_no_longer_due_returns_none(
        self, session, clock, user, schema, create_investment,
    ):
        inv = create_investment(
            user, schema, next_profit_time=clock.now() + timedelta(hours=3),
        )
        assert InvestmentStore(session).claim_for_distribution(inv.id, clock.now()) is None

    def test_postgres_claim_skips_locked_rows(self, clock):
        sql = str(
            claim_statement(uuid4(), clock.now()).compile(dialect=postgresql.dialect())
        )
        assert "FOR UPDATE OF investments SKIP LOCKED" in sql

    def test_sqlite_claim_has_no_locking_clause(self, clock):
        sql = str(claim_statement(uuid4(), clock.now()).compile(dialect=sqlite.dialect()))
        assert "FOR UPDATE" not in sql


# =============================================================================
# Transitions
# =============================================================================


class TestTransitions:
    def test_advance_profit(self, session_factory, clock, user, schema, create_investment):
        inv = create_investment(user, schema)
        now = clock.now()
        with session_factory() as s:
            InvestmentStore(s).advance_profit(
                inv.id, now, now + timedelta(days=1), Decimal("20"),
            )
            InvestmentStore(s).advance_profit(
                inv.id, now, now + timedelta(days=1), Decimal("20"),
            )
            s.commit()

        with session_factory() as s:
            row = s.get(InvestmentModel, inv.id).to_dto()
        assert row.total_profit_amount == Decimal("40")
        assert row.last_profit_time == now
        assert row.next_profit_time == now + timedelta(days=1)
        assert row.status == InvestmentStatus.ACTIVE

    def test_mark_completed(self, session_factory, clock, user, schema, create_investment):
        inv = create_investment(user, schema, total_profit_amount=Decimal("580"))
        with session_factory() as s:
            InvestmentStore(s).mark_completed(inv.id, clock.now(), final_profit=Decimal("20"))
            s.commit()

        with session_factory() as s:
            row = s.get(InvestmentModel, inv.id).to_dto()
        assert row.status == InvestmentStatus.COMPLETED
        assert row.next_profit_time is None
        assert row.last_profit_time == clock.now()
        assert row.total_profit_amount == Decimal("600")

    def test_completed_cannot_complete_again(
        self, session, clock, user, schema, create_investment,
    ):
        inv = create_investment(user, schema, status=InvestmentStatus.COMPLETED.value)
        with pytest.raises(InvestmentNotActiveError) as exc_info:
            InvestmentStore(session).mark_completed(inv.id, clock.now())
        assert exc_info.value.operation == "complete"

    def test_completed_cannot_advance(
        self, session, clock, user, schema, create_investment,
    ):
        inv = create_investment(user, schema, status=InvestmentStatus.COMPLETED.value)
        with pytest.raises(InvestmentNotActiveError):
            InvestmentStore(session).advance_profit(
                inv.id, clock.now(), clock.now(), Decimal("1"),
            )

    def test_unknown_investment(self, session, clock):
        with pytest.raises(InvestmentNotFoundError):
            InvestmentStore(session).mark_completed(uuid4(), clock.now())
