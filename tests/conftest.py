"""
Pytest fixtures for the investment kernel test suite.

Provides:
- In-memory SQLite engine (shared connection via StaticPool) with all
  kernel tables and the immutability listeners registered
- Session factory, DeterministicClock and a no-op sleeper
- Factories for users, schemas, investments and admin settings
- Structured log capture
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import invest_kernel.models  # noqa: F401
from invest_kernel.db.base import Base
from invest_kernel.db.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from invest_kernel.domain.clock import DeterministicClock
from invest_kernel.domain.types import InvestmentStatus
from invest_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from invest_kernel.models import (
    AdminSettingModel,
    InvestmentModel,
    InvestmentSchemaModel,
    UserModel,
)

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture invest_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, distributor):
            distributor.run()
            logs = captured_logs()
            assert any(r["message"] == "distribution_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("invest_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    register_immutability_listeners()
    yield engine
    unregister_immutability_listeners()
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock():
    return DeterministicClock(T0)


@pytest.fixture
def sleeper():
    """Records requested delays instead of sleeping."""
    calls: list[float] = []

    def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep


# =============================================================================
# Data factories
# =============================================================================


@pytest.fixture
def create_user(session_factory):
    def _create(
        balance=Decimal("0"),
        locked_balance=Decimal("0"),
        total_earned=Decimal("0"),
        is_active=True,
    ) -> UserModel:
        with session_factory() as s:
            user = UserModel(
                username=f"user-{uuid4().hex[:8]}",
                email=None,
                is_active=is_active,
                balance=balance,
                locked_balance=locked_balance,
                total_earned=total_earned,
            )
            s.add(user)
            s.commit()
            return user

    return _create


@pytest.fixture
def create_schema(session_factory):
    def _create(
        name="Starter",
        daily_rate=Decimal("2.0"),
        duration_days=30,
        min_amount=Decimal("100"),
        max_amount=Decimal("10000"),
        total_return=Decimal("0.60"),
        is_active=True,
    ) -> InvestmentSchemaModel:
        with session_factory() as s:
            schema = InvestmentSchemaModel(
                name=name,
                daily_rate=daily_rate,
                duration_days=duration_days,
                min_amount=min_amount,
                max_amount=max_amount,
                total_return=total_return,
                is_active=is_active,
            )
            s.add(schema)
            s.commit()
            return schema

    return _create


@pytest.fixture
def create_investment(session_factory):
    def _create(
        user,
        schema,
        invest_amount=Decimal("1000"),
        created_at=T0,
        next_profit_time=None,
        last_profit_time=None,
        status=InvestmentStatus.ACTIVE.value,
        total_profit_amount=Decimal("0"),
    ) -> InvestmentModel:
        with session_factory() as s:
            investment = InvestmentModel(
                user_id=user.id,
                schema_id=schema.id,
                invest_amount=invest_amount,
                total_profit_amount=total_profit_amount,
                status=status,
                created_at=created_at,
                updated_at=created_at,
                last_profit_time=last_profit_time,
                next_profit_time=next_profit_time,
            )
            s.add(investment)
            s.commit()
            return investment

    return _create


@pytest.fixture
def set_setting(session_factory):
    def _set(key: str, value: str | None, setting_type: str = "string") -> None:
        with session_factory() as s:
            s.add(
                AdminSettingModel(
                    setting_key=key,
                    setting_value=value,
                    setting_type=setting_type,
                )
            )
            s.commit()

    return _set


@pytest.fixture
def locked_mode(set_setting):
    set_setting("profit_distribution_locked", "1", "boolean")


@pytest.fixture
def immediate_mode(set_setting):
    set_setting("profit_distribution_locked", "0", "boolean")

