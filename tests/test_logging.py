"""Tests for run- and item-scoped structured logging (invest_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from invest_kernel.exceptions import InvestmentNotActiveError
from invest_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def stream():
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    configure_logging(handler=handler, level="DEBUG")
    return stream


def _records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestLogContext:
    def test_uuid_values_stored_as_strings(self):
        run_id, investment_id = uuid4(), uuid4()
        LogContext.set(run_id=run_id, investment_id=investment_id)
        assert LogContext.get_all() == {
            "run_id": str(run_id),
            "investment_id": str(investment_id),
        }

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="entry_id"):
            LogContext.set(entry_id="e-1")
        with pytest.raises(TypeError, match="entry_id"):
            LogContext.bind(entry_id="e-1")

    def test_item_binding_nests_inside_run_binding(self):
        with LogContext.bind(run_id="run"):
            with LogContext.bind(investment_id="inv", user_id="usr"):
                assert LogContext.get_all() == {
                    "run_id": "run",
                    "investment_id": "inv",
                    "user_id": "usr",
                }
            assert LogContext.get_all() == {"run_id": "run"}
        assert LogContext.get_all() == {}

    def test_item_binding_released_when_item_fails(self):
        with LogContext.bind(run_id="run"):
            with pytest.raises(InvestmentNotActiveError):
                with LogContext.bind(investment_id="inv"):
                    raise InvestmentNotActiveError("inv", "advance")
            assert LogContext.get_all() == {"run_id": "run"}


class TestStructuredFormatter:
    def test_context_and_extra_fields(self, stream):
        with LogContext.bind(run_id="run-1", investment_id="inv-9"):
            get_logger("batch.distributor").info(
                "investment_profit_credited", extra={"profit_day": 3},
            )

        (record,) = _records(stream)
        assert record["logger"] == "invest_kernel.batch.distributor"
        assert record["run_id"] == "run-1"
        assert record["investment_id"] == "inv-9"
        assert record["profit_day"] == 3
        assert "user_id" not in record

    def test_decimal_amounts_rendered_fixed_point(self, stream):
        get_logger("test").info(
            "amounts", extra={"profit": Decimal("1E+1"), "rate": Decimal("0.020")},
        )

        (record,) = _records(stream)
        assert record["profit"] == "10"
        assert record["rate"] == "0.020"

    def test_kernel_error_fields(self, stream):
        try:
            raise InvestmentNotActiveError("inv-3", "complete")
        except InvestmentNotActiveError:
            get_logger("test").error("investment_distribution_failed", exc_info=True)

        (record,) = _records(stream)
        assert record["exc_type"] == "InvestmentNotActiveError"
        assert record["exc_code"] == "INVESTMENT_NOT_ACTIVE"
        assert record["exc_investment_id"] == "inv-3"
        assert "traceback" in record


class TestConfigureLogging:
    def test_handler_installed_once(self):
        h1 = logging.StreamHandler(StringIO())
        h2 = logging.StreamHandler(StringIO())
        configure_logging(handler=h1)
        configure_logging(handler=h2)

        handlers = logging.getLogger("invest_kernel").handlers
        assert h1 in handlers and h2 not in handlers
        assert isinstance(h1.formatter, StructuredFormatter)

    def test_later_call_changes_level(self, stream):
        configure_logging(level="warning")
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        assert [r["message"] for r in _records(stream)] == ["kept"]

    def test_later_call_without_level_keeps_level(self, stream):
        configure_logging()
        get_logger("test").debug("verbose")
        assert [r["message"] for r in _records(stream)] == ["verbose"]

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="LOUD"):
            configure_logging(level="LOUD")
