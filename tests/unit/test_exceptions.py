"""Tests for the typed kernel exception hierarchy."""

import pytest

from invest_kernel.exceptions import (
    ConfigurationError,
    DistributionError,
    FatalSetupError,
    ImmutabilityViolationError,
    InvalidAmountError,
    InvestKernelError,
    InvestmentNotActiveError,
    InvestmentNotFoundError,
    LedgerError,
    SchemaNotFoundError,
    TransactionFailureError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    "exc,code,base",
    [
        (ConfigurationError("database.url", "missing"), "CONFIGURATION_INVALID", InvestKernelError),
        (SchemaNotFoundError("s1"), "SCHEMA_NOT_FOUND", InvestKernelError),
        (InvestmentNotFoundError("i1"), "INVESTMENT_NOT_FOUND", InvestKernelError),
        (InvestmentNotActiveError("i1", "advance"), "INVESTMENT_NOT_ACTIVE", InvestKernelError),
        (UserNotFoundError("u1"), "USER_NOT_FOUND", LedgerError),
        (InvalidAmountError("profit amount", "-1"), "INVALID_AMOUNT", LedgerError),
        (TransactionFailureError("i1", "deadlock"), "TRANSACTION_FAILURE", DistributionError),
        (FatalSetupError("connect", "refused"), "FATAL_SETUP_FAILURE", DistributionError),
        (
            ImmutabilityViolationError("Transaction", "t1", "append-only"),
            "IMMUTABILITY_VIOLATION",
            InvestKernelError,
        ),
    ],
)
def test_codes_and_hierarchy(exc, code, base):
    assert exc.code == code
    assert isinstance(exc, base)


def test_schema_not_found_message_names_investment():
    exc = SchemaNotFoundError("s1", "i9")
    assert str(exc) == "Schema s1 not found for investment i9"
    assert exc.investment_id == "i9"


def test_transaction_failure_carries_reason():
    exc = TransactionFailureError("i1", "lock timeout")
    assert exc.investment_id == "i1"
    assert "lock timeout" in str(exc)


def test_fatal_setup_stage():
    exc = FatalSetupError("due_selection", "relation does not exist")
    assert exc.stage == "due_selection"
    assert str(exc).startswith("Distribution run aborted during due_selection")
