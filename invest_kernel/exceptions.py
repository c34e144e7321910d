"""
Typed Exception Hierarchy for the Investment Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The distribution batch must tell an item-level failure (skip, count, move
on) from a run-level failure (abort before anything is committed).  That
decision is made by exception TYPE, never by parsing messages.

Every exception:
  1. Has a static ``code`` class attribute (machine-readable)
  2. Carries structured attributes (investment_id, schema_id, ...)
  3. Inherits from InvestKernelError

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InvestKernelError (base)
    |
    +-- ConfigurationError
    |
    +-- SchemaError
    |   +-- SchemaNotFoundError
    |
    +-- InvestmentError
    |   +-- InvestmentNotFoundError
    |   +-- InvestmentNotActiveError
    |
    +-- LedgerError
    |   +-- UserNotFoundError
    |   +-- InvalidAmountError
    |
    +-- DistributionError
    |   +-- TransactionFailureError
    |   +-- FatalSetupError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                    | When Raised                  | Scope
----------------|-------------------------|------------------------------|------
Config          | CONFIGURATION_INVALID   | Bad/missing config value     | run
Schema          | SCHEMA_NOT_FOUND        | Plan missing or inactive     | item
Investment      | INVESTMENT_NOT_FOUND    | Investment id doesn't exist  | item
                | INVESTMENT_NOT_ACTIVE   | Mutating a terminal row      | item
Ledger          | USER_NOT_FOUND          | Increment touched zero rows  | item
                | INVALID_AMOUNT          | Negative ledger amount       | item
Distribution    | TRANSACTION_FAILURE     | DB error inside item txn     | item
                | FATAL_SETUP_FAILURE     | Due-list / connection failed | run
Immutability    | IMMUTABILITY_VIOLATION  | Update/delete of ledger rows | item
"""


class InvestKernelError(Exception):
    """
    Base exception for all investment kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "INVEST_KERNEL_ERROR"


# Configuration


class ConfigurationError(InvestKernelError):
    """Runtime configuration is missing or invalid."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for '{key}': {reason}")


# Schema-related exceptions


class SchemaError(InvestKernelError):
    """Base exception for investment schema errors."""

    code: str = "SCHEMA_ERROR"


class SchemaNotFoundError(SchemaError):
    """Referenced investment schema does not exist or is inactive."""

    code: str = "SCHEMA_NOT_FOUND"

    def __init__(self, schema_id: str, investment_id: str | None = None):
        self.schema_id = schema_id
        self.investment_id = investment_id
        if investment_id is not None:
            message = f"Schema {schema_id} not found for investment {investment_id}"
        else:
            message = f"Schema not found: {schema_id}"
        super().__init__(message)


# Investment-related exceptions


class InvestmentError(InvestKernelError):
    """Base exception for investment state errors."""

    code: str = "INVESTMENT_ERROR"


class InvestmentNotFoundError(InvestmentError):
    """Investment with given ID was not found."""

    code: str = "INVESTMENT_NOT_FOUND"

    def __init__(self, investment_id: str):
        self.investment_id = investment_id
        super().__init__(f"Investment not found: {investment_id}")


class InvestmentNotActiveError(InvestmentError):
    """A state transition was attempted on a non-active investment."""

    code: str = "INVESTMENT_NOT_ACTIVE"

    def __init__(self, investment_id: str, operation: str):
        self.investment_id = investment_id
        self.operation = operation
        super().__init__(
            f"Cannot {operation} investment {investment_id}: not active"
        )


# Ledger-related exceptions


class LedgerError(InvestKernelError):
    """Base exception for balance ledger errors."""

    code: str = "LEDGER_ERROR"


class UserNotFoundError(LedgerError):
    """Balance increment matched no user row."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class InvalidAmountError(LedgerError):
    """Ledger amounts must be non-negative."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, amount: str):
        self.field = field
        self.amount = amount
        super().__init__(f"Invalid {field}: {amount} (must be >= 0)")


# Distribution-related exceptions


class DistributionError(InvestKernelError):
    """Base exception for distribution run errors."""

    code: str = "DISTRIBUTION_ERROR"


class TransactionFailureError(DistributionError):
    """The per-investment database transaction failed and was rolled back."""

    code: str = "TRANSACTION_FAILURE"

    def __init__(self, investment_id: str, reason: str):
        self.investment_id = investment_id
        self.reason = reason
        super().__init__(
            f"Distribution transaction failed for investment {investment_id}: {reason}"
        )


class FatalSetupError(DistributionError):
    """The run cannot start: due-list query or connection failed."""

    code: str = "FATAL_SETUP_FAILURE"

    def __init__(self, stage: str, reason: str):
        self.stage = stage
        self.reason = reason
        super().__init__(f"Distribution run aborted during {stage}: {reason}")


# Immutability-related exceptions


class ImmutabilityError(InvestKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an immutable record.

    Transactions and profit records are immutable from creation;
    investments are immutable once completed.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
