"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

Profit and principal-return transactions are the audit trail that the
conservation check reconciles against ``investments.total_profit_amount``.
If a row could be edited after the fact, the ledger could no longer prove
that money was paid exactly once.

SQLAlchemy fires mapper events before UPDATE/DELETE statements reach the
database.  The listeners below intercept those events and raise
ImmutabilityViolationError so the flush (and the enclosing item
transaction) is aborted:

    session.flush()
         |
         v
    [before_update / before_delete] --> _check_*() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

Core ``update()`` statements issued by the investment state store bypass
mapper events; those carry their own ``WHERE status = 'active'`` guard.

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity              | When Immutable           | Why
--------------------|--------------------------|-------------------------------
TransactionModel    | ALWAYS (from creation)   | Append-only money movements
ProfitRecordModel   | ALWAYS (from creation)   | Detail rows for paid profit
InvestmentModel     | After status = completed | Completed is terminal
"""

from sqlalchemy import event, inspect

from invest_kernel.exceptions import ImmutabilityViolationError
from invest_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

_AUDIT_FIELDS = ("updated_at",)


def _block(entity_type: str, target, operation: str, reason: str) -> None:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": operation,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(target.id),
        reason=reason,
    )


def _check_transaction_update(mapper, connection, target):
    _block("Transaction", target, "UPDATE", "Transactions are append-only")


def _check_transaction_delete(mapper, connection, target):
    _block("Transaction", target, "DELETE", "Transactions cannot be deleted")


def _check_profit_record_update(mapper, connection, target):
    _block("ProfitRecord", target, "UPDATE", "Profit records are immutable")


def _check_profit_record_delete(mapper, connection, target):
    _block("ProfitRecord", target, "DELETE", "Profit records cannot be deleted")


def _check_investment_immutability(mapper, connection, target):
    """
    Prevent updates to completed investments.

    The active -> completed transition itself is allowed; any change to a
    row whose status was already ``completed`` before this flush is not.
    """
    status_history = inspect(target).attrs.status.history

    if status_history.deleted:
        was_completed = status_history.deleted[0] == "completed"
    elif not status_history.added:
        was_completed = target.status == "completed"
    else:
        was_completed = False

    if not was_completed:
        return

    for attr in inspect(target).attrs:
        if attr.key in _AUDIT_FIELDS:
            continue
        if attr.history.has_changes():
            _block(
                "Investment",
                target,
                "UPDATE",
                f"Cannot modify field '{attr.key}' on completed investment",
            )


def _check_investment_delete(mapper, connection, target):
    if target.status == "completed":
        _block("Investment", target, "DELETE", "Completed investments cannot be deleted")


def _listeners():
    from invest_kernel.models.investment import InvestmentModel
    from invest_kernel.models.profit import ProfitRecordModel
    from invest_kernel.models.transaction import TransactionModel

    return (
        (TransactionModel, "before_update", _check_transaction_update),
        (TransactionModel, "before_delete", _check_transaction_delete),
        (ProfitRecordModel, "before_update", _check_profit_record_update),
        (ProfitRecordModel, "before_delete", _check_profit_record_delete),
        (InvestmentModel, "before_update", _check_investment_immutability),
        (InvestmentModel, "before_delete", _check_investment_delete),
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Idempotent: a listener that is already registered is not added twice.
    """
    for target, event_name, listener_fn in _listeners():
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def _safe_remove_listener(target, event_name, listener_fn):
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    Only for tests that need to set up rows the guards would reject.
    """
    for target, event_name, listener_fn in _listeners():
        _safe_remove_listener(target, event_name, listener_fn)
