"""Database layer - engine, base classes, types, and immutability guards."""

from invest_kernel.db.base import UUID, Base, TimestampedBase, UUIDString
from invest_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session_factory,
    session_scope,
)
from invest_kernel.db.types import ZERO, format_money, round_money, to_decimal

__all__ = [
    "get_engine",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "Base",
    "TimestampedBase",
    "UUIDString",
    "UUID",
    "ZERO",
    "format_money",
    "round_money",
    "to_decimal",
]
