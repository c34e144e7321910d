"""Kernel services: plan lookup, settings, ledger, transaction log, state store."""

from invest_kernel.services.balance_ledger import BalanceLedger
from invest_kernel.services.investment_store import InvestmentStore
from invest_kernel.services.schema_registry import SchemaRegistry
from invest_kernel.services.settings_gateway import SettingsGateway
from invest_kernel.services.transaction_log import TransactionLog

__all__ = [
    "BalanceLedger",
    "InvestmentStore",
    "SchemaRegistry",
    "SettingsGateway",
    "TransactionLog",
]
