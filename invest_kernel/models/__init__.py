"""ORM models for the investment kernel."""

from invest_kernel.models.investment import InvestmentModel
from invest_kernel.models.investment_schema import InvestmentSchemaModel
from invest_kernel.models.profit import ProfitRecordModel
from invest_kernel.models.setting import AdminSettingModel
from invest_kernel.models.transaction import TransactionModel
from invest_kernel.models.user import UserModel

__all__ = [
    "AdminSettingModel",
    "InvestmentModel",
    "InvestmentSchemaModel",
    "ProfitRecordModel",
    "TransactionModel",
    "UserModel",
]
