"""
SettingsGateway -- typed read access to admin settings.

Responsibility:
    Reads one row of ``admin_settings`` and converts ``setting_value`` by
    its declared ``setting_type``.  The distributor uses it for a single
    flag, ``profit_distribution_locked``, read fresh for every investment
    and passed explicitly into the balance ledger.

Architecture position:
    Kernel > Services.  Read-only.

Failure modes:
    - ConfigurationError when a stored value cannot be converted to its
      declared type (integer or json).  The item that asked fails.
"""

import json
from typing import Any

from sqlalchemy import select

from invest_kernel.domain.types import DistributionMode
from invest_kernel.exceptions import ConfigurationError
from invest_kernel.logging_config import get_logger
from invest_kernel.models.setting import AdminSettingModel
from invest_kernel.services.base import BaseService

logger = get_logger("services.settings_gateway")

PROFIT_DISTRIBUTION_LOCKED = "profit_distribution_locked"

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def convert_setting(key: str, value: str | None, setting_type: str) -> Any:
    """Convert a stored text value according to ``setting_type``."""
    if setting_type == "boolean":
        if value is None:
            return False
        return value.strip().lower() not in _FALSE_STRINGS
    if setting_type == "integer":
        try:
            return int(value) if value not in (None, "") else 0
        except ValueError:
            raise ConfigurationError(key, f"not an integer: {value!r}") from None
    if setting_type == "json":
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(key, f"invalid json: {exc.msg}") from exc
    return value


class SettingsGateway(BaseService):
    """Typed admin-settings reader."""

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Return the typed value of ``key``, or ``default`` if absent."""
        row = self.session.execute(
            select(AdminSettingModel).where(AdminSettingModel.setting_key == key)
        ).scalar_one_or_none()

        if row is None:
            return default

        return convert_setting(key, row.setting_value, row.setting_type)

    def get_distribution_mode(self) -> DistributionMode:
        locked = self.get_setting(PROFIT_DISTRIBUTION_LOCKED, 0)
        if isinstance(locked, str):
            locked = locked.strip().lower() not in _FALSE_STRINGS
        mode = DistributionMode.LOCKED if locked else DistributionMode.IMMEDIATE
        logger.debug("distribution_mode_read", extra={"mode": mode.value})
        return mode
