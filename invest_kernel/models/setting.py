"""
Module: invest_kernel.models.setting
Responsibility: ORM persistence for typed admin settings (key, text value,
    declared type).  Written by the admin UI; read-only to the core.
Architecture position: Kernel > Models.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from invest_kernel.db.base import TimestampedBase


class AdminSettingModel(TimestampedBase):
    """One platform-wide setting."""

    __tablename__ = "admin_settings"

    setting_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    setting_value: Mapped[str | None] = mapped_column(Text, nullable=True)

    # string | boolean | integer | json
    setting_type: Mapped[str] = mapped_column(String(20), nullable=False, default="string")

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
