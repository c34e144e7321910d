"""
RuntimeConfig schema.

The frozen runtime artifact produced by ``invest_config.get_active_config()``.
Every component that needs a tunable (database URL, inter-item delay, run
log path, timeouts) receives it from here; nothing else reads YAML or the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ITEM_DELAY_MS = 100
DEFAULT_RUN_LOG_PATH = "logs/daily-profits.log"
DEFAULT_STATEMENT_TIMEOUT_MS = 30000
DEFAULT_LOCK_TIMEOUT_MS = 5000

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RuntimeConfig:
    """Settings for one distribution run."""

    database_url: str
    item_delay_ms: int = DEFAULT_ITEM_DELAY_MS
    run_log_path: str = DEFAULT_RUN_LOG_PATH
    statement_timeout_ms: int = DEFAULT_STATEMENT_TIMEOUT_MS
    lock_timeout_ms: int = DEFAULT_LOCK_TIMEOUT_MS
    log_level: str = "INFO"
    pool_size: int = 5
    echo_sql: bool = False
    report_after_run: bool = True

    @property
    def item_delay_seconds(self) -> float:
        return self.item_delay_ms / 1000.0
