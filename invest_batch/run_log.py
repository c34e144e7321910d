"""
Run log -- one appended line per distribution run.

The line format is fixed because operators grep it:

    2024-01-31 00:00:05 - Profits distributed: 12 investments, $1,234.50 total, 1 errors

The ``, E errors`` suffix appears only when at least one item failed.  The
append holds an exclusive ``flock`` so concurrent runs cannot interleave
partial lines.
"""

from __future__ import annotations

import fcntl
from datetime import datetime
from pathlib import Path

from invest_kernel.db.types import format_money
from invest_kernel.logging_config import get_logger

from invest_batch.domain.types import DistributionRunResult

logger = get_logger("batch.run_log")


def format_run_log_line(result: DistributionRunResult, when: datetime) -> str:
    """Render the summary line for ``result`` (newline-terminated)."""
    line = (
        f"{when.strftime('%Y-%m-%d %H:%M:%S')} - Profits distributed: "
        f"{result.processed} investments, "
        f"${format_money(result.total_distributed)} total"
    )
    if result.errors > 0:
        line += f", {result.errors} errors"
    return line + "\n"


def append_run_log(
    path: Path | str, result: DistributionRunResult, when: datetime,
) -> Path:
    """Append the run's summary line to ``path``, creating parent dirs."""
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    line = format_run_log_line(result, when)

    with open(log_path, "a", encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            f.write(line)
            f.flush()
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    logger.info(
        "run_log_appended",
        extra={"path": str(log_path), "run_id": str(result.run_id)},
    )
    return log_path
