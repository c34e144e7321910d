"""
Console summary report printed after a distribution run.

Reads today's activity through ``DistributionSelector`` and renders the
block operators see at the end of the cron output.  Report failures are
logged and printed; they never change the outcome of the run itself.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, TextIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invest_kernel.db.types import format_money
from invest_kernel.logging_config import get_logger
from invest_kernel.selectors.distribution_selector import (
    DailyDistributionSummary,
    DistributionSelector,
)

logger = get_logger("batch.report")

_RULE = "================================"


def render_summary(summary: DailyDistributionSummary) -> list[str]:
    lines = ["", "[REPORT] DAILY PROFIT SUMMARY REPORT", _RULE]

    if summary.profit_transactions > 0:
        lines.append(f"[PROFIT] Today's Profits: ${format_money(summary.total_profits)}")
        lines.append(f"[USERS] Users Benefited: {summary.users_benefited}")
        lines.append(f"[STATS] Transactions: {summary.profit_transactions}")
    else:
        lines.append("No profits distributed today.")

    if summary.total_locked_balance > 0:
        lines.append(
            f"[LOCKED] Locked Profits: ${format_money(summary.total_locked_balance)}"
        )
        lines.append(f"[USERS] Users with Locked: {summary.users_with_locked_balance}")

    lines.append(f"[REPORT] Active Investments: {summary.active_investments}")
    lines.append(_RULE)
    lines.append("")
    return lines


def print_summary_report(
    session_factory: Callable[[], Session],
    day: date,
    out: TextIO,
) -> DailyDistributionSummary | None:
    """Print the daily report; return the summary, or None if it failed."""
    session = session_factory()
    try:
        summary = DistributionSelector(session).daily_summary(day)
    except SQLAlchemyError as exc:
        logger.error("summary_report_failed", exc_info=True)
        out.write(f"Error generating summary: {exc}\n")
        return None
    finally:
        session.close()

    for line in render_summary(summary):
        out.write(line + "\n")
    return summary
