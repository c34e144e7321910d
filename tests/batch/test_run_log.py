"""
Tests for the run log line format and append behavior.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from invest_batch.domain.types import DistributionRunResult
from invest_batch.run_log import append_run_log, format_run_log_line

WHEN = datetime(2024, 1, 31, 0, 0, 5, tzinfo=timezone.utc)


def _result(processed=12, errors=0, total=Decimal("1234.5")) -> DistributionRunResult:
    return DistributionRunResult(
        run_id=uuid4(),
        processed=processed,
        errors=errors,
        skipped=0,
        total_distributed=total,
        total_profit=total,
        total_principal_returned=Decimal("0"),
    )


class TestFormat:
    def test_without_errors(self):
        assert format_run_log_line(_result(), WHEN) == (
            "2024-01-31 00:00:05 - Profits distributed: 12 investments, $1,234.50 total\n"
        )

    def test_with_errors(self):
        line = format_run_log_line(_result(errors=1), WHEN)
        assert line.endswith("$1,234.50 total, 1 errors\n")

    def test_zero_run(self):
        line = format_run_log_line(_result(processed=0, total=Decimal("0")), WHEN)
        assert "0 investments, $0.00 total\n" in line


class TestAppend:
    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "logs" / "nested" / "daily-profits.log"
        returned = append_run_log(path, _result(), WHEN)

        assert returned == path
        assert path.read_text().count("\n") == 1

    def test_appends_one_line_per_run(self, tmp_path):
        path = tmp_path / "daily-profits.log"
        append_run_log(path, _result(processed=3, total=Decimal("60")), WHEN)
        append_run_log(path, _result(processed=2, errors=1, total=Decimal("40")), WHEN)

        lines = path.read_text().splitlines()
        assert lines == [
            "2024-01-31 00:00:05 - Profits distributed: 3 investments, $60.00 total",
            "2024-01-31 00:00:05 - Profits distributed: 2 investments, $40.00 total, 1 errors",
        ]
