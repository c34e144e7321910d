#!/usr/bin/env python3
"""
Daily profit distribution -- cron entry point.

Credits daily profit to every due investment, completes matured ones,
prints a summary report and appends one line to the run log.  Takes no
options; any argument is rejected with a usage message.

Configuration comes from invest_config (YAML plus INVEST_* environment
overrides).  Progress lines go to stdout, JSON logs to stderr.

Usage:
    python3 scripts/distribute_profits.py
    invest-distribute-profits

Exit status:
    0  run finished (individual item errors are reported, not fatal)
    1  configuration invalid, database unreachable or due list unreadable
    2  invalid invocation
"""

import argparse
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import yaml  # noqa: E402

from invest_batch.orchestrator import DistributionOrchestrator  # noqa: E402
from invest_config import get_active_config  # noqa: E402
from invest_kernel.exceptions import ConfigurationError, FatalSetupError  # noqa: E402

BANNER = "[START] DAILY PROFIT DISTRIBUTION"


def main(argv=None, *, out=None, clock=None, sleeper=time.sleep, environ=None) -> int:
    parser = argparse.ArgumentParser(
        prog="distribute_profits",
        description="Distribute daily investment profits (run from cron).",
    )
    parser.parse_args(argv)

    out = out or sys.stdout
    out.write(f"{BANNER}\n{'=' * 40}\n\n")

    try:
        config = get_active_config(environ=environ)
        orchestrator = DistributionOrchestrator.from_config(
            config, clock=clock, sleeper=sleeper, out=out,
        )
        orchestrator.run()
    except (ConfigurationError, FileNotFoundError, yaml.YAMLError) as exc:
        print(f"[ERROR] Configuration error: {exc}", file=sys.stderr)
        return 1
    except FatalSetupError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    out.write("[OK] Daily profit distribution completed!\n\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
