"""
Investment Kernel

The profit-distribution and balance-ledger engine:
- Pure profit calculation from elapsed days
- Atomic balance increments (locked / immediate modes)
- Append-only transaction log
- Exactly-once active -> completed transitions
"""

__version__ = "0.1.0"
