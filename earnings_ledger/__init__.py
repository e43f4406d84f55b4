"""
Daily Earnings Ledger - Source Package

A daily-goal earnings tracker that turns missed days into debt and
routes surplus income to the oldest unpaid days or a savings jar.

DESIGN PRINCIPLES:
1. The reconciliation engine is pure - "today" is always passed in
2. Validate before mutating, never after
3. No silent corrections
4. Every state change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Daily Earnings Ledger Team"
