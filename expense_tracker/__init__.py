"""
Expense Tracker - Source Package

A personal expense dashboard that records spending events against a
remote REST store and presents totals, budget usage and category
breakdowns.

DESIGN PRINCIPLES:
1. The remote store is the only source of truth
2. Derived numbers come from pure functions over the last fetch
3. Failures are visible but never blank the dashboard
4. Every store operation is audited
5. Store backend is swappable
"""

__version__ = "2.0.0"
__author__ = "Expense Tracker Team"
