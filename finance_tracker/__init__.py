"""
Finance Tracker - Source Package

A personal finance tracker: record income and expenses, plan monthly
budgets per category, follow savings goals and read period dashboards.

DESIGN PRINCIPLES:
1. Source records are the only state; every figure is derived on read
2. Engines are pure functions of (records, period, today)
3. Every mutation is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
