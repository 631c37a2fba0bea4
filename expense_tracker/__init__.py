"""
Expense Tracker - Source Package

A personal finance tracker: users sign in, record income and expense
transactions, and review totals and filtered listings.

DESIGN PRINCIPLES:
1. The ledger engine owns all data rules; the UI only renders
2. Fail early, fail visibly
3. No silent corrections
4. Every mutation is persisted before it is reported
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
