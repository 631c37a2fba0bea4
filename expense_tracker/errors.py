"""Base exception shared by every package in the expense tracker."""


class ExpenseTrackerError(Exception):
    """Base for all recoverable, user-facing errors."""
    pass
