"""Presentation helpers shared by front ends."""

from expense_tracker.presentation.formatting import (
    added_message,
    deleted_message,
    describe_listing,
    empty_listing_message,
    format_currency,
    format_date,
    format_signed_amount,
    updated_message,
)

__all__ = [
    "added_message",
    "deleted_message",
    "describe_listing",
    "empty_listing_message",
    "format_currency",
    "format_date",
    "format_signed_amount",
    "updated_message",
]
