"""Domain models for the Kakebo budget engine."""

from __future__ import annotations

from .category import CATEGORY_DISPLAY, Category, CategoryDisplay
from .entries import SAVINGS_PREFIX, SavingsLogEntry, Transaction, parse_amount
from .snapshot import BudgetSnapshot, compute_snapshot

__all__ = [
    "BudgetSnapshot",
    "CATEGORY_DISPLAY",
    "Category",
    "CategoryDisplay",
    "SAVINGS_PREFIX",
    "SavingsLogEntry",
    "Transaction",
    "compute_snapshot",
    "parse_amount",
]
