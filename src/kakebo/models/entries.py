"""Ledger entries: expenses and savings events."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from .category import Category

AmountLike = Union[Decimal, int, float, str]

SAVINGS_PREFIX = "Savings: "

_SEQUENCE = itertools.count(1)

# Amounts outside 1e-15 .. 1e15 overflow or underflow the snapshot arithmetic
MAX_AMOUNT_EXPONENT = 15
MIN_AMOUNT_EXPONENT = -15


def new_entry_id() -> str:
    """Return an id that stays unique for entries created in the same millisecond."""

    return f"{time.time_ns() // 1_000_000}-{next(_SEQUENCE)}"


def parse_amount(value: object) -> Optional[Decimal]:
    """Return ``value`` as a positive finite Decimal, or None when it is not one.

    Locale normalization (``"12,50"`` -> ``"12.50"``) is the caller's job.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    if not MIN_AMOUNT_EXPONENT <= amount.adjusted() <= MAX_AMOUNT_EXPONENT:
        return None
    return amount


def clean_description(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True, slots=True)
class Transaction:
    """An expense recorded in the ledger. Never edited, only deleted."""

    description: str
    amount: Decimal
    category: Category
    id: str = field(default_factory=new_entry_id)
    created_at: datetime = field(default_factory=datetime.now)
    # Reserved for income entries; the expense path always sets True
    is_expense: bool = True

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("Transaction amount must be positive")
        if not self.description:
            raise ValueError("Transaction description must not be empty")


@dataclass(frozen=True, slots=True)
class SavingsLogEntry:
    """Money diverted away from spending (a negotiated bill, a skipped purchase)."""

    description: str
    amount: Decimal
    id: str = field(default_factory=new_entry_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("Savings amount must be positive")


__all__ = [
    "AmountLike",
    "MAX_AMOUNT_EXPONENT",
    "MIN_AMOUNT_EXPONENT",
    "SAVINGS_PREFIX",
    "SavingsLogEntry",
    "Transaction",
    "clean_description",
    "new_entry_id",
    "parse_amount",
]
