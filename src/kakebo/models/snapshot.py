"""Derived, read-only budget aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from .category import Category
from .entries import SavingsLogEntry, Transaction

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _empty_totals() -> Mapping[Category, Decimal]:
    return MappingProxyType({category: ZERO for category in Category})


@dataclass(frozen=True, eq=False)
class BudgetSnapshot:
    """Aggregate view of the ledger at one point in time."""

    revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_savings: Decimal = ZERO
    category_totals: Mapping[Category, Decimal] = field(default_factory=_empty_totals)
    transaction_count: int = 0
    savings_count: int = 0

    @property
    def is_configured(self) -> bool:
        return self.revenue > 0

    @property
    def survival_total(self) -> Decimal:
        return self.category_totals[Category.SURVIVAL]

    @property
    def survival_ratio(self) -> Decimal:
        """Survival spending as a fraction of revenue; 0 while revenue is unset."""

        if self.revenue <= 0:
            return ZERO
        return self.survival_total / self.revenue

    @property
    def survival_percentage(self) -> Decimal:
        return self.survival_ratio * HUNDRED

    @property
    def expense_percentage(self) -> Decimal:
        if self.revenue <= 0:
            return ZERO
        return self.total_expenses / self.revenue * HUNDRED

    @property
    def available_balance(self) -> Decimal:
        return self.revenue - self.total_expenses + self.total_savings

    def spending_breakdown(self) -> list[tuple[Category, Decimal]]:
        """Non-empty categories, largest first (feeds charts and reports)."""

        items = [(cat, total) for cat, total in self.category_totals.items() if total > 0]
        items.sort(key=lambda item: item[1], reverse=True)
        return items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BudgetSnapshot):
            return NotImplemented
        return (
            self.revenue == other.revenue
            and self.total_expenses == other.total_expenses
            and self.total_savings == other.total_savings
            and dict(self.category_totals) == dict(other.category_totals)
            and self.transaction_count == other.transaction_count
            and self.savings_count == other.savings_count
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.revenue,
                self.total_expenses,
                self.total_savings,
                frozenset(self.category_totals.items()),
                self.transaction_count,
                self.savings_count,
            )
        )


def compute_snapshot(
    *,
    revenue: Decimal,
    transactions: Iterable[Transaction],
    savings: Iterable[SavingsLogEntry],
) -> BudgetSnapshot:
    """Fold ledger entries into a :class:`BudgetSnapshot`."""

    totals = {category: ZERO for category in Category}
    total_expenses = ZERO
    tx_count = 0
    for txn in transactions:
        totals[txn.category] += txn.amount
        total_expenses += txn.amount
        tx_count += 1

    total_savings = ZERO
    savings_count = 0
    for entry in savings:
        total_savings += entry.amount
        savings_count += 1

    return BudgetSnapshot(
        revenue=revenue,
        total_expenses=total_expenses,
        total_savings=total_savings,
        category_totals=MappingProxyType(totals),
        transaction_count=tx_count,
        savings_count=savings_count,
    )


__all__ = ["BudgetSnapshot", "compute_snapshot"]
