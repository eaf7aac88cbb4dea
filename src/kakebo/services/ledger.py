"""In-memory ledger: revenue, expenses and the savings log."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..models.category import Category
from ..models.entries import (
    SAVINGS_PREFIX,
    SavingsLogEntry,
    Transaction,
    clean_description,
    parse_amount,
)
from ..models.snapshot import ZERO, BudgetSnapshot, compute_snapshot

logger = logging.getLogger("kakebo.ledger")


class Ledger:
    """Owns the budget state; every mutation returns the fresh snapshot.

    Lists are kept newest-first. Invalid input never raises: the operation is
    skipped and the unchanged snapshot is returned.
    """

    def __init__(self) -> None:
        self._revenue: Decimal = ZERO
        self._transactions: list[Transaction] = []
        self._savings: list[SavingsLogEntry] = []

    @property
    def revenue(self) -> Decimal:
        return self._revenue

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def savings(self) -> tuple[SavingsLogEntry, ...]:
        return tuple(self._savings)

    @property
    def latest_transaction(self) -> Optional[Transaction]:
        return self._transactions[0] if self._transactions else None

    def survival_transactions(self) -> tuple[Transaction, ...]:
        return tuple(t for t in self._transactions if t.category is Category.SURVIVAL)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    def snapshot(self) -> BudgetSnapshot:
        return compute_snapshot(
            revenue=self._revenue,
            transactions=self._transactions,
            savings=self._savings,
        )

    def set_revenue(self, value: object) -> BudgetSnapshot:
        """Configure the monthly revenue projection.

        Only the first valid positive value is taken; afterwards revenue can only
        change through :meth:`reset`.
        """

        amount = parse_amount(value)
        if amount is None:
            logger.debug("Rejected revenue value", extra={"value": repr(value)})
        elif self._revenue > 0:
            logger.debug("Revenue already configured; reset first")
        else:
            self._revenue = amount
            logger.info("Revenue set", extra={"revenue": str(amount)})
        return self.snapshot()

    def add_transaction(self, description: object, amount: object, category: Category) -> BudgetSnapshot:
        text = clean_description(description)
        value = parse_amount(amount)
        if text is None or value is None or not isinstance(category, Category):
            logger.debug(
                "Rejected expense",
                extra={"description": repr(description), "amount": repr(amount)},
            )
            return self.snapshot()

        txn = Transaction(description=text, amount=value, category=category)
        self._transactions.insert(0, txn)
        logger.info(
            "Expense recorded",
            extra={"transaction_id": txn.id, "category": category.name, "amount": str(value)},
        )
        return self.snapshot()

    def delete_transaction(self, transaction_id: object) -> BudgetSnapshot:
        """Remove a transaction by id; unknown ids are ignored."""

        for index, txn in enumerate(self._transactions):
            if txn.id == transaction_id:
                del self._transactions[index]
                logger.info("Expense deleted", extra={"transaction_id": txn.id})
                break
        return self.snapshot()

    def add_savings(self, description: object, amount: object) -> BudgetSnapshot:
        text = clean_description(description)
        value = parse_amount(amount)
        if text is None or value is None:
            logger.debug(
                "Rejected savings entry",
                extra={"description": repr(description), "amount": repr(amount)},
            )
            return self.snapshot()

        entry = SavingsLogEntry(description=f"{SAVINGS_PREFIX}{text}", amount=value)
        self._savings.insert(0, entry)
        logger.info("Savings recorded", extra={"savings_id": entry.id, "amount": str(value)})
        return self.snapshot()

    def reset(self) -> BudgetSnapshot:
        """Drop revenue and every entry in one step."""

        self._revenue, self._transactions, self._savings = ZERO, [], []
        logger.info("Ledger reset")
        return self.snapshot()


__all__ = ["Ledger"]
