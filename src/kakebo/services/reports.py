"""Assemble collaborator inputs from ledger state and track the report dialog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..models.category import Category
from .dialogs import DialogMachine, DialogState
from .ledger import Ledger

logger = logging.getLogger("kakebo.reports")


@dataclass(frozen=True, slots=True)
class AdviceItem:
    description: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class AdviceRequest:
    """Input for the advice collaborator: survival expenses against revenue."""

    items: tuple[AdviceItem, ...]
    revenue: Decimal

    @property
    def survival_total(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))


@dataclass(frozen=True, slots=True)
class ExpenseLine:
    date: datetime
    category: Category
    description: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class SavingsLine:
    date: datetime
    description: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class ReportRequest:
    """Full data set handed to the report collaborator."""

    revenue: Decimal
    expenses: tuple[ExpenseLine, ...]
    savings: tuple[SavingsLine, ...]
    total_expenses: Decimal
    total_savings: Decimal
    balance: Decimal
    category_totals: tuple[tuple[Category, Decimal], ...] = ()


def build_advice_request(ledger: Ledger) -> AdviceRequest:
    return AdviceRequest(
        items=tuple(
            AdviceItem(description=t.description, amount=t.amount)
            for t in ledger.survival_transactions()
        ),
        revenue=ledger.revenue,
    )


def build_report_request(ledger: Ledger) -> ReportRequest:
    """Serialize revenue, both logs and the derived totals."""

    snapshot = ledger.snapshot()
    return ReportRequest(
        revenue=snapshot.revenue,
        expenses=tuple(
            ExpenseLine(
                date=t.created_at,
                category=t.category,
                description=t.description,
                amount=t.amount,
            )
            for t in ledger.transactions
        ),
        savings=tuple(
            SavingsLine(date=s.created_at, description=s.description, amount=s.amount)
            for s in ledger.savings
        ),
        total_expenses=snapshot.total_expenses,
        total_savings=snapshot.total_savings,
        balance=snapshot.available_balance,
        category_totals=tuple(snapshot.category_totals.items()),
    )


class ReportAssembler:
    """Owns the report dialog; opened only on explicit user request.

    The dialog is restartable: asking again while a report is loading issues a
    new request and only the newest result is shown.
    """

    def __init__(self) -> None:
        self.dialog = DialogMachine("report", restartable=True)

    @property
    def state(self) -> DialogState:
        return self.dialog.state

    @property
    def text(self) -> str:
        return self.dialog.content

    def open(self, ledger: Ledger) -> tuple[int, ReportRequest]:
        request = build_report_request(ledger)
        token = self.dialog.begin()
        # begin() never refuses a restartable dialog
        assert token is not None
        logger.info(
            "Report requested",
            extra={"token": token, "expenses": len(request.expenses), "savings": len(request.savings)},
        )
        return token, request

    def deliver(self, token: int, text: str) -> bool:
        return self.dialog.resolve(token, text)

    def close(self) -> bool:
        return self.dialog.close()

    def latest_text(self) -> Optional[str]:
        """Last finished report text (kept after close), None if none is ready."""

        if not self.dialog.is_loading and self.dialog.content:
            return self.dialog.content
        return None


__all__ = [
    "AdviceItem",
    "AdviceRequest",
    "ExpenseLine",
    "ReportAssembler",
    "ReportRequest",
    "SavingsLine",
    "build_advice_request",
    "build_report_request",
]
