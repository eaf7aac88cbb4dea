"""Survival-ratio watch that decides when the diagnosis dialog opens."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..models.category import Category
from ..models.snapshot import BudgetSnapshot
from .dialogs import DialogMachine, DialogState
from .ledger import Ledger

logger = logging.getLogger("kakebo.monitor")

DEFAULT_THRESHOLD = Decimal("0.60")


class ThresholdMonitor:
    """Fires guidance once per causal survival expense.

    The trigger needs a configured revenue, a survival ratio at or above the
    threshold, a Survival transaction at the head of the ledger and a closed
    diagnosis dialog. A ratio that stays high after unrelated edits does not
    re-fire.
    """

    def __init__(self, threshold: Decimal = DEFAULT_THRESHOLD) -> None:
        if not Decimal(0) < threshold <= Decimal(1):
            raise ValueError("threshold must be a fraction in (0, 1]")
        self.threshold = threshold
        self.dialog = DialogMachine("diagnosis")

    @property
    def state(self) -> DialogState:
        return self.dialog.state

    @property
    def advice(self) -> str:
        return self.dialog.content

    def should_trigger(self, ledger: Ledger, snapshot: Optional[BudgetSnapshot] = None) -> bool:
        snapshot = snapshot or ledger.snapshot()
        if not snapshot.is_configured or snapshot.survival_ratio < self.threshold:
            return False
        latest = ledger.latest_transaction
        if latest is None or latest.category is not Category.SURVIVAL:
            return False
        return not self.dialog.is_open

    def evaluate(self, ledger: Ledger, snapshot: Optional[BudgetSnapshot] = None) -> Optional[int]:
        """Open the dialog when the trigger holds; returns the request token."""

        snapshot = snapshot or ledger.snapshot()
        if not self.should_trigger(ledger, snapshot):
            return None
        token = self.dialog.begin()
        logger.warning(
            "Survival threshold crossed",
            extra={
                "survival_percentage": f"{snapshot.survival_percentage:.1f}",
                "threshold_percentage": f"{self.threshold * 100:.1f}",
            },
        )
        return token

    def deliver(self, token: int, advice: str) -> bool:
        return self.dialog.resolve(token, advice)

    def acknowledge(self) -> bool:
        return self.dialog.close()


__all__ = ["DEFAULT_THRESHOLD", "ThresholdMonitor"]
