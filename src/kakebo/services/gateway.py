"""Boundary to the external text services, with fallbacks on every failure."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Protocol

from ..models.category import Category
from .reports import AdviceRequest, ReportRequest

logger = logging.getLogger("kakebo.gateway")

ADVICE_FALLBACK = (
    "We detected an imbalance in your essential spending. "
    "Review your fixed bills and look for one you can renegotiate this week."
)
REPORT_FALLBACK = (
    "Sorry, the report could not be generated right now. Please try again later."
)


class Classifier(Protocol):
    """Assigns an expense to a category label such as ``"SURVIVAL"``."""

    def classify(self, description: str, amount: Decimal) -> Optional[str]:  # pragma: no cover - interface
        ...


class AdviceWriter(Protocol):
    """Writes guidance when survival spending crosses the threshold."""

    def write_advice(self, request: AdviceRequest) -> Optional[str]:  # pragma: no cover - interface
        ...


class ReportWriter(Protocol):
    """Writes the narrative budget report."""

    def write_report(self, request: ReportRequest) -> Optional[str]:  # pragma: no cover - interface
        ...


class CollaboratorGateway:
    """Uniform contract over the three collaborators.

    Every call returns a domain value. Exceptions, empty answers and unknown
    labels are logged and replaced with ``Category.EXTRAS``, ``ADVICE_FALLBACK``
    or ``REPORT_FALLBACK``.
    """

    def __init__(
        self,
        *,
        classifier: Classifier,
        advice_writer: AdviceWriter,
        report_writer: ReportWriter,
        advice_fallback: str = ADVICE_FALLBACK,
        report_fallback: str = REPORT_FALLBACK,
    ) -> None:
        self.classifier = classifier
        self.advice_writer = advice_writer
        self.report_writer = report_writer
        self.advice_fallback = advice_fallback
        self.report_fallback = report_fallback

    def classify(self, description: str, amount: Decimal) -> Category:
        try:
            label = self.classifier.classify(description, amount)
        except Exception:
            logger.exception("Classification failed", extra={"description": description})
            return Category.EXTRAS

        category = Category.from_label(label)
        if category not in Category.classifiable():
            # UNCATEGORIZED is not an answer the classifier may give
            category = Category.EXTRAS
        if label is None or category.name != str(label).strip().upper():
            logger.warning(
                "Unexpected classifier label; using fallback",
                extra={"label": repr(label), "fallback": category.name},
            )
        return category

    def advise(self, request: AdviceRequest) -> str:
        try:
            text = self.advice_writer.write_advice(request)
        except Exception:
            logger.exception("Advice generation failed", extra={"items": len(request.items)})
            return self.advice_fallback
        if not isinstance(text, str) or not text.strip():
            logger.warning("Advice collaborator returned no text")
            return self.advice_fallback
        return text

    def report(self, request: ReportRequest) -> str:
        try:
            text = self.report_writer.write_report(request)
        except Exception:
            logger.exception("Report generation failed", extra={"expenses": len(request.expenses)})
            return self.report_fallback
        if not isinstance(text, str) or not text.strip():
            logger.warning("Report collaborator returned no text")
            return self.report_fallback
        return text


__all__ = [
    "ADVICE_FALLBACK",
    "AdviceWriter",
    "Classifier",
    "CollaboratorGateway",
    "REPORT_FALLBACK",
    "ReportWriter",
]
