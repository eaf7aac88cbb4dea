"""Pytest configuration and shared fixtures for Kakebo tests.

Collaborators are replaced by in-memory stubs so no test talks to a hosted
text service.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

import pytest

from kakebo.config import TestConfig
from kakebo.controller import BudgetController
from kakebo.models.category import Category
from kakebo.services.gateway import CollaboratorGateway
from kakebo.services.ledger import Ledger
from kakebo.services.monitor import ThresholdMonitor
from kakebo.services.reports import AdviceRequest, ReportRequest

# =============================================================================
# Collaborator stubs
# =============================================================================


class StubClassifier:
    """Answers a fixed label, a per-description label, or raises."""

    def __init__(
        self,
        label: Optional[str] = "EXTRAS",
        *,
        by_description: Optional[dict[str, str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.label = label
        self.by_description = by_description or {}
        self.error = error
        self.calls: list[tuple[str, Decimal]] = []

    def classify(self, description: str, amount: Decimal) -> Optional[str]:
        self.calls.append((description, amount))
        if self.error is not None:
            raise self.error
        return self.by_description.get(description, self.label)


class StubAdviceWriter:
    def __init__(self, text: Optional[str] = "Cut the cable bill.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.requests: list[AdviceRequest] = []

    def write_advice(self, request: AdviceRequest) -> Optional[str]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


class StubReportWriter:
    def __init__(self, text: Optional[str] = "1. OVERALL DIAGNOSIS\nAll good.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.requests: list[ReportRequest] = []

    def write_report(self, request: ReportRequest) -> Optional[str]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_kakebo_logging():
    """Drop handlers installed by setup_logging so streams never leak between tests."""

    yield
    root = logging.getLogger("kakebo")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def test_config(tmp_path, monkeypatch) -> TestConfig:
    """Configuration rooted in a temporary data directory."""

    monkeypatch.setenv("KAKEBO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("KAKEBO_DEV_MODE", "false")
    monkeypatch.delenv("KAKEBO_GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("KAKEBO_SURVIVAL_THRESHOLD", raising=False)
    return TestConfig()


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


@pytest.fixture
def classifier() -> StubClassifier:
    return StubClassifier(
        "EXTRAS",
        by_description={
            "Rent": Category.SURVIVAL.label,
            "Electricity": Category.SURVIVAL.label,
            "Groceries": Category.SURVIVAL.label,
            "Coffee": Category.LEISURE.label,
            "Python course": Category.CULTURE.label,
        },
    )


@pytest.fixture
def advice_writer() -> StubAdviceWriter:
    return StubAdviceWriter()


@pytest.fixture
def report_writer() -> StubReportWriter:
    return StubReportWriter()


@pytest.fixture
def gateway(classifier, advice_writer, report_writer) -> CollaboratorGateway:
    return CollaboratorGateway(
        classifier=classifier,
        advice_writer=advice_writer,
        report_writer=report_writer,
    )


@pytest.fixture
def controller(gateway, test_config) -> BudgetController:
    return BudgetController(
        gateway=gateway,
        monitor=ThresholdMonitor(threshold=test_config.survival_threshold_ratio),
        config=test_config,
    )


@pytest.fixture
def seed_ledger():
    """Factory: set revenue and append (description, amount, category) rows."""

    def _seed(ledger: Ledger, revenue="5000", entries=()) -> Ledger:
        ledger.set_revenue(revenue)
        for description, amount, category in entries:
            ledger.add_transaction(description, amount, category)
        return ledger

    return _seed
