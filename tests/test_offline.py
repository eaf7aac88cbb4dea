"""Offline collaborator tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from kakebo.models.category import Category
from kakebo.services.offline import KeywordClassifier, RuleBasedAdviceWriter, RuleBasedReportWriter
from kakebo.services.reports import AdviceItem, AdviceRequest, build_report_request


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Monthly rent", "SURVIVAL"),
        ("Conta de luz", "SURVIVAL"),
        ("Farmácia", "SURVIVAL"),
        ("Netflix", "LEISURE"),
        ("Coffee with friends", "LEISURE"),
        ("Python course", "CULTURE"),
        ("Livro de receitas", "CULTURE"),
        ("Birthday gift", "EXTRAS"),
        ("Birthday present", "EXTRAS"),
        ("Parent visit", "EXTRAS"),
        ("Business trip", "EXTRAS"),
        ("Taxi to airport", "EXTRAS"),
        ("Barber", "EXTRAS"),
        ("Electricity bill", "SURVIVAL"),
        ("Weekly groceries", "SURVIVAL"),
        ("Movies night", "LEISURE"),
        ("", "EXTRAS"),
    ],
)
def test_keyword_classifier(description, expected):
    assert KeywordClassifier().classify(description, Decimal("10")) == expected


def test_advice_writer_highlights_heaviest_items():
    request = AdviceRequest(
        items=(
            AdviceItem("Water", Decimal("60")),
            AdviceItem("Rent", Decimal("3000")),
            AdviceItem("Power", Decimal("200")),
            AdviceItem("Internet", Decimal("100")),
        ),
        revenue=Decimal("5000"),
    )

    text = RuleBasedAdviceWriter(currency="$").write_advice(request)

    assert "67.2%" in text
    assert "- Rent ($ 3,000.00)" in text
    assert "Water" not in text
    assert 'Immediate action: call about "Rent"' in text


def test_advice_writer_without_items_returns_nothing():
    assert RuleBasedAdviceWriter().write_advice(AdviceRequest(items=(), revenue=Decimal("1"))) is None


def test_report_writer_has_four_sections(ledger, seed_ledger):
    seed_ledger(
        ledger,
        revenue="2000",
        entries=[("Rent", "1500", Category.SURVIVAL), ("Pizza", "60", Category.LEISURE)],
    )

    text = RuleBasedReportWriter(currency="R$").write_report(build_report_request(ledger))

    for heading in (
        "1. OVERALL DIAGNOSIS",
        "2. CATEGORY BREAKDOWN",
        "3. POINTS OF ATTENTION",
        "4. VERDICT AND ACTION PLAN",
    ):
        assert heading in text
    assert "- Survival: R$ 1,500.00 (75.0% of revenue)" in text
    assert "- Rent (R$ 1,500.00, Survival)" in text
    assert "currently 75.0%" in text


def test_report_writer_on_empty_ledger(ledger):
    text = RuleBasedReportWriter().write_report(build_report_request(ledger))

    assert "No expenses yet" in text
    assert "- No spending recorded." in text
    assert "- Nothing stands out." in text
