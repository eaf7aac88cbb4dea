"""Report assembly tests."""

from __future__ import annotations

from decimal import Decimal

from kakebo.models.category import Category
from kakebo.services.dialogs import DialogState
from kakebo.services.reports import ReportAssembler, build_advice_request, build_report_request


def test_advice_request_lists_only_survival_items(ledger, seed_ledger):
    seed_ledger(
        ledger,
        revenue="5000",
        entries=[
            ("Rent", "3200", Category.SURVIVAL),
            ("Coffee", "15", Category.LEISURE),
            ("Electricity", "180", Category.SURVIVAL),
        ],
    )

    request = build_advice_request(ledger)

    assert request.revenue == Decimal("5000")
    assert [item.description for item in request.items] == ["Electricity", "Rent"]
    assert request.survival_total == Decimal("3380")


def test_report_request_carries_logs_and_totals(ledger, seed_ledger):
    seed_ledger(
        ledger,
        revenue="2000",
        entries=[("Rent", "900", Category.SURVIVAL), ("Cinema", "40", Category.LEISURE)],
    )
    ledger.add_savings("Walked to work", "12")

    request = build_report_request(ledger)

    assert request.revenue == Decimal("2000")
    assert [line.description for line in request.expenses] == ["Cinema", "Rent"]
    assert request.expenses[1].category is Category.SURVIVAL
    assert [line.description for line in request.savings] == ["Savings: Walked to work"]
    assert request.total_expenses == Decimal("940")
    assert request.total_savings == Decimal("12")
    assert request.balance == Decimal("1072")
    assert dict(request.category_totals)[Category.LEISURE] == Decimal("40")


def test_empty_ledger_report_request(ledger):
    request = build_report_request(ledger)

    assert request.expenses == ()
    assert request.savings == ()
    assert request.balance == 0


def test_assembler_latest_request_wins(ledger):
    assembler = ReportAssembler()
    first, _ = assembler.open(ledger)
    second, _ = assembler.open(ledger)

    assert assembler.deliver(first, "stale report") is False
    assert assembler.state is DialogState.LOADING
    assert assembler.latest_text() is None

    assert assembler.deliver(second, "fresh report")
    assert assembler.state is DialogState.READY
    assert assembler.latest_text() == "fresh report"


def test_latest_text_survives_close(ledger):
    assembler = ReportAssembler()
    token, _ = assembler.open(ledger)
    assembler.deliver(token, "report body")
    assembler.close()

    assert assembler.state is DialogState.CLOSED
    assert assembler.latest_text() == "report body"
