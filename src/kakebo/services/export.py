"""Export helpers: report text and ledger CSV."""

from __future__ import annotations

import csv
import itertools
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ..models.entries import SavingsLogEntry, Transaction

LEDGER_HEADERS = ["kind", "id", "created_at", "category", "description", "amount"]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


def export_ledger_csv(
    *,
    transactions: Iterable[Transaction],
    savings: Iterable[SavingsLogEntry],
    output_path: Path,
) -> Path:
    """Write expenses then savings entries to CSV at ``output_path``.

    Columns are deterministic: kind, id, created_at, category, description, amount.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=LEDGER_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for txn in transactions:
            writer.writerow(
                {
                    "kind": "expense",
                    "id": txn.id,
                    "created_at": _serialize_value(txn.created_at),
                    "category": txn.category.name,
                    "description": txn.description,
                    "amount": _serialize_value(txn.amount),
                }
            )
        for entry in savings:
            writer.writerow(
                {
                    "kind": "savings",
                    "id": entry.id,
                    "created_at": _serialize_value(entry.created_at),
                    "category": "",
                    "description": entry.description,
                    "amount": _serialize_value(entry.amount),
                }
            )
    return output_path


def export_report_text(*, text: str, output_path: Path) -> Path:
    """Write the narrative exactly as the collaborator returned it."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    return output_path


def export_bundle(
    *,
    report_text: str,
    transactions: Iterable[Transaction],
    savings: Iterable[SavingsLogEntry],
    output_dir: Path,
    stamp: datetime | None = None,
) -> tuple[Path, Path]:
    """Write ``report-<stamp>.txt`` and ``ledger-<stamp>.csv``; returns both paths.

    Existing files are never overwritten: a second export in the same second
    gets ``-1``, ``-2``... appended to the stamp.
    """

    base = (stamp or datetime.now()).strftime("%Y%m%d-%H%M%S")
    suffix = base
    counter = itertools.count(1)
    while (output_dir / f"report-{suffix}.txt").exists() or (
        output_dir / f"ledger-{suffix}.csv"
    ).exists():
        suffix = f"{base}-{next(counter)}"
    report_path = export_report_text(text=report_text, output_path=output_dir / f"report-{suffix}.txt")
    ledger_path = export_ledger_csv(
        transactions=transactions,
        savings=savings,
        output_path=output_dir / f"ledger-{suffix}.csv",
    )
    return report_path, ledger_path


__all__ = ["LEDGER_HEADERS", "export_bundle", "export_ledger_csv", "export_report_text"]
