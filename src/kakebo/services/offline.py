"""Offline collaborators used when no hosted text service is configured.

They follow the same protocols as :class:`~kakebo.services.gemini.GeminiClient`
so the gateway and controller do not care which one is wired in.
"""

from __future__ import annotations

import re
import unicodedata
from decimal import Decimal
from typing import Optional

from ..models.category import Category
from .reports import AdviceRequest, ReportRequest

KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.SURVIVAL: (
        "rent", "aluguel", "mortgage", "electric", "electricity", "power", "luz", "energia",
        "water", "agua", "gas", "internet", "phone", "telefone", "grocery", "groceries",
        "mercado", "supermarket", "pharmacy", "farmacia", "health", "saude", "insurance",
        "seguro", "condo", "condominio", "bus", "transport", "transportation", "fuel", "school",
        "escola", "tax", "imposto",
    ),
    Category.LEISURE: (
        "coffee", "cafe", "restaurant", "bar", "beer", "cerveja", "pizza", "burger", "ifood",
        "delivery", "netflix", "spotify", "streaming", "cinema", "movie", "game", "hobby",
        "party", "festa", "snack", "lanche", "uber eats", "dessert",
    ),
    Category.CULTURE: (
        "book", "livro", "course", "curso", "class", "aula", "udemy", "workshop", "seminar",
        "software", "license", "licenca", "museum", "museu", "theater", "teatro", "magazine",
        "revista", "study", "estudo", "conference",
    ),
}


def _normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _money(currency: str, amount: Decimal) -> str:
    return f"{currency} {amount:,.2f}"


class KeywordClassifier:
    """Keyword clustering over the description; unknown text answers EXTRAS."""

    def __init__(self, keywords: Optional[dict[Category, tuple[str, ...]]] = None) -> None:
        self.keywords = keywords or KEYWORDS
        # whole words only, with an optional plural ending: "rent" never matches "parent"
        self._patterns = {
            category: re.compile(
                r"\b(?:" + "|".join(re.escape(term) for term in terms) + r")(?:s|es)?\b"
            )
            for category, terms in self.keywords.items()
        }

    def classify(self, description: str, amount: Decimal) -> Optional[str]:
        text = _normalize(description or "")
        for category, pattern in self._patterns.items():
            if pattern.search(text):
                return category.label
        return Category.EXTRAS.label


class RuleBasedAdviceWriter:
    """Points at the heaviest survival bills and asks about them."""

    def __init__(self, currency: str = "R$", top_n: int = 3) -> None:
        self.currency = currency
        self.top_n = top_n

    def write_advice(self, request: AdviceRequest) -> Optional[str]:
        if not request.items:
            return None
        heaviest = sorted(request.items, key=lambda item: item.amount, reverse=True)[: self.top_n]
        share = (
            request.survival_total / request.revenue * 100 if request.revenue > 0 else Decimal("0")
        )

        lines = [
            f"Your essential bills already take {share:.1f}% of the revenue you planned "
            f"({_money(self.currency, request.revenue)}). The Spending Wolf is at the door.",
            "",
        ]
        for item in heaviest:
            lines.append(
                f"- {item.description} ({_money(self.currency, item.amount)}): "
                "is this price fixed, or could it be renegotiated or shared?"
            )
        lines.extend(
            [
                "",
                f"Immediate action: call about \"{heaviest[0].description}\" this week "
                "and ask for a better deal.",
            ]
        )
        return "\n".join(lines)


class RuleBasedReportWriter:
    """Four-section narrative built from the totals only."""

    def __init__(self, currency: str = "R$", survival_limit: Decimal = Decimal("60")) -> None:
        self.currency = currency
        self.survival_limit = survival_limit

    def write_report(self, request: ReportRequest) -> Optional[str]:
        def money(amount: Decimal) -> str:
            return _money(self.currency, amount)

        revenue = request.revenue

        if request.total_savings >= request.total_expenses and request.total_savings > 0:
            diagnosis = "You are feeding the Piggy Bank more than the Wolf. Keep it up."
        elif request.total_expenses == 0:
            diagnosis = "No expenses yet. The Wolf is hungry but has not eaten."
        else:
            diagnosis = "The Wolf is eating more than the Piggy Bank. Time to tighten the belt."

        breakdown = []
        for category, total in request.category_totals:
            if total <= 0:
                continue
            share = total / revenue * 100 if revenue > 0 else Decimal("0")
            breakdown.append(f"- {category.display.title}: {money(total)} ({share:.1f}% of revenue)")
        if not breakdown:
            breakdown.append("- No spending recorded.")

        attention = sorted(request.expenses, key=lambda line: line.amount, reverse=True)[:3]
        attention_lines = [
            f"- {line.description} ({money(line.amount)}, {line.category.display.title})"
            for line in attention
        ] or ["- Nothing stands out."]

        survival = dict(request.category_totals).get(Category.SURVIVAL, Decimal("0"))
        survival_share = survival / revenue * 100 if revenue > 0 else Decimal("0")
        steps = [
            "1. Write down every expense the day it happens.",
            f"2. Keep Survival under {self.survival_limit}% of revenue "
            f"(currently {survival_share:.1f}%).",
            "3. Move part of what is left to savings as soon as revenue arrives.",
        ]

        sections = [
            "Official Budget Guardian Report",
            "",
            "1. OVERALL DIAGNOSIS",
            diagnosis,
            f"Revenue {money(revenue)}, spent {money(request.total_expenses)}, "
            f"saved {money(request.total_savings)}, balance {money(request.balance)}.",
            "",
            "2. CATEGORY BREAKDOWN",
            *breakdown,
            "",
            "3. POINTS OF ATTENTION",
            *attention_lines,
            "",
            "4. VERDICT AND ACTION PLAN",
            *steps,
            "Every coin you track is a lesson you teach yourself.",
        ]
        return "\n".join(sections)


__all__ = ["KEYWORDS", "KeywordClassifier", "RuleBasedAdviceWriter", "RuleBasedReportWriter"]
