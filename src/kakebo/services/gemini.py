"""Hosted collaborators backed by the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Optional

import requests

from ..config import BaseConfig
from ..errors import CollaboratorUnavailable, MalformedResponse
from ..models.category import Category
from .reports import AdviceRequest, ReportRequest

logger = logging.getLogger("kakebo.gemini")

SYSTEM_INSTRUCTION = """
You are the "Budget Guardian", a financial mentor for teachers who run their own business.
Your voice is educational, empathetic and focused on results.
Your job is to classify expenses with the Kakebo method and help the user save.
The categories are:
1. Survival (essentials, fixed bills, rent, electricity)
2. Leisure and Vices (restaurants, streaming, hobbies, non-essentials)
3. Culture and Study (books, courses, work software)
4. Extras (repairs, emergencies, gifts)
"""

ADVICE_PROMPT = """
The user is a teacher who runs their own business.
The 'Survival' category has reached more than {threshold} of the projected revenue ({revenue}).
Current survival expenses:
{items}

As the Budget Guardian, analyse the list above.
1. Point out 2 or 3 items that look high or negotiable.
2. Ask direct, reflective questions about those items to encourage saving.
3. Be brief and empathetic, but firm against the "Spending Wolf".
4. Suggest one immediate action.

Do not use complex Markdown, only plain text and line breaks.
"""

REPORT_PROMPT = """
Write an "Official Budget Guardian Report" with an educational, strategic tone.

FINANCIAL DATA:
- Projected revenue: {revenue}
- Total spent (the Wolf): {total_expenses}
- Total saved (the Piggy Bank): {total_savings}
- Real balance: {balance}

EXPENSE HISTORY:
{expenses}

SAVINGS HISTORY:
{savings}

REQUIRED STRUCTURE:

TITLE: Official Budget Guardian Report

1. OVERALL DIAGNOSIS
Briefly assess whether the user is feeding the Wolf (spending) or the Piggy Bank (saving). Use metaphors.

2. CATEGORY BREAKDOWN
Analyse how spending is spread. Is any category excessive? (Survival, Leisure, Culture, Extras).

3. POINTS OF ATTENTION
Name 2 or 3 specific expenses that could be avoided or reduced. Be direct.

4. VERDICT AND ACTION PLAN
Give 3 practical steps for the next cycle. Finish with a motivating sentence for a teacher-entrepreneur.

IMPORTANT:
- Be strict about waste but kind to the person.
- Do not use Markdown bold; use UPPER CASE for emphasis because the report is shown as plain text.
"""


def _money(currency: str, amount: Decimal) -> str:
    return f"{currency} {amount:.2f}"


class GeminiClient:
    """Implements the classifier, advice and report collaborators over HTTP.

    Errors surface as :class:`~kakebo.errors.CollaboratorError` subclasses; the
    gateway is responsible for turning them into fallbacks.
    """

    def __init__(
        self,
        *,
        api_key: str,
        classifier_model: str,
        writer_model: str,
        api_base: str,
        timeout: float = 30.0,
        currency: str = "R$",
        threshold_percentage: Decimal = Decimal("60"),
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required for the hosted collaborators")
        self.api_key = api_key
        self.classifier_model = classifier_model
        self.writer_model = writer_model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.currency = currency
        self.threshold_percentage = threshold_percentage
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: BaseConfig, session: Optional[requests.Session] = None) -> "GeminiClient":
        return cls(
            api_key=config.GEMINI_API_KEY or "",
            classifier_model=config.CLASSIFIER_MODEL,
            writer_model=config.WRITER_MODEL,
            api_base=config.API_BASE,
            timeout=config.REQUEST_TIMEOUT,
            currency=config.CURRENCY,
            threshold_percentage=config.SURVIVAL_THRESHOLD,
            session=session,
        )

    # Collaborator protocol implementations

    def classify(self, description: str, amount: Decimal) -> Optional[str]:
        labels = [c.label for c in Category.classifiable()]
        prompt = (
            f'Classify the following expense: "{description}" worth {_money(self.currency, amount)}. '
            f"Answer ONLY with one of these JSON keys: {', '.join(json.dumps(label) for label in labels)}."
        )
        generation_config = {
            "responseMimeType": "application/json",
            "responseSchema": {
                "type": "OBJECT",
                "properties": {"category": {"type": "STRING", "enum": labels}},
            },
        }
        text = self._generate(self.classifier_model, prompt, generation_config=generation_config)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedResponse("Classifier answered with invalid JSON", service="classify") from exc
        if not isinstance(payload, dict):
            raise MalformedResponse("Classifier answer is not a JSON object", service="classify")
        return payload.get("category")

    def write_advice(self, request: AdviceRequest) -> Optional[str]:
        items = "\n".join(
            f"- {item.description}: {_money(self.currency, item.amount)}" for item in request.items
        )
        prompt = ADVICE_PROMPT.format(
            threshold=f"{self.threshold_percentage}%",
            revenue=_money(self.currency, request.revenue),
            items=items,
        )
        return self._generate(self.writer_model, prompt)

    def write_report(self, request: ReportRequest) -> Optional[str]:
        expenses = "\n".join(
            f"- {line.date:%Y-%m-%d} | {line.category.display.title}: {line.description} "
            f"({_money(self.currency, line.amount)})"
            for line in request.expenses
        )
        savings = "\n".join(
            f"- {line.date:%Y-%m-%d} | {line.description} ({_money(self.currency, line.amount)})"
            for line in request.savings
        )
        prompt = REPORT_PROMPT.format(
            revenue=_money(self.currency, request.revenue),
            total_expenses=_money(self.currency, request.total_expenses),
            total_savings=_money(self.currency, request.total_savings),
            balance=_money(self.currency, request.balance),
            expenses=expenses or "No expenses recorded.",
            savings=savings or "No savings recorded.",
        )
        return self._generate(self.writer_model, prompt)

    # HTTP plumbing

    def _generate(
        self,
        model: str,
        prompt: str,
        *,
        generation_config: Optional[dict[str, Any]] = None,
    ) -> str:
        url = f"{self.api_base}/models/{model}:generateContent"
        body: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION.strip()}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if generation_config:
            body["generationConfig"] = generation_config

        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CollaboratorUnavailable(f"Request to {model} failed: {exc}", service=model) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponse("Response body is not JSON", service=model) from exc

        text = _extract_text(data)
        if not text:
            raise MalformedResponse("Response carried no text", service=model)
        logger.debug("Collaborator answered", extra={"model": model, "chars": len(text)})
        return text


def _extract_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate."""

    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


__all__ = ["GeminiClient", "SYSTEM_INSTRUCTION"]
