"""Gemini client tests over a fake HTTP session."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal

import pytest
import requests

from kakebo.errors import CollaboratorUnavailable, MalformedResponse
from kakebo.models.category import Category
from kakebo.services.gateway import REPORT_FALLBACK, CollaboratorGateway
from kakebo.services.gemini import GeminiClient
from kakebo.services.reports import AdviceItem, AdviceRequest, ExpenseLine, ReportRequest


class FakeResponse:
    def __init__(self, payload=None, *, status_error=None, body_error=None):
        self.payload = payload
        self.status_error = status_error
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_error is not None:
            raise self.status_error

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class FakeSession:
    """Records POST calls and replays a queued response or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _text_payload(*texts: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


def _client(session: FakeSession) -> GeminiClient:
    return GeminiClient(
        api_key="secret",
        classifier_model="flash-model",
        writer_model="pro-model",
        api_base="https://example.test/v1beta/",
        timeout=5.0,
        session=session,
    )


def test_requires_api_key():
    with pytest.raises(ValueError):
        GeminiClient(api_key="", classifier_model="a", writer_model="b", api_base="https://x")


def test_classify_sends_schema_and_parses_label():
    session = FakeSession(FakeResponse(_text_payload(json.dumps({"category": "SURVIVAL"}))))

    label = _client(session).classify("Rent", Decimal("3200"))

    assert label == "SURVIVAL"
    call = session.calls[0]
    assert call["url"] == "https://example.test/v1beta/models/flash-model:generateContent"
    assert call["params"] == {"key": "secret"}
    assert call["timeout"] == 5.0
    schema = call["json"]["generationConfig"]["responseSchema"]
    assert schema["properties"]["category"]["enum"] == ["SURVIVAL", "LEISURE", "CULTURE", "EXTRAS"]
    assert "Rent" in call["json"]["contents"][0]["parts"][0]["text"]


@pytest.mark.parametrize("text", ["not json", json.dumps(["SURVIVAL"])])
def test_classify_rejects_malformed_answers(text):
    session = FakeSession(FakeResponse(_text_payload(text)))
    with pytest.raises(MalformedResponse):
        _client(session).classify("Rent", Decimal("1"))


def test_transport_failure_raises_unavailable():
    session = FakeSession(error=requests.ConnectionError("no route"))
    with pytest.raises(CollaboratorUnavailable) as excinfo:
        _client(session).classify("Rent", Decimal("1"))
    assert excinfo.value.service == "flash-model"


def test_http_error_raises_unavailable():
    response = FakeResponse(status_error=requests.HTTPError("500 Server Error"))
    with pytest.raises(CollaboratorUnavailable):
        _client(FakeSession(response)).write_advice(AdviceRequest(items=(), revenue=Decimal("1")))


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(body_error=ValueError("no json")),
        FakeResponse({"candidates": []}),
        FakeResponse(_text_payload("")),
    ],
)
def test_empty_or_unreadable_body_is_malformed(response):
    with pytest.raises(MalformedResponse):
        _client(FakeSession(response)).write_advice(AdviceRequest(items=(), revenue=Decimal("1")))


def test_write_advice_uses_writer_model_and_lists_items():
    session = FakeSession(FakeResponse(_text_payload("Negotiate ", "the rent.")))
    request = AdviceRequest(
        items=(AdviceItem("Rent", Decimal("3200")), AdviceItem("Power", Decimal("180"))),
        revenue=Decimal("5000"),
    )

    text = _client(session).write_advice(request)

    assert text == "Negotiate the rent."
    call = session.calls[0]
    assert call["url"].endswith("/models/pro-model:generateContent")
    prompt = call["json"]["contents"][0]["parts"][0]["text"]
    assert "- Rent: R$ 3200.00" in prompt
    assert "R$ 5000.00" in prompt
    assert "generationConfig" not in call["json"]


def test_write_report_includes_history():
    session = FakeSession(FakeResponse(_text_payload("REPORT")))
    request = ReportRequest(
        revenue=Decimal("1000"),
        expenses=(ExpenseLine(datetime(2024, 3, 5), Category.LEISURE, "Cinema", Decimal("40")),),
        savings=(),
        total_expenses=Decimal("40"),
        total_savings=Decimal("0"),
        balance=Decimal("960"),
    )

    assert _client(session).write_report(request) == "REPORT"
    prompt = session.calls[0]["json"]["contents"][0]["parts"][0]["text"]
    assert "2024-03-05 | Leisure & Vices: Cinema (R$ 40.00)" in prompt
    assert "No savings recorded." in prompt


def test_gateway_over_failing_client_returns_fallbacks():
    client = _client(FakeSession(error=requests.Timeout("slow")))
    gateway = CollaboratorGateway(classifier=client, advice_writer=client, report_writer=client)
    request = ReportRequest(
        revenue=Decimal("0"),
        expenses=(),
        savings=(),
        total_expenses=Decimal("0"),
        total_savings=Decimal("0"),
        balance=Decimal("0"),
    )

    assert gateway.classify("Rent", Decimal("1")) is Category.EXTRAS
    assert gateway.report(request) == REPORT_FALLBACK


def test_from_config(test_config):
    test_config.GEMINI_API_KEY = "from-env"
    session = FakeSession()

    client = GeminiClient.from_config(test_config, session=session)

    assert client.api_key == "from-env"
    assert client.classifier_model == test_config.CLASSIFIER_MODEL
    assert client.session is session
