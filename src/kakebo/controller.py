"""Budget controller: the single owner of ledger state and dialog flow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import BaseConfig
from .models.category import Category
from .models.entries import clean_description, parse_amount
from .models.snapshot import BudgetSnapshot
from .services.dialogs import DialogMachine
from .services.export import export_bundle
from .services.gateway import CollaboratorGateway
from .services.gemini import GeminiClient
from .services.ledger import Ledger
from .services.monitor import ThresholdMonitor
from .services.offline import KeywordClassifier, RuleBasedAdviceWriter, RuleBasedReportWriter
from .services.reports import ReportAssembler, build_advice_request

logger = logging.getLogger("kakebo.controller")


class BudgetController:
    """Sequences user actions: ledger mutation, threshold check, collaborator calls.

    All public operations are total. Invalid input leaves the state untouched
    and collaborator failures surface only as fallback text.
    """

    def __init__(
        self,
        *,
        gateway: CollaboratorGateway,
        ledger: Optional[Ledger] = None,
        monitor: Optional[ThresholdMonitor] = None,
        assembler: Optional[ReportAssembler] = None,
        config: Optional[BaseConfig] = None,
    ) -> None:
        self.gateway = gateway
        self.ledger = ledger or Ledger()
        self.monitor = monitor or ThresholdMonitor()
        self.assembler = assembler or ReportAssembler()
        self.config = config

    @property
    def diagnosis(self) -> DialogMachine:
        return self.monitor.dialog

    @property
    def report(self) -> DialogMachine:
        return self.assembler.dialog

    def snapshot(self) -> BudgetSnapshot:
        return self.ledger.snapshot()

    def set_revenue(self, value: object) -> BudgetSnapshot:
        before = self.ledger.revenue
        snapshot = self.ledger.set_revenue(value)
        if snapshot.revenue != before:
            self._check_threshold(snapshot)
        return snapshot

    def add_expense(self, description: object, amount: object) -> BudgetSnapshot:
        """Classify and record an expense, then run the survival check."""

        text = clean_description(description)
        value = parse_amount(amount)
        if text is None or value is None:
            logger.debug("Expense rejected before classification")
            return self.ledger.snapshot()

        category = self.gateway.classify(text, value)
        snapshot = self.ledger.add_transaction(text, value, category)
        self._check_threshold(snapshot)
        return snapshot

    def save_money(self, description: object, amount: object) -> BudgetSnapshot:
        return self.ledger.add_savings(description, amount)

    def delete_transaction(self, transaction_id: object) -> BudgetSnapshot:
        removed = self.ledger.find_transaction(transaction_id) if isinstance(transaction_id, str) else None
        snapshot = self.ledger.delete_transaction(transaction_id)
        if removed is not None and removed.category is Category.SURVIVAL:
            self._check_threshold(snapshot)
        return snapshot

    def reset(self) -> BudgetSnapshot:
        """Clear revenue, both logs and both dialogs before anyone is notified."""

        was_open = (self.diagnosis.is_open, self.report.is_open)
        snapshot = self.ledger.reset()
        self.diagnosis.reset()
        self.report.reset()
        if was_open[0]:
            self.diagnosis.notify()
        if was_open[1]:
            self.report.notify()
        return snapshot

    def acknowledge_diagnosis(self) -> bool:
        return self.monitor.acknowledge()

    def request_report(self) -> str:
        """Open the report dialog and fill it with the collaborator narrative."""

        token, request = self.assembler.open(self.ledger)
        text = self.gateway.report(request)
        self.assembler.deliver(token, text)
        return self.assembler.text

    def close_report(self) -> bool:
        return self.assembler.close()

    def export_report(self, output_dir: Optional[Path] = None) -> Optional[tuple[Path, Path]]:
        """Write the last finished report and the ledger.

        Returns None when no report exists or the files could not be written.
        """

        text = self.assembler.latest_text()
        if text is None:
            return None
        if output_dir is None:
            output_dir = self.config.export_dir if self.config else Path("exports")
        try:
            paths = export_bundle(
                report_text=text,
                transactions=self.ledger.transactions,
                savings=self.ledger.savings,
                output_dir=output_dir,
            )
        except OSError:
            logger.exception("Report export failed", extra={"output_dir": str(output_dir)})
            return None
        logger.info("Report exported", extra={"report": str(paths[0]), "ledger": str(paths[1])})
        return paths

    def _check_threshold(self, snapshot: BudgetSnapshot) -> None:
        token = self.monitor.evaluate(self.ledger, snapshot)
        if token is None:
            return
        advice = self.gateway.advise(build_advice_request(self.ledger))
        self.monitor.deliver(token, advice)


def build_gateway(config: BaseConfig) -> CollaboratorGateway:
    """Hosted collaborators when an API key is configured, offline ones otherwise."""

    if config.use_hosted_collaborators:
        client = GeminiClient.from_config(config)
        return CollaboratorGateway(classifier=client, advice_writer=client, report_writer=client)

    logger.info("No API key configured; using offline collaborators")
    return CollaboratorGateway(
        classifier=KeywordClassifier(),
        advice_writer=RuleBasedAdviceWriter(currency=config.CURRENCY),
        report_writer=RuleBasedReportWriter(
            currency=config.CURRENCY, survival_limit=config.SURVIVAL_THRESHOLD
        ),
    )


def create_controller(
    config: Optional[BaseConfig] = None,
    gateway: Optional[CollaboratorGateway] = None,
) -> BudgetController:
    """Create a controller wired from configuration."""

    if config is None:
        config = BaseConfig()
    return BudgetController(
        gateway=gateway or build_gateway(config),
        monitor=ThresholdMonitor(threshold=config.survival_threshold_ratio),
        config=config,
    )


__all__ = ["BudgetController", "build_gateway", "create_controller"]
