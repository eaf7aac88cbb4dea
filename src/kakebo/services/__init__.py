"""Service module exports."""

from . import (
    dialogs,
    export,
    gateway,
    gemini,
    ledger,
    monitor,
    offline,
    reports,
)

__all__ = [
    "dialogs",
    "export",
    "gateway",
    "gemini",
    "ledger",
    "monitor",
    "offline",
    "reports",
]
