"""Kakebo envelope budgeting engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .controller import BudgetController, create_controller
from .models import BudgetSnapshot, Category

__all__ = [
    "BaseConfig",
    "BudgetController",
    "BudgetSnapshot",
    "Category",
    "DevConfig",
    "TestConfig",
    "create_controller",
]
