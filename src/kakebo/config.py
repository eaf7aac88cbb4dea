"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        return Decimal(raw.strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Kakebo"
    LOG_FILENAME = "kakebo.log"
    EXPORT_DIRNAME = "exports"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("KAKEBO_DEV_MODE", default=True)
        self.SURVIVAL_THRESHOLD = _env_decimal("KAKEBO_SURVIVAL_THRESHOLD", "60")
        self.GEMINI_API_KEY = os.getenv("KAKEBO_GEMINI_API_KEY") or None
        self.CLASSIFIER_MODEL = os.getenv("KAKEBO_CLASSIFIER_MODEL", "gemini-3-flash-preview")
        self.WRITER_MODEL = os.getenv("KAKEBO_WRITER_MODEL", "gemini-3-pro-preview")
        self.API_BASE = os.getenv("KAKEBO_API_BASE", DEFAULT_API_BASE).rstrip("/")
        self.REQUEST_TIMEOUT = float(_env_decimal("KAKEBO_REQUEST_TIMEOUT", "30"))
        self.CURRENCY = os.getenv("KAKEBO_CURRENCY", "R$")

        if not Decimal(0) < self.SURVIVAL_THRESHOLD <= Decimal(100):
            raise ValueError("KAKEBO_SURVIVAL_THRESHOLD must be in the range (0, 100].")
        if self.REQUEST_TIMEOUT <= 0:
            raise ValueError("KAKEBO_REQUEST_TIMEOUT must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and exports live."""

        data_root = os.getenv("KAKEBO_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    @property
    def survival_threshold_ratio(self) -> Decimal:
        """Threshold expressed as a fraction of revenue (60 -> 0.60)."""

        return self.SURVIVAL_THRESHOLD / Decimal(100)

    @property
    def export_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.EXPORT_DIRNAME

    @property
    def use_hosted_collaborators(self) -> bool:
        return bool(self.GEMINI_API_KEY)


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test suite; never talks to hosted services."""

    DEBUG = False
    TESTING = True
    __test__ = False

    def __init__(self) -> None:
        super().__init__()
        self.GEMINI_API_KEY = None


_CONFIGS: dict[str, type[BaseConfig]] = {
    "base": BaseConfig,
    "dev": DevConfig,
    "development": DevConfig,
    "test": TestConfig,
    "testing": TestConfig,
}


def get_config(name: str | None = None) -> BaseConfig:
    """Instantiate the configuration class registered under ``name``."""

    key = (name or os.getenv("KAKEBO_ENV", "base")).strip().lower()
    try:
        return _CONFIGS[key]()
    except KeyError as exc:
        raise ValueError(f"Unknown configuration {name!r}") from exc


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "get_config"]
