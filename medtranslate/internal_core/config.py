from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import MissingCredential

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUTHY


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class TranslatorConfig:
    GEMINI_API_KEY: str
    GEMINI_MODEL: str
    GEMINI_BASE_URL: str
    MEDTRANSLATE_HTTP_TIMEOUT_SEC: float
    MEDTRANSLATE_HOST: str
    PORT: int
    MEDTRANSLATE_LEDGER_CAPACITY: int
    MEDTRANSLATE_LEDGER_LIST_LIMIT: int
    MEDTRANSLATE_HEALTH_INTERVAL_SEC: float
    MEDTRANSLATE_SPEECH_RATE: float
    MEDTRANSLATE_SPEECH_PITCH: float
    MEDTRANSLATE_MEDICAL_MODE: bool
    MEDTRANSLATE_LOG_LEVEL: str

    def has_api_key(self) -> bool:
        return bool(self.GEMINI_API_KEY.strip())


def load_config() -> TranslatorConfig:
    return TranslatorConfig(
        GEMINI_API_KEY=_getenv_str("GEMINI_API_KEY", ""),
        GEMINI_MODEL=_getenv_str("GEMINI_MODEL", "gemini-2.5-flash"),
        GEMINI_BASE_URL=_getenv_str(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/"),
        MEDTRANSLATE_HTTP_TIMEOUT_SEC=_getenv_float("MEDTRANSLATE_HTTP_TIMEOUT_SEC", 30.0),
        MEDTRANSLATE_HOST=_getenv_str("MEDTRANSLATE_HOST", "0.0.0.0"),
        PORT=_getenv_int("PORT", 5000),
        MEDTRANSLATE_LEDGER_CAPACITY=_getenv_int("MEDTRANSLATE_LEDGER_CAPACITY", 10),
        MEDTRANSLATE_LEDGER_LIST_LIMIT=_getenv_int("MEDTRANSLATE_LEDGER_LIST_LIMIT", 5),
        MEDTRANSLATE_HEALTH_INTERVAL_SEC=_getenv_float("MEDTRANSLATE_HEALTH_INTERVAL_SEC", 30.0),
        MEDTRANSLATE_SPEECH_RATE=_getenv_float("MEDTRANSLATE_SPEECH_RATE", 0.9),
        MEDTRANSLATE_SPEECH_PITCH=_getenv_float("MEDTRANSLATE_SPEECH_PITCH", 1.0),
        MEDTRANSLATE_MEDICAL_MODE=_getenv_bool("MEDTRANSLATE_MEDICAL_MODE", True),
        MEDTRANSLATE_LOG_LEVEL=_getenv_str("MEDTRANSLATE_LOG_LEVEL", "INFO"),
    )


def require_api_key(config: TranslatorConfig) -> str:
    if not config.has_api_key():
        raise MissingCredential(
            "GEMINI_API_KEY environment variable is required. "
            "Please set your Gemini API key in the environment variables."
        )
    return config.GEMINI_API_KEY.strip()
