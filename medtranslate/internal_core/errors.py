from __future__ import annotations

from typing import Optional


class MedTranslateError(RuntimeError):
    default_code = "MEDTRANSLATE_ERROR"
    default_message = "Unexpected error."

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None):
        self.code = code or self.default_code
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(MedTranslateError):
    default_code = "MISSING_CREDENTIAL"
    default_message = "GEMINI_API_KEY environment variable is required."


class EngineUnavailable(MedTranslateError):
    default_code = "ENGINE_UNAVAILABLE"

    def __init__(self, engine: str, message: Optional[str] = None):
        self.engine = engine
        super().__init__(message or f"No {engine} engine is available in this environment.")


class EngineError(MedTranslateError):
    default_code = "ENGINE_ERROR"

    def __init__(self, reason: str, engine_name: str = ""):
        self.reason = reason
        self.engine_name = engine_name
        super().__init__(f"Speech recognition error: {reason}")


class EmptyInput(MedTranslateError):
    default_code = "EMPTY_INPUT"
    default_message = "No text provided for translation"


class NothingToSpeak(MedTranslateError):
    default_code = "NOTHING_TO_SPEAK"
    default_message = "There is no translated text to read aloud."


class IncompleteSession(MedTranslateError):
    default_code = "INCOMPLETE_SESSION"
    default_message = "Original and translated text are required"


class TranslationFailed(MedTranslateError):
    default_code = "TRANSLATION_FAILED"
    default_message = "Translation failed. Please check your connection and try again."

    def __init__(self, cause: str = "", message: Optional[str] = None):
        self.cause = cause
        super().__init__(message)


class AuthFailure(TranslationFailed):
    default_code = "AUTH_FAILURE"
    default_message = "Invalid API key. Please check your GEMINI_API_KEY environment variable."


class QuotaExceeded(TranslationFailed):
    default_code = "QUOTA_EXCEEDED"
    default_message = "API quota exceeded. Please check your Gemini API usage limits."


def classify_backend_failure(cause: str, status_code: Optional[int] = None) -> TranslationFailed:
    """Map a raw backend failure onto the most specific translation error."""
    text = cause or ""
    if status_code in (401, 403) or "API_KEY" in text:
        return AuthFailure(cause)
    if status_code == 429 or "quota" in text.lower():
        return QuotaExceeded(cause)
    return TranslationFailed(cause)
