from __future__ import annotations

from ..languages import display_name

_RESPONSE_FORMAT = (
    'Respond with JSON: { "translatedText": "translation here", "confidence": 0.95 }'
)


def _lang_name(tag: str) -> str:
    name = display_name(tag)
    return name if name == tag else f"{name} ({tag})"


def build_medical_prompt(text: str, input_language: str, output_language: str) -> str:
    return f"""You are a professional medical translator. Translate the following text accurately while preserving medical terminology and context.

Translate from {_lang_name(input_language)} to {_lang_name(output_language)}:
"{text}"

{_RESPONSE_FORMAT}"""


def build_generic_prompt(text: str, input_language: str, output_language: str) -> str:
    return f"""Translate accurately from {_lang_name(input_language)} to {_lang_name(output_language)}:
"{text}"

{_RESPONSE_FORMAT}"""


def build_translation_prompt(
    text: str, input_language: str, output_language: str, *, medical: bool = True
) -> str:
    if medical:
        return build_medical_prompt(text, input_language, output_language)
    return build_generic_prompt(text, input_language, output_language)
