from __future__ import annotations

from typing import Dict, Tuple

LANGUAGES: Dict[str, str] = {
    "en-US": "English (US)",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "it-IT": "Italian",
    "pt-PT": "Portuguese",
    "zh-CN": "Chinese (Mandarin)",
    "ja-JP": "Japanese",
    "ar-SA": "Arabic",
    "ru-RU": "Russian",
    "hi-IN": "Hindi",
    "sa": "Sanskrit",
}

DEFAULT_INPUT_LANGUAGE = "en-US"
DEFAULT_OUTPUT_LANGUAGE = "es-ES"


def display_name(tag: str) -> str:
    """Human label for a language tag; unknown tags are shown as-is."""
    return LANGUAGES.get(tag, tag)


def is_supported(tag: str) -> bool:
    return tag in LANGUAGES


def speaker_labels(input_language: str, output_language: str) -> Tuple[str, str]:
    return (
        f"Patient ({display_name(input_language)})",
        f"Provider ({display_name(output_language)})",
    )
