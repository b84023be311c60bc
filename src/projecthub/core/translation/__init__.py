"""Translation adapter - remote services with a bundled phrase-table fallback."""

from src.projecthub.core.translation.client import (
    TranslationProvider,
    TranslationResult,
    Translator,
)
from src.projecthub.core.translation.detect import detect_language
from src.projecthub.core.translation.phrases import phrase_translate, placeholder

__all__ = [
    "TranslationProvider",
    "TranslationResult",
    "Translator",
    "detect_language",
    "phrase_translate",
    "placeholder",
]
