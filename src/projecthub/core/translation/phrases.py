"""Bundled phrase tables used when both remote translators are unavailable."""

import re
from functools import lru_cache

EN_TO_ES: dict[str, str] = {
    # Greetings and basics
    "hello": "hola",
    "hi": "hola",
    "good morning": "buenos días",
    "good afternoon": "buenas tardes",
    "good evening": "buenas noches",
    "goodbye": "adiós",
    "see you later": "hasta luego",
    "thank you": "gracias",
    "thanks": "gracias",
    "please": "por favor",
    "you're welcome": "de nada",
    "excuse me": "disculpe",
    "sorry": "lo siento",
    "yes": "sí",
    "no": "no",
    "maybe": "tal vez",
    # Common phrases
    "how are you": "cómo estás",
    "i am fine": "estoy bien",
    "what do you think": "qué piensas",
    "let me know": "hazme saber",
    "no problem": "no hay problema",
    "of course": "por supuesto",
    "i understand": "entiendo",
    "i don't understand": "no entiendo",
    "can you help me": "puedes ayudarme",
    "this works": "esto funciona",
    "it works": "funciona",
    "it doesn't work": "no funciona",
    "is working": "está funcionando",
    # Project vocabulary
    "the function": "la función",
    "testing": "probando",
    "test": "prueba",
    "bug": "error",
    "problem": "problema",
    "issue": "problema",
    "feature": "característica",
    "update": "actualización",
    "new": "nuevo",
    "old": "viejo",
    "done": "hecho",
    "finished": "terminado",
    "working": "trabajando",
    "complete": "completo",
    "ready": "listo",
}

ES_TO_EN: dict[str, str] = {
    # Greetings and basics
    "hola": "hello",
    "buenos días": "good morning",
    "buenas tardes": "good afternoon",
    "buenas noches": "good evening",
    "adiós": "goodbye",
    "hasta luego": "see you later",
    "gracias": "thank you",
    "por favor": "please",
    "de nada": "you're welcome",
    "disculpe": "excuse me",
    "lo siento": "sorry",
    "sí": "yes",
    "no": "no",
    "tal vez": "maybe",
    # Common phrases
    "cómo estás": "how are you",
    "estoy bien": "i am fine",
    "qué piensas": "what do you think",
    "hazme saber": "let me know",
    "no hay problema": "no problem",
    "por supuesto": "of course",
    "entiendo": "i understand",
    "no entiendo": "i don't understand",
    "puedes ayudarme": "can you help me",
    "esto funciona": "this works",
    "funciona": "it works",
    "no funciona": "it doesn't work",
    "está funcionando": "is working",
    # Project vocabulary
    "la función": "the function",
    "probando": "testing",
    "prueba": "test",
    "error": "bug",
    "problema": "problem",
    "característica": "feature",
    "actualización": "update",
    "nuevo": "new",
    "viejo": "old",
    "hecho": "done",
    "terminado": "finished",
    "trabajando": "working",
    "completo": "complete",
    "listo": "ready",
}

PHRASE_TABLES: dict[tuple[str, str], dict[str, str]] = {
    ("en", "es"): EN_TO_ES,
    ("es", "en"): ES_TO_EN,
}


@lru_cache
def _phrase_pattern(source: str, target: str) -> re.Pattern[str]:
    # Longest phrases first so "no problem" wins over "no"
    phrases = sorted(PHRASE_TABLES[(source, target)], key=len, reverse=True)
    alternation = "|".join(re.escape(p) for p in phrases)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def phrase_translate(text: str, source: str, target: str) -> str | None:
    """Translate with the bundled phrase table.

    An exact phrase match returns the table entry. Otherwise every known phrase
    inside the text is substituted in one pass, longest first, and the result
    is capitalised.

    Returns:
        The translated text, or None when no phrase matched.
    """
    table = PHRASE_TABLES.get((source, target))
    if not table:
        return None

    normalized = text.lower().strip()
    if normalized in table:
        return table[normalized]

    pattern = _phrase_pattern(source, target)
    translated, count = pattern.subn(lambda m: table[m.group(0).lower()], normalized)
    if count == 0:
        return None
    return translated[:1].upper() + translated[1:]


def placeholder(text: str, target: str) -> str:
    """Wrap untranslated text in a tag naming its language for the reader."""
    if target == "es":
        return f'[Mensaje en inglés: "{text}"]'
    return f'[Message in Spanish: "{text}"]'
