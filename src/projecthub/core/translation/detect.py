"""Bag-of-words language detection between English and Spanish."""

SPANISH_WORDS = frozenset(
    {
        "el", "la", "es", "en", "de", "que", "y", "a", "un", "se", "no", "te", "lo",
        "le", "da", "su", "por", "son", "con", "para", "una", "está", "las", "los",
        "del", "al", "gracias", "hola", "sí", "problema",
    }
)  # fmt: skip

ENGLISH_WORDS = frozenset(
    {
        "the", "of", "and", "a", "to", "in", "is", "you", "that", "it", "he", "was",
        "for", "on", "are", "as", "with", "his", "they", "i", "at", "be", "this",
        "have", "thank", "hello", "yes", "problem",
    }
)  # fmt: skip


def detect_language(text: str) -> str | None:
    """Guess whether text is English or Spanish.

    Returns:
        "en", "es", or None when the counts tie (undetermined).
    """
    words = text.lower().split()
    spanish = sum(1 for word in words if word in SPANISH_WORDS)
    english = sum(1 for word in words if word in ENGLISH_WORDS)
    if spanish > english:
        return "es"
    if english > spanish:
        return "en"
    return None
