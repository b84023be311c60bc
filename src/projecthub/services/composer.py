"""Message composition with best-effort translation."""

from dataclasses import dataclass
from typing import Any

from src.projecthub.core.logging import get_logger
from src.projecthub.core.translation import Translator, detect_language
from src.projecthub.models import Language, Role

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComposedText:
    """What gets stored for one outgoing message."""

    content: str
    original_content: str | None = None
    original_language: str | None = None
    translated_content: str | None = None
    target_language: str | None = None
    translation_enabled: bool | None = None

    def message_fields(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "original_content": self.original_content,
            "original_language": self.original_language,
            "translated_content": self.translated_content,
            "target_language": self.target_language,
            "translation_enabled": self.translation_enabled,
        }

    @classmethod
    def plain(cls, text: str) -> "ComposedText":
        return cls(content=text)


class MessageComposer:
    """Translates outgoing text into the reader's language.

    The developer writes in developer_language; the client writes in the
    client's language. Detection overrides the role default when the text
    itself is clearly English or Spanish.
    """

    def __init__(self, translator: Translator, developer_language: str = Language.EN.value):
        self.translator = translator
        self.developer_language = developer_language

    def languages(self, author: Role, client_language: str) -> tuple[str, str]:
        """(default source, target) for a message written by author."""
        if author is Role.DEVELOPER:
            return self.developer_language, client_language
        return client_language, self.developer_language

    async def compose(self, text: str, author: Role, client_language: str) -> ComposedText:
        """Build the stored fields for a message.

        Never raises: any failure stores the original text with
        translation_enabled=False.
        """
        default_source, target = self.languages(author, client_language)
        source = detect_language(text) or default_source
        if source == target:
            return ComposedText(
                content=text,
                original_content=text,
                original_language=source,
                target_language=target,
                translation_enabled=False,
            )

        try:
            result = await self.translator.translate(text, source, target)
        except Exception as e:
            logger.warning("Translation failed, sending original", error=str(e))
            result = None

        if result is None or not result.translated:
            return ComposedText(
                content=text,
                original_content=text,
                original_language=source,
                target_language=target,
                translation_enabled=False,
            )

        logger.debug(
            "Message translated",
            provider=result.provider.value,
            source=source,
            target=target,
        )
        return ComposedText(
            content=result.translated_text,
            original_content=text,
            original_language=source,
            translated_content=result.translated_text,
            target_language=target,
            translation_enabled=True,
        )
