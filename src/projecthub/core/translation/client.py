"""Best-effort translation: MyMemory, then LibreTranslate, then the phrase table.

Translation never raises and never blocks longer than the configured timeout
per remote attempt. When nothing can translate the text, the original is
returned wrapped in a language-tagged placeholder.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import httpx

from src.projecthub.core.config import Settings
from src.projecthub.core.logging import get_logger
from src.projecthub.core.translation.phrases import phrase_translate, placeholder

logger = get_logger(__name__)


class TranslationProvider(str, Enum):
    """Which step of the fallback chain produced the text."""

    IDENTITY = "identity"
    MYMEMORY = "mymemory"
    LIBRETRANSLATE = "libretranslate"
    PHRASEBOOK = "phrasebook"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class TranslationResult:
    translated_text: str
    success: bool
    provider: TranslationProvider
    error: str | None = None

    @property
    def translated(self) -> bool:
        """True when the text was actually rendered in the target language."""
        return self.provider not in (TranslationProvider.IDENTITY, TranslationProvider.PLACEHOLDER)


class TranslationError(Exception):
    """A remote translator returned no usable text."""


class Translator:
    """Translation adapter with two remote services and a local fallback.

    The httpx client is injected so the application can share one connection
    pool and tests can swap in an httpx.MockTransport.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        mymemory_url: str,
        libretranslate_url: str,
        timeout: float = 5.0,
    ):
        self.http = http
        self.mymemory_url = mymemory_url
        self.libretranslate_url = libretranslate_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "Translator":
        return cls(
            http,
            mymemory_url=settings.mymemory_url,
            libretranslate_url=settings.libretranslate_url,
            timeout=settings.translation_timeout_seconds,
        )

    async def translate(self, text: str, source: str, target: str) -> TranslationResult:
        """Translate text from source to target language.

        Args:
            text: Text to translate.
            source: Source language code ("en" or "es").
            target: Target language code ("en" or "es").

        Returns:
            A successful TranslationResult; the error field records why the
            remote services were skipped when a fallback was used.
        """
        if source == target or not text.strip():
            return TranslationResult(text, True, TranslationProvider.IDENTITY)

        errors: list[str] = []
        for provider, call in (
            (TranslationProvider.MYMEMORY, self._mymemory),
            (TranslationProvider.LIBRETRANSLATE, self._libretranslate),
        ):
            try:
                # httpx timeouts bound each phase, not the whole exchange
                async with asyncio.timeout(self.timeout):
                    translated = await call(text, source, target)
                return TranslationResult(translated, True, provider)
            except Exception as e:
                if isinstance(e, TimeoutError):
                    reason = f"timed out after {self.timeout}s"
                else:
                    reason = str(e) or type(e).__name__
                errors.append(f"{provider.value}: {reason}")
                logger.warning(
                    "Remote translation failed",
                    provider=provider.value,
                    source=source,
                    target=target,
                    error=reason,
                )

        error = "; ".join(errors)
        phrased = phrase_translate(text, source, target)
        if phrased is not None:
            return TranslationResult(phrased, True, TranslationProvider.PHRASEBOOK, error)
        return TranslationResult(
            placeholder(text, target), True, TranslationProvider.PLACEHOLDER, error
        )

    async def _mymemory(self, text: str, source: str, target: str) -> str:
        response = await self.http.get(
            self.mymemory_url,
            params={"q": text, "langpair": f"{source}|{target}"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        translated = (data.get("responseData") or {}).get("translatedText")
        if data.get("responseStatus") != 200 or not translated:
            raise TranslationError(str(data.get("responseDetails") or "no translation"))
        return translated

    async def _libretranslate(self, text: str, source: str, target: str) -> str:
        response = await self.http.post(
            self.libretranslate_url,
            json={"q": text, "source": source, "target": target, "format": "text"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        translated = response.json().get("translatedText")
        if not translated:
            raise TranslationError("no translation")
        return translated
