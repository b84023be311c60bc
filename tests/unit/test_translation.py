"""Tests for the translation fallback chain."""

import asyncio
import json
import time

import httpx
import pytest

from src.projecthub.core.translation import (
    TranslationProvider,
    Translator,
    detect_language,
    phrase_translate,
    placeholder,
)

pytestmark = pytest.mark.unit

MYMEMORY_URL = "https://mymemory.test/get"
LIBRE_URL = "https://libre.test/translate"


def make_translator(handler) -> Translator:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Translator(http, MYMEMORY_URL, LIBRE_URL, timeout=1.0)


def mymemory_ok(text: str) -> httpx.Response:
    return httpx.Response(
        200, json={"responseStatus": 200, "responseData": {"translatedText": text}}
    )


class TestTranslator:
    async def test_mymemory_is_tried_first(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            assert request.url.params["langpair"] == "en|es"
            return mymemory_ok("hola mundo")

        result = await make_translator(handler).translate("hello world", "en", "es")

        assert result.translated_text == "hola mundo"
        assert result.provider is TranslationProvider.MYMEMORY
        assert result.translated
        assert seen == ["mymemory.test"]

    async def test_falls_back_to_libretranslate(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "mymemory.test":
                return httpx.Response(503)
            body = json.loads(request.content)
            assert body == {"q": "hola", "source": "es", "target": "en", "format": "text"}
            return httpx.Response(200, json={"translatedText": "hello"})

        result = await make_translator(handler).translate("hola", "es", "en")

        assert result.translated_text == "hello"
        assert result.provider is TranslationProvider.LIBRETRANSLATE

    async def test_mymemory_quota_message_counts_as_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "mymemory.test":
                return httpx.Response(
                    200,
                    json={
                        "responseStatus": 429,
                        "responseDetails": "MYMEMORY WARNING: QUOTA EXCEEDED",
                        "responseData": {"translatedText": None},
                    },
                )
            return httpx.Response(200, json={"translatedText": "gracias"})

        result = await make_translator(handler).translate("thank you", "en", "es")
        assert result.provider is TranslationProvider.LIBRETRANSLATE

    async def test_phrasebook_when_both_services_are_down(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        result = await make_translator(handler).translate("thank you", "en", "es")

        assert result.success
        assert result.provider is TranslationProvider.PHRASEBOOK
        assert result.translated_text == "gracias"
        assert "mymemory" in (result.error or "")
        assert "libretranslate" in (result.error or "")

    async def test_placeholder_when_nothing_matches(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        result = await make_translator(handler).translate("zxqv", "en", "es")

        assert result.success
        assert result.provider is TranslationProvider.PLACEHOLDER
        assert not result.translated
        assert result.translated_text == '[Mensaje en inglés: "zxqv"]'

    async def test_same_language_skips_the_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        result = await make_translator(handler).translate("hola", "es", "es")
        assert result.provider is TranslationProvider.IDENTITY
        assert result.translated_text == "hola"


class TestPhrasebook:
    def test_exact_phrase(self):
        assert phrase_translate("Buenos días", "es", "en") == "good morning"

    def test_longest_phrase_wins(self):
        assert phrase_translate("no problem, thanks", "en", "es") == "No hay problema, gracias"

    def test_no_match(self):
        assert phrase_translate("qwerty", "en", "es") is None

    def test_unknown_pair(self):
        assert phrase_translate("hello", "en", "fr") is None

    def test_placeholder_names_the_source_language(self):
        assert placeholder("hola", "en") == '[Message in Spanish: "hola"]'


@pytest.mark.parametrize(
    ("text", "language"),
    [
        ("Hola, gracias por el avance del proyecto", "es"),
        ("Thank you, the page is working", "en"),
        ("ok", None),
        ("", None),
    ],
)
def test_detect_language(text: str, language: str | None):
    assert detect_language(text) == language


class TestTranslatorTimeouts:
    """Each remote attempt is bounded as a whole, not per network phase."""

    async def test_stalled_services_fall_back_within_the_limit(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return mymemory_ok("demasiado tarde")

        translator = make_translator(handler)
        translator.timeout = 0.1
        started = time.monotonic()

        result = await translator.translate("thank you", "en", "es")

        assert time.monotonic() - started < 1.0
        assert result.provider is TranslationProvider.PHRASEBOOK
        assert "mymemory: timed out after 0.1s" in (result.error or "")
        assert "libretranslate: timed out after 0.1s" in (result.error or "")

    async def test_trickling_body_is_cut_off(self):
        async def trickle():
            for char in '{"translatedText": "hola"}':
                await asyncio.sleep(0.05)
                yield char.encode()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=trickle())

        translator = make_translator(handler)
        translator.timeout = 0.2
        started = time.monotonic()

        result = await translator.translate("zxqv", "en", "es")

        assert time.monotonic() - started < 1.5
        assert result.provider is TranslationProvider.PLACEHOLDER
