from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Sequence

import requests

from .models import Translation, TranslationResult
from .normalize import is_acceptable, normalize_translation

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8.0
MYMEMORY_URL = "https://api.mymemory.translated.net/get"
LIBRETRANSLATE_URL = os.environ.get("LIBRETRANSLATE_URL", "https://libretranslate.com")
LIBRETRANSLATE_API_KEY = os.environ.get("LIBRETRANSLATE_API_KEY")
GOOGLE_URL = "https://translate.googleapis.com/translate_a/single"


def _accept(word: str, candidate: object, source: str) -> TranslationResult:
    if not isinstance(candidate, str) or not is_acceptable(word, candidate):
        return TranslationResult.failure(f"rejected {candidate!r}", source)
    return TranslationResult.success(Translation.of(normalize_translation(candidate)), source)


class MyMemoryClient:
    source = "mymemory"

    def __init__(
        self,
        session: requests.Session,
        *,
        url: str = MYMEMORY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        langpair: str = "en|ru",
    ) -> None:
        self.session = session
        self.url = url
        self.timeout = timeout
        self.langpair = langpair

    def _query(self, text: str) -> Optional[str]:
        try:
            response = self.session.get(
                self.url, params={"q": text, "langpair": self.langpair}, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.debug("MyMemory request failed for %r: %s", text[:40], exc)
            return None
        if not isinstance(data, dict) or data.get("responseStatus") != 200:
            return None
        translated = (data.get("responseData") or {}).get("translatedText")
        return translated if isinstance(translated, str) else None

    def translate(self, word: str) -> TranslationResult:
        translated = self._query(word)
        if translated is None:
            return TranslationResult.failure("no response", self.source)
        return _accept(word, translated.strip(), self.source)

    def translate_batch(self, words: Sequence[str]) -> Optional[Dict[str, TranslationResult]]:
        """Translate newline-joined words in one request; None when the request failed."""
        source = f"{self.source}-batch"
        translated = self._query("\n".join(words))
        if translated is None:
            return None
        lines = [line.strip() for line in translated.split("\n")]
        results: Dict[str, TranslationResult] = {}
        for idx, word in enumerate(words):
            if idx >= len(lines):
                results[word] = TranslationResult.failure("missing line", source)
                continue
            results[word] = _accept(word, lines[idx], source)
        return results


class LibreTranslateClient:
    source = "libretranslate"

    def __init__(
        self,
        session: requests.Session,
        url: Optional[str] = LIBRETRANSLATE_URL,
        api_key: Optional[str] = LIBRETRANSLATE_API_KEY,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session
        self.url = url.rstrip("/") if url else None
        self.api_key = api_key
        self.timeout = timeout

    def translate(self, word: str, source: str = "en", target: str = "ru") -> TranslationResult:
        if not self.url:
            return TranslationResult.failure("disabled", self.source)
        payload = {"q": word, "source": source, "target": target, "format": "text"}
        if self.api_key:
            payload["api_key"] = self.api_key
        try:
            response = self.session.post(
                f"{self.url}/translate", json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.debug("LibreTranslate request failed for %s: %s", word, exc)
            return TranslationResult.failure(str(exc), self.source)
        if not isinstance(data, dict):
            return TranslationResult.failure("malformed payload", self.source)
        translation = data.get("translatedText") or data.get("translated_text")
        return _accept(word, translation.strip() if isinstance(translation, str) else None, self.source)


class GoogleSynonymsClient:
    """Primary translation plus per-part-of-speech alternates (``dt=at``)."""

    source = "google-synonyms"

    def __init__(
        self,
        session: requests.Session,
        *,
        url: str = GOOGLE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session
        self.url = url
        self.timeout = timeout

    @staticmethod
    def parse_variants(data: object) -> List[str]:
        variants: List[str] = []
        if not isinstance(data, list):
            return variants
        head = data[0] if data else None
        if isinstance(head, list) and head and isinstance(head[0], list) and head[0]:
            if isinstance(head[0][0], str):
                variants.append(head[0][0].strip())
        blocks = data[1] if len(data) > 1 else None
        if isinstance(blocks, list):
            for block in blocks:
                if isinstance(block, list) and len(block) > 1 and isinstance(block[1], list):
                    variants.extend(v.strip() for v in block[1] if isinstance(v, str) and v.strip())
        return variants

    def translate(self, word: str) -> TranslationResult:
        params = [
            ("client", "gtx"),
            ("sl", "en"),
            ("tl", "ru"),
            ("dt", "t"),
            ("dt", "at"),
            ("q", word),
        ]
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.debug("Translate failed for %s: %s", word, exc)
            return TranslationResult.failure(str(exc), self.source)
        accepted = [
            normalize_translation(v) for v in self.parse_variants(data) if is_acceptable(word, v)
        ]
        translation = Translation.of(*accepted)
        if not translation.resolved:
            return TranslationResult.failure("no variants", self.source)
        return TranslationResult.success(translation, self.source)
