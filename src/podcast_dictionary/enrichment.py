"""Fill placeholder entries through remote translation services."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .clients import GoogleSynonymsClient, LibreTranslateClient, MyMemoryClient
from .merge import DictionaryBuilder
from .models import TranslationResult
from .scheduler import Throttle

LOGGER = logging.getLogger(__name__)


@dataclass
class EnrichmentSettings:
    batch_size: int = 30
    batch_delay: float = 0.3
    individual_limit: int = 300
    word_delay: float = 0.25
    synonyms_limit: Optional[int] = None
    synonyms_delay: float = 1.2
    checkpoint_every: int = 200


@dataclass
class EnrichmentReport:
    batch_filled: int = 0
    batch_failures: int = 0
    individual_filled: int = 0
    synonyms_added: int = 0


class Enricher:
    def __init__(
        self,
        builder: DictionaryBuilder,
        batch_client: MyMemoryClient,
        primary: LibreTranslateClient,
        secondary: MyMemoryClient,
        *,
        synonyms_client: Optional[GoogleSynonymsClient] = None,
        settings: Optional[EnrichmentSettings] = None,
        checkpoint: Optional[Callable[[], object]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.builder = builder
        self.batch_client = batch_client
        self.primary = primary
        self.secondary = secondary
        self.synonyms_client = synonyms_client
        self.settings = settings or EnrichmentSettings()
        if self.settings.batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.checkpoint = checkpoint
        self.sleep = sleep
        self.report = EnrichmentReport()
        self._writes = 0

    def _record_write(self) -> None:
        self._writes += 1
        every = self.settings.checkpoint_every
        if self.checkpoint and every > 0 and self._writes % every == 0:
            self.checkpoint()
            LOGGER.info("Progress saved (%s translations)", self._writes)

    def _store(self, key: str, result: TranslationResult) -> bool:
        if not result.ok or result.value is None:
            return False
        if not self.builder.fill(key, result.value, result.source):
            return False
        self._record_write()
        return True

    def run_batch_phase(self) -> int:
        missing = self.builder.unresolved()
        if not missing:
            return 0
        size = self.settings.batch_size
        batches: List[Sequence[str]] = [missing[i : i + size] for i in range(0, len(missing), size)]
        LOGGER.info("Translating %s remaining words via MyMemory (batch)...", len(missing))
        throttle = Throttle(self.settings.batch_delay, self.sleep)
        filled = 0
        for batch in throttle.pace(batches):
            results = self.batch_client.translate_batch(batch)
            if results is None:
                LOGGER.warning("MyMemory batch of %s words failed; skipping", len(batch))
                self.report.batch_failures += 1
                continue
            for word in batch:
                result = results.get(word)
                if result is not None and self._store(word, result):
                    filled += 1
        if filled:
            LOGGER.info("Translated %s words via MyMemory batch", filled)
        self.report.batch_filled += filled
        return filled

    def translate_one(self, word: str) -> TranslationResult:
        result = self.primary.translate(word)
        if result.ok:
            return result
        LOGGER.debug("%s failed for %s (%s); trying fallback", result.source, word, result.reason)
        return self.secondary.translate(word)

    def run_individual_phase(self) -> int:
        missing = self.builder.unresolved()[: self.settings.individual_limit]
        if not missing:
            return 0
        LOGGER.info("Translating %s remaining words (LibreTranslate + MyMemory)...", len(missing))
        throttle = Throttle(self.settings.word_delay, self.sleep)
        filled = 0
        for word in throttle.pace(missing):
            if self._store(word, self.translate_one(word)):
                filled += 1
        if filled:
            LOGGER.info("Translated %s words via API (one-by-one)", filled)
        self.report.individual_filled += filled
        return filled

    def run_synonyms_phase(self) -> int:
        if self.synonyms_client is None:
            return 0
        candidates = [
            key
            for key, value in self.builder.entries.items()
            if len(value.variants) <= 1 and key not in self.builder.curated
        ]
        if self.settings.synonyms_limit is not None:
            candidates = candidates[: self.settings.synonyms_limit]
        LOGGER.info("Collecting synonyms for %s words...", len(candidates))
        throttle = Throttle(self.settings.synonyms_delay, self.sleep)
        added = 0
        for idx, key in enumerate(throttle.pace(candidates), start=1):
            result = self.synonyms_client.translate(key)
            if result.ok and result.value is not None:
                if self.builder.add_variants(key, result.value, result.source):
                    added += 1
                    self._record_write()
            if idx % 50 == 0:
                LOGGER.info("Synonyms %s/%s...", idx, len(candidates))
        self.report.synonyms_added += added
        return added

    def run(self) -> EnrichmentReport:
        self.run_batch_phase()
        self.run_individual_phase()
        self.run_synonyms_phase()
        return self.report
