from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .models import UNRESOLVED, Translation
from .morphology import MorphologicalResolver
from .normalize import is_all_caps, normalize_translation

LOGGER = logging.getLogger(__name__)

ABBREVIATIONS = ("xhtml", "ng")


@dataclass(frozen=True)
class BuildStats:
    total: int
    resolved: int

    @property
    def unresolved(self) -> int:
        return self.total - self.resolved


class DictionaryBuilder:
    """In-memory dictionary for one build run.

    Local sources are applied in priority order: curated overrides, then any
    resolved value already in the dictionary, then a direct bilingual hit,
    then a base-form match. A resolved entry is only ever replaced by a
    curated override.
    """

    def __init__(
        self,
        existing: Optional[Mapping[str, Translation]] = None,
        *,
        curated: Optional[Mapping[str, Translation]] = None,
        bilingual: Optional[Mapping[str, Translation]] = None,
    ) -> None:
        self.entries: Dict[str, Translation] = dict(existing or {})
        self.sources: Dict[str, str] = {
            key: "existing" if value.resolved else "placeholder"
            for key, value in self.entries.items()
        }
        self.curated: Dict[str, Translation] = dict(curated or {})
        self.bilingual: Dict[str, Translation] = dict(bilingual or {})
        self.resolver = MorphologicalResolver(self.curated, self.bilingual)
        self.excluded: set[str] = set()

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str) -> Translation:
        return self.entries.get(key, UNRESOLVED)

    def remove_keys(self, keys: Iterable[str]) -> int:
        removed = 0
        for key in keys:
            self.excluded.add(key)
            if self.entries.pop(key, None) is not None:
                self.sources.pop(key, None)
                LOGGER.info("Removed: %s", key)
                removed += 1
        return removed

    def pick_translation(self, key: str) -> Tuple[Translation, str]:
        curated = self.curated.get(key)
        if curated is not None and curated.resolved:
            return curated, "curated"
        current = self.entries.get(key)
        if current is not None and current.resolved:
            return current, self.sources.get(key, "existing")
        direct = self.bilingual.get(key)
        if direct is not None and direct.resolved:
            return direct, "bilingual"
        resolved = self.resolver.resolve(key)
        if resolved is not None:
            return resolved, "morphology"
        return UNRESOLVED, "placeholder"

    def _put(self, key: str, translation: Translation, source: str) -> None:
        self.entries[key] = translation
        self.sources[key] = source

    def fill_placeholders(self) -> int:
        filled = 0
        for key in list(self.entries):
            if self.entries[key].resolved:
                continue
            translation, source = self.pick_translation(key)
            if translation.resolved:
                self._put(key, translation, source)
                filled += 1
        if filled:
            LOGGER.info("Filled %s entries from local sources (direct + base form)", filled)
        return filled

    def extend(self, words: Iterable[str], target_size: int) -> int:
        added = 0
        for key in words:
            if len(self.entries) >= target_size:
                break
            if key in self.entries or key in self.excluded:
                continue
            translation, source = self.pick_translation(key)
            self._put(key, translation, source)
            added += 1
        LOGGER.info("Added %s words from word lists (target %s)", added, target_size)
        return added

    def add_phrases(self, phrasal: Mapping[str, Translation]) -> int:
        added = 0
        for key, translation in phrasal.items():
            if key in self.entries or key in self.excluded or not translation.resolved:
                continue
            self._put(key, translation, "phrasal")
            added += 1
        LOGGER.info("Phrasal verbs merged: %s", added)
        return added

    def apply_curated(self) -> int:
        applied = 0
        for key, translation in self.curated.items():
            if not translation.resolved or key in self.excluded:
                continue
            if self.entries.get(key) != translation or self.sources.get(key) != "curated":
                applied += 1
            self._put(key, translation, "curated")
        return applied

    def normalize_casing(self) -> int:
        changed = 0
        for key, translation in self.entries.items():
            if not translation.resolved or key in self.curated:
                continue
            variants = [
                normalize_translation(v) if len(v) > 3 and is_all_caps(v) else v
                for v in translation.variants
            ]
            normalized = Translation.of(*variants)
            if normalized != translation:
                self.entries[key] = normalized
                changed += 1
        return changed

    def merge(
        self,
        words: Iterable[str],
        target_size: int,
        phrasal: Optional[Mapping[str, Translation]] = None,
    ) -> BuildStats:
        self.fill_placeholders()
        self.extend(words, target_size)
        if phrasal:
            self.add_phrases(phrasal)
        self.apply_curated()
        self.normalize_casing()
        return self.stats()

    def fill(self, key: str, translation: Translation, source: str) -> bool:
        if not translation.resolved or self.entries.get(key, UNRESOLVED).resolved:
            return False
        self._put(key, translation, source)
        return True

    def add_variants(self, key: str, translation: Translation, source: str) -> bool:
        current = self.entries.get(key, UNRESOLVED)
        if key in self.curated:
            return False
        combined = current.extended(translation)
        if combined == current:
            return False
        self.entries[key] = combined
        if not current.resolved:
            self.sources[key] = source
        return True

    def unresolved(self) -> List[str]:
        return [key for key, value in self.entries.items() if not value.resolved]

    def stats(self) -> BuildStats:
        resolved = sum(1 for value in self.entries.values() if value.resolved)
        return BuildStats(total=len(self.entries), resolved=resolved)

    def to_json(self) -> Dict[str, object]:
        return {key: value.to_json() for key, value in self.entries.items()}
