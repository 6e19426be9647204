"""Recover translations for inflected English words from their base forms."""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Tuple

from .models import Translation

LOGGER = logging.getLogger(__name__)

VOWELS = set("aeiou")
# (suffix, characters stripped); applies only to words longer than stripped + 2
SUFFIX_TABLE: Tuple[Tuple[str, int], ...] = (
    ("ly", 2),
    ("ily", 3),
    ("er", 2),
    ("est", 3),
    ("ness", 4),
    ("ment", 4),
    ("tion", 4),
    ("ity", 3),
    ("ful", 3),
    ("less", 4),
    ("es", 2),
    ("s", 1),
)
SUFFIX_RETRIES = {"tion": "t", "ity": "e"}


class MorphologicalResolver:
    def __init__(
        self,
        curated: Mapping[str, Translation],
        bilingual: Mapping[str, Translation],
    ) -> None:
        self.curated = curated
        self.bilingual = bilingual

    def lookup(self, base: str) -> Optional[Translation]:
        if len(base) < 2:
            return None
        found = self.curated.get(base)
        if found is not None and found.resolved:
            return found
        found = self.bilingual.get(base)
        if found is not None and found.resolved:
            return found
        return None

    def candidates(self, key: str) -> List[str]:
        """Ordered base forms tried for ``key``, duplicates removed."""
        seen: set[str] = set()
        ordered: List[str] = []
        for candidate in self._iter_candidates(key.lower()):
            if len(candidate) < 2 or candidate in seen:
                continue
            seen.add(candidate)
            ordered.append(candidate)
        return ordered

    def resolve(self, key: str) -> Optional[Translation]:
        for candidate in self.candidates(key):
            found = self.lookup(candidate)
            if found is not None:
                if candidate != key:
                    LOGGER.debug("Resolved %s via base form %s", key, candidate)
                return found
        return None

    @staticmethod
    def _iter_candidates(w: str) -> Iterable[str]:
        # transcripts drop the final g: "breakin"
        if w.endswith("in") and len(w) > 5:
            yield w + "g"
        yield w
        if w.endswith("ing") and len(w) > 5:
            stem = w[:-3]
            yield stem
            if len(stem) >= 2 and stem[-1] == stem[-2] and stem[-1] not in VOWELS:
                yield stem[:-1]
            yield stem + "e"
        if w.endswith("ed") and len(w) > 4:
            stem = w[:-2]
            yield stem
            yield stem + "e"
        if w.endswith("ies") and len(w) > 4:
            yield w[:-3] + "y"
        for suffix, stripped in SUFFIX_TABLE:
            if not w.endswith(suffix) or len(w) <= stripped + 2:
                continue
            base = w[:-stripped]
            yield base
            retry = SUFFIX_RETRIES.get(suffix)
            if retry:
                yield base + retry
