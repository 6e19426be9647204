from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import requests
from wordfreq import top_n_list

from .models import PLACEHOLDER, Translation
from .normalize import clean_text, normalize_key
from .store import DictionaryStore

LOGGER = logging.getLogger(__name__)

BILINGUAL_URL = (
    "https://raw.githubusercontent.com/spishniak/rus-eng-eng-rus-txt-json/master/eng-rus.json"
)
WORD_LIST_URLS = (
    "https://raw.githubusercontent.com/tgmgroup/Word-List-from-Oxford-Longman-5000/master/Oxford%205000.txt",
    "https://raw.githubusercontent.com/first20hours/google-10000-english/master/20k.txt",
)
FALLBACK_WORD_COUNT = 5000


@dataclass
class RemoteSources:
    bilingual: Dict[str, Translation] = field(default_factory=dict)
    words: List[str] = field(default_factory=list)
    used_fallback: bool = False


def _dedup_keep_order(xs: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for x in xs:
        if x in seen:
            continue
        seen.add(x)
        out.append(x)
    return out


def load_existing(store: DictionaryStore) -> Dict[str, Translation]:
    entries: Dict[str, Translation] = {}
    for raw_key, translation in store.load().items():
        key = normalize_key(raw_key, allow_phrase=True)
        if key is None:
            LOGGER.warning("Dropping invalid dictionary key %r", raw_key)
            continue
        current = entries.get(key)
        if current is None or not current.resolved:
            entries[key] = translation
    LOGGER.info("Loaded %s existing entries from %s", len(entries), store.path)
    return entries


def _load_translation_file(path: Optional[Path], label: str) -> Dict[str, Translation]:
    if path is None:
        return {}
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.warning("%s dictionary not found, skipping: %s", label, exc)
        return {}
    if not isinstance(raw, dict):
        LOGGER.warning("%s dictionary %s is not a JSON object, skipping", label, path)
        return {}
    result: Dict[str, Translation] = {}
    for raw_key, value in raw.items():
        key = normalize_key(raw_key, allow_phrase=True)
        translation = Translation.from_value(value)
        if key is None or not translation.resolved:
            continue
        result[key] = translation
    LOGGER.info("Loaded %s %s translations from %s", len(result), label, path)
    return result


def load_curated(path: Optional[Path]) -> Dict[str, Translation]:
    return _load_translation_file(path, "Curated")


def load_phrasal(path: Optional[Path]) -> Dict[str, Translation]:
    return _load_translation_file(path, "Phrasal-verb")


def parse_bilingual(data: object) -> Dict[str, Translation]:
    if not isinstance(data, dict):
        raise ValueError("bilingual dump is not a JSON object")
    result: Dict[str, Translation] = {}
    for raw_key, candidates in data.items():
        key = normalize_key(raw_key if isinstance(raw_key, str) else None, allow_phrase=True)
        if key is None or key in result:
            continue
        primary = candidates[0] if isinstance(candidates, list) and candidates else candidates
        if not isinstance(primary, str):
            continue
        primary = clean_text(primary)
        if primary and primary != PLACEHOLDER:
            result[key] = Translation.of(primary)
    return result


def fetch_bilingual(
    url: str, session: requests.Session, timeout: float = 8.0
) -> Dict[str, Translation]:
    LOGGER.info("Fetching EN-RU dictionary from %s", url)
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        result = parse_bilingual(response.json())
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("Could not fetch EN-RU dictionary: %s", exc)
        return {}
    LOGGER.info("Loaded %s EN-RU translations", len(result))
    return result


def parse_word_list(text: str) -> List[str]:
    words: List[str] = []
    for line in text.splitlines():
        key = normalize_key(line)
        if key:
            words.append(key)
    return _dedup_keep_order(words)


def fetch_word_list(url: str, session: requests.Session, timeout: float = 8.0) -> List[str]:
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        LOGGER.warning("Could not fetch word list %s: %s", url, exc)
        return []
    words = parse_word_list(response.text)
    LOGGER.info("Loaded %s words from %s", len(words), url)
    return words


def fallback_word_list(n: int = FALLBACK_WORD_COUNT) -> List[str]:
    words = (normalize_key(word) for word in top_n_list("en", n))
    return _dedup_keep_order([w for w in words if w])


def fetch_remote_sources(
    session_factory: Callable[[], requests.Session] = requests.Session,
    *,
    bilingual_url: Optional[str] = BILINGUAL_URL,
    word_list_urls: Sequence[str] = WORD_LIST_URLS,
    timeout: float = 8.0,
    fallback_size: int = FALLBACK_WORD_COUNT,
) -> RemoteSources:
    """Fetch the bilingual dump and word lists concurrently, one session per request."""
    with ThreadPoolExecutor(max_workers=1 + max(len(word_list_urls), 1)) as pool:
        bilingual_future = (
            pool.submit(fetch_bilingual, bilingual_url, session_factory(), timeout) if bilingual_url else None
        )
        list_futures = [
            pool.submit(fetch_word_list, url, session_factory(), timeout) for url in word_list_urls
        ]
        bilingual = bilingual_future.result() if bilingual_future else {}
        lists = [future.result() for future in list_futures]

    words = _dedup_keep_order([word for words in lists for word in words])
    used_fallback = False
    if not words:
        LOGGER.warning("No word lists available; using the embedded frequency list")
        words = fallback_word_list(fallback_size)
        used_fallback = True
    return RemoteSources(bilingual=bilingual, words=words, used_fallback=used_fallback)
