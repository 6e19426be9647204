"""Build the English-Russian word dictionary used by the podcast player."""
from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from .clients import (
    DEFAULT_TIMEOUT,
    LIBRETRANSLATE_API_KEY,
    LIBRETRANSLATE_URL,
    GoogleSynonymsClient,
    LibreTranslateClient,
    MyMemoryClient,
)
from .enrichment import Enricher, EnrichmentSettings
from .merge import ABBREVIATIONS, BuildStats, DictionaryBuilder
from .report import log_summary, write_report
from .sources import (
    BILINGUAL_URL,
    WORD_LIST_URLS,
    fetch_remote_sources,
    load_curated,
    load_existing,
    load_phrasal,
)
from .store import DictionaryStore, PersistenceError

LOGGER = logging.getLogger(__name__)
DEFAULT_DICTIONARY_PATH = Path("public/dictionary.json")
DEFAULT_CURATED_PATH = Path("scripts/it-curated.json")
DEFAULT_PHRASAL_PATH = Path("scripts/phrasal-verbs-ru.json")
DEFAULT_TARGET = 10000
SYNONYMS_DELAY_MS = 1200


def synonyms_delay_from_env() -> float:
    raw = os.environ.get("TRANSLATE_DELAY_MS")
    if not raw:
        return SYNONYMS_DELAY_MS / 1000
    try:
        delay_ms = float(raw)
    except ValueError:
        delay_ms = -1
    if not 0 < delay_ms < float("inf"):
        LOGGER.warning(
            "Ignoring invalid TRANSLATE_DELAY_MS=%r; using %s ms", raw, SYNONYMS_DELAY_MS
        )
        return SYNONYMS_DELAY_MS / 1000
    return delay_ms / 1000


@dataclass
class PipelineConfig:
    dictionary_path: Path = DEFAULT_DICTIONARY_PATH
    curated_path: Optional[Path] = DEFAULT_CURATED_PATH
    phrasal_path: Optional[Path] = DEFAULT_PHRASAL_PATH
    target_size: int = DEFAULT_TARGET
    bilingual_url: Optional[str] = BILINGUAL_URL
    word_list_urls: List[str] = field(default_factory=lambda: list(WORD_LIST_URLS))
    abbreviations: List[str] = field(default_factory=lambda: list(ABBREVIATIONS))
    offline: bool = False
    synonyms: bool = False
    timeout: float = DEFAULT_TIMEOUT
    libretranslate_url: Optional[str] = LIBRETRANSLATE_URL
    libretranslate_api_key: Optional[str] = LIBRETRANSLATE_API_KEY
    report_path: Optional[Path] = None
    enrichment: EnrichmentSettings = field(default_factory=EnrichmentSettings)


def run_pipeline(
    config: PipelineConfig, session: Optional[requests.Session] = None
) -> BuildStats:
    session_factory = (lambda: session) if session is not None else requests.Session
    session = session or requests.Session()
    store = DictionaryStore(config.dictionary_path)
    existing = load_existing(store)
    curated = load_curated(config.curated_path)
    phrasal = load_phrasal(config.phrasal_path)
    remote = fetch_remote_sources(
        session_factory,
        bilingual_url=config.bilingual_url,
        word_list_urls=config.word_list_urls,
        timeout=config.timeout,
    )

    builder = DictionaryBuilder(existing, curated=curated, bilingual=remote.bilingual)
    builder.remove_keys(config.abbreviations)
    builder.merge(remote.words, config.target_size, phrasal)

    if config.offline:
        LOGGER.info("Offline mode: skipping remote translation.")
    else:
        mymemory = MyMemoryClient(session, timeout=config.timeout)
        enricher = Enricher(
            builder,
            batch_client=mymemory,
            primary=LibreTranslateClient(
                session,
                config.libretranslate_url,
                config.libretranslate_api_key,
                timeout=config.timeout,
            ),
            secondary=mymemory,
            synonyms_client=GoogleSynonymsClient(session, timeout=config.timeout)
            if config.synonyms
            else None,
            settings=config.enrichment,
            checkpoint=lambda: store.save(builder.entries),
        )
        enricher.run()
        builder.apply_curated()
        builder.normalize_casing()

    store.save(builder.entries)
    LOGGER.info("Saved %s", store.path)
    log_summary(builder)
    if config.report_path:
        write_report(builder, config.report_path)
    return builder.stats()


def parse_args(argv: Optional[Sequence[str]] = None) -> PipelineConfig:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dictionary",
        type=Path,
        default=DEFAULT_DICTIONARY_PATH,
        help="Dictionary JSON to extend and overwrite",
    )
    parser.add_argument(
        "--curated",
        type=Path,
        default=DEFAULT_CURATED_PATH,
        help="Hand-maintained translations that override every other source",
    )
    parser.add_argument(
        "--phrasal",
        type=Path,
        default=DEFAULT_PHRASAL_PATH,
        help="Phrasal verbs with pre-translated Russian",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=DEFAULT_TARGET,
        help="Grow the dictionary from word lists up to this many keys",
    )
    parser.add_argument(
        "--bilingual-url",
        type=str,
        default=BILINGUAL_URL,
        help="EN-RU dictionary dump (JSON object of word -> translations)",
    )
    parser.add_argument(
        "--word-list-url",
        dest="word_list_urls",
        action="append",
        default=None,
        help="Newline-delimited word list; repeat for several (default: Oxford 5000 + Google 20k)",
    )
    parser.add_argument(
        "--abbreviations",
        nargs="*",
        default=list(ABBREVIATIONS),
        help="Keys removed from the dictionary before merging",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Only use local sources; skip translation services",
    )
    parser.add_argument(
        "--synonyms",
        action="store_true",
        help="Collect synonyms from Google Translate for single-variant entries",
    )
    parser.add_argument(
        "--synonyms-limit",
        type=int,
        default=None,
        help="Query synonyms for at most N entries",
    )
    parser.add_argument(
        "--individual-limit",
        type=int,
        default=300,
        help="Translate at most N words one by one after the batch phase",
    )
    parser.add_argument("--batch-size", type=int, default=30, help="Words per batch request")
    parser.add_argument(
        "--checkpoint-every",
        type=int,
        default=200,
        help="Save progress after this many new translations",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait for each remote call",
    )
    parser.add_argument(
        "--libretranslate-url",
        type=str,
        default=LIBRETRANSLATE_URL,
        help="LibreTranslate endpoint for single-word translation",
    )
    parser.add_argument(
        "--libretranslate-api-key",
        type=str,
        default=LIBRETRANSLATE_API_KEY,
        help="API key for LibreTranslate (if required)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a CSV coverage report (unresolved frequent words first)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)
    if args.target < 0:
        parser.error("--target must be non-negative")
    if args.batch_size < 1:
        parser.error("--batch-size must be positive")
    logging.basicConfig(
        level=getattr(logging, args.log_level), format="%(levelname)s %(message)s"
    )
    return PipelineConfig(
        dictionary_path=args.dictionary,
        curated_path=args.curated,
        phrasal_path=args.phrasal,
        target_size=args.target,
        bilingual_url=args.bilingual_url or None,
        word_list_urls=args.word_list_urls or list(WORD_LIST_URLS),
        abbreviations=[a.lower() for a in args.abbreviations],
        offline=args.offline,
        synonyms=args.synonyms,
        timeout=args.timeout,
        libretranslate_url=args.libretranslate_url,
        libretranslate_api_key=args.libretranslate_api_key,
        report_path=args.report,
        enrichment=EnrichmentSettings(
            batch_size=args.batch_size,
            individual_limit=args.individual_limit,
            synonyms_limit=args.synonyms_limit,
            synonyms_delay=synonyms_delay_from_env(),
            checkpoint_every=args.checkpoint_every,
        ),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = parse_args(argv)
    try:
        run_pipeline(config)
    except PersistenceError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
