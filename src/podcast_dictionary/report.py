from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, List

import pandas as pd
from wordfreq import zipf_frequency

from .merge import DictionaryBuilder

LOGGER = logging.getLogger(__name__)


def coverage_by_source(builder: DictionaryBuilder) -> Dict[str, int]:
    counts: Counter[str] = Counter()
    for key, value in builder.entries.items():
        counts[builder.sources.get(key, "existing") if value.resolved else "placeholder"] += 1
    return dict(counts)


def log_summary(builder: DictionaryBuilder) -> None:
    stats = builder.stats()
    LOGGER.info(
        "Dictionary built: %s words, %s with Russian translation", stats.total, stats.resolved
    )
    if stats.unresolved:
        LOGGER.info("%s words still without translation", stats.unresolved)
    if not stats.total:
        return
    parts = [
        f"{source} {count / stats.total * 100:.1f}%"
        for source, count in sorted(coverage_by_source(builder).items(), key=lambda kv: -kv[1])
    ]
    LOGGER.info("Coverage: %s", " | ".join(parts))


def to_records(builder: DictionaryBuilder) -> List[Dict[str, object]]:
    records: List[Dict[str, object]] = []
    for key, value in builder.entries.items():
        records.append(
            {
                "key": key,
                "translation": value.display(),
                "source": builder.sources.get(key, "existing") if value.resolved else "placeholder",
                "resolved": value.resolved,
                "zipf": zipf_frequency(key, "en"),
            }
        )
    return records


def write_report(builder: DictionaryBuilder, path: Path) -> Path:
    frame = pd.DataFrame(
        to_records(builder), columns=["key", "translation", "source", "resolved", "zipf"]
    )
    frame.sort_values(by=["resolved", "zipf", "key"], ascending=[True, False, True], inplace=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    LOGGER.info("Writing coverage report (%s rows) to %s", len(frame), path)
    frame.to_csv(path, index=False, encoding="utf-8-sig")
    return path
