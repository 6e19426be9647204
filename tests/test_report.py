from __future__ import annotations

from pathlib import Path

import pandas as pd

from podcast_dictionary.merge import DictionaryBuilder
from podcast_dictionary.models import Translation
from podcast_dictionary.report import coverage_by_source, write_report


def _builder() -> DictionaryBuilder:
    builder = DictionaryBuilder(
        {"zzyzx": Translation()},
        curated={"core": Translation.of("ядро")},
        bilingual={"length": Translation.of("длина")},
    )
    builder.merge(["core", "length", "the", "break"], target_size=10)
    return builder


def test_coverage_by_source() -> None:
    assert coverage_by_source(_builder()) == {"placeholder": 3, "curated": 1, "bilingual": 1}


def test_report_lists_frequent_unresolved_words_first(tmp_path: Path) -> None:
    path = write_report(_builder(), tmp_path / "reports" / "coverage.csv")
    frame = pd.read_csv(path, encoding="utf-8-sig")
    assert list(frame.columns) == ["key", "translation", "source", "resolved", "zipf"]
    assert list(frame["key"][:3]) == ["the", "break", "zzyzx"]
    assert set(frame["key"][3:]) == {"core", "length"}
    assert frame.loc[frame["key"] == "core", "translation"].item() == "ядро"
