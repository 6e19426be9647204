from __future__ import annotations

from podcast_dictionary.merge import DictionaryBuilder
from podcast_dictionary.models import Translation


def _t(*variants: str) -> Translation:
    return Translation.of(*variants)


def _builder(existing=None, curated=None, bilingual=None) -> DictionaryBuilder:
    return DictionaryBuilder(
        {k: _t(*v) if isinstance(v, tuple) else Translation.from_value(v) for k, v in (existing or {}).items()},
        curated={k: _t(v) for k, v in (curated or {}).items()},
        bilingual={k: _t(v) for k, v in (bilingual or {}).items()},
    )


def test_end_to_end_merge_without_remote_calls() -> None:
    builder = _builder(curated={"core": "ядро"}, bilingual={"length": "длина"})
    stats = builder.merge(["core", "length", "unmappable"], target_size=3)
    assert builder.to_json() == {"core": "ядро", "length": "длина", "unmappable": "—"}
    assert stats.total == 3
    assert stats.resolved == 2
    assert builder.unresolved() == ["unmappable"]


def test_curated_wins_over_bilingual_and_existing() -> None:
    builder = _builder(
        existing={"length": "протяжённость"},
        curated={"length": "длина"},
        bilingual={"length": "долгота"},
    )
    builder.merge([], target_size=10)
    assert builder.get("length") == _t("длина")
    assert builder.sources["length"] == "curated"


def test_existing_resolved_value_is_never_regressed() -> None:
    builder = _builder(existing={"break": "перерыв"}, bilingual={"break": "ломать"})
    builder.merge(["break"], target_size=10)
    assert builder.get("break") == _t("перерыв")
    assert builder.sources["break"] == "existing"


def test_existing_placeholder_is_filled_from_local_sources() -> None:
    builder = _builder(existing={"breaking": "—", "rare": "—"}, bilingual={"break": "ломать"})
    builder.merge([], target_size=10)
    assert builder.get("breaking") == _t("ломать")
    assert builder.sources["breaking"] == "morphology"
    assert "rare" in builder
    assert not builder.get("rare").resolved


def test_extend_respects_target_and_order() -> None:
    builder = _builder(existing={"alpha": "альфа"})
    added = builder.extend(["beta", "alpha", "gamma", "delta"], target_size=3)
    assert added == 2
    assert list(builder.entries) == ["alpha", "beta", "gamma"]


def test_merge_is_idempotent_on_its_own_output() -> None:
    curated = {"core": "ядро"}
    bilingual = {"length": "длина", "break": "ломать"}
    words = ["core", "length", "breaking", "unmappable"]
    first = _builder(curated=curated, bilingual=bilingual)
    first.merge(words, target_size=4)
    snapshot = first.to_json()

    second = _builder(existing=snapshot, curated=curated, bilingual=bilingual)
    second.merge(words, target_size=4)
    assert second.to_json() == snapshot
    assert list(second.entries) == list(snapshot)


def test_remove_keys_drops_abbreviations() -> None:
    builder = _builder(existing={"xhtml": "—", "ng": "нг", "core": "ядро"})
    assert builder.remove_keys(["xhtml", "ng", "missing"]) == 2
    assert list(builder.entries) == ["core"]


def test_removed_keys_are_not_readded_by_later_steps() -> None:
    builder = _builder(
        existing={"xhtml": "—", "core": "ядро"},
        curated={"ng": "нг"},
        bilingual={"xhtml": "разметка", "length": "длина"},
    )
    builder.remove_keys(["xhtml", "ng"])
    builder.merge(["core", "xhtml", "ng", "length"], target_size=10, phrasal={"xhtml": _t("икс")})
    assert list(builder.entries) == ["core", "length"]


def test_phrases_added_without_overwriting() -> None:
    builder = _builder(existing={"give up": "отказаться"})
    added = builder.add_phrases({"give up": _t("сдаваться"), "look up": _t("искать")})
    assert added == 1
    assert builder.get("give up") == _t("отказаться")
    assert builder.get("look up") == _t("искать")


def test_curated_keys_are_injected_when_missing() -> None:
    builder = _builder(curated={"breakin": "ломать"})
    builder.merge([], target_size=0)
    assert builder.get("breakin") == _t("ломать")


def test_normalize_casing_only_touches_long_all_caps() -> None:
    builder = _builder(existing={"ai": "ИИ", "core": "ЯДРО", "thread": "Поток"})
    assert builder.normalize_casing() == 1
    assert builder.get("core") == _t("Ядро")
    assert builder.get("ai") == _t("ИИ")


def test_fill_only_replaces_placeholders() -> None:
    builder = _builder(existing={"core": "ядро", "rare": "—"})
    assert not builder.fill("core", _t("сердцевина"), "mymemory")
    assert builder.fill("rare", _t("Редкий"), "mymemory")
    assert builder.sources["rare"] == "mymemory"
    assert not builder.fill("rare", _t("Другой"), "mymemory")


def test_add_variants_appends_after_primary() -> None:
    builder = _builder(existing={"break": "ломать"}, curated={"core": "ядро"})
    assert builder.add_variants("break", _t("Ломать", "перерыв"), "google-synonyms")
    assert builder.get("break").variants == ("ломать", "перерыв")
    assert builder.sources["break"] == "existing"
    assert not builder.add_variants("break", _t("перерыв"), "google-synonyms")
    assert not builder.add_variants("core", _t("сердцевина"), "google-synonyms")
