from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

PLACEHOLDER = "—"

JsonValue = Union[str, list, None]


def _dedup_keep_order(values: Iterable[str]) -> Tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        k = value.lower()
        if k in seen:
            continue
        seen.add(k)
        out.append(value)
    return tuple(out)


@dataclass(frozen=True)
class Translation:
    """Ordered set of Russian variants; primary meaning first, empty when unresolved."""

    variants: Tuple[str, ...] = ()

    @classmethod
    def of(cls, *variants: str) -> "Translation":
        cleaned = (v.strip() for v in variants if isinstance(v, str))
        return cls(_dedup_keep_order(v for v in cleaned if v and v != PLACEHOLDER))

    @classmethod
    def from_value(cls, raw: JsonValue) -> "Translation":
        if raw is None:
            return cls()
        if isinstance(raw, (list, tuple)):
            return cls.of(*raw)
        return cls.of(str(raw))

    @property
    def resolved(self) -> bool:
        return bool(self.variants)

    @property
    def primary(self) -> Optional[str]:
        return self.variants[0] if self.variants else None

    def extended(self, other: "Translation") -> "Translation":
        return Translation(_dedup_keep_order(self.variants + other.variants))

    def to_json(self) -> JsonValue:
        if not self.variants:
            return PLACEHOLDER
        if len(self.variants) == 1:
            return self.variants[0]
        return list(self.variants)

    def display(self) -> str:
        return ", ".join(self.variants)


UNRESOLVED = Translation()


@dataclass(frozen=True)
class TranslationResult:
    ok: bool
    source: str
    value: Optional[Translation] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: Translation, source: str) -> "TranslationResult":
        return cls(ok=True, source=source, value=value)

    @classmethod
    def failure(cls, reason: str, source: str) -> "TranslationResult":
        return cls(ok=False, source=source, reason=reason)
