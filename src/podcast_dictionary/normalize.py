from __future__ import annotations

import re
import unicodedata
from typing import Optional

import ftfy

QUOTE_CHARS = "'\""
KEY_PATTERN = re.compile(r"^[a-z'-]+$")
PHRASE_PATTERN = re.compile(r"^[a-z'-]+(?: [a-z'-]+)*$")
CYRILLIC_PATTERN = re.compile(r"[Ѐ-ӿ]")


def clean_text(raw_text: str) -> str:
    text = ftfy.fix_text(raw_text)
    text = text.replace("\xa0", " ")
    text = unicodedata.normalize("NFC", text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_key(raw: Optional[str], *, allow_phrase: bool = False) -> Optional[str]:
    if not raw:
        return None
    key = raw.strip().lower()
    if key[:1] in QUOTE_CHARS:
        key = key[1:]
    if key[-1:] in QUOTE_CHARS:
        key = key[:-1]
    key = key.strip()
    if allow_phrase:
        key = re.sub(r"\s+", " ", key)
    if len(key) < 2:
        return None
    pattern = PHRASE_PATTERN if allow_phrase else KEY_PATTERN
    if not pattern.match(key):
        return None
    return key


def normalize_translation(raw: str) -> str:
    """Sentence-case a translation; strings of three characters or fewer are kept as-is."""
    text = ftfy.fix_text(raw).strip()
    if len(text) <= 3:
        return text
    return text[0].upper() + text[1:].lower()


def is_all_caps(text: str) -> bool:
    return text.upper() == text and text.lower() != text


def has_target_script(text: str) -> bool:
    return bool(CYRILLIC_PATTERN.search(text))


def is_acceptable(word: str, candidate: Optional[str]) -> bool:
    if not candidate:
        return False
    trimmed = candidate.strip()
    if not trimmed or trimmed.lower() == word.strip().lower():
        return False
    return has_target_script(trimmed)
