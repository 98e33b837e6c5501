"""
Text normalization and word-overlap helpers shared by the classifier, the
response cache, the learning store and the response banks.
"""

from __future__ import annotations

import re
import unicodedata

_WORD_CHAR_RE = re.compile(r"\w")

STOPWORDS = frozenset(
    {
        "tôi", "bạn", "là", "có", "được", "và", "của", "trong", "để", "với", "này", "đó",
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    }
)


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.replace("đ", "d").replace("Đ", "D")


def fold_with_accents(text: str | None) -> tuple[str, str]:
    """
    Return `(folded, accented)` forms of `text`, aligned character for character.

    Both are lowercased with punctuation turned into spaces and whitespace
    collapsed; `folded` also drops diacritics, `accented` keeps them.
    """
    folded: list[str] = []
    accented: list[str] = []
    for ch in unicodedata.normalize("NFC", str(text or "")).lower():
        base = strip_diacritics(ch)
        if not base:
            continue
        if base == "_" or not _WORD_CHAR_RE.match(base):
            if folded and folded[-1] != " ":
                folded.append(" ")
                accented.append(" ")
            continue
        folded.append(base)
        accented.append(ch if len(base) == 1 else base)
    if folded and folded[-1] == " ":
        folded.pop()
        accented.pop()
    return "".join(folded), "".join(accented)


def normalize_text(text: str | None) -> str:
    """Lowercase, drop diacritics, turn punctuation into spaces and collapse whitespace."""
    return fold_with_accents(text)[0]


def cache_key_text(text: str | None) -> str:
    return str(text or "").lower().strip()


def word_set(text: str | None) -> set[str]:
    return {w for w in str(text or "").lower().split() if w}


def jaccard(a: str | None, b: str | None) -> float:
    left = word_set(a)
    right = word_set(b)
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def overlap_ratio(query: str | None, candidate: str | None) -> float:
    """Shared words over the longer word list, on normalized text."""
    left = set(normalize_text(query).split())
    right = set(normalize_text(candidate).split())
    if not left or not right:
        return 0.0
    return len(left & right) / max(len(left), len(right))


def extract_keywords(text: str | None, limit: int = 5) -> list[str]:
    keywords: list[str] = []
    for word in str(text or "").lower().split():
        if len(word) <= 2 or word in STOPWORDS:
            continue
        token = normalize_text(word).replace(" ", "")
        if not token or token in keywords:
            continue
        keywords.append(token)
        if len(keywords) >= limit:
            break
    return keywords
