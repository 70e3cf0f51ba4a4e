import re
from collections.abc import Iterable
from typing import Any

# Articles, conjunctions and prepositions never learned as keywords.
STOP_WORDS = frozenset({
    "und", "der", "die", "das", "den", "dem", "des", "eine", "ein", "einer",
    "mit", "für", "von", "vom", "auf", "in", "im", "zu", "zum", "zur", "an",
    "am", "bei", "aus", "nach", "über", "oder", "aber",
    "the", "and", "or", "but", "on", "at", "to", "for", "of", "with", "by",
    "from", "a", "an",
})

_TOKEN_PATTERN = re.compile(r"\w+(?:[&'.+-]\w+)*")


def parse_keyword_list(raw_keywords: str | None) -> list[str]:
    if not raw_keywords:
        return []
    return normalize_keywords(raw_keywords.split(","))


def normalize_keywords(value: Any) -> list[str]:
    """Lower-case, strip and de-duplicate keywords, keeping first-seen order."""
    if not value:
        return []
    if isinstance(value, str):
        return parse_keyword_list(value)
    if not isinstance(value, Iterable):
        return []
    keywords: list[str] = []
    seen = set()
    for item in value:
        keyword = " ".join(str(item).split()).lower()
        if keyword and keyword not in seen:
            keywords.append(keyword)
            seen.add(keyword)
    return keywords


def merge_keywords(
    existing: list[str] | None,
    new_keywords: Iterable[str],
    limit: int | None = None,
) -> list[str]:
    merged = normalize_keywords(list(existing or []) + list(new_keywords))
    if limit is not None and limit > 0:
        return merged[:limit]
    return merged


def tokenize(text: str | None) -> list[str]:
    if not text:
        return []
    return _TOKEN_PATTERN.findall(text.lower())


def extract_learnable_terms(
    text: str,
    *,
    stop_words: Iterable[str] = STOP_WORDS,
    min_length: int = 1,
) -> list[str]:
    blocked = {word.lower() for word in stop_words}
    terms: list[str] = []
    seen = set()
    for token in tokenize(text):
        if token in blocked or token in seen:
            continue
        if len(token) < min_length:
            continue
        if not any(char.isalpha() for char in token):
            continue
        terms.append(token)
        seen.add(token)
    return terms


def contains_term(text: str, term: str) -> bool:
    """Whole-word, case-insensitive containment; multi-word terms match as a phrase."""
    term = term.strip().lower()
    if not term or not text:
        return False
    pattern = r"(?<!\w)" + re.escape(term) + r"(?!\w)"
    return re.search(pattern, text.lower()) is not None
