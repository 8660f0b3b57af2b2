"""Lexical normalization of raw chat queries.

normalize() is total and idempotent: it never raises and
normalize(normalize(x)) == normalize(x) for any input.
"""

import re
from collections.abc import Mapping
from functools import lru_cache

from alumni_search.core.vocabulary import DEFAULT_CORRECTIONS

# Keep word characters, whitespace, apostrophes (possessives) and the
# symbols that appear inside skill names (c++, c#, r&d, co-founder).
_PUNCTUATION = re.compile(r"[^\w\s'&+#-]")
# Apostrophes not sitting between two word characters are quotes.
_QUOTE = re.compile(r"(?<!\w)'|'(?!\w)")
_UNDERSCORE = re.compile(r"_+")
_WHITESPACE = re.compile(r"\s+")

_pattern_cache: dict[tuple[str, ...], re.Pattern[str]] = {}


def normalize(raw: object, corrections: Mapping[str, str] | None = None) -> str:
    """Case-fold, strip punctuation, collapse whitespace and fix known typos."""
    if raw is None:
        return ""
    text = str(raw).casefold()
    text = _PUNCTUATION.sub(" ", text)
    text = _UNDERSCORE.sub(" ", text)
    text = _QUOTE.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    if not text:
        return ""
    table = DEFAULT_CORRECTIONS if corrections is None else corrections
    return apply_corrections(text, table)


def apply_corrections(text: str, corrections: Mapping[str, str]) -> str:
    """Replace whole words found in the correction table in a single pass."""
    if not corrections:
        return text
    pattern = _corrections_pattern(corrections)
    return pattern.sub(lambda m: corrections[m.group(0)], text)


def _corrections_pattern(corrections: Mapping[str, str]) -> re.Pattern[str]:
    key = tuple(sorted(corrections))
    pattern = _pattern_cache.get(key)
    if pattern is None:
        alternation = "|".join(re.escape(k) for k in sorted(key, key=len, reverse=True))
        pattern = re.compile(rf"(?<![\w'&+#-])(?:{alternation})(?![\w'&+#-])")
        _pattern_cache[key] = pattern
    return pattern


@lru_cache(maxsize=1024)
def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(term)}(?:e?s)?(?!\w)")


def contains_term(text: str, term: str) -> bool:
    """Whole-word containment of ``term`` in lower-cased ``text``.

    A plural suffix is accepted ("founder" matches "founders"), but a term
    never matches inside a longer word ("ai" does not match "training").
    """
    term = term.lower().strip()
    return bool(term) and _term_pattern(term).search(text) is not None
