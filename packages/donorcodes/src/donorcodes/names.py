"""Entity name analysis: initials, abbreviations and code cleaning."""

from __future__ import annotations

import re
import unicodedata

MAX_CODE_LENGTH = 10

STOP_WORDS: frozenset[str] = frozenset({
    "THE", "OF", "AND", "FOR", "TO", "IN", "ON", "AT", "BY", "WITH", "FROM",
    "INTO", "THROUGH", "DURING", "BEFORE", "AFTER", "ABOVE", "BELOW", "UP",
    "DOWN", "OUT", "OFF", "OVER", "UNDER", "AGAIN", "FURTHER", "THEN", "ONCE",
})

# Organizational nouns that always count as significant words.
ORGANIZATIONAL_TERMS: frozenset[str] = frozenset({
    "FUND", "FOUNDATION", "ORGANIZATION", "CENTRE", "CENTER", "AGENCY", "BANK",
})

MIN_INITIALS_LENGTH = 2
MAX_INITIALS_LENGTH = 8

_PUNCTUATION_RE = re.compile(r"[^\w\s&-]")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_LETTER_RE = re.compile(r"[^A-Z]")
_VOWEL_RE = re.compile(r"[AEIOU]")
_ISOLATED_VOWEL_RE = re.compile(r"[AEIOU](?![AEIOU])")
_NON_CODE_RE = re.compile(r"[^A-Z0-9]")


def fold_accents(text: str) -> str:
    """Decompose accented characters and drop the combining marks ('é' -> 'e')."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(name: str) -> str:
    """Uppercase a name, keeping only word characters, spaces, '&' and '-'."""
    s = fold_accents(name.strip())
    s = _PUNCTUATION_RE.sub("", s)
    s = _WHITESPACE_RE.sub(" ", s).strip()
    return s.upper()


def is_significant(word: str) -> bool:
    """Check whether a word contributes to initials."""
    return (
        word not in STOP_WORDS
        or len(word) == 1
        or word in ORGANIZATIONAL_TERMS
    )


def extract_initials(name: str) -> list[str]:
    """Extract initials-style patterns from an entity name.

    Returns a de-duplicated list of patterns between 2 and 8 characters long.
    Empty or non-string input returns an empty list.
    """
    if not name or not isinstance(name, str):
        return []

    cleaned = normalize_name(name)
    words = [w for w in cleaned.split(" ") if w]
    significant = [w for w in words if is_significant(w)]

    patterns: list[str] = []

    # 1. First letter of every significant word
    if significant:
        patterns.append("".join(w[0] for w in significant))

    # 2. First 3 (then 2) letters of the first word + initials of the others
    if len(significant) > 1:
        first = significant[0]
        others = "".join(w[0] for w in significant[1:])
        if len(first) >= 3:
            patterns.append(first[:3] + others)
        if len(first) >= 2:
            patterns.append(first[:2] + others)

    # 3. Prefixes of a single long word
    if len(significant) == 1 and len(significant[0]) > 6:
        word = significant[0]
        patterns.extend(word[:n] for n in (4, 5, 6))

    # 4. Hyphenated segments
    segments = [s.strip() for s in cleaned.split("-") if s.strip()]
    if len(segments) > 1:
        patterns.append("".join(s[0] for s in segments))
        patterns.append("".join(s[:2] for s in segments))

    return [
        p for p in dict.fromkeys(patterns)
        if MIN_INITIALS_LENGTH <= len(p) <= MAX_INITIALS_LENGTH
    ]


def generate_abbreviations(name: str) -> list[str]:
    """Generate vowel-elided abbreviations of an entity name."""
    if not name or not isinstance(name, str):
        return []

    letters = _NON_LETTER_RE.sub("", fold_accents(name).upper())
    abbreviations: list[str] = []

    # 1. Drop every vowel
    consonants = _VOWEL_RE.sub("", letters)
    if 3 <= len(consonants) <= 8:
        abbreviations.append(consonants)

    # 2. Leading consonants
    if len(consonants) > 4:
        abbreviations.append(consonants[:4])
        abbreviations.append(consonants[:5])

    # 3. Drop only vowels not followed by another vowel, keeping digraphs readable
    smart = _ISOLATED_VOWEL_RE.sub("", letters)[:6]
    if len(smart) >= 3:
        abbreviations.append(smart)

    return list(dict.fromkeys(abbreviations))


def clean_code(code: str) -> str:
    """Canonicalize a code: uppercase, [A-Z0-9] only, at most 10 characters."""
    if not code or not isinstance(code, str):
        return ""
    return _NON_CODE_RE.sub("", code.upper())[:MAX_CODE_LENGTH]
