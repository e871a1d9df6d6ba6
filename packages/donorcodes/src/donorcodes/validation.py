"""Code validation against format rules and the donor registry.

Every function here is total: any input, including None or an empty
string, produces a result object. Problems are reported as data.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from donorcodes.config import SearchLimits, SimilarityConfig
from donorcodes.names import MAX_CODE_LENGTH
from donorcodes.types import (
    BestPracticeReport,
    CodeValidationResult,
    DonorRecord,
    FormatCheck,
    UniquenessCheck,
)

MIN_CODE_LENGTH = 2

_ALNUM_RE = re.compile(r"[A-Za-z0-9]+")
_LETTER_RE = re.compile(r"[A-Za-z]")
_DIGITS_RE = re.compile(r"\d+")
_NON_CODE_RE = re.compile(r"[^A-Z0-9]")
_CONSONANT_RUN_RE = re.compile(r"[BCDFGHJKLMNPQRSTVWXYZ]{4,}")
_REPEAT_RE = re.compile(r"(.)\1{2,}")


def _normalized(code: str | None) -> str:
    if not isinstance(code, str):
        return ""
    return code.upper().strip()


def validate_code_format(code: str | None) -> FormatCheck:
    """Check length, character set and letter content of a code.

    Warnings (all digits, no uppercase) are listed in ``issues`` but do not
    make the code invalid.
    """
    if not code or not isinstance(code, str):
        return FormatCheck(is_valid=False, issues=["Code is required"])

    trimmed = code.strip()
    if not trimmed:
        return FormatCheck(is_valid=False, issues=["Code cannot be empty"])

    errors: list[str] = []
    warnings: list[str] = []

    if len(trimmed) < MIN_CODE_LENGTH:
        errors.append(f"Code must be at least {MIN_CODE_LENGTH} characters long")
    if len(trimmed) > MAX_CODE_LENGTH:
        errors.append(f"Code cannot exceed {MAX_CODE_LENGTH} characters")
    if not _ALNUM_RE.fullmatch(trimmed):
        errors.append("Code can only contain letters and numbers")

    has_letter = _LETTER_RE.search(trimmed) is not None
    if not has_letter:
        errors.append("Code must contain at least one letter")

    if _DIGITS_RE.fullmatch(trimmed):
        warnings.append("Code should not be only numbers")
    if has_letter and trimmed.lower() == trimmed:
        warnings.append("Code should contain uppercase letters")

    return FormatCheck(is_valid=not errors, issues=errors + warnings)


def check_code_uniqueness(
    code: str | None, donors: Iterable[DonorRecord]
) -> UniquenessCheck:
    """Find donors whose code equals ``code`` (case-insensitive, trimmed)."""
    normalized = _normalized(code)
    if not normalized:
        return UniquenessCheck(is_unique=False, conflicts=[])

    conflicts = [d.name for d in donors if _normalized(d.ceb_code) == normalized]
    return UniquenessCheck(is_unique=not conflicts, conflicts=conflicts)


def code_similarity(a: str | None, b: str | None) -> float:
    """Normalized Levenshtein similarity: 1 - edits / max(len(a), len(b))."""
    a_norm = _normalized(a)
    b_norm = _normalized(b)
    if not a_norm or not b_norm:
        return 0.0
    return Levenshtein.normalized_similarity(a_norm, b_norm)


def find_similar_codes(
    code: str | None,
    donors: Sequence[DonorRecord],
    threshold: float = 0.8,
) -> list[str]:
    """List existing codes likely to be confused with ``code``.

    Exact matches are excluded (they are conflicts, not look-alikes).
    Entries are formatted "CODE (Donor Name)", most similar first.
    """
    normalized = _normalized(code)
    if not normalized or not donors:
        return []

    existing = [_normalized(d.ceb_code) for d in donors]
    matches = process.extract(
        normalized,
        existing,
        scorer=Levenshtein.normalized_similarity,
        score_cutoff=threshold,
        limit=None,
    )
    return [
        f"{existing_code} ({donors[idx].name})"
        for existing_code, _score, idx in matches
        if existing_code and existing_code != normalized
    ]


def validate_code(
    code: str | None,
    donors: Sequence[DonorRecord],
    limits: SearchLimits | None = None,
    similarity: SimilarityConfig | None = None,
) -> CodeValidationResult:
    """Run format, uniqueness and similarity checks and propose fixes."""
    if limits is None:
        limits = SearchLimits()
    if similarity is None:
        similarity = SimilarityConfig()

    format_result = validate_code_format(code)
    uniqueness = check_code_uniqueness(code, donors)
    similar = find_similar_codes(code, donors, similarity.threshold)

    suggestions: list[str] = []

    base = _normalized(code)
    if not uniqueness.is_unique and base:
        for i in range(1, limits.conflict_suggestions + 1):
            variant = f"{base}{i:02d}"
            if check_code_uniqueness(variant, donors).is_unique:
                suggestions.append(variant)

    if not format_result.is_valid:
        cleaned = _NON_CODE_RE.sub("", _normalized(code))
        if len(cleaned) >= MIN_CODE_LENGTH:
            suggestions.append(cleaned)

    return CodeValidationResult(
        is_valid=format_result.is_valid and uniqueness.is_unique,
        is_unique=uniqueness.is_unique,
        conflicts=uniqueness.conflicts,
        suggestions=list(dict.fromkeys(suggestions)),
        format_issues=format_result.issues,
        similar=similar,
    )


def check_code_best_practices(code: str | None) -> BestPracticeReport:
    """Score a code against readability conventions (100 = no concerns)."""
    trimmed = _normalized(code)
    if not trimmed:
        return BestPracticeReport(score=0, recommendations=["Code is required"])

    score = 100
    recommendations: list[str] = []

    if len(trimmed) < 3:
        score -= 20
        recommendations.append("Consider using at least 3 characters for better uniqueness")
    elif len(trimmed) > 7:
        score -= 10
        recommendations.append("Shorter codes (3-6 characters) are generally preferred")

    digit_count = sum(ch.isdigit() for ch in trimmed)
    letter_count = len(trimmed) - digit_count

    if digit_count > letter_count:
        score -= 15
        recommendations.append("Codes should primarily use letters, not numbers")
    if digit_count > 2:
        score -= 10
        recommendations.append("Avoid using more than 2 numbers in a code")
    if _CONSONANT_RUN_RE.search(trimmed):
        score -= 15
        recommendations.append("Avoid long sequences of consonants for better readability")
    if _REPEAT_RE.search(trimmed):
        score -= 10
        recommendations.append("Avoid repeating the same character more than twice")

    return BestPracticeReport(score=max(0, score), recommendations=recommendations)


def find_duplicate_codes(donors: Iterable[DonorRecord]) -> dict[str, list[str]]:
    """Map each code held by more than one donor to those donors' names."""
    by_code: dict[str, list[str]] = {}
    for donor in donors:
        code = _normalized(donor.ceb_code)
        if code:
            by_code.setdefault(code, []).append(donor.name)
    return {code: names for code, names in sorted(by_code.items()) if len(names) > 1}
