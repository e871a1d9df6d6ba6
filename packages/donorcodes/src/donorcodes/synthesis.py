"""Candidate code synthesis strategies and the fallback cascade."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from donorcodes.config import SearchLimits
from donorcodes.names import (
    clean_code,
    extract_initials,
    fold_accents,
    generate_abbreviations,
)
from donorcodes.types import Candidate, DonorRecord, Strategy
from donorcodes.validation import check_code_uniqueness, validate_code_format

StrategyFn = Callable[[str, int, SearchLimits], list[str]]

_NON_CODE_RE = re.compile(r"[^A-Z0-9]")


def codes_from_initials(
    initials: str, preferred_length: int, limits: SearchLimits | None = None
) -> list[str]:
    """Expand an initials pattern with numeric padding or truncation."""
    if limits is None:
        limits = SearchLimits()

    base = clean_code(initials)
    if not base:
        return []

    codes = [base]

    if len(base) < preferred_length:
        needed = preferred_length - len(base)
        if needed <= limits.max_suffix_deficit:
            for i in range(1, limits.max_suffix + 1):
                codes.append(base + str(i).zfill(needed))
                if len(codes) >= limits.max_initials_variants:
                    break

    if len(base) > preferred_length:
        codes.append(base[:preferred_length])
        codes.append(base[: preferred_length - 1] + "1")

    return codes


def codes_from_abbreviation(abbreviation: str, preferred_length: int) -> list[str]:
    """Expand an abbreviation with short numeric suffixes or truncation."""
    base = clean_code(abbreviation)
    if not base:
        return []

    codes = [base]
    if len(base) < preferred_length:
        codes.append(base + "01")
        codes.append(base + "1")
    if len(base) > preferred_length + 2:
        codes.append(base[:preferred_length])
    return codes


def hybrid_codes(entity_name: str, preferred_length: int) -> list[str]:
    """Combine a prefix of the first word with the initials of the rest."""
    words = fold_accents(entity_name).upper().split()
    if not words:
        return []

    codes: list[str] = []

    if len(words) > 1:
        first = words[0]
        others = "".join(w[0] for w in words[1:])
        for prefix_len in range(2, min(4, len(first)) + 1):
            hybrid = first[:prefix_len] + others
            if 3 <= len(hybrid) <= 8:
                codes.append(hybrid)
                if len(hybrid) < preferred_length:
                    codes.append(hybrid + "01")

    if len(words) == 1 and len(words[0]) > 6:
        word = words[0]
        codes.append(word[:preferred_length])
        codes.append(word[: preferred_length - 1] + "1")

    return codes


def _initials_strategy(
    entity_name: str, preferred_length: int, limits: SearchLimits
) -> list[str]:
    codes: list[str] = []
    for initials in extract_initials(entity_name):
        codes.extend(codes_from_initials(initials, preferred_length, limits))
    return codes


def _abbreviation_strategy(
    entity_name: str, preferred_length: int, limits: SearchLimits
) -> list[str]:
    codes: list[str] = []
    for abbreviation in generate_abbreviations(entity_name):
        codes.extend(codes_from_abbreviation(abbreviation, preferred_length))
    return codes


def _hybrid_strategy(
    entity_name: str, preferred_length: int, limits: SearchLimits
) -> list[str]:
    return hybrid_codes(entity_name, preferred_length)


# Run order matters: earlier strategies win ties after ranking.
STRATEGIES: dict[Strategy, StrategyFn] = {
    Strategy.INITIALS: _initials_strategy,
    Strategy.ABBREVIATION: _abbreviation_strategy,
    Strategy.HYBRID: _hybrid_strategy,
}


def synthesize(
    entity_name: str, preferred_length: int, limits: SearchLimits | None = None
) -> list[Candidate]:
    """Run every primary strategy and return cleaned, strategy-tagged candidates."""
    if limits is None:
        limits = SearchLimits()

    candidates: list[Candidate] = []
    for strategy, fn in STRATEGIES.items():
        for raw in fn(entity_name, preferred_length, limits):
            candidates.append(Candidate(code=clean_code(raw), strategy=strategy))
    return candidates


def fallback_candidates(
    entity_name: str,
    donors: Sequence[DonorRecord],
    limits: SearchLimits | None = None,
) -> list[Candidate]:
    """Simpler heuristics used when no primary candidate survives validation."""
    if limits is None:
        limits = SearchLimits()

    clean_name = _NON_CODE_RE.sub("", fold_accents(entity_name or "").upper())
    candidates: list[Candidate] = []

    # 1. Leading 4-6 characters of the name
    if len(clean_name) >= 4:
        for length in range(4, min(6, len(clean_name)) + 1):
            code = clean_name[:length]
            if validate_code_format(code).is_valid:
                candidates.append(Candidate(
                    code=code,
                    strategy=Strategy.FALLBACK,
                    note=f"Fallback: first {length} letters of entity name",
                ))

    # 2. Leading 3 characters + numeric suffix, until enough unique codes
    if len(clean_name) >= 3:
        base = clean_name[:3]
        found = 0
        for i in range(1, limits.max_suffix + 1):
            code = f"{base}{i:02d}"
            if (
                validate_code_format(code).is_valid
                and check_code_uniqueness(code, donors).is_unique
            ):
                candidates.append(Candidate(
                    code=code,
                    strategy=Strategy.FALLBACK,
                    note=f"Fallback: first 3 letters + number {i}",
                ))
                found += 1
                if found >= limits.fallback_unique_target:
                    break

    # 3. Last resort: two leading characters + last letter + "01"
    if not candidates and clean_name:
        last = next((ch for ch in reversed(clean_name) if ch.isalpha()), clean_name[-1])
        code = clean_name[:2] + last + "01"
        if validate_code_format(code).is_valid:
            candidates.append(Candidate(
                code=code,
                strategy=Strategy.FALLBACK,
                note="Fallback: simple letter combination + number",
            ))

    return candidates


def generate_code_variants(base_code: str, max_variants: int = 5) -> list[str]:
    """Numbered variants of a base code, e.g. WHO -> WHO01, WHO1, WHO02, ..."""
    cleaned = clean_code(base_code)
    if not cleaned:
        return []

    variants = [cleaned]
    for i in range(1, max_variants + 1):
        if len(variants) >= max_variants:
            break
        variants.append(f"{cleaned}{i:02d}")
        variants.append(f"{cleaned}{i}")

    if len(cleaned) > 3:
        shortened = cleaned[:-1]
        variants.append(f"{shortened}01")
        variants.append(f"{shortened}1")

    return list(dict.fromkeys(variants))
