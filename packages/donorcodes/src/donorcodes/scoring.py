"""Deterministic quality scoring of candidate codes."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from donorcodes.config import CodeGenConfig, QualityWeights
from donorcodes.names import clean_code, fold_accents
from donorcodes.types import (
    Candidate,
    CodePattern,
    CodeValidationResult,
    DonorRecord,
    GeneratedCodeSuggestion,
    PatternKind,
    Strategy,
)
from donorcodes.validation import validate_code, validate_code_format

_CONSONANT_RUN_RE = re.compile(r"[BCDFGHJKLMNPQRSTVWXYZ]{4,}")

_STRATEGY_PHRASES: dict[Strategy, str] = {
    Strategy.INITIALS: "Generated from entity name initials",
    Strategy.ABBREVIATION: "Created using name abbreviation technique",
    Strategy.HYBRID: "Combines word prefixes with initials",
    Strategy.FALLBACK: "Fallback heuristic",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def _clamp(score: float) -> int:
    return round_half_up(max(0.0, min(100.0, score)))


def score_code_quality(
    code: str, entity_name: str, weights: QualityWeights | None = None
) -> int:
    """Score a code's intrinsic quality for an entity name (0-100)."""
    if not code or not entity_name:
        return 0
    if weights is None:
        weights = QualityWeights()

    cleaned = clean_code(code)
    name_upper = fold_accents(entity_name).upper()
    score = weights.base

    # 1. Length: 4-6 characters read best
    if 4 <= len(cleaned) <= 6:
        score += weights.ideal_length_bonus
    elif len(cleaned) in (3, 7):
        score += weights.near_length_bonus
    else:
        score -= weights.length_penalty

    # 2. Share of the code's letters found in the name
    letters = [ch for ch in cleaned if not ch.isdigit()]
    if letters:
        found = sum(1 for ch in letters if ch in name_upper)
        score += (found / len(letters)) * 100 * weights.letter_match_weight

    # 3. Digits
    digit_count = len(cleaned) - len(letters)
    if digit_count == 0:
        score += weights.no_digit_bonus
    elif digit_count <= 2:
        score += weights.few_digit_bonus
    else:
        score -= weights.many_digit_penalty

    # 4. Readability
    if not _CONSONANT_RUN_RE.search(cleaned):
        score += weights.readability_bonus

    return _clamp(score)


def analyze_code_pattern(code: str) -> CodePattern:
    """Classify the shape of a code."""
    cleaned = clean_code(code)
    if not cleaned:
        return CodePattern(PatternKind.CUSTOM, "Empty code", "")

    digit_count = sum(ch.isdigit() for ch in cleaned)
    letter_count = len(cleaned) - digit_count

    if digit_count == 0 and letter_count >= 3:
        if letter_count <= 4:
            return CodePattern(
                PatternKind.INITIALS, "Initials-based code (3-4 letters)", "WHO, UNDP"
            )
        return CodePattern(
            PatternKind.ABBREVIATION, "Abbreviation (5+ letters)", "WORLDBANK, GATES"
        )

    if letter_count >= 2 and digit_count > 0:
        return CodePattern(
            PatternKind.HYBRID, "Letters + numbers combination", "WHO123, GATES01"
        )

    if letter_count == 2 and digit_count == 0:
        return CodePattern(
            PatternKind.ACRONYM, "Two-letter country/region code", "CH, ZA"
        )

    return CodePattern(PatternKind.CUSTOM, "Custom format", cleaned)


def build_reasoning(
    candidate: Candidate, validation: CodeValidationResult, pattern: CodePattern
) -> str:
    """Assemble the human-readable explanation attached to a suggestion."""
    reasons = [candidate.note or _STRATEGY_PHRASES[candidate.strategy]]

    if validation.is_unique:
        reasons.append("unique in current registry")
    else:
        reasons.append(f"conflicts with {len(validation.conflicts)} existing code(s)")

    reasons.append(f"follows {pattern.kind.value} pattern")
    return ", ".join(reasons)


def create_suggestion(
    candidate: Candidate,
    entity_name: str,
    donors: Sequence[DonorRecord],
    config: CodeGenConfig | None = None,
) -> GeneratedCodeSuggestion:
    """Validate a candidate against the registry and turn it into a scored suggestion."""
    if config is None:
        config = CodeGenConfig()
    adj = config.adjustments

    code = clean_code(candidate.code)
    validation = validate_code(code, donors, config.limits, config.similarity)
    format_valid = validate_code_format(code).is_valid

    confidence = float(score_code_quality(code, entity_name, config.quality))
    confidence += adj.unique_bonus if validation.is_unique else -adj.conflict_penalty
    confidence += adj.valid_format_bonus if format_valid else -adj.invalid_format_penalty
    if candidate.strategy is Strategy.INITIALS:
        confidence += adj.initials_bonus

    pattern = analyze_code_pattern(code)
    return GeneratedCodeSuggestion(
        code=code,
        confidence=_clamp(confidence),
        reasoning=build_reasoning(candidate, validation, pattern),
        is_unique=validation.is_unique,
        pattern=pattern,
        strategy=candidate.strategy,
    )
