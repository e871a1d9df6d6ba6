"""Main orchestration: synthesis, validation, scoring and ranking of codes."""

from __future__ import annotations

import time
from collections.abc import Iterable

import structlog

from donorcodes.config import CodeGenConfig
from donorcodes.names import MAX_CODE_LENGTH
from donorcodes.scoring import create_suggestion, round_half_up
from donorcodes.synthesis import fallback_candidates, generate_code_variants, synthesize
from donorcodes.types import (
    Candidate,
    CodeGenerationResult,
    CustomCodeValidation,
    DonorRecord,
    GeneratedCodeSuggestion,
    GenerationStats,
)
from donorcodes.validation import (
    MIN_CODE_LENGTH,
    check_code_best_practices,
    validate_code,
    validate_code_format,
)

log = structlog.get_logger()


class GenerationError(Exception):
    """No code could be generated for an entity name."""


class CodeGenerator:
    """Donor code generator holding an immutable snapshot of the registry."""

    def __init__(
        self,
        donors: Iterable[DonorRecord] = (),
        config: CodeGenConfig | None = None,
    ) -> None:
        self.config = config or CodeGenConfig()
        self._donors: tuple[DonorRecord, ...] = tuple(donors)

    @property
    def donors(self) -> tuple[DonorRecord, ...]:
        return self._donors

    def update_donors(self, donors: Iterable[DonorRecord]) -> None:
        """Replace the registry snapshot; takes effect on the next call."""
        self._donors = tuple(donors)
        log.info("donors_updated", count=len(self._donors))

    def generate_code(
        self,
        entity_name: str,
        *,
        contributor_type: str | None = None,
        preferred_length: int | None = None,
        max_suggestions: int | None = None,
    ) -> CodeGenerationResult:
        """Generate a primary code and ranked alternatives for an entity name."""
        start = time.perf_counter()
        defaults = self.config.defaults
        if preferred_length is None:
            preferred_length = defaults.preferred_length
        if max_suggestions is None:
            max_suggestions = defaults.max_suggestions

        if not isinstance(entity_name, str) or not entity_name.strip():
            raise GenerationError("Entity name is required for code generation")
        if not MIN_CODE_LENGTH <= preferred_length <= MAX_CODE_LENGTH:
            raise ValueError(
                f"preferred_length must be between {MIN_CODE_LENGTH} and "
                f"{MAX_CODE_LENGTH}, got {preferred_length}"
            )
        if max_suggestions < 0:
            raise ValueError(f"max_suggestions must be >= 0, got {max_suggestions}")

        # Pin the snapshot for the whole call
        donors = self._donors
        log.debug(
            "generate_code_start",
            entity_name=entity_name,
            contributor_type=contributor_type,
            preferred_length=preferred_length,
            donor_count=len(donors),
        )

        # Stage 1: Candidate synthesis
        candidates = synthesize(entity_name, preferred_length, self.config.limits)
        total_generated = len(candidates)

        # Stage 2: Validate, score, de-duplicate
        ranked = self._rank(candidates, entity_name, donors)

        # Stage 3: Fallback cascade
        if not ranked:
            log.info("fallback_cascade_invoked", entity_name=entity_name)
            fallbacks = fallback_candidates(entity_name, donors, self.config.limits)
            total_generated += len(fallbacks)
            ranked = self._rank(fallbacks, entity_name, donors)

        if not ranked:
            log.warning("generation_failed", entity_name=entity_name)
            raise GenerationError(
                f'Could not generate any valid codes for "{entity_name}". '
                "Try a different entity name or use a custom code."
            )

        primary, *rest = ranked
        average = sum(s.confidence for s in ranked) / len(ranked)
        elapsed_ms = (time.perf_counter() - start) * 1000

        result = CodeGenerationResult(
            primary=primary,
            alternatives=rest[:max_suggestions],
            stats=GenerationStats(
                total_generated=total_generated,
                unique_count=len(ranked),
                average_confidence=round_half_up(average),
                processing_time_ms=round_half_up(elapsed_ms),
            ),
        )

        log.debug(
            "generate_code_done",
            entity_name=entity_name,
            primary=primary.code,
            confidence=primary.confidence,
            alternatives=[s.code for s in result.alternatives],
            total_generated=total_generated,
            unique_count=len(ranked),
        )
        return result

    def generate_multiple_codes(self, entity_name: str, count: int = 5) -> list[str]:
        """Return up to ``count`` codes, best first."""
        result = self.generate_code(entity_name, max_suggestions=max(count - 1, 0))
        return result.codes[:count]

    def validate_custom_code(self, code: str) -> CustomCodeValidation:
        """Check a hand-typed code and propose available alternatives.

        Never raises: an internal failure yields an unavailable, invalid result.
        """
        try:
            return self._validate_custom_code(code)
        except Exception:
            log.exception("custom_code_validation_failed", code=code)
            return CustomCodeValidation(
                is_valid=False,
                is_available=False,
                issues=["Validation failed"],
                suggestions=[],
            )

    def _validate_custom_code(self, code: str) -> CustomCodeValidation:
        donors = self._donors
        limits = self.config.limits
        validation = validate_code(code, donors, limits, self.config.similarity)
        format_valid = validate_code_format(code).is_valid

        suggestions: list[str] = []
        if not validation.is_unique or not format_valid:
            normalized = code.upper().strip() if isinstance(code, str) else ""
            pool = [*validation.suggestions, *generate_code_variants(normalized)]
            for variant in dict.fromkeys(pool):
                if len(suggestions) >= limits.custom_suggestions:
                    break
                if variant == normalized:
                    continue
                check = validate_code(variant, donors, limits, self.config.similarity)
                if check.is_valid and not check.format_issues:
                    suggestions.append(variant)

        issues = [
            *validation.format_issues,
            *(f"Conflicts with: {name}" for name in validation.conflicts),
        ]
        return CustomCodeValidation(
            is_valid=validation.is_valid,
            is_available=validation.is_unique,
            issues=issues,
            suggestions=suggestions,
            recommendations=check_code_best_practices(code).recommendations,
        )

    def _rank(
        self,
        candidates: list[Candidate],
        entity_name: str,
        donors: tuple[DonorRecord, ...],
    ) -> list[GeneratedCodeSuggestion]:
        """Score format-valid candidates, keep the first of each code, best first."""
        seen: set[str] = set()
        suggestions: list[GeneratedCodeSuggestion] = []
        for candidate in candidates:
            if candidate.code in seen or not validate_code_format(candidate.code).is_valid:
                continue
            seen.add(candidate.code)
            suggestion = create_suggestion(candidate, entity_name, donors, self.config)
            suggestions.append(suggestion)

        # Stable sort: ties keep generation order
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions
