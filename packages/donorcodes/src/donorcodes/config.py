"""Configuration for the donorcodes code generation engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class QualityWeights:
    base: float = 50.0
    ideal_length_bonus: float = 20.0  # 4-6 characters
    near_length_bonus: float = 10.0  # 3 or 7 characters
    length_penalty: float = 10.0
    letter_match_weight: float = 0.3
    no_digit_bonus: float = 15.0
    few_digit_bonus: float = 5.0  # 1-2 digits
    many_digit_penalty: float = 10.0
    readability_bonus: float = 10.0


@dataclass
class SuggestionAdjustments:
    unique_bonus: float = 20.0
    conflict_penalty: float = 30.0
    valid_format_bonus: float = 10.0
    invalid_format_penalty: float = 20.0
    initials_bonus: float = 5.0


@dataclass
class SearchLimits:
    max_suffix: int = 99
    max_initials_variants: int = 10
    max_suffix_deficit: int = 3
    fallback_unique_target: int = 3
    conflict_suggestions: int = 5
    custom_suggestions: int = 3


@dataclass
class SimilarityConfig:
    threshold: float = 0.8


@dataclass
class GenerationDefaults:
    preferred_length: int = 5
    max_suggestions: int = 5


@dataclass
class CodeGenConfig:
    quality: QualityWeights = field(default_factory=QualityWeights)
    adjustments: SuggestionAdjustments = field(default_factory=SuggestionAdjustments)
    limits: SearchLimits = field(default_factory=SearchLimits)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    defaults: GenerationDefaults = field(default_factory=GenerationDefaults)
