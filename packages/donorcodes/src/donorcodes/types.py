"""Core types for the donorcodes code generation engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_NAME_KEYS = ("NAME", "name", "Name")
_CODE_KEYS = ("CEB CODE", "ceb_code", "cebCode", "CODE", "code")
_CONTRIBUTOR_KEYS = ("CONTRIBUTOR TYPE", "contributor_type", "contributorType")
_TYPE_KEYS = ("TYPE", "type")


def _first(row: Mapping[str, Any], keys: tuple[str, ...], default: str = "") -> str:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return str(value).strip()
    return default


@dataclass(frozen=True)
class DonorRecord:
    name: str
    ceb_code: str
    contributor_type: str = ""
    type: str = "0"  # "0" non-government, "1" government

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> DonorRecord:
        """Build a record from registry headers ("CEB CODE") or field names."""
        return cls(
            name=_first(row, _NAME_KEYS),
            ceb_code=_first(row, _CODE_KEYS),
            contributor_type=_first(row, _CONTRIBUTOR_KEYS),
            type=_first(row, _TYPE_KEYS, default="0") or "0",
        )


class PatternKind(str, Enum):
    INITIALS = "initials"
    ABBREVIATION = "abbreviation"
    ACRONYM = "acronym"
    HYBRID = "hybrid"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CodePattern:
    kind: PatternKind
    description: str
    example: str


class Strategy(str, Enum):
    INITIALS = "initials"
    ABBREVIATION = "abbreviation"
    HYBRID = "hybrid"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Candidate:
    code: str
    strategy: Strategy
    note: str | None = None


@dataclass(frozen=True)
class GeneratedCodeSuggestion:
    code: str
    confidence: int
    reasoning: str
    is_unique: bool
    pattern: CodePattern
    strategy: Strategy


@dataclass
class GenerationStats:
    total_generated: int = 0
    unique_count: int = 0
    average_confidence: int = 0
    processing_time_ms: int = 0


@dataclass
class CodeGenerationResult:
    primary: GeneratedCodeSuggestion
    alternatives: list[GeneratedCodeSuggestion] = field(default_factory=list)
    stats: GenerationStats = field(default_factory=GenerationStats)

    @property
    def codes(self) -> list[str]:
        return [self.primary.code, *(s.code for s in self.alternatives)]


@dataclass
class FormatCheck:
    is_valid: bool
    issues: list[str] = field(default_factory=list)


@dataclass
class UniquenessCheck:
    is_unique: bool
    conflicts: list[str] = field(default_factory=list)


@dataclass
class CodeValidationResult:
    is_valid: bool
    is_unique: bool
    conflicts: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    format_issues: list[str] = field(default_factory=list)
    similar: list[str] = field(default_factory=list)


@dataclass
class BestPracticeReport:
    score: int
    recommendations: list[str] = field(default_factory=list)


@dataclass
class CustomCodeValidation:
    is_valid: bool
    is_available: bool
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
