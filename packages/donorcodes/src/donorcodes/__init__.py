"""donorcodes - Donor code generation and validation engine."""

from donorcodes.config import CodeGenConfig
from donorcodes.generator import CodeGenerator, GenerationError
from donorcodes.types import (
    CodeGenerationResult,
    CodePattern,
    CodeValidationResult,
    CustomCodeValidation,
    DonorRecord,
    GeneratedCodeSuggestion,
    PatternKind,
    Strategy,
)

__all__ = [
    "CodeGenConfig",
    "CodeGenerationResult",
    "CodeGenerator",
    "CodePattern",
    "CodeValidationResult",
    "CustomCodeValidation",
    "DonorRecord",
    "GeneratedCodeSuggestion",
    "GenerationError",
    "PatternKind",
    "Strategy",
]
