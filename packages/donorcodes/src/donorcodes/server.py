"""FastAPI app exposing code generation and validation."""

from pathlib import Path

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from donorcodes.config import CodeGenConfig
from donorcodes.generator import CodeGenerator, GenerationError
from donorcodes.io import read_donors
from donorcodes.types import DonorRecord, GeneratedCodeSuggestion
from donorcodes.validation import find_duplicate_codes

log = structlog.get_logger()


class GenerateRequest(BaseModel):
    """Request body for code generation."""

    entity_name: str
    contributor_type: str | None = None
    preferred_length: int | None = None
    max_suggestions: int | None = None


class PatternResponse(BaseModel):
    kind: str
    description: str
    example: str


class SuggestionResponse(BaseModel):
    code: str
    confidence: int
    reasoning: str
    is_unique: bool
    pattern: PatternResponse

    @classmethod
    def from_suggestion(cls, s: GeneratedCodeSuggestion) -> "SuggestionResponse":
        return cls(
            code=s.code,
            confidence=s.confidence,
            reasoning=s.reasoning,
            is_unique=s.is_unique,
            pattern=PatternResponse(
                kind=s.pattern.kind.value,
                description=s.pattern.description,
                example=s.pattern.example,
            ),
        )


class StatsResponse(BaseModel):
    total_generated: int
    unique_count: int
    average_confidence: int
    processing_time_ms: int


class GenerateResponse(BaseModel):
    """Primary suggestion, ranked alternatives and generation statistics."""

    primary: SuggestionResponse
    alternatives: list[SuggestionResponse]
    stats: StatsResponse


class ValidateRequest(BaseModel):
    code: str


class ValidateResponse(BaseModel):
    is_valid: bool
    is_available: bool
    issues: list[str]
    suggestions: list[str]
    recommendations: list[str]


class DonorEntry(BaseModel):
    """A donor record in a registry snapshot."""

    name: str
    ceb_code: str
    contributor_type: str = ""
    type: str = Field(default="0", pattern="^[01]$")


class DonorsUpdatedResponse(BaseModel):
    count: int


def create_app(
    donors_path: str | None = None,
    donors: list[DonorRecord] | None = None,
    config: CodeGenConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application around a single CodeGenerator."""
    app = FastAPI(title="Donor Code Generator")

    initial: list[DonorRecord] = list(donors or [])
    if donors_path and Path(donors_path).exists():
        log.info("server_loading_donors", path=donors_path)
        initial.extend(read_donors(donors_path))
    elif donors_path:
        log.warning("donors_file_not_found", path=donors_path)

    generator = CodeGenerator(initial, config)
    log.info("server_ready", donor_count=len(generator.donors))

    @app.post("/api/codes/generate")
    async def generate(req: GenerateRequest) -> GenerateResponse:
        """Generate a primary code and alternatives for an entity name."""
        try:
            result = generator.generate_code(
                req.entity_name,
                contributor_type=req.contributor_type,
                preferred_length=req.preferred_length,
                max_suggestions=req.max_suggestions,
            )
        except (GenerationError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return GenerateResponse(
            primary=SuggestionResponse.from_suggestion(result.primary),
            alternatives=[SuggestionResponse.from_suggestion(s) for s in result.alternatives],
            stats=StatsResponse(
                total_generated=result.stats.total_generated,
                unique_count=result.stats.unique_count,
                average_confidence=result.stats.average_confidence,
                processing_time_ms=result.stats.processing_time_ms,
            ),
        )

    @app.post("/api/codes/validate")
    async def validate(req: ValidateRequest) -> ValidateResponse:
        """Check a custom code for format problems and conflicts."""
        v = generator.validate_custom_code(req.code)
        return ValidateResponse(
            is_valid=v.is_valid,
            is_available=v.is_available,
            issues=v.issues,
            suggestions=v.suggestions,
            recommendations=v.recommendations,
        )

    @app.put("/api/donors")
    async def replace_donors(entries: list[DonorEntry]) -> DonorsUpdatedResponse:
        """Replace the registry snapshot used for validation."""
        generator.update_donors(
            DonorRecord(
                name=e.name,
                ceb_code=e.ceb_code,
                contributor_type=e.contributor_type,
                type=e.type,
            )
            for e in entries
        )
        return DonorsUpdatedResponse(count=len(generator.donors))

    @app.get("/api/donors/duplicates")
    async def duplicates() -> dict[str, list[str]]:
        """Codes shared by more than one donor in the current snapshot."""
        return find_duplicate_codes(generator.donors)

    return app
