"""Tests for the end-to-end code generator."""

import re
from dataclasses import replace

import pytest

from donorcodes.config import CodeGenConfig, SearchLimits
from donorcodes.generator import CodeGenerator, GenerationError
from donorcodes.scoring import create_suggestion
from donorcodes.types import DonorRecord, Strategy

CODE_RE = re.compile(r"^[A-Z0-9]{2,10}$")


def test_initials_code_is_primary():
    generator = CodeGenerator()
    result = generator.generate_code("World Health Organization")
    assert result.primary.code == "WHO"
    assert result.primary.strategy is Strategy.INITIALS


def test_taken_code_loses_to_unique_variant(donors):
    generator = CodeGenerator(donors)
    result = generator.generate_code("World Health Organization")
    assert result.primary.code == "WHO01"
    assert result.primary.is_unique


def test_result_shape():
    generator = CodeGenerator()
    result = generator.generate_code("International Development Agency")
    assert CODE_RE.match(result.primary.code)
    assert len(result.alternatives) > 0
    assert len(result.alternatives) <= 5


def test_codes_valid_and_distinct(donors):
    generator = CodeGenerator(donors)
    result = generator.generate_code("Bill & Melinda Gates Foundation", max_suggestions=50)
    codes = result.codes
    assert len(codes) == len(set(codes))
    for code in codes:
        assert CODE_RE.match(code)
        assert re.search(r"[A-Z]", code)


def test_confidence_ordering_and_range(donors):
    generator = CodeGenerator(donors)
    result = generator.generate_code("United Nations Children's Fund", max_suggestions=50)
    suggestions = [result.primary, *result.alternatives]
    confidences = [s.confidence for s in suggestions]
    assert confidences == sorted(confidences, reverse=True)
    for c in confidences:
        assert isinstance(c, int)
        assert 0 <= c <= 100


def test_unique_count_matches_ranked_list(donors):
    generator = CodeGenerator(donors)
    result = generator.generate_code("World Health Organization", max_suggestions=1000)
    assert result.stats.unique_count == len(result.codes)
    assert result.stats.total_generated >= result.stats.unique_count


def test_stats_are_integers(donors):
    result = CodeGenerator(donors).generate_code("Gavi Alliance")
    stats = result.stats
    assert isinstance(stats.average_confidence, int)
    assert isinstance(stats.processing_time_ms, int)
    assert 0 <= stats.average_confidence <= 100


def test_average_confidence_rounds_half_up(monkeypatch):
    confidences = iter([90, 85])

    def scored(*args, **kwargs):
        return replace(create_suggestion(*args, **kwargs), confidence=next(confidences))

    monkeypatch.setattr("donorcodes.generator.create_suggestion", scored)
    generator = CodeGenerator(config=CodeGenConfig(limits=SearchLimits(fallback_unique_target=2)))

    result = generator.generate_code("Ab1")

    assert result.codes == ["AB101", "AB102"]
    assert result.stats.average_confidence == 88


def test_deterministic(donors):
    generator = CodeGenerator(donors)
    first = generator.generate_code("Médecins Sans Frontières")
    second = generator.generate_code("Médecins Sans Frontières")
    assert first.codes == second.codes
    assert [s.confidence for s in first.alternatives] == [s.confidence for s in second.alternatives]
    assert first.primary.reasoning == second.primary.reasoning


def test_max_suggestions_zero():
    result = CodeGenerator().generate_code("World Health Organization", max_suggestions=0)
    assert result.alternatives == []


def test_preferred_length_changes_padding():
    result = CodeGenerator().generate_code("World Health Organization", preferred_length=6, max_suggestions=50)
    assert "WHO001" in result.codes


def test_defaults_from_config():
    config = CodeGenConfig()
    config.defaults.max_suggestions = 2
    result = CodeGenerator(config=config).generate_code("World Health Organization")
    assert len(result.alternatives) == 2


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_name_raises(name):
    with pytest.raises(GenerationError):
        CodeGenerator().generate_code(name)


@pytest.mark.parametrize("name", ["日本財団", "12345", "!!!"])
def test_no_latin_letters_raises(name):
    with pytest.raises(GenerationError, match="Could not generate any valid codes"):
        CodeGenerator().generate_code(name)


@pytest.mark.parametrize("length", [1, 11])
def test_preferred_length_out_of_range(length):
    with pytest.raises(ValueError):
        CodeGenerator().generate_code("World Health Organization", preferred_length=length)


def test_negative_max_suggestions():
    with pytest.raises(ValueError):
        CodeGenerator().generate_code("World Health Organization", max_suggestions=-1)


class TestFallback:
    def test_two_letter_name(self):
        result = CodeGenerator().generate_code("Xy")
        assert result.primary.code == "XYY01"
        assert result.primary.strategy is Strategy.FALLBACK
        assert result.primary.reasoning.startswith("Fallback: simple letter combination")

    def test_single_letter_name(self):
        assert CodeGenerator().generate_code("X").primary.code == "XX01"

    def test_letter_buried_in_digits(self):
        assert CodeGenerator().generate_code("1234567X8").primary.code == "12X01"

    def test_numbered_fallbacks(self):
        result = CodeGenerator().generate_code("Ab1")
        assert result.codes == ["AB101", "AB102", "AB103"]
        assert result.stats.total_generated == 3


def test_generate_multiple_codes():
    codes = CodeGenerator().generate_multiple_codes("World Health Organization", 3)
    assert len(codes) == 3
    assert codes[0] == "WHO"


class TestValidateCustomCode:
    def test_taken_code(self, donors):
        generator = CodeGenerator(donors)
        v = generator.validate_custom_code("who")
        assert not v.is_valid
        assert not v.is_available
        assert "Conflicts with: World Health Organization" in v.issues
        assert "Code should contain uppercase letters" in v.issues
        assert v.suggestions == ["WHO01", "WHO02", "WHO03"]

    def test_suggestions_are_available(self, donors):
        generator = CodeGenerator(donors)
        for suggestion in generator.validate_custom_code("WHO").suggestions:
            v = generator.validate_custom_code(suggestion)
            assert v.is_available
            assert v.is_valid

    def test_available_code(self, donors):
        v = CodeGenerator(donors).validate_custom_code("NEWORG")
        assert v.is_valid
        assert v.is_available
        assert v.issues == []
        assert v.suggestions == []

    def test_invalid_format(self):
        v = CodeGenerator().validate_custom_code("x-1")
        assert not v.is_valid
        assert v.is_available
        assert v.suggestions == ["X1", "X101", "X11"]

    def test_recommendations(self):
        v = CodeGenerator().validate_custom_code("BCDFG")
        assert "Avoid long sequences of consonants for better readability" in v.recommendations

    def test_none_does_not_raise(self):
        v = CodeGenerator().validate_custom_code(None)  # type: ignore[arg-type]
        assert not v.is_valid
        assert not v.is_available

    def test_internal_failure_degrades(self, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("registry unavailable")

        monkeypatch.setattr("donorcodes.generator.validate_code", boom)
        v = CodeGenerator().validate_custom_code("WHO")
        assert not v.is_valid
        assert not v.is_available
        assert v.issues == ["Validation failed"]
        assert v.suggestions == []


def test_update_donors():
    generator = CodeGenerator()
    assert generator.validate_custom_code("WHO").is_available

    generator.update_donors([DonorRecord("World Health Organization", "WHO")])
    assert not generator.validate_custom_code("WHO").is_available
    assert len(generator.donors) == 1


def test_snapshot_is_copied():
    source = [DonorRecord("World Health Organization", "WHO")]
    generator = CodeGenerator(source)
    source.append(DonorRecord("Gates Foundation", "GATES"))
    assert len(generator.donors) == 1
    assert generator.validate_custom_code("GATES").is_available
