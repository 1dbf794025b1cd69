"""Tests for structured error types."""

from techspec.errors import (
    ContentLoadError,
    ConversionError,
    ErrorCategory,
    ErrorContext,
    InvalidSectionContentError,
    MissingRequiredSectionError,
    TechSpecError,
    UnknownMarkupConstructError,
    ValidationError,
    categorize_error,
)


class TestErrorContext:
    """Tests for ErrorContext."""

    def test_to_dict_skips_unset(self):
        assert ErrorContext().to_dict() == {}

    def test_to_dict(self):
        context = ErrorContext(section="risk", line_number=3, metadata={"template": "risk.md.j2"})

        assert context.to_dict() == {"section": "risk", "line_number": 3, "template": "risk.md.j2"}


class TestTechSpecError:
    """Tests for the base error."""

    def test_default_category(self):
        assert TechSpecError("boom").category == ErrorCategory.INTERNAL

    def test_with_context(self):
        error = TechSpecError("boom").with_context(section="goal", attempt=2)

        assert error.context.section == "goal"
        assert error.context.metadata == {"attempt": 2}

    def test_cause_chained(self):
        cause = OSError("disk full")
        error = ContentLoadError("Cannot read", cause=cause)

        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk full"

    def test_to_dict(self):
        error = InvalidSectionContentError("risk", "bad row")

        assert error.to_dict() == {
            "error_type": "InvalidSectionContentError",
            "message": "Invalid content for section 'risk': bad row",
            "category": "VALIDATION",
            "context": {"section": "risk"},
        }

    def test_repr(self):
        assert repr(TechSpecError("boom")) == "TechSpecError('boom', category=INTERNAL)"


class TestMissingRequiredSectionError:
    """Tests for MissingRequiredSectionError."""

    def test_missing_listed(self):
        error = MissingRequiredSectionError(["risk", "metrics"])

        assert isinstance(error, ValidationError)
        assert error.missing == ["risk", "metrics"]
        assert "risk, metrics" in str(error)
        assert error.to_dict()["missing"] == ["risk", "metrics"]

    def test_single_missing_sets_section(self):
        assert MissingRequiredSectionError(["goal"]).context.section == "goal"


class TestUnknownMarkupConstructError:
    """Tests for UnknownMarkupConstructError."""

    def test_attributes(self):
        error = UnknownMarkupConstructError("<div>", line_number=4, construct="html")

        assert isinstance(error, ConversionError)
        assert error.line == "<div>"
        assert error.context.to_dict() == {"line_number": 4, "construct": "html"}
        assert "line 4" in error.message


class TestCategorizeError:
    """Tests for categorize_error."""

    def test_categories(self):
        assert categorize_error(MissingRequiredSectionError(["goal"])) == ErrorCategory.VALIDATION
        assert categorize_error(FileNotFoundError()) == ErrorCategory.SOURCE
        assert categorize_error(ValueError()) == ErrorCategory.VALIDATION
        assert categorize_error(RuntimeError()) == ErrorCategory.UNKNOWN
