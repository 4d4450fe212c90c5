"""Tests for error module."""

from iterpipes.errors import (
    CompositionError,
    ErrorContext,
    ItemValidationError,
    PipeError,
    ResetError,
    SourceError,
    UnwrapError,
)


class TestErrorContext:
    """Tests for ErrorContext."""

    def test_empty_context(self) -> None:
        """Test empty context string representation."""
        assert str(ErrorContext()) == ""

    def test_context_with_source(self) -> None:
        """Test context with source."""
        assert "[composition]" in str(ErrorContext(source="composition"))

    def test_context_with_pipe(self) -> None:
        """Test context with pipe name."""
        assert "in 'PipeIter'" in str(ErrorContext(pipe="PipeIter"))

    def test_context_with_hint(self) -> None:
        """Test context with hint."""
        ctx = ErrorContext(hint="Use unwrap()")
        assert "(hint: Use unwrap())" in str(ctx)


class TestPipeError:
    """Tests for base error class."""

    def test_basic_error(self) -> None:
        """Test basic error creation."""
        error = PipeError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_error_with_context(self) -> None:
        """Test error with context."""
        error = PipeError("Failed", ErrorContext(source="test", hint="Try again"))
        assert "[test]" in str(error)
        assert "(hint: Try again)" in str(error)

    def test_with_hint(self) -> None:
        """Test adding hint to error."""
        error = PipeError("Failed").with_hint("Check the types")
        assert error.context.hint == "Check the types"
        assert "(hint: Check the types)" in str(error)


class TestSpecificErrors:
    """Tests for the specific error types."""

    def test_hierarchy(self) -> None:
        """Test every error is a PipeError."""
        for error_type in (
            CompositionError,
            ItemValidationError,
            UnwrapError,
            SourceError,
            ResetError,
        ):
            assert issubclass(error_type, PipeError)

    def test_composition_error(self) -> None:
        """Test composition error details."""
        error = CompositionError("mismatch", upstream="str", downstream="int")
        assert error.context.source == "composition"
        assert error.context.details == {"upstream": "str", "downstream": "int"}

    def test_item_validation_error(self) -> None:
        """Test validation error details."""
        error = ItemValidationError("bad", expected="int", actual="str", side="input")
        assert error.context.source == "validation"
        assert error.side == "input"
        assert error.context.details["expected"] == "int"

    def test_unwrap_error_default_message(self) -> None:
        """Test unwrap error has a default message."""
        error = UnwrapError()
        assert "unwrap()" in error.message
        assert error.context.source == "unwrap"

    def test_source_error_position(self) -> None:
        """Test source error records the position."""
        error = SourceError("None element", position=3)
        assert error.position == 3
        assert error.context.details["position"] == 3

    def test_reset_error(self) -> None:
        """Test reset error source."""
        assert ResetError("cannot").context.source == "reset"
