"""错误基类：提供分层错误体系和结构化错误上下文。

Base error classes for iterpipes.

Provides a layered error hierarchy:
- PipeError: Base class for all library errors
- CompositionError: Adjoining pipes disagree on their item types
- ItemValidationError: A constrained pipe saw an item of the wrong type
- UnwrapError: An unwrapped pipe produced no item
- SourceError: A pull source yielded a value it cannot represent
- ResetError: A pipe was asked to reset but cannot restart
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    pipe: str | None = None
    """Name of the pipe that raised (e.g., 'Connector', 'PipeIter')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'composition', 'source', 'unwrap')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.pipe:
            parts.append(f"in '{self.pipe}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class PipeError(Exception):
    """Base class for all iterpipes errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> PipeError:
        """Add a hint to this error."""
        self.context.hint = hint
        self.args = (self._format_message(),)
        return self


class CompositionError(PipeError):
    """Two pipes cannot be connected.

    Raised when the output type tag of the upstream pipe is not
    compatible with the input type tag of the downstream pipe.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        upstream: Any = None,
        downstream: Any = None,
    ) -> None:
        ctx = context or ErrorContext(source="composition")
        if upstream is not None:
            ctx.details["upstream"] = upstream
        if downstream is not None:
            ctx.details["downstream"] = downstream
        super().__init__(message, ctx)
        self.upstream = upstream
        self.downstream = downstream


class ItemValidationError(PipeError):
    """An item crossing a constrained pipe does not match its type tag."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        expected: Any = None,
        actual: Any = None,
        side: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="validation")
        if expected is not None:
            ctx.details["expected"] = expected
        if actual is not None:
            ctx.details["actual"] = actual
        if side:
            ctx.details["side"] = side
        super().__init__(message, ctx)
        self.expected = expected
        self.actual = actual
        self.side = side


class UnwrapError(PipeError):
    """An unwrapped pipe produced ``None``.

    This signals a broken invariant in the calling code and is not
    meant to be caught and recovered from.
    """

    def __init__(
        self,
        message: str = "Called unwrap() on an absent item",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, context or ErrorContext(source="unwrap"))


class SourceError(PipeError):
    """A pull source produced a value that cannot be passed downstream."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        position: int | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="source")
        if position is not None:
            ctx.details["position"] = position
        super().__init__(message, ctx)
        self.position = position


class ResetError(PipeError):
    """A pipe cannot be returned to its initial state."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, context or ErrorContext(source="reset"))
