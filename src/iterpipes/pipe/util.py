"""
General-purpose pipes and the decorators behind ``Pipe``'s methods.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, PydanticUserError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from iterpipes.config import get_config
from iterpipes.errors import (
    CompositionError,
    ErrorContext,
    ItemValidationError,
    ResetError,
    UnwrapError,
)
from iterpipes.pipe.base import UNSET, Pipe
from iterpipes.telemetry.logger import get_logger, log_context
from iterpipes.types.info import PipeInfo
from iterpipes.types.tags import (
    callable_tags,
    is_compatible,
    make_optional,
    strip_optional,
    type_name,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("iterpipes.pipe.util")


class Identity(Pipe[Any, Any]):
    """A pipe that returns its input unchanged."""

    def __init__(self, item_type: Any = Any) -> None:
        self.input_type = item_type
        self.output_type = item_type

    def step(self, item: Any) -> Any:
        return item


class Lazy(Pipe[Any, Any]):
    """A pipe defined by a single-argument function.

    Item types are taken from the arguments, then from the function's
    annotations, then default to ``Any``. The pipe keeps no state of its own.

    Example:
        >>> def halve(x: int) -> float:
        ...     return x / 2
        >>> pipe = Lazy(halve)
        >>> pipe.step(3)
        1.5
        >>> pipe.input_type, pipe.output_type
        (<class 'int'>, <class 'float'>)
    """

    def __init__(
        self,
        function: Callable[[Any], Any],
        *,
        input_type: Any = UNSET,
        output_type: Any = UNSET,
    ) -> None:
        if not callable(function):
            raise TypeError(f"Lazy expects a callable, got {type(function).__name__}")

        inferred_input, inferred_output = callable_tags(function)
        self.function = function
        self.input_type = inferred_input if input_type is UNSET else input_type
        self.output_type = inferred_output if output_type is UNSET else output_type

    def step(self, item: Any) -> Any:
        return self.function(item)

    def describe(self) -> PipeInfo:
        name = getattr(self.function, "__name__", type(self.function).__name__)
        return PipeInfo(
            name=f"Lazy[{name}]",
            input_type=type_name(self.input_type),
            output_type=type_name(self.output_type),
        )


class Unwrap(Pipe[Any, Any]):
    """A pipe that rejects ``None`` and passes every other item through."""

    def __init__(self, item_type: Any = Any, *, source: str | None = None) -> None:
        """Initialize the pipe.

        Args:
            item_type: Tag of the optional items to unwrap
            source: Name of the pipe producing the items, for error messages
        """
        self.input_type = make_optional(item_type)
        self.output_type = strip_optional(item_type)
        self._source = source

    def step(self, item: Any) -> Any:
        if item is None:
            with log_context(stage=self._source):
                logger.error("Unwrapped an absent item", source=self._source)
            raise UnwrapError(
                context=ErrorContext(source="unwrap", pipe=self._source)
            )
        return item


class OptionalPipe(Pipe[Any, Any]):
    """A pipe that wraps another pipe's input and output in ``Optional``.

    ``None`` is returned for ``None`` without stepping the inner pipe.

    Example:
        >>> pipe = Lazy(lambda x: x * 2).optional()
        >>> pipe.step(2), pipe.step(None)
        (4, None)
    """

    def __init__(self, pipe: Pipe[Any, Any]) -> None:
        self.pipe = pipe
        self.input_type = make_optional(pipe.input_type)
        self.output_type = make_optional(pipe.output_type)

    def step(self, item: Any) -> Any:
        if item is None:
            return None
        return self.pipe.step(item)

    def reset(self) -> None:
        self.pipe.reset()

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return (self.pipe,)


class Enumerate(Pipe[Any, Any]):
    """A pipe that pairs another pipe's output items with a running index.

    The index starts at 0 and grows by one per step; ``reset`` starts it
    over.
    """

    def __init__(self, pipe: Pipe[Any, Any]) -> None:
        self.pipe = pipe
        self.progress = 0
        self.input_type = pipe.input_type
        self.output_type = tuple[int, pipe.output_type]

    def step(self, item: Any) -> tuple[int, Any]:
        output = self.pipe.step(item)
        index = self.progress
        self.progress += 1
        return index, output

    def reset(self) -> None:
        self.progress = 0
        self.pipe.reset()

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return (self.pipe,)


class Bypass(Pipe[Any, Any]):
    """A pipe that returns the input item alongside the inner pipe's output.

    The input object is returned as is, not copied.
    """

    def __init__(self, pipe: Pipe[Any, Any]) -> None:
        self.pipe = pipe
        self.input_type = pipe.input_type
        self.output_type = tuple[pipe.input_type, pipe.output_type]

    def step(self, item: Any) -> tuple[Any, Any]:
        return item, self.pipe.step(item)

    def reset(self) -> None:
        self.pipe.reset()

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return (self.pipe,)


class Parallel(Pipe[tuple[Any, ...], tuple[Any, ...]]):
    """A pipe that steps several pipes side by side.

    The input is a tuple with one item per pipe; the output is the tuple
    of their outputs. Pipes are stepped left to right.

    Example:
        >>> pipe = Parallel(Lazy(str.upper), Lazy(len))
        >>> pipe.step(("ab", "abc"))
        ('AB', 3)
    """

    def __init__(self, *pipes: Pipe[Any, Any]) -> None:
        if not pipes:
            raise CompositionError("Parallel needs at least one pipe")
        self.pipes = pipes
        self.input_type = tuple[tuple(p.input_type for p in pipes)]
        self.output_type = tuple[tuple(p.output_type for p in pipes)]

    def step(self, items: tuple[Any, ...]) -> tuple[Any, ...]:
        if len(items) != len(self.pipes):
            raise ItemValidationError(
                f"Parallel expects {len(self.pipes)} items, got {len(items)}",
                ErrorContext(source="validation", pipe="Parallel"),
                expected=len(self.pipes),
                actual=len(items),
                side="input",
            )
        return tuple(pipe.step(item) for pipe, item in zip(self.pipes, items))

    def reset(self) -> None:
        # Every member is reset even if one of them cannot restart.
        failure: ResetError | None = None
        for pipe in self.pipes:
            try:
                pipe.reset()
            except ResetError as exc:
                if failure is None:
                    failure = exc
        if failure is not None:
            raise failure

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return self.pipes


_ARBITRARY_TYPES = ConfigDict(arbitrary_types_allowed=True)


def _type_adapter(item_type: Any) -> TypeAdapter[Any] | None:
    if item_type is Any:
        return None
    try:
        return TypeAdapter(item_type, config=_ARBITRARY_TYPES)
    except PydanticUserError:
        # Models and dataclasses carry their own config.
        return TypeAdapter(item_type)


class Constraint(Pipe[Any, Any]):
    """A pipe that declares narrower item types for another pipe.

    The declared tags take part in composition checks like any other.
    With ``validate`` on, every item is also checked at runtime in pydantic
    strict mode.

    Example:
        >>> pipe = Lazy(lambda x: x * 2).constrain(int, int, validate=True)
        >>> pipe.step(2)
        4
        >>> pipe.step("2")
        Traceback (most recent call last):
        ...
        iterpipes.errors.base.ItemValidationError: ...
    """

    def __init__(
        self,
        pipe: Pipe[Any, Any],
        input_type: Any = UNSET,
        output_type: Any = UNSET,
        *,
        validate: bool | None = None,
    ) -> None:
        """Initialize the constraint.

        Args:
            pipe: Pipe to constrain
            input_type: Declared input tag (defaults to the pipe's)
            output_type: Declared output tag (defaults to the pipe's)
            validate: Check items at runtime; ``None`` uses the active config

        Raises:
            CompositionError: If the declared tags contradict the pipe's own
        """
        declared_input = pipe.input_type if input_type is UNSET else input_type
        declared_output = pipe.output_type if output_type is UNSET else output_type

        if not is_compatible(declared_input, pipe.input_type):
            raise CompositionError(
                f"{pipe!r} does not accept {type_name(declared_input)}",
                ErrorContext(source="composition", pipe=type(pipe).__name__),
                upstream=type_name(declared_input),
                downstream=type_name(pipe.input_type),
            )
        if not is_compatible(pipe.output_type, declared_output):
            raise CompositionError(
                f"{pipe!r} does not produce {type_name(declared_output)}",
                ErrorContext(source="composition", pipe=type(pipe).__name__),
                upstream=type_name(pipe.output_type),
                downstream=type_name(declared_output),
            )

        self.pipe = pipe
        self.input_type = declared_input
        self.output_type = declared_output
        self.validate = get_config().validate_items if validate is None else validate

        self._input_adapter = _type_adapter(declared_input) if self.validate else None
        self._output_adapter = _type_adapter(declared_output) if self.validate else None

    def step(self, item: Any) -> Any:
        if self._input_adapter is not None:
            self._check(self._input_adapter, item, self.input_type, "input")
        output = self.pipe.step(item)
        if self._output_adapter is not None:
            self._check(self._output_adapter, output, self.output_type, "output")
        return output

    def _check(
        self, adapter: TypeAdapter[Any], item: Any, expected: Any, side: str
    ) -> None:
        try:
            adapter.validate_python(item, strict=True)
        except PydanticValidationError as exc:
            raise ItemValidationError(
                f"{side.capitalize()} item {item!r} is not a valid {type_name(expected)}",
                ErrorContext(source="validation", pipe=type(self.pipe).__name__),
                expected=type_name(expected),
                actual=type(item).__name__,
                side=side,
            ) from exc

    def reset(self) -> None:
        self.pipe.reset()

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return (self.pipe,)
