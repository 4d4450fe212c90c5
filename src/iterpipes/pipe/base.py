"""
Base abstraction for the pipe layer.

Defines the ``Pipe`` contract that every stage implements, together with
the decoration methods available on every pipe.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from iterpipes.errors import CompositionError
from iterpipes.telemetry.logger import get_log_context, log_context
from iterpipes.types.info import PipeInfo
from iterpipes.types.tags import type_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from iterpipes.pipe.connect import Connector
    from iterpipes.pipe.iter import IterPipe
    from iterpipes.pipe.util import Bypass, Constraint, Enumerate, OptionalPipe

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")
T = TypeVar("T")


class _Unset:
    """Marker for "argument not given" where ``None`` is a meaningful value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class Pipe(ABC, Generic[InputT, OutputT]):
    """A stateful, single-step transform.

    A pipe consumes exactly one input item per call to ``step`` and returns
    exactly one output item. Any state it needs between calls is owned by the
    instance. ``input_type`` and ``output_type`` declare the item types and
    are checked whenever two pipes are connected.

    Example:
        >>> class Multiply(Pipe[float, float]):
        ...     input_type = float
        ...     output_type = float
        ...
        ...     def __init__(self, factor: float) -> None:
        ...         self.factor = factor
        ...
        ...     def step(self, item: float) -> float:
        ...         return item * self.factor
        ...
        >>> pipe = Multiply(2.0) >> (lambda x: x + 1)
        >>> pipe.step(3.0)
        7.0
    """

    input_type: Any = Any
    output_type: Any = Any

    @abstractmethod
    def step(self, item: InputT) -> OutputT:
        """Calculate the next output item from the next input item.

        Args:
            item: The input item

        Returns:
            The output item
        """
        ...

    def reset(self) -> None:
        """Return the pipe to the state it had before its first step.

        Stateless pipes need not override this. Decorators and composites
        forward the call to every pipe they own.
        """

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        """Pipes owned by this one, in stepping order."""
        return ()

    def describe(self) -> PipeInfo:
        """Describe this pipe and everything it owns."""
        return PipeInfo(
            name=type(self).__name__,
            input_type=type_name(self.input_type),
            output_type=type_name(self.output_type),
            children=[child.describe() for child in self.children()],
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}"
            f"({type_name(self.input_type)} -> {type_name(self.output_type)})"
        )

    # Composition

    def then(self, other: Pipe[OutputT, T] | Callable[[OutputT], T]) -> Connector:
        """Connect ``other`` after this pipe.

        The connected pipe feeds every output item of ``self`` into ``other``.
        Plain callables are wrapped in a ``Lazy`` pipe first.

        Raises:
            CompositionError: If the output type of ``self`` does not fit the
                input type of ``other``
        """
        from iterpipes.pipe.connect import Connector

        return Connector(self, as_pipe(other))

    def connect(self, other: Pipe[OutputT, T] | Callable[[OutputT], T]) -> Connector:
        """Alias of ``then``."""
        return self.then(other)

    def __rshift__(self, other: Any) -> Connector:
        if not isinstance(other, Pipe) and not callable(other):
            return NotImplemented
        return self.then(other)

    def __rrshift__(self, other: Any) -> Connector:
        if not isinstance(other, Pipe) and not callable(other):
            return NotImplemented
        return as_pipe(other).then(self)

    # Decoration

    def map_output(
        self, function: Callable[[OutputT], T], *, output_type: Any = UNSET
    ) -> Connector:
        """Apply ``function`` to every output item.

        Args:
            function: Function applied to the output of this pipe
            output_type: Output tag of ``function``, if its annotations
                do not say

        Returns:
            A pipe equivalent to ``self >> Lazy(function)``
        """
        from iterpipes.pipe.util import Lazy

        return self.then(Lazy(function, output_type=output_type))

    def map_input(
        self, function: Callable[[T], InputT], *, input_type: Any = UNSET
    ) -> Connector:
        """Apply ``function`` to every input item before this pipe sees it.

        Args:
            function: Function producing this pipe's input
            input_type: Input tag of ``function``, if its annotations
                do not say

        Returns:
            A pipe equivalent to ``Lazy(function) >> self``
        """
        from iterpipes.pipe.util import Lazy

        return Lazy(function, input_type=input_type).then(self)

    def unwrap(self) -> Connector:
        """Strip ``None`` from the output of this pipe.

        Use this where an absent output is impossible by construction. The
        returned pipe raises ``UnwrapError`` if it ever sees ``None``.
        """
        from iterpipes.pipe.util import Unwrap

        return self.then(Unwrap(self.output_type, source=type(self).__name__))

    def optional(self) -> OptionalPipe:
        """Pass ``None`` through untouched and step this pipe for anything else."""
        from iterpipes.pipe.util import OptionalPipe

        return OptionalPipe(self)

    def enumerate(self) -> Enumerate:
        """Pair every output item with its index, counting from 0."""
        from iterpipes.pipe.util import Enumerate

        return Enumerate(self)

    def bypass(self) -> Bypass:
        """Pair every output item with the input item that produced it."""
        from iterpipes.pipe.util import Bypass

        return Bypass(self)

    def constrain(
        self,
        input_type: Any = UNSET,
        output_type: Any = UNSET,
        *,
        validate: bool | None = None,
    ) -> Constraint:
        """Declare narrower item types for this pipe.

        Args:
            input_type: Input tag to declare (defaults to the current one)
            output_type: Output tag to declare (defaults to the current one)
            validate: Check every item against the declared tags at runtime.
                ``None`` uses ``PipeConfig.validate_items``.

        Raises:
            CompositionError: If the declared tags contradict the pipe's own
        """
        from iterpipes.pipe.util import Constraint

        return Constraint(self, input_type, output_type, validate=validate)

    # Driving

    def into_iter(self, trigger: Any = None) -> IterPipe:
        """Iterate over this pipe's outputs.

        Each iteration steps the pipe with ``trigger``; iteration stops at
        the first ``None`` output.
        """
        from iterpipes.pipe.iter import IterPipe

        return IterPipe(self, trigger)

    def run(self, trigger: Any = None) -> int:
        """Step the pipe with ``trigger`` until it returns a falsy item.

        Log records emitted meanwhile carry the pipeline name, which is this
        pipe's class name unless an enclosing ``log_context`` already names
        one.

        Returns:
            Number of steps taken, including the final one
        """
        pipeline = get_log_context().pipeline or type(self).__name__
        steps = 0
        with log_context(pipeline=pipeline):
            while True:
                steps += 1
                if not self.step(trigger):
                    return steps


def as_pipe(obj: Pipe[Any, Any] | Callable[[Any], Any]) -> Pipe[Any, Any]:
    """Return ``obj`` if it is a pipe, or wrap a callable in ``Lazy``.

    Raises:
        CompositionError: If ``obj`` is neither
    """
    if isinstance(obj, Pipe):
        return obj
    if callable(obj):
        from iterpipes.pipe.util import Lazy

        return Lazy(obj)
    raise CompositionError(
        f"Cannot use {type(obj).__name__!r} as a pipe",
        downstream=type(obj).__name__,
    ).with_hint("pass a Pipe instance or a single-argument callable")
