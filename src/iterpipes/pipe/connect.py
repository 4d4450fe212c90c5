"""
Sequential composition of pipes.

``Connector`` glues two pipes end to end. Everything that builds a longer
pipeline (``>>``, ``Pipe.then``, ``compose``) ends up here.
"""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING, Any

from iterpipes.errors import CompositionError, ErrorContext
from iterpipes.pipe.base import Pipe, as_pipe
from iterpipes.telemetry.logger import get_logger
from iterpipes.types.tags import is_compatible, type_name

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("iterpipes.pipe.connect")


class Connector(Pipe[Any, Any]):
    """A pipe that feeds the output of ``first`` into ``second``.

    ``Connector(a, b).step(x)`` is ``b.step(a.step(x))``: ``first`` is
    always stepped before ``second``, and each exactly once per step.

    Example:
        >>> double = Lazy(lambda x: x * 2)
        >>> increment = Lazy(lambda x: x + 1)
        >>> Connector(double, increment).step(5)
        11
    """

    def __init__(self, first: Pipe[Any, Any], second: Pipe[Any, Any]) -> None:
        """Initialize the connector.

        Args:
            first: Upstream pipe
            second: Downstream pipe, accepting the items ``first`` produces

        Raises:
            CompositionError: If the item types at the joint disagree
        """
        if not is_compatible(first.output_type, second.input_type):
            produced = type_name(first.output_type)
            accepted = type_name(second.input_type)
            raise CompositionError(
                f"Cannot connect {first!r} to {second!r}: "
                f"{produced} is not accepted where {accepted} is expected",
                ErrorContext(source="composition", pipe=type(second).__name__),
                upstream=produced,
                downstream=accepted,
            )

        self.first = first
        self.second = second
        self.input_type = first.input_type
        self.output_type = second.output_type

        logger.debug(
            "Connected pipes",
            first=type(first).__name__,
            second=type(second).__name__,
            item_type=type_name(first.output_type),
        )

    def step(self, item: Any) -> Any:
        return self.second.step(self.first.step(item))

    def reset(self) -> None:
        try:
            self.first.reset()
        finally:
            self.second.reset()

    def children(self) -> tuple[Pipe[Any, Any], ...]:
        return (self.first, self.second)


def compose(
    first: Pipe[Any, Any] | Callable[[Any], Any],
    second: Pipe[Any, Any] | Callable[[Any], Any],
    *rest: Pipe[Any, Any] | Callable[[Any], Any],
) -> Connector:
    """Connect two or more pipes, left to right.

    ``compose(a, b, c)`` is ``(a >> b) >> c``. Callables are wrapped in
    ``Lazy``.

    Raises:
        CompositionError: If any joint has mismatched item types
    """
    head = Connector(as_pipe(first), as_pipe(second))
    return reduce(lambda acc, nxt: Connector(acc, as_pipe(nxt)), rest, head)
