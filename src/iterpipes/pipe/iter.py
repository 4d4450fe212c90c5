"""
Interoperability between pipes and Python iterators.

- PipeIter: a pipe that pulls the next element of an iterable per step
- IterPipe: an iterator that steps a pipe per ``next()``
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, TypeVar

from iterpipes.errors import ErrorContext, ResetError, SourceError
from iterpipes.pipe.base import Pipe
from iterpipes.telemetry.logger import get_logger, log_context
from iterpipes.types.tags import make_optional

logger = get_logger("iterpipes.pipe.iter")

T = TypeVar("T")


class SourceState(str, Enum):
    """States of a pull source."""

    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class PipeIter(Pipe[None, Any]):
    """A pipe that yields the elements of an iterable.

    Every step ignores its trigger input (conventionally ``None``) and pulls
    one element, returning ``None`` once the iterable is exhausted.
    Exhaustion is terminal: the underlying iterator is never pulled again.

    ``reset`` restarts the source when it is a re-iterable collection such
    as a list or range. One-shot iterators and generators cannot be
    restarted.

    Example:
        >>> source = PipeIter([1, 2])
        >>> [source.step(None) for _ in range(4)]
        [1, 2, None, None]
    """

    input_type = None

    def __init__(self, iterable: Iterable[T], *, item_type: Any = Any) -> None:
        """Initialize the source.

        Args:
            iterable: Elements to yield; must not contain ``None``
            item_type: Tag of the elements
        """
        self._iterable = iterable
        self._iterator: Iterator[T] = iter(iterable)
        self._restartable = self._iterator is not iterable
        self._state = SourceState.ACTIVE
        self._position = 0
        self._pulled = False
        self.output_type = make_optional(item_type)

    @property
    def state(self) -> SourceState:
        return self._state

    @property
    def exhausted(self) -> bool:
        return self._state is SourceState.EXHAUSTED

    @property
    def restartable(self) -> bool:
        """Whether ``reset`` can start the source over."""
        return self._restartable

    @property
    def position(self) -> int:
        """Number of elements yielded so far."""
        return self._position

    def step(self, item: Any = None) -> Any:
        if self._state is SourceState.EXHAUSTED:
            return None

        self._pulled = True
        try:
            element = next(self._iterator)
        except StopIteration:
            self._state = SourceState.EXHAUSTED
            with log_context(stage=type(self).__name__):
                logger.debug("Source exhausted", yielded=self._position)
            return None

        if element is None:
            raise SourceError(
                f"Source yielded None at position {self._position}, "
                "which is reserved for exhaustion",
                ErrorContext(source="source", pipe=type(self).__name__),
                position=self._position,
            ).with_hint("filter out None or wrap elements before adapting the iterable")

        self._position += 1
        return element

    def reset(self) -> None:
        if not self._pulled:
            return
        if not self._restartable:
            raise ResetError(
                f"Cannot restart a one-shot {type(self._iterable).__name__} "
                f"after {self._position} elements",
                ErrorContext(source="reset", pipe=type(self).__name__),
            ).with_hint("pass a re-iterable collection such as a list or range")

        self._iterator = iter(self._iterable)
        self._state = SourceState.ACTIVE
        self._position = 0
        self._pulled = False
        with log_context(stage=type(self).__name__):
            logger.debug("Source restarted", source=type(self._iterable).__name__)


class IterPipe(Iterator[Any]):
    """An iterator over the outputs of a pipe.

    Each ``next()`` steps the pipe with a fixed trigger item. Iteration stops
    at the first ``None`` output and stays stopped.

    Example:
        >>> pipe = PipeIter(range(3)) >> Lazy(lambda i: i * 2).optional()
        >>> list(pipe.into_iter())
        [0, 2, 4]
    """

    def __init__(self, pipe: Pipe[Any, Any], trigger: Any = None) -> None:
        self.pipe = pipe
        self.trigger = trigger
        self._done = False

    def __iter__(self) -> IterPipe:
        return self

    def __next__(self) -> Any:
        if self._done:
            raise StopIteration
        output = self.pipe.step(self.trigger)
        if output is None:
            self._done = True
            raise StopIteration
        return output
