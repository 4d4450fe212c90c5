"""
Pipes that read from and write into in-memory sequences.
"""

from __future__ import annotations

from collections.abc import MutableSequence, Sequence
from enum import Enum
from typing import Any, TypeVar

from iterpipes.pipe.base import Pipe
from iterpipes.pipe.iter import PipeIter

T = TypeVar("T")


class SequenceProducer(PipeIter):
    """A restartable source over the items of a sequence."""

    def __init__(self, items: Sequence[T], *, item_type: Any = Any) -> None:
        if not isinstance(items, Sequence):
            raise TypeError(
                f"SequenceProducer expects a sequence, got {type(items).__name__}"
            )
        super().__init__(items, item_type=item_type)


class ConsumeResult(str, Enum):
    """Outcome of writing one item into a ``SequenceConsumer``."""

    OK = "ok"
    LAST_ITEM = "last_item"
    FULL = "full"


class SequenceConsumer(Pipe[Any, ConsumeResult]):
    """A sink that writes items into consecutive slots of a mutable sequence.

    Returns ``LAST_ITEM`` for the write that fills the final slot and
    ``FULL`` (dropping the item) for every write after that.

    Example:
        >>> buffer = [0, 0]
        >>> sink = SequenceConsumer(buffer)
        >>> [sink.step(v) for v in (7, 8, 9)]
        [<ConsumeResult.OK: 'ok'>, <ConsumeResult.LAST_ITEM: 'last_item'>, <ConsumeResult.FULL: 'full'>]
        >>> buffer
        [7, 8]
    """

    output_type = ConsumeResult

    def __init__(self, buffer: MutableSequence[T], *, item_type: Any = Any) -> None:
        self.buffer = buffer
        self.index = 0
        self.input_type = item_type

    def step(self, item: Any) -> ConsumeResult:
        if self.index >= len(self.buffer):
            return ConsumeResult.FULL

        self.buffer[self.index] = item
        self.index += 1
        if self.index == len(self.buffer):
            return ConsumeResult.LAST_ITEM
        return ConsumeResult.OK

    def reset(self) -> None:
        self.index = 0
