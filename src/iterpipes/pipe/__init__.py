"""
Pipe layer - composable single-step transforms.

- Pipe: the contract (one input item in, one output item out per step)
- Connector / compose: sequential composition, also spelled ``a >> b``
- Lazy, Identity: function and identity pipes
- PipeIter / IterPipe: bridges to and from Python iterators
- OptionalPipe, Enumerate, Bypass, Constraint, Unwrap, Parallel: decorators
- SequenceProducer / SequenceConsumer: in-memory sources and sinks
"""

from iterpipes.pipe.base import UNSET, Pipe, as_pipe
from iterpipes.pipe.connect import Connector, compose
from iterpipes.pipe.iter import IterPipe, PipeIter, SourceState
from iterpipes.pipe.sequence import ConsumeResult, SequenceConsumer, SequenceProducer
from iterpipes.pipe.util import (
    Bypass,
    Constraint,
    Enumerate,
    Identity,
    Lazy,
    OptionalPipe,
    Parallel,
    Unwrap,
)

__all__ = [
    "UNSET",
    "Bypass",
    "Connector",
    "Constraint",
    "ConsumeResult",
    "Enumerate",
    "Identity",
    "IterPipe",
    "Lazy",
    "OptionalPipe",
    "Parallel",
    "Pipe",
    "PipeIter",
    "SequenceConsumer",
    "SequenceProducer",
    "SourceState",
    "Unwrap",
    "as_pipe",
    "compose",
]
