"""组合式流处理：单步变换契约及其组合代数。

iterpipes: compositional, pipes-style stream processing.

A pipe turns one input item into one output item per step. Small pipes
are tested on their own and then glued into larger ones with ``>>``.
"""
from __future__ import annotations

from iterpipes.config import PipeConfig, get_config, set_config
from iterpipes.errors import (
    CompositionError,
    ItemValidationError,
    PipeError,
    ResetError,
    SourceError,
    UnwrapError,
)
from iterpipes.pipe import (
    Bypass,
    Connector,
    Constraint,
    ConsumeResult,
    Enumerate,
    Identity,
    IterPipe,
    Lazy,
    OptionalPipe,
    Parallel,
    Pipe,
    PipeIter,
    SequenceConsumer,
    SequenceProducer,
    SourceState,
    Unwrap,
    compose,
)
from iterpipes.types import PipeInfo

__version__ = "0.1.0"

__all__ = [
    # Core
    "Connector",
    "Pipe",
    "compose",
    # Adapters
    "Identity",
    "IterPipe",
    "Lazy",
    "PipeIter",
    "SourceState",
    # Decorators
    "Bypass",
    "Constraint",
    "Enumerate",
    "OptionalPipe",
    "Parallel",
    "Unwrap",
    # Sequences
    "ConsumeResult",
    "SequenceConsumer",
    "SequenceProducer",
    # Description
    "PipeInfo",
    # Config
    "PipeConfig",
    "get_config",
    "set_config",
    # Errors
    "CompositionError",
    "ItemValidationError",
    "PipeError",
    "ResetError",
    "SourceError",
    "UnwrapError",
    # Version
    "__version__",
]
