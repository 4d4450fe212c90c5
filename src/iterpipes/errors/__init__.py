"""错误体系：提供管道组合与运行时的结构化错误类型。

Error hierarchy for iterpipes.

Construction-time failures (composition) and programming errors (unwrap,
reset) are raised; exhaustion of a source is a normal ``None`` output.
"""

from iterpipes.errors.base import (
    CompositionError,
    ErrorContext,
    ItemValidationError,
    PipeError,
    ResetError,
    SourceError,
    UnwrapError,
)

__all__ = [
    "CompositionError",
    "ErrorContext",
    "ItemValidationError",
    "PipeError",
    "ResetError",
    "SourceError",
    "UnwrapError",
]
