"""
Type system for iterpipes.

- tags: item type tags and the compatibility check used at composition
- info: pydantic description of a composed pipeline
"""

from iterpipes.types.info import PipeInfo
from iterpipes.types.tags import (
    callable_tags,
    is_compatible,
    make_optional,
    strip_optional,
    type_name,
)

__all__ = [
    "PipeInfo",
    "callable_tags",
    "is_compatible",
    "make_optional",
    "strip_optional",
    "type_name",
]
