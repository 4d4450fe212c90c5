"""
Structural description of a pipeline.

``Pipe.describe()`` returns a ``PipeInfo`` tree mirroring how a pipeline
was composed, which is handy for logging and for asserting on the shape of
a pipeline in tests.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field


class PipeInfo(BaseModel):
    """Description of one pipe and the pipes it owns."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Pipe class name")
    input_type: str = Field(default="Any", description="Input item type tag")
    output_type: str = Field(default="Any", description="Output item type tag")
    children: list[PipeInfo] = Field(
        default_factory=list, description="Owned sub-pipes in stepping order"
    )

    @property
    def signature(self) -> str:
        """``name(input -> output)``"""
        return f"{self.name}({self.input_type} -> {self.output_type})"

    def walk(self) -> Iterator[PipeInfo]:
        """Yield this node and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def stages(self) -> list[str]:
        """Names of the leaf pipes, in the order items flow through them."""
        return [node.name for node in self.walk() if not node.children]

    def render(self, indent: int = 2) -> str:
        """Render the tree as indented text."""
        lines: list[str] = []

        def _render(node: PipeInfo, depth: int) -> None:
            lines.append(" " * (indent * depth) + node.signature)
            for child in node.children:
                _render(child, depth + 1)

        _render(self, 0)
        return "\n".join(lines)
