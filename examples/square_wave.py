#!/usr/bin/env python3
"""
Square wave example.

Builds a square wave generator out of three independent pipes: a counting
source, a stage that turns an index into periodic progress, and a stage
that thresholds progress into -1.0 / 1.0.

Usage:
    python examples/square_wave.py
"""

import itertools

from iterpipes import Lazy, Pipe, PipeIter


class Progress(Pipe[int, float]):
    """Turn an index into a periodic progress value in [0.0, 1.0)."""

    input_type = int
    output_type = float

    def __init__(self, period_length: int) -> None:
        self.period_length = period_length

    def step(self, index: int) -> float:
        return (index % self.period_length) / self.period_length


class SquareWave(Pipe[float, float]):
    """Turn a progress value into a square wave."""

    input_type = float
    output_type = float

    def step(self, progress: float) -> float:
        return -1.0 if progress < 0.5 else 1.0


def main() -> None:
    """Run the square wave example."""
    # Each stage can be stepped on its own...
    progress = Progress(period_length=4)
    print("progress:", [progress.step(i) for i in range(4)])

    # ...and the same stages compose into one pipe.
    pipe = (
        PipeIter(itertools.count(), item_type=int).unwrap()
        >> Progress(period_length=4)
        >> SquareWave()
    )
    print("frames:  ", [pipe.step(None) for _ in range(8)])
    print()
    print(pipe.describe().render())

    # A function works as a stage too.
    scaled = pipe >> (lambda frame: frame * 0.5)
    print()
    print("scaled:  ", [scaled.step(None) for _ in range(4)])

    # Finite sources end in None, so the pipe can drive a for loop.
    finite = PipeIter(range(6)) >> Lazy(lambda i: i % 2 == 0).optional()
    print("even:    ", list(finite.into_iter()))


if __name__ == "__main__":
    main()
