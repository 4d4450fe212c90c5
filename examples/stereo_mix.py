#!/usr/bin/env python3
"""
Stereo mixing example.

Reads two input channels from lists, mixes them, and writes two output
channels into pre-allocated lists. The pipeline stops itself once the
output buffers are full.

Usage:
    python examples/stereo_mix.py
"""

from iterpipes import (
    ConsumeResult,
    Lazy,
    Parallel,
    PipeConfig,
    SequenceConsumer,
    SequenceProducer,
    set_config,
)
from iterpipes.telemetry import LogLevel

LENGTH = 16


def main() -> None:
    """Run the stereo mixing example."""
    set_config(PipeConfig(log_level=LogLevel.DEBUG))

    input0 = [float(i) for i in range(LENGTH)]
    input1 = [float(LENGTH - i) for i in range(LENGTH)]
    output0 = [0.0] * LENGTH
    output1 = [0.0] * LENGTH

    # Widen the trigger to both channels, and treat the pair as absent
    # as soon as either channel runs out.
    source = (
        Parallel(SequenceProducer(input0), SequenceProducer(input1))
        .map_input(lambda _: (None, None))
        .map_output(lambda pair: None if None in pair else pair)
        .constrain(output_type=tuple[float, float] | None)
    )

    process = (
        Lazy(lambda pair: (pair[0] + pair[1], -(pair[0] + pair[1])))
        .constrain(tuple[float, float], tuple[float, float], validate=True)
        .optional()
    )

    # Keep going while both consumers have room left.
    sink = (
        Parallel(SequenceConsumer(output0), SequenceConsumer(output1))
        .optional()
        .map_output(lambda results: results == (ConsumeResult.OK, ConsumeResult.OK))
    )

    steps = (source >> process >> sink).run()

    print(f"Rendered {steps} frames")
    for frame in zip(input0, input1, output0, output1):
        print("  in: {:5.1f} {:5.1f}   out: {:5.1f} {:6.1f}".format(*frame))


if __name__ == "__main__":
    main()
