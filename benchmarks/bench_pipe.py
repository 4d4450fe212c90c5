#!/usr/bin/env python3
"""
Pipe composition benchmarks.

Renders a metronome signal twice: once assembled from small pipes and once
as a single hand-written pipe, and compares the per-frame cost.
"""

import math
import time
from typing import Any

from iterpipes import Lazy, Parallel, Pipe


class Envelope(Pipe[int, float]):
    """Linear attack then linear decay, silent afterwards."""

    input_type = int
    output_type = float

    def __init__(self, attack_len: int, decay_len: int) -> None:
        self.attack_len = attack_len
        self.decay_len = decay_len

    def step(self, index: int) -> float:
        if index < self.attack_len:
            return index / self.attack_len
        if index < self.attack_len + self.decay_len:
            return 1.0 - (index - self.attack_len) / self.decay_len
        return 0.0


class SineWave(Pipe[int, float]):
    """Sine wave with a period of ``wave_length`` frames."""

    input_type = int
    output_type = float

    def __init__(self, wave_length: int) -> None:
        self.wave_length = wave_length

    def step(self, index: int) -> float:
        progress = (index % self.wave_length) / self.wave_length
        return math.sin(progress * 2.0 * math.pi)


def piped_metronome(
    attack_len: int, decay_len: int, wave_length: int, pulse_distance: int
) -> Pipe[int, float]:
    """Metronome built by composing the envelope and the sine wave."""
    return (
        Lazy(lambda index: (index, index % pulse_distance))
        >> Parallel(SineWave(wave_length), Envelope(attack_len, decay_len))
        >> Lazy(lambda frames: frames[0] * frames[1], output_type=float)
    )


class ManualMetronome(Pipe[int, float]):
    """The same signal as ``piped_metronome``, written out by hand."""

    input_type = int
    output_type = float

    def __init__(
        self, attack_len: int, decay_len: int, wave_length: int, pulse_distance: int
    ) -> None:
        self.attack_len = attack_len
        self.decay_len = decay_len
        self.wave_length = wave_length
        self.pulse_distance = pulse_distance

    def step(self, index: int) -> float:
        wave_progress = (index % self.wave_length) / self.wave_length
        wave_frame = math.sin(wave_progress * 2.0 * math.pi)

        env_index = index % self.pulse_distance
        if env_index < self.attack_len:
            env_frame = env_index / self.attack_len
        elif env_index < self.attack_len + self.decay_len:
            env_frame = 1.0 - (env_index - self.attack_len) / self.decay_len
        else:
            env_frame = 0.0

        return wave_frame * env_frame


def benchmark_pipe(name: str, pipe: Pipe[int, float], length: int) -> dict[str, Any]:
    """Render ``length`` frames through ``pipe``."""
    buffer = [0.0] * length

    start = time.perf_counter()
    for i in range(length):
        buffer[i] = pipe.step(i)
    elapsed = time.perf_counter() - start

    return {
        "name": name,
        "frames": length,
        "elapsed_seconds": elapsed,
        "throughput_fps": length / elapsed,
        "latency_us": (elapsed / length) * 1_000_000,
        "checksum": sum(buffer),
    }


def run_benchmarks(length: int = 200_000, runs: int = 5) -> None:
    """Run both variants and print results."""
    print("=" * 60)
    print("Pipe Benchmarks")
    print("=" * 60)
    print()

    results: dict[str, list[dict[str, Any]]] = {"piped": [], "manual": []}
    for run in range(1, runs + 1):
        wave_length = 100 * run
        results["piped"].append(
            benchmark_pipe("piped", piped_metronome(500, 500, wave_length, 1_000), length)
        )
        results["manual"].append(
            benchmark_pipe(
                "manual", ManualMetronome(500, 500, wave_length, 1_000), length
            )
        )

    for name, runs_ in results.items():
        mean = sum(r["elapsed_seconds"] for r in runs_) / len(runs_)
        print(f"{name}:")
        print(f"  Runs: {len(runs_)} x {length} frames")
        print(f"  Mean elapsed: {mean:.4f}s")
        print(f"  Latency: {mean / length * 1_000_000:.2f} µs/frame")
        print()

    ratios = [
        p["elapsed_seconds"] / m["elapsed_seconds"]
        for p, m in zip(results["piped"], results["manual"])
    ]
    print(f"Piped / manual: min {min(ratios):.2f}, mean {sum(ratios) / len(ratios):.2f}, "
          f"max {max(ratios):.2f}")


if __name__ == "__main__":
    run_benchmarks()
