"""Named wall-clock timers with running statistics."""
from __future__ import annotations

import math
import sys
import time
from collections import deque
from typing import Optional, Union

Key = Union[str, int]


class Accumulator:
    """Running statistics over all samples and over a sliding window."""

    def __init__(self, window: int = 50):
        if window < 1:
            raise ValueError("the window must hold at least one sample")
        self._window: deque[float] = deque(maxlen=window)
        self._total_samples = 0
        self._sum = 0.0
        self._min = sys.float_info.max
        self._max = -sys.float_info.max

    def add(self, sample: float) -> None:
        sample = float(sample)
        self._window.append(sample)
        self._total_samples += 1
        self._sum += sample
        self._max = max(self._max, sample)
        self._min = min(self._min, sample)

    @property
    def total_samples(self) -> int:
        return self._total_samples

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    def mean(self) -> float:
        """Mean over all samples; NaN if there are none."""
        if self._total_samples == 0:
            return math.nan
        return self._sum / self._total_samples

    def rolling_mean(self) -> float:
        """Mean over the samples in the window; NaN if there are none."""
        if not self._window:
            return math.nan
        return math.fsum(self._window) / len(self._window)

    def lazy_variance(self) -> float:
        """Population variance over the samples in the window."""
        if not self._window:
            return 0.0
        mean = self.rolling_mean()
        return math.fsum((s - mean) ** 2 for s in self._window) / len(self._window)


def seconds_to_time_string(seconds: float) -> str:
    """Format a duration as HH:MM:SS.ffffff."""
    sign = "-" if seconds < 0 else ""
    hours, rest = divmod(abs(float(seconds)), 3600.0)
    minutes, secs = divmod(rest, 60.0)
    return f"{sign}{int(hours):02d}:{int(minutes):02d}:{secs:09.6f}"


class Timing:
    """A registry of named timers, each addressed by tag or integer handle."""

    def __init__(self):
        self._tags: dict[str, int] = {}
        self._accumulators: list[Accumulator] = []

    @property
    def tags(self) -> dict[str, int]:
        return dict(self._tags)

    def get_handle(self, tag: str) -> int:
        """Handle for a tag, registering the tag if it is new."""
        handle = self._tags.get(tag)
        if handle is None:
            handle = len(self._accumulators)
            self._tags[tag] = handle
            self._accumulators.append(Accumulator())
        return handle

    def get_tag(self, handle: int) -> str:
        for tag, known in self._tags.items():
            if known == handle:
                return tag
        raise KeyError(handle)

    def _accumulator(self, key: Key) -> Accumulator:
        if isinstance(key, str):
            return self._accumulators[self._tags[key]]
        if not 0 <= key < len(self._accumulators):
            raise KeyError(key)
        return self._accumulators[key]

    def add_time(self, handle: Key, seconds: float) -> None:
        self._accumulator(handle).add(seconds)

    def total_seconds(self, key: Key) -> float:
        return self._accumulator(key).sum

    def mean_seconds(self, key: Key) -> float:
        return self._accumulator(key).mean()

    def num_samples(self, key: Key) -> int:
        return self._accumulator(key).total_samples

    def variance_seconds(self, key: Key) -> float:
        return self._accumulator(key).lazy_variance()

    def min_seconds(self, key: Key) -> float:
        return self._accumulator(key).min

    def max_seconds(self, key: Key) -> float:
        return self._accumulator(key).max

    def hz(self, key: Key) -> float:
        """Rate implied by the rolling mean duration."""
        mean = self._accumulator(key).rolling_mean()
        if mean == 0.0:
            return math.inf
        return 1.0 / mean

    def reset(self) -> None:
        self._tags.clear()
        self._accumulators.clear()

    def report(self) -> str:
        """A table of all timers, sorted by tag."""
        lines = ["Timing", "-----"]
        width = max((len(tag) for tag in self._tags), default=0)
        for tag, handle in sorted(self._tags.items()):
            acc = self._accumulators[handle]
            if acc.total_samples == 0:
                lines.append(f"{tag:<{width}}\t{0:>6d}")
                continue
            fmt = seconds_to_time_string
            lines.append(
                f"{tag:<{width}}\t{acc.total_samples:>6d}\t{fmt(acc.sum)}\t"
                f"({fmt(acc.mean())} +- {fmt(math.sqrt(acc.lazy_variance()))})\t"
                f"[{fmt(acc.min)},{fmt(acc.max)}]"
            )
        return "\n".join(lines) + "\n"


DEFAULT_TIMING = Timing()


class Timer:
    """Measures wall-clock time and records it in a Timing registry."""

    def __init__(
        self,
        tag: Key,
        start_stopped: bool = False,
        registry: Optional[Timing] = None,
    ):
        self._registry = registry if registry is not None else DEFAULT_TIMING
        if isinstance(tag, str):
            self._handle = self._registry.get_handle(tag)
        else:
            self._registry.get_tag(tag)
            self._handle = tag
        self._started: Optional[float] = None
        if not start_stopped:
            self.start()

    @property
    def handle(self) -> int:
        return self._handle

    def start(self) -> None:
        self._started = time.perf_counter()

    def stop(self) -> float:
        """Stop the timer, record the elapsed time and return it."""
        if self._started is None:
            raise RuntimeError("the timer is not running")
        elapsed = time.perf_counter() - self._started
        self._started = None
        self._registry.add_time(self._handle, elapsed)
        return elapsed

    def is_timing(self) -> bool:
        return self._started is not None

    def __enter__(self) -> "Timer":
        if not self.is_timing():
            self.start()
        return self

    def __exit__(self, *args) -> None:
        if self.is_timing():
            self.stop()


class MiniTimer:
    """A small stopwatch for benchmarking."""

    def __init__(self):
        self._start = time.perf_counter()
        self._end: Optional[float] = None

    def start(self) -> None:
        self._start = time.perf_counter()

    def stop(self) -> float:
        self._end = time.perf_counter()
        return self.elapsed()

    def elapsed(self) -> float:
        """Seconds between the last start and stop; 0 if not stopped since starting."""
        if self._end is None or self._end < self._start:
            return 0.0
        return self._end - self._start