"""Bounded sample and beat buffers."""

import threading
import time
from collections import deque
from typing import Callable, Deque, Generic, Iterable, List, Optional, TypeVar

import numpy as np

from ..core.config import BufferConfig
from ..core.models import Reading

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Fixed-capacity FIFO buffer; the oldest items are evicted on overflow."""

    def __init__(self, capacity: int):
        """Initialize ring buffer with specified capacity."""
        if capacity <= 0:
            raise ValueError("Capacity must be positive")
        self.capacity = capacity
        self._items: Deque[T] = deque(maxlen=capacity)
        self.lock = threading.Lock()

    def push(self, item: T) -> None:
        """Append an item, evicting the oldest when full."""
        with self.lock:
            self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        """Append several items in order."""
        with self.lock:
            self._items.extend(items)

    def snapshot(self) -> List[T]:
        """Copy of the contents, oldest first."""
        with self.lock:
            return list(self._items)

    def latest(self, count: int) -> List[T]:
        """Up to ``count`` most recent items, oldest first."""
        if count <= 0:
            return []
        with self.lock:
            items = list(self._items)
        return items[-count:]

    def last(self) -> Optional[T]:
        """Most recent item, or None when empty."""
        with self.lock:
            return self._items[-1] if self._items else None

    def clear(self) -> None:
        """Remove everything."""
        with self.lock:
            self._items.clear()

    def to_numpy(self, dtype=np.float64) -> np.ndarray:
        """Contents as a numpy array, oldest first."""
        return np.asarray(self.snapshot(), dtype=dtype)

    @property
    def is_full(self) -> bool:
        return len(self) == self.capacity

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0


class SampleStore:
    """Recent Lead I and Lead II voltages for the waveform display."""

    def __init__(self, config: BufferConfig):
        self.lead_i = RingBuffer(config.sample_capacity)
        self.lead_ii = RingBuffer(config.sample_capacity)

    def add(self, reading: Reading) -> None:
        """Store both leads of a reading."""
        self.lead_ii.push(reading.lead_ii)
        self.lead_i.push(reading.lead_i)

    def clear(self) -> None:
        self.lead_i.clear()
        self.lead_ii.clear()

    def __len__(self) -> int:
        return len(self.lead_ii)


class BeatTracker:
    """Ingestion times of device-reported beats and the device irregularity history.

    Timestamps never decrease: a clock value older than the last stored one
    is recorded as the last stored one.
    """

    def __init__(self, config: BufferConfig, clock: Callable[[], float] = time.monotonic):
        """
        Initialize beat tracker.

        Args:
            config: Buffer capacities
            clock: Seconds clock used to timestamp beats
        """
        self.beat_timestamps = RingBuffer(config.beat_capacity)
        self.device_irregularity = RingBuffer(config.irregularity_capacity)
        self._clock = clock

    def add(self, reading: Reading) -> bool:
        """
        Record the beat carried by a reading, if any.

        Returns:
            True if a beat was recorded
        """
        if not reading.has_beat:
            return False

        now = self._clock()
        last = self.beat_timestamps.last()
        if last is not None and now < last:
            now = last
        self.beat_timestamps.push(now)

        if reading.device_irregularity is not None:
            self.device_irregularity.push(reading.device_irregularity)
        return True

    def clear(self) -> None:
        self.beat_timestamps.clear()
        self.device_irregularity.clear()

    @property
    def beat_count(self) -> int:
        return len(self.beat_timestamps)
