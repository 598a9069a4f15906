"""Tests for ring buffers and the sample and beat stores."""

import numpy as np
import pytest

from heart_monitor.analysis.buffers import BeatTracker, RingBuffer, SampleStore
from heart_monitor.core.config import BufferConfig
from heart_monitor.core.models import Reading


class TestRingBuffer:

    def test_keeps_last_capacity_items_in_push_order(self):
        buffer = RingBuffer(5)
        for i in range(12):
            buffer.push(i)
        assert len(buffer) == 5
        assert buffer.snapshot() == [7, 8, 9, 10, 11]
        assert buffer.is_full

    def test_under_capacity(self):
        buffer = RingBuffer(5)
        buffer.extend([1, 2])
        assert buffer.snapshot() == [1, 2]
        assert not buffer.is_full

    def test_latest_and_last(self):
        buffer = RingBuffer(10)
        buffer.extend(range(6))
        assert buffer.latest(3) == [3, 4, 5]
        assert buffer.latest(20) == [0, 1, 2, 3, 4, 5]
        assert buffer.latest(0) == []
        assert buffer.last() == 5

    def test_empty(self):
        buffer = RingBuffer(3)
        assert buffer.last() is None
        assert not buffer
        assert buffer.to_numpy().shape == (0,)

    def test_snapshot_is_a_copy(self):
        buffer = RingBuffer(3)
        buffer.push(1.0)
        snapshot = buffer.snapshot()
        snapshot.append(99.0)
        assert buffer.snapshot() == [1.0]

    def test_clear(self):
        buffer = RingBuffer(3)
        buffer.extend([1, 2, 3])
        buffer.clear()
        assert len(buffer) == 0

    def test_to_numpy(self):
        buffer = RingBuffer(3)
        buffer.extend([0.5, 1.5, 2.5, 3.5])
        np.testing.assert_allclose(buffer.to_numpy(), [1.5, 2.5, 3.5])

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_capacity_must_be_positive(self, capacity):
        with pytest.raises(ValueError):
            RingBuffer(capacity)


class TestSampleStore:

    def test_both_leads_are_stored_for_every_reading(self):
        store = SampleStore(BufferConfig(sample_capacity=3))
        for i in range(5):
            store.add(Reading(lead_i=float(i), lead_ii=float(-i)))
        assert store.lead_i.snapshot() == [2.0, 3.0, 4.0]
        assert store.lead_ii.snapshot() == [-2.0, -3.0, -4.0]
        assert len(store) == 3

    def test_default_capacity(self):
        store = SampleStore(BufferConfig())
        assert store.lead_ii.capacity == 1500
        assert store.lead_i.capacity == 1500


class TestBeatTracker:

    def test_beat_recorded_only_with_device_bpm(self, clock):
        tracker = BeatTracker(BufferConfig(), clock=clock)
        assert not tracker.add(Reading(lead_i=0.0, lead_ii=0.0))
        assert tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=70))
        assert tracker.beat_timestamps.snapshot() == [clock.now]

    def test_irregularity_recorded_only_alongside_a_beat(self, clock):
        tracker = BeatTracker(BufferConfig(), clock=clock)
        tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_irregularity=0.4))
        assert len(tracker.device_irregularity) == 0
        tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=70, device_irregularity=0.4))
        assert tracker.device_irregularity.snapshot() == [0.4]

    def test_capacities(self, clock):
        tracker = BeatTracker(BufferConfig(), clock=clock)
        for _ in range(60):
            clock.advance(0.8)
            tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=75, device_irregularity=0.1))
        assert tracker.beat_count == 50
        assert len(tracker.device_irregularity) == 10

    def test_timestamps_never_decrease(self, clock):
        tracker = BeatTracker(BufferConfig(), clock=clock)
        tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=70))
        clock.advance(-5.0)
        tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=70))
        first, second = tracker.beat_timestamps.snapshot()
        assert second >= first

    def test_clear(self, clock):
        tracker = BeatTracker(BufferConfig(), clock=clock)
        tracker.add(Reading(lead_i=0.0, lead_ii=0.0, device_bpm=70, device_irregularity=0.2))
        tracker.clear()
        assert tracker.beat_count == 0
        assert len(tracker.device_irregularity) == 0
