"""Rhythm irregularity estimation."""

from typing import Sequence

import numpy as np

from ..core.config import RhythmConfig
from ..core.models import RhythmEstimate, RhythmSource
from .buffers import BeatTracker


class RhythmEstimator:
    """Derives a 0..1 irregularity figure from the beat tracker.

    Device-reported irregularity wins when there is any. Otherwise the
    coefficient of variation of recent inter-beat intervals is scaled by
    ``cv_gain`` and capped at 1.
    """

    def __init__(self, config: RhythmConfig):
        self.config = config

    def estimate(self, beats: BeatTracker) -> RhythmEstimate:
        """
        Estimate irregularity from the current buffer contents.

        Args:
            beats: Beat tracker owned by the session

        Returns:
            Estimate with ``irregularity`` None when there are too few beats
        """
        beat_count = beats.beat_count
        device_values = beats.device_irregularity.latest(self.config.device_window)
        if device_values:
            return RhythmEstimate(
                irregularity=self.from_device(device_values),
                source=RhythmSource.DEVICE,
                beat_count=beat_count,
            )

        if beat_count < self.config.min_beats:
            return RhythmEstimate(beat_count=beat_count)

        timestamps = beats.beat_timestamps.latest(self.config.beat_window)
        return RhythmEstimate(
            irregularity=self.from_timestamps(timestamps),
            source=RhythmSource.INTERVALS,
            beat_count=beat_count,
        )

    @staticmethod
    def from_device(values: Sequence[float]) -> float:
        """Mean of device irregularity values, clamped to [0, 1]."""
        return float(np.clip(np.mean(values), 0.0, 1.0))

    def from_timestamps(self, timestamps: Sequence[float]) -> float:
        """Scaled coefficient of variation of the inter-beat intervals."""
        intervals = np.diff(np.asarray(timestamps, dtype=np.float64))
        if intervals.size == 0:
            return 0.0
        mean = float(np.mean(intervals))
        # Population standard deviation
        sd = float(np.std(intervals))
        cv = sd / mean if mean > 0 else 0.0
        return min(1.0, cv * self.config.cv_gain)
