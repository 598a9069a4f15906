"""Buffering, rhythm and risk analysis for the heart monitor."""

from .buffers import RingBuffer, SampleStore, BeatTracker
from .rhythm import RhythmEstimator
from .risk import RiskScorer

__all__ = ["RingBuffer", "SampleStore", "BeatTracker", "RhythmEstimator", "RiskScorer"]
