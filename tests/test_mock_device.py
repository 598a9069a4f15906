"""Tests for the synthetic device stream used by the mock sensor."""

import pytest

from heart_monitor.core.models import LineKind, RiskLevel
from heart_monitor.data_acquisition.record_parser import RecordParser
from heart_monitor.examples.mock_device import CALIBRATION_MESSAGES, SyntheticHeart
from heart_monitor.session.monitor import HeartMonitor


class TestSyntheticHeart:

    def test_line_count_matches_duration(self):
        heart = SyntheticHeart(sample_rate=125.0, seed=1)
        assert len(list(heart.lines(seconds=2.0))) == 250

    def test_every_line_parses(self, config):
        parser = RecordParser(config)
        heart = SyntheticHeart(seed=2)
        kinds = {parser.parse(line).kind for line in heart.lines(seconds=5.0)}
        assert kinds == {LineKind.DATA}

    def test_one_annotated_sample_per_beat(self, config):
        parser = RecordParser(config)
        heart = SyntheticHeart(sample_rate=125.0, heart_rate=60.0, seed=3)
        readings = [parser.parse(line).reading for line in heart.lines(seconds=10.0)]
        beats = [r for r in readings if r.device_bpm is not None]
        assert len(beats) == 10
        assert all(r.device_bpm == 60 for r in beats)
        assert all(r.device_irregularity is not None for r in beats)

    def test_calibration_messages_are_status_lines(self, config):
        parser = RecordParser(config)
        parsed = [parser.parse(message) for message in CALIBRATION_MESSAGES]
        assert all(p.is_status for p in parsed)
        assert parsed[-1].calibration_complete

    def test_rejects_non_positive_rates(self):
        with pytest.raises(ValueError):
            SyntheticHeart(heart_rate=0)

    def test_slow_stream_scores_bradycardia(self, fast_config, clock):
        monitor = HeartMonitor(fast_config, clock=clock)
        heart = SyntheticHeart(sample_rate=125.0, heart_rate=45.0, seed=4)
        for line in heart.lines(seconds=15.0):
            clock.advance(1 / 125.0)
            monitor.ingest_line(line)

        assessment = monitor.refresh_assessment()
        assert assessment.breakdown.brady_points == 40
        assert assessment.level in (RiskLevel.MODERATE, RiskLevel.HIGH)
