"""Heart health index scoring."""

import math
from typing import Optional

from ..core.config import ScoringConfig
from ..core.models import HealthAssessment, RhythmEstimate, RiskLevel, ScoreBreakdown


class RiskScorer:
    """Combines heart rate and rhythm irregularity into a 0..100 score.

    Higher is worse. Bradycardia and tachycardia each add mild or severe
    points, irregularity adds up to ``irregularity_points``. This is a
    screening heuristic, not a diagnosis.
    """

    def __init__(self, config: ScoringConfig):
        self.config = config

    def assess(self, estimate: RhythmEstimate, heart_rate: Optional[int] = None) -> HealthAssessment:
        """
        Produce a complete assessment.

        Args:
            estimate: Current rhythm estimate
            heart_rate: Most recent device BPM, or None if none has arrived

        Returns:
            New assessment; InsufficientData when the estimate is insufficient
        """
        if not estimate.is_sufficient:
            return HealthAssessment.insufficient(self.config.insufficient_description)

        hr = heart_rate if heart_rate is not None else self.config.default_heart_rate
        breakdown = self.breakdown(hr, estimate.irregularity)
        score = max(0, min(100, breakdown.total))
        level = self.categorize(score)

        return HealthAssessment(
            level=level,
            score=score,
            description=self.describe(level),
            breakdown=breakdown,
            heart_rate=hr,
            irregularity=estimate.irregularity,
            rhythm_source=estimate.source,
        )

    def breakdown(self, heart_rate: float, irregularity: float) -> ScoreBreakdown:
        """Points per component for a heart rate and a 0..1 irregularity."""
        return ScoreBreakdown(
            brady_points=self.brady_points(heart_rate),
            tachy_points=self.tachy_points(heart_rate),
            irregularity_points=self.irregularity_points(irregularity),
        )

    def brady_points(self, heart_rate: float) -> int:
        if heart_rate < self.config.brady_severe_below:
            return self.config.severe_points
        if heart_rate < self.config.brady_mild_below:
            return self.config.mild_points
        return 0

    def tachy_points(self, heart_rate: float) -> int:
        if heart_rate > self.config.tachy_severe_above:
            return self.config.severe_points
        if heart_rate > self.config.tachy_mild_above:
            return self.config.mild_points
        return 0

    def irregularity_points(self, irregularity: float) -> int:
        """Scaled irregularity, rounded half up."""
        irregularity = min(1.0, max(0.0, irregularity))
        return int(math.floor(irregularity * self.config.irregularity_points + 0.5))

    def categorize(self, score: int) -> RiskLevel:
        if score >= self.config.high_threshold:
            return RiskLevel.HIGH
        if score >= self.config.moderate_threshold:
            return RiskLevel.MODERATE
        return RiskLevel.NORMAL

    def describe(self, level: RiskLevel) -> str:
        descriptions = {
            RiskLevel.NORMAL: self.config.normal_description,
            RiskLevel.MODERATE: self.config.moderate_description,
            RiskLevel.HIGH: self.config.high_description,
            RiskLevel.INSUFFICIENT_DATA: self.config.insufficient_description,
        }
        return descriptions[level]
