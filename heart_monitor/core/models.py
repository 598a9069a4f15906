"""Data models for the heart monitor."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
import numpy as np


class Reading(BaseModel):
    """One data line from the device."""
    lead_i: float = Field(..., description="Lead I voltage")
    lead_ii: float = Field(..., description="Lead II voltage")
    device_bpm: Optional[int] = Field(default=None, gt=0, description="Heart rate reported by the device")
    device_irregularity: Optional[float] = Field(default=None, ge=0, description="Irregularity reported by the device")

    model_config = ConfigDict(frozen=True)

    @property
    def has_beat(self) -> bool:
        """Whether the device reported a heart rate with this reading."""
        return self.device_bpm is not None


class LineKind(str, Enum):
    """Classification of a single stream line."""
    DATA = "data"
    STATUS = "status"
    MALFORMED = "malformed"


class ParsedLine(BaseModel):
    """Result of classifying one line."""
    kind: LineKind
    raw: str = Field(default="", description="Line text after trimming")
    reading: Optional[Reading] = None
    calibration_complete: bool = Field(default=False, description="Status line announced end of calibration")

    model_config = ConfigDict(frozen=True)

    @property
    def is_data(self) -> bool:
        return self.kind == LineKind.DATA

    @property
    def is_status(self) -> bool:
        return self.kind == LineKind.STATUS


class RiskLevel(str, Enum):
    """Health index categories."""
    INSUFFICIENT_DATA = "Insufficient data"
    NORMAL = "Normal"
    MODERATE = "Moderate"
    HIGH = "High"


class RhythmSource(str, Enum):
    """Where an irregularity estimate came from."""
    DEVICE = "device"
    INTERVALS = "intervals"


class RhythmEstimate(BaseModel):
    """Irregularity estimate; ``irregularity`` is None when data is insufficient."""
    irregularity: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    source: Optional[RhythmSource] = None
    beat_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_sufficient(self) -> bool:
        return self.irregularity is not None


class ScoreBreakdown(BaseModel):
    """Points contributed by each part of the health index."""
    brady_points: int = Field(default=0, ge=0, le=100)
    tachy_points: int = Field(default=0, ge=0, le=100)
    irregularity_points: int = Field(default=0, ge=0, le=100)

    model_config = ConfigDict(frozen=True)

    @property
    def heart_rate_points(self) -> int:
        return self.brady_points + self.tachy_points

    @property
    def total(self) -> int:
        """Sum of all points before clamping."""
        return self.brady_points + self.tachy_points + self.irregularity_points


class HealthAssessment(BaseModel):
    """A complete health index result. Always replaced as a whole."""
    level: RiskLevel
    score: int = Field(..., ge=0, le=100)
    description: str
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    heart_rate: Optional[int] = Field(default=None, description="Heart rate the score was computed from")
    irregularity: Optional[float] = Field(default=None, description="Irregularity the score was computed from")
    rhythm_source: Optional[RhythmSource] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_score(self):
        """Validate that the score is the clamped sum of the breakdown."""
        if self.score != max(0, min(100, self.breakdown.total)):
            raise ValueError("Score must equal the clamped breakdown total")
        return self

    @classmethod
    def insufficient(cls, description: str) -> 'HealthAssessment':
        """Assessment used until there is enough rhythm data."""
        return cls(level=RiskLevel.INSUFFICIENT_DATA, score=0, description=description)


class SessionState(str, Enum):
    """Monitor session states."""
    DISCONNECTED = "Disconnected"
    CALIBRATING = "Calibrating"
    MONITORING = "Monitoring"


class Diagnostics(BaseModel):
    """Most recent raw stream information for debugging displays."""
    last_line: str = ""
    last_bpm: Optional[int] = None
    last_irregularity: Optional[float] = None
    lines_received: int = Field(default=0, ge=0)
    readings_accepted: int = Field(default=0, ge=0)
    status_lines: int = Field(default=0, ge=0)

    model_config = ConfigDict(validate_assignment=True)


class MonitorSnapshot(BaseModel):
    """Read-only view of the monitor handed to presentation code."""
    state: SessionState
    lead_i: List[float] = Field(default_factory=list, description="Lead I samples, oldest first")
    lead_ii: List[float] = Field(default_factory=list, description="Lead II samples, oldest first")
    assessment: HealthAssessment
    assessment_valid: bool = Field(default=False, description="Whether the assessment may be displayed as final")
    heart_rate: Optional[int] = None
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)

    model_config = ConfigDict(frozen=True)

    @property
    def sample_count(self) -> int:
        return len(self.lead_ii)

    def lead_ii_array(self) -> np.ndarray:
        """Lead II samples as a numpy array for plotting."""
        return np.asarray(self.lead_ii, dtype=np.float64)

    def lead_i_array(self) -> np.ndarray:
        """Lead I samples as a numpy array for plotting."""
        return np.asarray(self.lead_i, dtype=np.float64)
