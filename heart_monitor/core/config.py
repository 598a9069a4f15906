"""Configuration management for the heart monitor."""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigurationError


class SerialConfig(BaseModel):
    """Serial transport configuration."""
    port: Optional[str] = Field(default=None, description="Serial port (e.g., COM5, /dev/ttyACM0)")
    baudrate: int = Field(default=115200, ge=9600, le=4000000, description="Baud rate")
    bytesize: int = Field(default=8, ge=5, le=8, description="Data bits")
    parity: str = Field(default="N", pattern="^[NOEMS]$", description="Parity")
    stopbits: float = Field(default=1.0, ge=1.0, le=2.0, description="Stop bits")
    read_size: int = Field(default=1024, gt=0, description="Maximum bytes per transport read")

    model_config = ConfigDict(validate_assignment=True)


class ProtocolConfig(BaseModel):
    """Line protocol configuration."""
    status_keywords: List[str] = Field(
        default_factory=lambda: ["Calibration", "Starting", "Baseline", "Gain"],
        description="Substrings that mark a device status line",
    )
    completion_keyword: str = Field(default="Complete", description="Status substring that ends calibration")
    field_delimiter: str = Field(default=",", min_length=1, description="Field separator")
    encoding: str = Field(default="utf-8", description="Stream text encoding")

    @field_validator('status_keywords')
    @classmethod
    def validate_status_keywords(cls, v):
        """Reject empty keywords, they would match every line."""
        if any(not keyword for keyword in v):
            raise ValueError("Status keywords cannot be empty")
        return v


class BufferConfig(BaseModel):
    """Ring buffer capacities."""
    sample_capacity: int = Field(default=1500, gt=0, description="Samples kept per lead (~12 s at 125 Hz)")
    beat_capacity: int = Field(default=50, gt=0, description="Beat timestamps kept")
    irregularity_capacity: int = Field(default=10, gt=0, description="Device irregularity values kept")


class RhythmConfig(BaseModel):
    """Rhythm irregularity estimation parameters."""
    device_window: int = Field(default=5, gt=0, description="Device irregularity values averaged")
    beat_window: int = Field(default=8, ge=2, description="Most recent beats used for interval variability")
    min_beats: int = Field(default=3, ge=2, description="Beats required before intervals are trusted")
    cv_gain: float = Field(default=3.0, gt=0, description="Gain mapping interval CV to irregularity")


class ScoringConfig(BaseModel):
    """Health index scoring constants."""
    default_heart_rate: int = Field(default=70, gt=0, description="Heart rate used before any BPM arrives")
    brady_severe_below: float = Field(default=50, description="HR below this scores severe bradycardia")
    brady_mild_below: float = Field(default=60, description="HR below this scores mild bradycardia")
    tachy_severe_above: float = Field(default=120, description="HR above this scores severe tachycardia")
    tachy_mild_above: float = Field(default=100, description="HR above this scores mild tachycardia")
    severe_points: int = Field(default=40, ge=0, le=100)
    mild_points: int = Field(default=20, ge=0, le=100)
    irregularity_points: int = Field(default=40, ge=0, le=100, description="Points at full irregularity")
    high_threshold: int = Field(default=70, ge=0, le=100)
    moderate_threshold: int = Field(default=35, ge=0, le=100)
    normal_description: str = "Heart rate and rhythm are within typical ranges."
    moderate_description: str = (
        "Moderate concern: some abnormal findings. Consider monitoring and consulting a clinician."
    )
    high_description: str = (
        "High concern: heart rate or rhythm suggest elevated risk. "
        "Seek medical attention if symptomatic."
    )
    insufficient_description: str = "Need at least 3 beats to assess rhythm."

    @model_validator(mode='after')
    def validate_bands(self):
        """Validate that the bands nest the way the scorer expects."""
        if self.brady_severe_below > self.brady_mild_below:
            raise ValueError("Severe bradycardia threshold must not exceed the mild one")
        if self.tachy_severe_above < self.tachy_mild_above:
            raise ValueError("Severe tachycardia threshold must not be below the mild one")
        if self.brady_mild_below > self.tachy_mild_above:
            raise ValueError("Bradycardia and tachycardia bands overlap")
        if self.moderate_threshold > self.high_threshold:
            raise ValueError("Moderate threshold must not exceed the high threshold")
        return self


class SessionConfig(BaseModel):
    """Session timing configuration."""
    calibration_seconds: float = Field(default=4.0, ge=0, description="Calibration window after connect")
    scoring_interval: float = Field(default=1.0, gt=0, description="Seconds between risk assessments")
    render_interval: float = Field(default=1 / 30, gt=0, description="Seconds between render callbacks")

    model_config = ConfigDict(validate_assignment=True)


class Config(BaseModel):
    """Main configuration for the heart monitor."""
    serial: SerialConfig = Field(default_factory=SerialConfig)
    protocol: ProtocolConfig = Field(default_factory=ProtocolConfig)
    buffers: BufferConfig = Field(default_factory=BufferConfig)
    rhythm: RhythmConfig = Field(default_factory=RhythmConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    # Advanced options
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    enable_logging: bool = Field(default=True)

    model_config = ConfigDict(validate_assignment=True)

    @model_validator(mode='after')
    def validate_windows(self):
        """Validate rhythm windows against buffer capacities."""
        if self.rhythm.beat_window > self.buffers.beat_capacity:
            raise ValueError("Rhythm beat window exceeds beat buffer capacity")
        if self.rhythm.device_window > self.buffers.irregularity_capacity:
            raise ValueError("Device irregularity window exceeds history capacity")
        if self.rhythm.min_beats > self.rhythm.beat_window:
            raise ValueError("Minimum beats cannot exceed the beat window")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary."""
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def create_default(cls, port: Optional[str] = None) -> 'Config':
        """Create default configuration for a given port."""
        return cls(serial=SerialConfig(port=port))
