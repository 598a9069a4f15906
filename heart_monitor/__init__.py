"""Heart Monitor - real-time ECG stream ingestion and heart health index."""

__version__ = "0.1.0"

# Core imports for easy access
from .core.config import (
    Config,
    SerialConfig,
    ProtocolConfig,
    BufferConfig,
    RhythmConfig,
    ScoringConfig,
    SessionConfig,
)
from .core.models import (
    Reading,
    ParsedLine,
    LineKind,
    RiskLevel,
    RhythmEstimate,
    ScoreBreakdown,
    HealthAssessment,
    SessionState,
    Diagnostics,
    MonitorSnapshot,
)
from .core.exceptions import (
    HeartMonitorError,
    ConfigurationError,
    TransportError,
    TransportUnavailableError,
    TransportOpenError,
    TransportReadError,
    ProtocolError,
    MalformedRecordError,
    SessionStateError,
)
from .core.log import setup_logging
from .data_acquisition.line_framer import LineFramer, iter_lines
from .data_acquisition.record_parser import RecordParser
from .data_acquisition.transport import Transport, SerialTransport
from .analysis.buffers import RingBuffer, SampleStore, BeatTracker
from .analysis.rhythm import RhythmEstimator
from .analysis.risk import RiskScorer
from .session.state_machine import SessionStateMachine
from .session.monitor import HeartMonitor

__all__ = [
    # Version info
    "__version__",

    # Configuration
    "Config",
    "SerialConfig",
    "ProtocolConfig",
    "BufferConfig",
    "RhythmConfig",
    "ScoringConfig",
    "SessionConfig",
    "setup_logging",

    # Data models
    "Reading",
    "ParsedLine",
    "LineKind",
    "RiskLevel",
    "RhythmEstimate",
    "ScoreBreakdown",
    "HealthAssessment",
    "SessionState",
    "Diagnostics",
    "MonitorSnapshot",

    # Exceptions
    "HeartMonitorError",
    "ConfigurationError",
    "TransportError",
    "TransportUnavailableError",
    "TransportOpenError",
    "TransportReadError",
    "ProtocolError",
    "MalformedRecordError",
    "SessionStateError",

    # Pipeline components
    "LineFramer",
    "iter_lines",
    "RecordParser",
    "Transport",
    "SerialTransport",
    "RingBuffer",
    "SampleStore",
    "BeatTracker",
    "RhythmEstimator",
    "RiskScorer",
    "SessionStateMachine",
    "HeartMonitor",
]
