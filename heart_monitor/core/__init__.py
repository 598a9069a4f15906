"""Core module for the heart monitor."""

from .config import Config
from .models import Reading, HealthAssessment, SessionState
from .exceptions import HeartMonitorError, ConfigurationError, ProtocolError, TransportError
from .log import setup_logging

__all__ = [
    "Config", "Reading", "HealthAssessment", "SessionState",
    "HeartMonitorError", "ConfigurationError", "ProtocolError", "TransportError",
    "setup_logging",
]
