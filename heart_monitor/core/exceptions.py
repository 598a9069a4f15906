"""Custom exceptions for the heart monitor."""


class HeartMonitorError(Exception):
    """Base exception for the heart monitor."""
    pass


class ConfigurationError(HeartMonitorError):
    """Raised when there's a configuration error."""
    pass


class TransportError(HeartMonitorError):
    """Raised when the device transport fails."""
    pass


class TransportUnavailableError(TransportError):
    """Raised when no transport can be used at all (no port, no serial support)."""
    pass


class TransportOpenError(TransportError):
    """Raised when the device is busy or rejects the connection."""
    pass


class TransportReadError(TransportError):
    """Raised when the transport fails while streaming."""
    pass


class ProtocolError(HeartMonitorError):
    """Raised when there's a protocol violation."""
    pass


class MalformedRecordError(ProtocolError):
    """Raised when a data line cannot be parsed."""
    pass


class SessionStateError(HeartMonitorError):
    """Raised when a session transition is requested from the wrong state."""
    pass
