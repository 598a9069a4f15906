"""Data acquisition module for the heart monitor."""

from .line_framer import LineFramer, iter_lines
from .record_parser import RecordParser
from .transport import Transport, SerialTransport, available_ports

__all__ = ["LineFramer", "iter_lines", "RecordParser", "Transport", "SerialTransport", "available_ports"]
