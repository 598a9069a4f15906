"""Heart monitor examples module."""

from .real_time_monitor import RealTimeMonitor, main as monitor_main
from .mock_device import SyntheticHeart, MockDevice, main as mock_main

__all__ = [
    "RealTimeMonitor",
    "monitor_main",
    "SyntheticHeart",
    "MockDevice",
    "mock_main",
]
