"""Session control for the heart monitor."""

from .state_machine import SessionStateMachine
from .monitor import HeartMonitor

__all__ = ["SessionStateMachine", "HeartMonitor"]
