"""Session state machine: Disconnected -> Calibrating -> Monitoring."""

import logging
from typing import Callable, Dict, FrozenSet, List

from ..core.models import SessionState
from ..core.exceptions import SessionStateError

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState, SessionState, str], None]

_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.DISCONNECTED: frozenset({SessionState.CALIBRATING}),
    SessionState.CALIBRATING: frozenset({SessionState.MONITORING, SessionState.DISCONNECTED}),
    SessionState.MONITORING: frozenset({SessionState.DISCONNECTED}),
}


class SessionStateMachine:
    """Owns the session state. Other components only read it.

    Event methods return True when they caused a transition. Events that do
    not apply to the current state are ignored, except ``connected`` which
    raises when the session is already open.
    """

    def __init__(self):
        self._state = SessionState.DISCONNECTED
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state != SessionState.DISCONNECTED

    @property
    def is_monitoring(self) -> bool:
        return self._state == SessionState.MONITORING

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback receiving (old_state, new_state, reason)."""
        self._listeners.append(listener)

    def connected(self) -> bool:
        """Transport opened."""
        if self._state != SessionState.DISCONNECTED:
            raise SessionStateError(f"Cannot connect while {self._state.value}")
        return self._transition(SessionState.CALIBRATING, "transport opened")

    def calibration_elapsed(self) -> bool:
        """Calibration timer fired."""
        return self._end_calibration("calibration window elapsed")

    def device_bpm_received(self) -> bool:
        """Device reported a heart rate."""
        return self._end_calibration("device reported heart rate")

    def calibration_completed(self) -> bool:
        """Device announced calibration completion."""
        return self._end_calibration("device finished calibration")

    def start_monitoring(self) -> bool:
        """Operator skipped the rest of calibration."""
        return self._end_calibration("monitoring started manually")

    def disconnected(self, reason: str = "disconnect requested") -> bool:
        """Disconnect requested or transport failed."""
        if self._state == SessionState.DISCONNECTED:
            return False
        return self._transition(SessionState.DISCONNECTED, reason)

    def _end_calibration(self, reason: str) -> bool:
        if self._state != SessionState.CALIBRATING:
            return False
        return self._transition(SessionState.MONITORING, reason)

    def _transition(self, target: SessionState, reason: str) -> bool:
        if target not in _TRANSITIONS[self._state]:
            raise SessionStateError(f"Illegal transition {self._state.value} -> {target.value}")

        old, self._state = self._state, target
        logger.info("Session %s -> %s (%s)", old.value, target.value, reason)
        for listener in list(self._listeners):
            listener(old, target, reason)
        return True
