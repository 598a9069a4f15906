"""Tests for session state transitions."""

import pytest

from heart_monitor.core.exceptions import SessionStateError
from heart_monitor.core.models import SessionState
from heart_monitor.session.state_machine import SessionStateMachine


@pytest.fixture
def machine() -> SessionStateMachine:
    return SessionStateMachine()


@pytest.fixture
def calibrating(machine) -> SessionStateMachine:
    machine.connected()
    return machine


class TestTransitions:

    def test_initial_state(self, machine):
        assert machine.state == SessionState.DISCONNECTED
        assert not machine.is_connected

    def test_connect_starts_calibration(self, machine):
        assert machine.connected()
        assert machine.state == SessionState.CALIBRATING

    @pytest.mark.parametrize("event", [
        "calibration_elapsed",
        "device_bpm_received",
        "calibration_completed",
        "start_monitoring",
    ])
    def test_every_calibration_exit(self, calibrating, event):
        assert getattr(calibrating, event)()
        assert calibrating.state == SessionState.MONITORING

    def test_disconnect_from_calibrating(self, calibrating):
        assert calibrating.disconnected()
        assert calibrating.state == SessionState.DISCONNECTED

    def test_disconnect_from_monitoring(self, calibrating):
        calibrating.calibration_elapsed()
        assert calibrating.disconnected("transport failure")
        assert calibrating.state == SessionState.DISCONNECTED

    def test_reconnect_calibrates_again(self, calibrating):
        calibrating.calibration_elapsed()
        calibrating.disconnected()
        calibrating.connected()
        assert calibrating.state == SessionState.CALIBRATING


class TestIgnoredEvents:

    def test_late_timer_after_disconnect_is_ignored(self, calibrating):
        calibrating.disconnected()
        assert not calibrating.calibration_elapsed()
        assert calibrating.state == SessionState.DISCONNECTED

    def test_bpm_while_monitoring_is_ignored(self, calibrating):
        calibrating.device_bpm_received()
        assert not calibrating.device_bpm_received()
        assert calibrating.state == SessionState.MONITORING

    def test_disconnect_while_disconnected_is_ignored(self, machine):
        assert not machine.disconnected()

    def test_connect_twice_raises(self, calibrating):
        with pytest.raises(SessionStateError):
            calibrating.connected()


class TestListeners:

    def test_listener_receives_each_transition(self, machine):
        seen = []
        machine.add_listener(lambda old, new, reason: seen.append((old, new, reason)))

        machine.connected()
        machine.calibration_completed()
        machine.disconnected("disconnect requested")

        assert seen == [
            (SessionState.DISCONNECTED, SessionState.CALIBRATING, "transport opened"),
            (SessionState.CALIBRATING, SessionState.MONITORING, "device finished calibration"),
            (SessionState.MONITORING, SessionState.DISCONNECTED, "disconnect requested"),
        ]

    def test_ignored_events_do_not_notify(self, machine):
        seen = []
        machine.add_listener(lambda *args: seen.append(args))
        machine.calibration_elapsed()
        assert seen == []
