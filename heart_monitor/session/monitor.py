"""Heart monitor session: ingestion, scoring and render tasks."""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from ..core.config import Config
from ..core.models import (
    Diagnostics,
    HealthAssessment,
    MonitorSnapshot,
    ParsedLine,
    Reading,
    SessionState,
)
from ..core.exceptions import TransportError
from ..analysis.buffers import BeatTracker, SampleStore
from ..analysis.rhythm import RhythmEstimator
from ..analysis.risk import RiskScorer
from ..data_acquisition.line_framer import LineFramer
from ..data_acquisition.record_parser import RecordParser
from ..data_acquisition.transport import SerialTransport, Transport
from .state_machine import SessionStateMachine

logger = logging.getLogger(__name__)


class HeartMonitor:
    """Owns one device session and everything derived from its stream.

    While connected three tasks share the buffers: ingestion drains the
    transport, scoring recomputes the health index on a fixed cadence and
    render hands snapshots to the presentation layer. All run on one event
    loop, so each buffer update or read completes without interleaving.
    """

    def __init__(self, config: Config, transport: Optional[Transport] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize heart monitor.

        Args:
            config: Configuration object
            transport: Device transport; a serial transport on the configured port by default
            clock: Seconds clock used to timestamp beats
        """
        self.config = config
        self.transport = transport or SerialTransport(config.serial)

        self.framer = LineFramer(encoding=config.protocol.encoding)
        self.parser = RecordParser(config)
        self.samples = SampleStore(config.buffers)
        self.beats = BeatTracker(config.buffers, clock=clock)
        self.estimator = RhythmEstimator(config.rhythm)
        self.scorer = RiskScorer(config.scoring)

        self._state_machine = SessionStateMachine()
        self._state_machine.add_listener(self._on_state_change)

        self._last_bpm: Optional[int] = None
        self._diagnostics = Diagnostics()
        self._assessment = HealthAssessment.insufficient(config.scoring.insufficient_description)

        self._ingest_task: Optional[asyncio.Task] = None
        self._tasks: List[asyncio.Task] = []

        # Callbacks
        self._render_callback: Optional[Callable[[MonitorSnapshot], None]] = None
        self._state_callback: Optional[Callable[[SessionState, SessionState, str], None]] = None
        self._status_line_callback: Optional[Callable[[str], None]] = None
        self._assessment_callback: Optional[Callable[[HealthAssessment], None]] = None
        self._error_callback: Optional[Callable[[Exception], None]] = None

    def set_render_callback(self, callback: Callable[[MonitorSnapshot], None]) -> None:
        """Set callback receiving a snapshot on every render tick."""
        self._render_callback = callback

    def set_state_callback(self, callback: Callable[[SessionState, SessionState, str], None]) -> None:
        """Set callback for session state changes."""
        self._state_callback = callback

    def set_status_line_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for device status lines."""
        self._status_line_callback = callback

    def set_assessment_callback(self, callback: Callable[[HealthAssessment], None]) -> None:
        """Set callback for each new health assessment."""
        self._assessment_callback = callback

    def set_error_callback(self, callback: Callable[[Exception], None]) -> None:
        """Set callback for transport failures while streaming."""
        self._error_callback = callback

    async def connect(self) -> None:
        """
        Open the transport and start a new session.

        Raises:
            SessionStateError: If a session is already open
            TransportUnavailableError: If no transport can be used
            TransportOpenError: If the device rejects the connection
        """
        if self._state_machine.is_connected:
            # Raises SessionStateError with the current state
            self._state_machine.connected()

        try:
            await self.transport.open()
        except TransportError as e:
            logger.error("Connect failed: %s", e)
            raise

        self._state_machine.connected()

        self._ingest_task = asyncio.create_task(self._ingest_loop(), name="heart-monitor-ingest")
        self._tasks = [
            self._ingest_task,
            asyncio.create_task(self._scoring_loop(), name="heart-monitor-scoring"),
            asyncio.create_task(self._render_loop(), name="heart-monitor-render"),
            asyncio.create_task(self._calibration_timer(), name="heart-monitor-calibration"),
        ]

    async def disconnect(self, reason: str = "disconnect requested") -> None:
        """Stop all session tasks, close the transport and clear every buffer."""
        if not self._state_machine.is_connected:
            return

        current = asyncio.current_task()
        pending = [task for task in self._tasks if task is not current and not task.done()]
        for task in pending:
            task.cancel()
        self._tasks = []
        self._ingest_task = None

        # Clears buffers before any other task can run again
        self._state_machine.disconnected(reason)

        try:
            await asyncio.gather(*pending, return_exceptions=True)
        finally:
            await self.transport.close()

    def start_monitoring(self) -> bool:
        """Leave calibration now instead of waiting for the timer."""
        return self._state_machine.start_monitoring()

    async def wait(self) -> None:
        """Wait until the stream ends or the session is disconnected."""
        task = self._ingest_task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def __aenter__(self) -> 'HeartMonitor':
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    def feed(self, chunk) -> List[ParsedLine]:
        """Frame a raw chunk and ingest every line it completes."""
        return [self.ingest_line(line) for line in self.framer.feed(chunk)]

    def ingest_line(self, line: str) -> ParsedLine:
        """Parse one line and apply it to the buffers and session state."""
        parsed = self.parser.parse(line)
        self._diagnostics.lines_received += 1
        self._diagnostics.last_line = parsed.raw

        if parsed.is_status:
            self._handle_status_line(parsed)
        elif parsed.is_data:
            self._handle_reading(parsed.reading)
        return parsed

    def refresh_assessment(self) -> HealthAssessment:
        """Recompute the health index from current buffer contents."""
        estimate = self.estimator.estimate(self.beats)
        assessment = self.scorer.assess(estimate, self._last_bpm)
        self._assessment = assessment
        self._notify(self._assessment_callback, assessment)
        return assessment

    def snapshot(self) -> MonitorSnapshot:
        """Read-only copy of everything the presentation layer shows."""
        return MonitorSnapshot(
            state=self.state,
            lead_i=self.samples.lead_i.snapshot(),
            lead_ii=self.samples.lead_ii.snapshot(),
            assessment=self._assessment,
            assessment_valid=self.assessment_valid,
            heart_rate=self._last_bpm,
            diagnostics=self._diagnostics.model_copy(),
        )

    def _handle_status_line(self, parsed: ParsedLine) -> None:
        self._diagnostics.status_lines += 1
        logger.info("Device: %s", parsed.raw)
        self._notify(self._status_line_callback, parsed.raw)
        if parsed.calibration_complete:
            self._state_machine.calibration_completed()

    def _handle_reading(self, reading: Reading) -> None:
        self.samples.add(reading)
        self._diagnostics.readings_accepted += 1

        if not self.beats.add(reading):
            return

        # Calibration-phase BPM is trusted like any other
        self._last_bpm = reading.device_bpm
        self._diagnostics.last_bpm = reading.device_bpm
        if reading.device_irregularity is not None:
            self._diagnostics.last_irregularity = reading.device_irregularity
        self._state_machine.device_bpm_received()

    def _on_state_change(self, old: SessionState, new: SessionState, reason: str) -> None:
        if new in (SessionState.CALIBRATING, SessionState.DISCONNECTED):
            self._reset_session_data()
        self._notify(self._state_callback, old, new, reason)

    def _notify(self, callback: Optional[Callable[..., None]], *args) -> None:
        """Invoke a consumer callback; a failing callback never stops a session task."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Callback %s failed", getattr(callback, "__name__", repr(callback)))

    def _reset_session_data(self) -> None:
        self.framer.reset()
        self.samples.clear()
        self.beats.clear()
        self._last_bpm = None
        self._diagnostics = Diagnostics()
        self._assessment = HealthAssessment.insufficient(self.config.scoring.insufficient_description)

    async def _ingest_loop(self) -> None:
        """Drain the transport until the stream ends or fails."""
        try:
            while True:
                chunk = await self.transport.read()
                if not chunk:
                    last = self.framer.flush()
                    if last is not None:
                        self.ingest_line(last)
                    logger.info("Device stream ended")
                    return
                self.feed(chunk)
        except TransportError as e:
            logger.error("Transport failure: %s", e)
            self._notify(self._error_callback, e)
            await self.disconnect("transport failure")

    async def _scoring_loop(self) -> None:
        interval = self.config.session.scoring_interval
        while True:
            await asyncio.sleep(interval)
            self.refresh_assessment()

    async def _render_loop(self) -> None:
        interval = self.config.session.render_interval
        while True:
            if self._render_callback:
                self._notify(self._render_callback, self.snapshot())
            await asyncio.sleep(interval)

    async def _calibration_timer(self) -> None:
        await asyncio.sleep(self.config.session.calibration_seconds)
        self._state_machine.calibration_elapsed()

    @property
    def state(self) -> SessionState:
        return self._state_machine.state

    @property
    def assessment(self) -> HealthAssessment:
        return self._assessment

    @property
    def assessment_valid(self) -> bool:
        """Only a monitoring-phase assessment is final."""
        return self._state_machine.is_monitoring

    @property
    def heart_rate(self) -> Optional[int]:
        """Most recent device BPM in this session."""
        return self._last_bpm

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics.model_copy()
