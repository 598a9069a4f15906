#!/usr/bin/env python3
"""Real-time heart monitor console from a wearable ECG over a serial port."""

import asyncio
import signal
import sys

from ..core.config import Config
from ..core.exceptions import HeartMonitorError
from ..core.log import setup_logging
from ..core.models import HealthAssessment, SessionState
from ..data_acquisition.transport import available_ports
from ..session.monitor import HeartMonitor


class RealTimeMonitor:
    """Console front-end printing state changes and the heart health index."""

    def __init__(self, config: Config):
        """
        Initialize real-time monitor.

        Args:
            config: Configuration object
        """
        self.config = config
        self.monitor = HeartMonitor(config)
        self.running = False

        # Setup signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        print(f"\nReceived signal {signum}. Shutting down gracefully...")
        self.running = False

    async def start(self):
        """Connect and print assessments until stopped or the device goes away."""
        print("Starting Heart Monitor...")
        print(f"Port: {self.config.serial.port}")
        print(f"Baudrate: {self.config.serial.baudrate}")
        print(f"Calibration: {self.config.session.calibration_seconds:.1f} s")
        print("-" * 50)

        self.monitor.set_state_callback(self._on_state)
        self.monitor.set_status_line_callback(self._on_status_line)
        self.monitor.set_assessment_callback(self._on_assessment)
        self.monitor.set_error_callback(self._on_error)

        await self.monitor.connect()

        self.running = True
        while self.running and self.monitor.state != SessionState.DISCONNECTED:
            await asyncio.sleep(0.5)

    def _on_state(self, old: SessionState, new: SessionState, reason: str):
        print(f"[{new.value}] {reason}")

    def _on_status_line(self, line: str):
        print(f"Device: {line}")

    def _on_error(self, error: Exception):
        print(f"Transport error: {error}")

    def _on_assessment(self, assessment: HealthAssessment):
        snapshot = self.monitor.snapshot()
        bpm = snapshot.heart_rate if snapshot.heart_rate is not None else "--"
        marker = "" if snapshot.assessment_valid else " (provisional)"
        breakdown = assessment.breakdown
        print(f"HR: {bpm} BPM | Index: {assessment.score:3d} {assessment.level.value}{marker} | "
              f"Brady {breakdown.brady_points} Tachy {breakdown.tachy_points} "
              f"Irregularity {breakdown.irregularity_points} | "
              f"Samples: {snapshot.sample_count}")

    async def stop(self):
        """Stop the monitoring system."""
        print("Stopping heart monitor...")
        self.running = False
        await self.monitor.disconnect()
        print("Heart monitor stopped.")


async def main():
    """Main function."""
    import argparse

    parser = argparse.ArgumentParser(description="Real-time Heart Monitor")
    parser.add_argument("--port", help="Serial port (e.g., COM5, /dev/ttyACM0)")
    parser.add_argument("--baudrate", type=int, default=115200, help="Baud rate")
    parser.add_argument("--calibration", type=float, default=4.0, help="Calibration window in seconds")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Log level")
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")

    args = parser.parse_args()

    if args.list_ports:
        ports = available_ports()
        print("Available serial ports:" if ports else "No serial ports found.")
        for port in ports:
            print(f"  {port}")
        return

    monitor = None
    try:
        config = Config.from_dict({
            "serial": {"port": args.port, "baudrate": args.baudrate},
            "session": {"calibration_seconds": args.calibration},
            "log_level": args.log_level,
        })
        setup_logging(config)

        monitor = RealTimeMonitor(config)
        await monitor.start()

    except HeartMonitorError as e:
        print(f"Heart monitor failed: {e}")
        sys.exit(1)
    finally:
        if monitor is not None:
            await monitor.stop()


def main_sync():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nProgram stopped.")


if __name__ == "__main__":
    main_sync()
