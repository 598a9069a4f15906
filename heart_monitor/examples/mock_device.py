#!/usr/bin/env python3
"""
Mock wearable ECG sensor.

Streams a synthetic two-lead ECG over a serial port in the device line
format, so the monitor can be exercised without hardware:

    Starting calibration...
    Baseline: 512
    Gain: 1.00
    Calibration Complete
    <leadI>,<leadII>                    (every sample)
    <leadI>,<leadII>,<bpm>,<irregularity> (on the sample of each R peak)

Usage:
    python -m heart_monitor.examples.mock_device --port /dev/ttyV1
    python -m heart_monitor.examples.mock_device --port COM6 --bpm 45 --jitter 0.2
"""

import argparse
import sys
import time
from typing import Iterator, List, Optional

import numpy as np
import serial

CALIBRATION_MESSAGES = [
    "Starting calibration...",
    "Baseline: 512",
    "Gain: 1.00",
    "Calibration Complete",
]


class SyntheticHeart:
    """Generates ECG-like samples and beat annotations."""

    def __init__(self, sample_rate: float = 125.0, heart_rate: float = 72.0,
                 jitter: float = 0.0, noise: float = 0.02, seed: Optional[int] = None):
        """
        Initialize synthetic heart.

        Args:
            sample_rate: Samples per second
            heart_rate: Mean heart rate in BPM
            jitter: Relative standard deviation of beat-to-beat intervals
            noise: Standard deviation of additive noise
            seed: Random seed for reproducible streams
        """
        if sample_rate <= 0 or heart_rate <= 0:
            raise ValueError("Sample rate and heart rate must be positive")
        self.sample_rate = sample_rate
        self.heart_rate = heart_rate
        self.jitter = jitter
        self.noise = noise
        self._rng = np.random.default_rng(seed)
        self._intervals: List[float] = []

    def _next_interval(self) -> float:
        """Seconds until the next beat."""
        mean = 60.0 / self.heart_rate
        interval = mean * (1.0 + self._rng.normal(0.0, self.jitter)) if self.jitter else mean
        return max(0.25, interval)

    def _irregularity(self) -> float:
        """Coefficient of variation of the last few intervals, as the firmware reports it."""
        recent = np.asarray(self._intervals[-8:])
        if recent.size < 2:
            return 0.0
        return float(np.std(recent) / np.mean(recent))

    @staticmethod
    def _waveform(phase: np.ndarray) -> np.ndarray:
        """P-QRS-T shape for time (s) since the R peak."""
        return (
            0.15 * np.exp(-((phase + 0.2) / 0.025) ** 2)
            - 0.15 * np.exp(-((phase + 0.03) / 0.01) ** 2)
            + 1.2 * np.exp(-(phase / 0.012) ** 2)
            - 0.25 * np.exp(-((phase - 0.03) / 0.01) ** 2)
            + 0.3 * np.exp(-((phase - 0.25) / 0.05) ** 2)
        )

    def beat_lines(self) -> Iterator[str]:
        """Lines for one beat, R peak annotated with BPM and irregularity."""
        interval = self._next_interval()
        self._intervals.append(interval)
        count = max(1, int(round(interval * self.sample_rate)))

        # R peak sits a third of the way into the beat
        t = np.arange(count) / self.sample_rate - interval / 3.0
        lead_ii = self._waveform(t) + self._rng.normal(0.0, self.noise, count)
        lead_i = 0.6 * self._waveform(t) + self._rng.normal(0.0, self.noise, count)
        peak = int(np.argmin(np.abs(t)))
        bpm = int(round(60.0 / interval))

        for i in range(count):
            if i == peak:
                yield f"{lead_i[i]:.3f},{lead_ii[i]:.3f},{bpm},{self._irregularity():.3f}"
            else:
                yield f"{lead_i[i]:.3f},{lead_ii[i]:.3f}"

    def lines(self, seconds: Optional[float] = None) -> Iterator[str]:
        """Stream of data lines, endless unless ``seconds`` is given."""
        limit = None if seconds is None else int(seconds * self.sample_rate)
        sent = 0
        while limit is None or sent < limit:
            for line in self.beat_lines():
                if limit is not None and sent >= limit:
                    return
                yield line
                sent += 1


class MockDevice:
    """Writes the synthetic stream to a serial port in real time."""

    def __init__(self, port: str, heart: SyntheticHeart, baudrate: int = 115200):
        self.port = port
        self.heart = heart
        self.baudrate = baudrate
        self.serial_conn = None
        self.running = False

    def connect(self) -> bool:
        """Connect to serial port."""
        try:
            self.serial_conn = serial.Serial(port=self.port, baudrate=self.baudrate, timeout=1.0)
            print(f"Connected to {self.port}")
            return True
        except serial.SerialException as e:
            print(f"Failed to connect to {self.port}: {e}")
            return False

    def disconnect(self):
        """Disconnect from serial port."""
        if self.serial_conn and self.serial_conn.is_open:
            self.serial_conn.close()
            print("Disconnected from serial port")

    def _send(self, line: str):
        self.serial_conn.write(f"{line}\r\n".encode("utf-8"))

    def start_transmission(self, calibrate: bool = True):
        """Send calibration messages, then samples at the configured rate."""
        if not self.serial_conn or not self.serial_conn.is_open:
            print("Serial port not connected!")
            return

        self.running = True
        print(f"Streaming at {self.heart.sample_rate} Hz, {self.heart.heart_rate} BPM. Press Ctrl+C to stop...")

        sample_interval = 1.0 / self.heart.sample_rate
        try:
            if calibrate:
                for message in CALIBRATION_MESSAGES:
                    self._send(message)
                    time.sleep(0.5)

            next_time = time.monotonic()
            for line in self.heart.lines():
                if not self.running:
                    break
                self._send(line)
                next_time += sample_interval
                sleep_time = next_time - time.monotonic()
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except KeyboardInterrupt:
            print("\nTransmission stopped by user")
        except serial.SerialException as e:
            print(f"Transmission error: {e}")
        finally:
            self.running = False


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Mock wearable ECG sensor")
    parser.add_argument("--port", required=True, help="Serial port (e.g., COM6, /dev/ttyV1)")
    parser.add_argument("--baudrate", type=int, default=115200, help="Baud rate")
    parser.add_argument("--sample-rate", type=float, default=125.0, help="Sample rate in Hz (default: 125)")
    parser.add_argument("--bpm", type=float, default=72.0, help="Mean heart rate (default: 72)")
    parser.add_argument("--jitter", type=float, default=0.02,
                        help="Relative beat-to-beat interval spread (default: 0.02)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--no-calibration", action="store_true", help="Skip calibration messages")

    args = parser.parse_args()

    heart = SyntheticHeart(
        sample_rate=args.sample_rate,
        heart_rate=args.bpm,
        jitter=args.jitter,
        seed=args.seed,
    )
    device = MockDevice(args.port, heart, baudrate=args.baudrate)

    if device.connect():
        try:
            device.start_transmission(calibrate=not args.no_calibration)
        finally:
            device.disconnect()
    else:
        print("Failed to connect to serial port")
        sys.exit(1)


if __name__ == "__main__":
    main()
