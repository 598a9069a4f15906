#!/usr/bin/env python3
"""
Live ECG waveform view.

Draws Lead II and Lead I from monitor snapshots with matplotlib, together
with the heart rate and the heart health index.

Usage:
    python -m heart_monitor.examples.live_waveform --port /dev/ttyACM0
"""

import argparse
import asyncio
import sys

import matplotlib.pyplot as plt
import numpy as np

from ..core.config import Config
from ..core.exceptions import HeartMonitorError
from ..core.log import setup_logging
from ..core.models import MonitorSnapshot, RiskLevel, SessionState
from ..session.monitor import HeartMonitor

LEVEL_COLORS = {
    RiskLevel.NORMAL: "#7ef77e",
    RiskLevel.MODERATE: "#ffb020",
    RiskLevel.HIGH: "#ff6b6b",
    RiskLevel.INSUFFICIENT_DATA: "#888888",
}


class LiveWaveform:
    """Matplotlib window redrawn from snapshots; never touches the monitor."""

    def __init__(self, sample_capacity: int, y_range: float = 2.0):
        """
        Initialize the plot window.

        Args:
            sample_capacity: Samples per lead shown across the x axis
            y_range: Half-height of the voltage axis
        """
        plt.ion()
        self.fig, (self.ax_ii, self.ax_i) = plt.subplots(2, 1, figsize=(12, 6), sharex=True)
        self.fig.patch.set_facecolor("#0d1218")

        x = np.arange(sample_capacity)
        self.line_ii, = self.ax_ii.plot(x, np.full(sample_capacity, np.nan), color="#ff4444", linewidth=1.5)
        self.line_i, = self.ax_i.plot(x, np.full(sample_capacity, np.nan), color="#4ea1ff", linewidth=1.0)

        for ax, label in ((self.ax_ii, "Lead II"), (self.ax_i, "Lead I")):
            ax.set_facecolor("#0d1218")
            ax.set_ylim(-y_range, y_range)
            ax.set_xlim(0, sample_capacity - 1)
            ax.set_ylabel(label, color="#cccccc")
            ax.grid(True, color="#1a2530")
            ax.tick_params(colors="#888888")

        self.title = self.fig.suptitle("Waiting for ECG data...", color="#eeeeee")
        self.fig.show()

    def update(self, snapshot: MonitorSnapshot):
        """Redraw from a snapshot."""
        self._set_lead(self.line_ii, snapshot.lead_ii_array())
        self._set_lead(self.line_i, snapshot.lead_i_array())

        assessment = snapshot.assessment
        if snapshot.state == SessionState.CALIBRATING:
            title = "Calibrating ECG... keep sensor stable"
        elif snapshot.state == SessionState.DISCONNECTED:
            title = "Disconnected"
        else:
            bpm = snapshot.heart_rate if snapshot.heart_rate is not None else "--"
            title = f"{bpm} BPM  |  Heart Health Index {assessment.score} ({assessment.level.value})"
        self.title.set_text(title)
        self.title.set_color(LEVEL_COLORS[assessment.level] if snapshot.assessment_valid else "#eeeeee")

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    @staticmethod
    def _set_lead(line, samples: np.ndarray):
        # Right-align so the newest sample is at the right edge
        ydata = np.full(len(line.get_xdata()), np.nan)
        if samples.size:
            ydata[-samples.size:] = samples[-ydata.size:]
        line.set_ydata(ydata)

    @property
    def is_open(self) -> bool:
        return plt.fignum_exists(self.fig.number)


async def run(config: Config):
    """Show the live view until the window closes or the device goes away."""
    monitor = HeartMonitor(config)
    view = LiveWaveform(config.buffers.sample_capacity)
    monitor.set_render_callback(view.update)

    await monitor.connect()
    try:
        while view.is_open and monitor.state != SessionState.DISCONNECTED:
            await asyncio.sleep(0.25)
    finally:
        await monitor.disconnect()


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Live ECG waveform view")
    parser.add_argument("--port", required=True, help="Serial port (e.g., COM5, /dev/ttyACM0)")
    parser.add_argument("--baudrate", type=int, default=115200, help="Baud rate")
    parser.add_argument("--fps", type=float, default=20.0, help="Redraw rate (default: 20)")

    args = parser.parse_args()
    if args.fps <= 0:
        parser.error("--fps must be positive")

    try:
        config = Config.from_dict({
            "serial": {"port": args.port, "baudrate": args.baudrate},
            "session": {"render_interval": 1.0 / args.fps},
        })
        setup_logging(config)
        asyncio.run(run(config))
    except KeyboardInterrupt:
        print("\nProgram stopped.")
    except HeartMonitorError as e:
        print(f"Live view failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
