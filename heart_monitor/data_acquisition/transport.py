"""Device transports for the heart monitor."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import serial
import serial_asyncio
from serial.tools import list_ports

from ..core.config import SerialConfig
from ..core.exceptions import (
    TransportOpenError,
    TransportReadError,
    TransportUnavailableError,
)

logger = logging.getLogger(__name__)


class Transport(ABC):
    """A byte stream from the sensor that can be opened and closed.

    ``read`` returns empty bytes once the stream has ended.
    """

    @abstractmethod
    async def open(self) -> None:
        """Open the stream."""

    @abstractmethod
    async def read(self) -> bytes:
        """Wait for the next chunk."""

    @abstractmethod
    async def close(self) -> None:
        """Close the stream. Safe to call more than once."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the stream is open."""


class SerialTransport(Transport):
    """Serial port transport built on pyserial-asyncio."""

    def __init__(self, config: SerialConfig):
        """
        Initialize serial transport.

        Args:
            config: Serial configuration
        """
        self.config = config
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    async def open(self) -> None:
        """Open the serial port at the configured baud rate."""
        if not self.config.port:
            raise TransportUnavailableError("No serial port configured")

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self.config.port,
                baudrate=self.config.baudrate,
                bytesize=self.config.bytesize,
                parity=self.config.parity,
                stopbits=self.config.stopbits,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            raise TransportOpenError(f"Failed to open {self.config.port}: {e}") from e

        logger.info("Opened %s at %d baud", self.config.port, self.config.baudrate)

    async def read(self) -> bytes:
        """Wait for the next chunk from the port."""
        if self._reader is None:
            raise TransportReadError("Serial port is not open")
        try:
            return await self._reader.read(self.config.read_size)
        except (serial.SerialException, OSError) as e:
            raise TransportReadError(f"Serial read failed: {e}") from e

    async def close(self) -> None:
        """Close the serial port."""
        writer, self._writer, self._reader = self._writer, None, None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error while closing %s: %s", self.config.port, e)
        logger.info("Closed %s", self.config.port)

    @property
    def is_open(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()


def available_ports() -> List[str]:
    """List serial ports visible on this machine."""
    return sorted(port.device for port in list_ports.comports())
