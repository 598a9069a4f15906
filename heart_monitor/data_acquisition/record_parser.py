"""Record parser for the device line protocol."""

import logging
import math
from typing import List, Optional, Tuple

from ..core.config import Config
from ..core.models import LineKind, ParsedLine, Reading
from ..core.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)


class RecordParser:
    """Classifies stream lines and parses data lines into readings.

    Wire format: ``<leadI>,<leadII>[,<bpm>[,<irregularity>]]``. Lines that
    contain a status keyword are device messages, not data.
    """

    def __init__(self, config: Config):
        """
        Initialize record parser.

        Args:
            config: Configuration object
        """
        self.config = config
        self._status_keywords = tuple(config.protocol.status_keywords)
        self._completion_keyword = config.protocol.completion_keyword
        self._delimiter = config.protocol.field_delimiter

    def parse(self, line: str) -> ParsedLine:
        """
        Classify one line. Never raises.

        Args:
            line: Line text without its delimiter

        Returns:
            Parsed line carrying a Reading for data lines
        """
        text = line.strip()

        if self.is_status_line(text):
            return ParsedLine(
                kind=LineKind.STATUS,
                raw=text,
                calibration_complete=self._completion_keyword in text,
            )

        try:
            reading = self.parse_reading(text)
        except MalformedRecordError as e:
            logger.debug("Dropping malformed line %r: %s", text, e)
            return ParsedLine(kind=LineKind.MALFORMED, raw=text)

        return ParsedLine(kind=LineKind.DATA, raw=text, reading=reading)

    def is_status_line(self, text: str) -> bool:
        """Check for a device status keyword (case-sensitive)."""
        return any(keyword in text for keyword in self._status_keywords)

    def parse_reading(self, text: str) -> Reading:
        """
        Parse a data line into a Reading.

        Raises:
            MalformedRecordError: If there are fewer than two fields or a lead is not numeric
        """
        fields = text.split(self._delimiter)
        if len(fields) < 2:
            raise MalformedRecordError(f"Expected at least 2 fields, got {len(fields)}")

        lead_i, lead_ii = self._parse_leads(fields)
        bpm = self._parse_bpm(fields[2]) if len(fields) >= 3 else None
        irregularity = self._parse_irregularity(fields[3]) if len(fields) >= 4 else None

        return Reading(
            lead_i=lead_i,
            lead_ii=lead_ii,
            device_bpm=bpm,
            device_irregularity=irregularity,
        )

    def _parse_leads(self, fields: List[str]) -> Tuple[float, float]:
        """Parse the two voltage fields."""
        values = []
        for name, field in (("Lead I", fields[0]), ("Lead II", fields[1])):
            value = _to_float(field)
            if value is None:
                raise MalformedRecordError(f"{name} is not a number: {field!r}")
            values.append(value)
        return values[0], values[1]

    @staticmethod
    def _parse_bpm(field: str) -> Optional[int]:
        """Positive integer BPM, or None."""
        try:
            bpm = int(field)
        except ValueError:
            value = _to_float(field)
            if value is None:
                return None
            bpm = int(value)
        return bpm if bpm > 0 else None

    @staticmethod
    def _parse_irregularity(field: str) -> Optional[float]:
        """Non-negative irregularity, or None."""
        value = _to_float(field)
        if value is None or value < 0:
            return None
        return value


def _to_float(field: str) -> Optional[float]:
    """Parse a finite float, or None."""
    try:
        value = float(field)
    except ValueError:
        return None
    return value if math.isfinite(value) else None
