"""Newline framing for the device text stream."""

import codecs
from typing import AsyncIterator, List, Optional, Union


class LineFramer:
    """Splits an un-chunked text stream into complete lines."""

    def __init__(self, delimiter: str = "\n", encoding: str = "utf-8"):
        """
        Initialize line framer.

        Args:
            delimiter: Line delimiter
            encoding: Encoding used to decode byte chunks
        """
        if not delimiter:
            raise ValueError("Delimiter cannot be empty")
        self._delimiter = delimiter
        self._encoding = encoding
        self._pending = ""
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def reset(self) -> None:
        """Drop any partial line. Called at session start."""
        self._pending = ""
        self._decoder.reset()

    def feed(self, chunk: Union[str, bytes]) -> List[str]:
        """
        Add a chunk and return every line it completes.

        Args:
            chunk: Text, or bytes in the configured encoding

        Returns:
            Complete lines, delimiter stripped, in stream order
        """
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        if not chunk:
            return []

        self._pending += chunk
        lines = self._pending.split(self._delimiter)
        # Last element is the (possibly empty) unterminated remainder
        self._pending = lines.pop()
        return lines

    def flush(self) -> Optional[str]:
        """Emit the trailing partial line when the stream closes."""
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._pending += tail
        line, self._pending = self._pending, ""
        return line or None

    @property
    def pending(self) -> str:
        """Text received since the last delimiter."""
        return self._pending


async def iter_lines(chunks: AsyncIterator[Union[str, bytes]],
                     framer: Optional[LineFramer] = None) -> AsyncIterator[str]:
    """Lazily yield lines from an async chunk source, flushing at the end."""
    framer = framer or LineFramer()
    async for chunk in chunks:
        for line in framer.feed(chunk):
            yield line
    last = framer.flush()
    if last is not None:
        yield last
