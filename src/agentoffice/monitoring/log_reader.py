"""Incremental tailing of the gateway log with rotation detection.

This module reads only the bytes appended to the gateway log since the last
poll. A file that shrank below the stored offset is treated as rotated and
read again from its first byte. A trailing line without its newline
is held back until the writer finishes it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from .models import TailPosition

logger = logging.getLogger(__name__)


class GatewayLogTail:
    """Reads a growing log file incrementally using a byte offset.

    The offset lives in memory only. On restart the caller seeks to the end
    of the file, so content written while the process was down is skipped.

    Attributes:
        file_path: Log file under observation.
        byte_offset: Number of bytes already consumed, including any
            unterminated line held back for the next poll.
    """

    def __init__(self, file_path: str | Path, byte_offset: int = 0):
        """Initialize the tail.

        Args:
            file_path: Path to the log file to tail.
            byte_offset: Bytes already consumed from that file.
        """
        self.file_path = Path(file_path)
        self.byte_offset = byte_offset
        self._last_read_timestamp: str | None = None
        self._partial_line = b""

    def seek_to_end(self) -> int:
        """Skip existing content by moving the offset to the current file size.

        Returns:
            The new offset (0 when the file doesn't exist yet).
        """
        try:
            self.byte_offset = self.file_path.stat().st_size
        except FileNotFoundError:
            self.byte_offset = 0
        self._partial_line = b""
        logger.debug(f"Tail of {self.file_path} positioned at offset {self.byte_offset}")
        return self.byte_offset

    def reset(self, file_path: str | Path | None = None) -> None:
        """Restart reading from byte 0, optionally switching to another file.

        Args:
            file_path: New log file to observe, or None to keep the current one.
        """
        if file_path is not None:
            self.file_path = Path(file_path)
        self.byte_offset = 0
        self._partial_line = b""

    def poll(self) -> bytes:
        """Read the complete lines appended since the previous poll.

        Bytes after the last newline are kept and prepended to the next read,
        so a line caught half written is never returned in two pieces.

        Returns:
            The unread complete lines, or ``b""`` when the file is missing,
            has not grown, or only grew by part of a line.

        Raises:
            OSError: If stat or read fails. The offset is left unchanged.
        """
        if not self.file_path.exists():
            return b""

        file_size = self.file_path.stat().st_size

        if file_size < self.byte_offset:
            logger.info(
                f"Log rotation detected for {self.file_path} "
                f"(offset {self.byte_offset} > size {file_size})"
            )
            self.byte_offset = 0
            self._partial_line = b""

        if file_size == self.byte_offset:
            return b""

        with self.file_path.open("rb") as f:
            f.seek(self.byte_offset)
            data = f.read(file_size - self.byte_offset)

        # Only advance past what was actually read; a concurrent truncation
        # can make the read come up short.
        previous_offset = self.byte_offset
        self.byte_offset += len(data)
        self._last_read_timestamp = datetime.now().isoformat()

        logger.debug(
            f"Read {len(data)} bytes from {self.file_path} "
            f"(offset {previous_offset} -> {self.byte_offset})"
        )
        buffered = self._partial_line + data
        line_end = buffered.rfind(b"\n") + 1
        self._partial_line = buffered[line_end:]
        return buffered[:line_end]

    def position(self) -> TailPosition:
        """Return a snapshot of the current reading position."""
        return TailPosition(
            file_path=str(self.file_path),
            byte_offset=self.byte_offset,
            last_read_timestamp=self._last_read_timestamp,
        )
