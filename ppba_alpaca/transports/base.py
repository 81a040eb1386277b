"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class LineTransport(Protocol):
    def write_line(self, data: bytes, *, timeout_s: float) -> None:
        """Write one encoded, newline-terminated line."""

    def read_line(self, *, timeout_s: float) -> str:
        """Read one line, raising TransportTimeoutError if it does not arrive in time."""

    def discard_input(self) -> None:
        """Drop any bytes already waiting in the receive buffer."""

    def close(self) -> None:
        """Release the underlying port."""
