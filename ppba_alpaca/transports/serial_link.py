"""Serial line transport implementation using pyserial."""

from __future__ import annotations

import logging

import serial

from ppba_alpaca.core.errors import (
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
)

LOGGER = logging.getLogger(__name__)


class SerialLink:
    """Newline-delimited ASCII link over a pyserial port.

    ``port`` may be a device path (``/dev/ttyUSB0``, ``COM3``) or any URL
    understood by :func:`serial.serial_for_url` (``loop://``, ``socket://...``).
    """

    def __init__(self, port: serial.SerialBase) -> None:
        self._port = port

    @classmethod
    def open(
        cls,
        port_name: str,
        baud_rate: int = 9600,
        *,
        read_timeout_s: float = 1.0,
        write_timeout_s: float = 1.0,
    ) -> SerialLink:
        try:
            port = serial.serial_for_url(
                port_name,
                baudrate=baud_rate,
                timeout=read_timeout_s,
                write_timeout=write_timeout_s,
            )
        except (serial.SerialException, ValueError) as exc:
            raise TransportConnectError(f"Could not open serial port {port_name}: {exc}") from exc
        LOGGER.info("Serial port %s opened at %d baud", port_name, baud_rate)
        return cls(port)

    @property
    def name(self) -> str:
        return str(getattr(self._port, "name", None) or getattr(self._port, "port", ""))

    def write_line(self, data: bytes, *, timeout_s: float) -> None:
        try:
            self._port.write_timeout = timeout_s
            self._port.write(data)
        except serial.SerialTimeoutException as exc:
            raise TransportTimeoutError(f"Write to {self.name} timed out after {timeout_s:.3f}s") from exc
        except serial.SerialException as exc:
            raise TransportSendError(f"Write to {self.name} failed: {exc}") from exc

    def read_line(self, *, timeout_s: float) -> str:
        try:
            self._port.timeout = timeout_s
            raw = self._port.read_until(b"\n")
        except serial.SerialException as exc:
            raise TransportSendError(f"Read from {self.name} failed: {exc}") from exc

        if not raw.endswith(b"\n"):
            partial = raw.decode("ascii", errors="replace")
            raise TransportTimeoutError(
                f"No complete line from {self.name} within {timeout_s:.3f}s (got {partial!r})"
            )
        return raw.decode("ascii", errors="replace")

    def discard_input(self) -> None:
        try:
            self._port.reset_input_buffer()
        except serial.SerialException as exc:
            raise TransportSendError(f"Could not reset input buffer on {self.name}: {exc}") from exc

    def close(self) -> None:
        if self._port.is_open:
            self._port.close()
            LOGGER.info("Serial port %s closed", self.name)
