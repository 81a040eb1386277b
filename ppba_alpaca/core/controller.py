"""Line protocol spoken by the PPBA power box over its serial link."""

from __future__ import annotations

import logging
import threading

from ppba_alpaca.core.errors import TransportError
from ppba_alpaca.core.model import Command
from ppba_alpaca.transports.base import LineTransport

PING_COMMAND = Command("P#")
EXPECTED_OK = "PPBA_OK"
LOGGER = logging.getLogger(__name__)


def relay_on_command(device_number: int) -> Command:
    return Command(f"O{device_number}#")


def relay_off_command(device_number: int) -> Command:
    return Command(f"F{device_number}#")


class PPBAController:
    """Owns the serial link and runs one command/response exchange at a time.

    The box answers each command with exactly one line and has no way to tag
    replies, so every write/read pair runs under ``_lock``.
    """

    def __init__(self, link: LineTransport, *, write_timeout_ms: int | None = None) -> None:
        self._link = link
        self._write_timeout_ms = write_timeout_ms
        self._lock = threading.Lock()
        self.last_error: str | None = None

    def handshake(self, timeout_ms: int) -> bool:
        try:
            response = self.send_command(PING_COMMAND, timeout_ms)
        except TransportError as exc:
            self.last_error = str(exc)
            LOGGER.error("Handshake failed: %s", exc)
            return False

        if response.strip() != EXPECTED_OK:
            self.last_error = f"Unexpected handshake response {response.strip()!r}"
            LOGGER.error("Handshake failed: %s", self.last_error)
            return False

        self.last_error = None
        LOGGER.info("Handshake succeeded (%s)", EXPECTED_OK)
        return True

    def send_command(self, command: Command, timeout_ms: int) -> str:
        """Write ``command`` and return the raw reply line.

        Raises TransportTimeoutError when either phase runs out of time and
        TransportSendError on any other link failure.
        """
        write_timeout_ms = self._write_timeout_ms if self._write_timeout_ms is not None else timeout_ms
        with self._lock:
            self._link.discard_input()
            LOGGER.debug("-> %s", command)
            self._link.write_line(command.encode(), timeout_s=write_timeout_ms / 1000)
            response = self._link.read_line(timeout_s=timeout_ms / 1000)
            LOGGER.debug("<- %r", response)
            return response

    def close(self) -> None:
        with self._lock:
            self._link.close()
