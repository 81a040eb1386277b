"""Switch device: one relay channel on the PPBA box."""

from __future__ import annotations

import logging
import threading

from ppba_alpaca.core.controller import (
    EXPECTED_OK,
    PPBAController,
    relay_off_command,
    relay_on_command,
)
from ppba_alpaca.core.errors import DeviceUnavailableError, TransportError
from ppba_alpaca.core.model import DEFAULT_TIMEOUT_MS, Command

LOGGER = logging.getLogger(__name__)


class Switch:
    device_type = "Switch"

    def __init__(self, controller: PPBAController, device_number: int) -> None:
        self._controller = controller
        self._device_number = device_number
        self._lock = threading.Lock()
        self._closed = False
        self.initialized = False

    @property
    def device_number(self) -> int:
        return self._device_number

    def initialize(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
        with self._lock:
            self._ensure_open()
            LOGGER.info("[Switch #%d] Initializing (ping)", self._device_number)
            ok = self._controller.handshake(timeout_ms)
            self.initialized = ok
            if not ok:
                LOGGER.error(
                    "[Switch #%d] Ping failed, no %s: %s",
                    self._device_number,
                    EXPECTED_OK,
                    self._controller.last_error,
                )
            return ok

    def turn_on(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
        return self._send_relay_command(relay_on_command(self._device_number), "ON", timeout_ms)

    def turn_off(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
        return self._send_relay_command(relay_off_command(self._device_number), "OFF", timeout_ms)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise DeviceUnavailableError(f"Switch #{self._device_number} is no longer available")

    def _send_relay_command(self, command: Command, action: str, timeout_ms: int) -> bool:
        with self._lock:
            self._ensure_open()
            LOGGER.info("[Switch #%d] Sending %s command: %s", self._device_number, action, command)
            try:
                response = self._controller.send_command(command, timeout_ms).strip()
            except TransportError as exc:
                LOGGER.warning("[Switch #%d] %s failed: %s", self._device_number, action, exc)
                return False

            if response == EXPECTED_OK:
                LOGGER.info("[Switch #%d] %s succeeded", self._device_number, action)
                return True

            LOGGER.warning(
                "[Switch #%d] Unexpected response to %s: %r",
                self._device_number,
                action,
                response,
            )
            return False
