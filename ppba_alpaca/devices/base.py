"""Device capability interface."""

from __future__ import annotations

from typing import Protocol

from ppba_alpaca.core.model import DEFAULT_TIMEOUT_MS


class AlpacaDevice(Protocol):
    """A relay channel routable as /{device_type}/{device_number}/{action}."""

    @property
    def device_type(self) -> str: ...

    @property
    def device_number(self) -> int: ...

    def initialize(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
        """Handshake with the hardware. Safe to call repeatedly."""

    def turn_on(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool: ...

    def turn_off(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool: ...

    def close(self) -> None: ...
