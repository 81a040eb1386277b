"""Device registry keyed by (device type, device number)."""

from __future__ import annotations

import logging
import threading

from ppba_alpaca.core.errors import DuplicateDeviceError
from ppba_alpaca.core.model import DeviceKey
from ppba_alpaca.devices.base import AlpacaDevice

LOGGER = logging.getLogger(__name__)


class DeviceRegistry:
    def __init__(self) -> None:
        self._devices: dict[DeviceKey, AlpacaDevice] = {}
        self._lock = threading.Lock()

    def register(self, device: AlpacaDevice) -> None:
        key = DeviceKey.of(device.device_type, device.device_number)
        with self._lock:
            if key in self._devices:
                raise DuplicateDeviceError(
                    f"Device {device.device_type} #{device.device_number} is already registered."
                )
            self._devices[key] = device
        LOGGER.info("Registered %s #%d", device.device_type, device.device_number)

    def get(self, device_type: str, device_number: int) -> AlpacaDevice | None:
        with self._lock:
            return self._devices.get(DeviceKey.of(device_type, device_number))

    def devices(self) -> list[AlpacaDevice]:
        with self._lock:
            return sorted(self._devices.values(), key=lambda d: (d.device_type.lower(), d.device_number))

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def close(self) -> None:
        for device in self.devices():
            device.close()
