"""mDNS advertisement of the Alpaca HTTP endpoint."""

from __future__ import annotations

import logging
import socket

from zeroconf import ServiceInfo, Zeroconf

SERVICE_TYPE = "_alpaca._tcp.local."
_WILDCARD_ADDRESSES = {"", "0.0.0.0", "::"}
LOGGER = logging.getLogger(__name__)


def _advertised_address(address: str | None) -> str:
    if address is None or address in _WILDCARD_ADDRESSES:
        return socket.gethostbyname(socket.gethostname())
    return address


class MdnsAdvertiser:
    """Registers the gateway as an ``_alpaca._tcp`` service.

    Advertising is best effort: failures are logged and never raised, so a
    host without multicast still serves HTTP.
    """

    def __init__(
        self,
        *,
        device_type: str = "Switch",
        device_number: int = 0,
        manufacturer: str = "PPBA",
        version: str = "1.0",
    ) -> None:
        self.properties = {
            "DeviceType": device_type,
            "DeviceNumber": str(device_number),
            "Manufacturer": manufacturer,
            "Version": version,
        }
        self._zeroconf: Zeroconf | None = None
        self._info: ServiceInfo | None = None

    @property
    def is_advertising(self) -> bool:
        return self._info is not None

    def start(self, name: str, port: int, address: str | None = None) -> bool:
        if self._info is not None:
            return True
        try:
            info = ServiceInfo(
                SERVICE_TYPE,
                f"{name}.{SERVICE_TYPE}",
                port=port,
                properties=self.properties,
                parsed_addresses=[_advertised_address(address)],
            )
            zeroconf = Zeroconf()
        except Exception as exc:
            LOGGER.warning("mDNS advertisement for %r not started: %s", name, exc)
            return False

        try:
            zeroconf.register_service(info)
        except Exception as exc:
            LOGGER.warning("mDNS advertisement for %r failed: %s", name, exc)
            zeroconf.close()
            return False

        self._zeroconf = zeroconf
        self._info = info
        LOGGER.info("Advertising %s on port %d", info.name, port)
        return True

    def stop(self) -> None:
        zeroconf, info = self._zeroconf, self._info
        self._zeroconf = None
        self._info = None
        if zeroconf is None:
            return
        try:
            if info is not None:
                zeroconf.unregister_service(info)
        except Exception as exc:
            LOGGER.warning("mDNS withdrawal failed: %s", exc)
        try:
            zeroconf.close()
        except Exception as exc:
            LOGGER.warning("mDNS shutdown failed: %s", exc)
        LOGGER.info("mDNS advertisement withdrawn")
