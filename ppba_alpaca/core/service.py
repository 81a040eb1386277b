"""Service layer that wires the serial link, devices, router and HTTP server."""

from __future__ import annotations

import logging

from ppba_alpaca.core.controller import PPBAController
from ppba_alpaca.core.errors import HandshakeError, PpbaError
from ppba_alpaca.core.registry import DeviceRegistry
from ppba_alpaca.core.router import Router
from ppba_alpaca.core.settings import Settings
from ppba_alpaca.devices.switch import Switch
from ppba_alpaca.discovery import MdnsAdvertiser
from ppba_alpaca.server import AlpacaServer
from ppba_alpaca.transports.base import LineTransport
from ppba_alpaca.transports.serial_link import SerialLink

LOGGER = logging.getLogger(__name__)


def open_controller(settings: Settings, link: LineTransport | None = None) -> PPBAController:
    if link is None:
        link = SerialLink.open(
            settings.serial_port,
            settings.baud_rate,
            read_timeout_s=settings.read_timeout_ms / 1000,
            write_timeout_s=settings.write_timeout_ms / 1000,
        )
    return PPBAController(link, write_timeout_ms=settings.write_timeout_ms)


class Gateway:
    """Owns every runtime component for the lifetime of the process.

    ``start()`` raises TransportConnectError, HandshakeError or
    ServerStartError when startup cannot complete; anything opened so far is
    released before the error propagates.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        link: LineTransport | None = None,
        advertiser: MdnsAdvertiser | None = None,
    ) -> None:
        self.settings = settings
        self._link = link
        self.advertiser = advertiser or MdnsAdvertiser(device_number=settings.devices[0])
        self.controller: PPBAController | None = None
        self.registry = DeviceRegistry()
        self.router = Router(self.registry)
        self.server: AlpacaServer | None = None

    def __enter__(self) -> Gateway:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self) -> None:
        settings = self.settings
        LOGGER.info(
            "Configuration - IP: %s, Port: %d, Serial: %s@%d, Devices: %s",
            settings.server_address,
            settings.server_port,
            settings.serial_port,
            settings.baud_rate,
            ", ".join(str(n) for n in settings.devices),
        )
        self.controller = open_controller(settings, self._link)

        try:
            for device_number in settings.devices:
                switch = Switch(self.controller, device_number)
                if not switch.initialize(timeout_ms=settings.read_timeout_ms):
                    raise HandshakeError(
                        f"Initialization failed for Switch #{device_number}: {self.controller.last_error}"
                    )
                self.registry.register(switch)

            self.server = AlpacaServer(settings.server_address, settings.server_port, self.router)
            self.server.start()
        except PpbaError:
            self.stop()
            raise

        if settings.advertise:
            self.advertiser.start(settings.service_name, self.server.port, settings.server_address)

    def stop(self) -> None:
        self.advertiser.stop()
        if self.server is not None:
            self.server.stop()
            self.server = None
        self.registry.close()
        # closed switches stay in the old table; start() registers fresh ones
        self.registry = DeviceRegistry()
        self.router = Router(self.registry)
        if self.controller is not None:
            self.controller.close()
            self.controller = None
