"""Stable public API for embedding the PPBA Alpaca gateway.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from ppba_alpaca.core.controller import EXPECTED_OK, PING_COMMAND, PPBAController
from ppba_alpaca.core.errors import (
    DeviceNotFoundError,
    DeviceUnavailableError,
    DuplicateDeviceError,
    HandshakeError,
    InvalidDeviceNumberError,
    InvalidPathError,
    PpbaError,
    RoutingError,
    ServerStartError,
    SettingsError,
    SettingsValidationError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
    UnknownActionError,
)
from ppba_alpaca.core.model import Action, Command, DeviceKey, RoutedRequest, RouteResult
from ppba_alpaca.core.registry import DeviceRegistry
from ppba_alpaca.core.router import Router
from ppba_alpaca.core.service import Gateway
from ppba_alpaca.core.settings import Settings, load_settings
from ppba_alpaca.devices.base import AlpacaDevice
from ppba_alpaca.devices.switch import Switch
from ppba_alpaca.discovery import MdnsAdvertiser
from ppba_alpaca.server import AlpacaServer, create_app
from ppba_alpaca.transports.base import LineTransport
from ppba_alpaca.transports.serial_link import SerialLink

__all__ = [
    "PpbaError",
    "SettingsError",
    "SettingsValidationError",
    "DuplicateDeviceError",
    "DeviceUnavailableError",
    "HandshakeError",
    "ServerStartError",
    "RoutingError",
    "InvalidPathError",
    "InvalidDeviceNumberError",
    "DeviceNotFoundError",
    "UnknownActionError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "Action",
    "Command",
    "DeviceKey",
    "RoutedRequest",
    "RouteResult",
    "EXPECTED_OK",
    "PING_COMMAND",
    "PPBAController",
    "DeviceRegistry",
    "Router",
    "Gateway",
    "Settings",
    "load_settings",
    "AlpacaDevice",
    "Switch",
    "MdnsAdvertiser",
    "AlpacaServer",
    "create_app",
    "LineTransport",
    "SerialLink",
]
