"""Maps /{deviceType}/{deviceNumber}/{action} requests onto device actions."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from ppba_alpaca.core.errors import (
    DeviceNotFoundError,
    InvalidDeviceNumberError,
    InvalidPathError,
    RoutingError,
    UnknownActionError,
)
from ppba_alpaca.core.model import DEFAULT_TIMEOUT_MS, Action, RoutedRequest, RouteResult
from ppba_alpaca.core.registry import DeviceRegistry
from ppba_alpaca.devices.base import AlpacaDevice

_DEVICE_NUMBER_RE = re.compile(r"[0-9]+")
_ACTIONS: dict[str, Action] = {action.value: action for action in Action}
LOGGER = logging.getLogger(__name__)


def parse_request(path: str, query: Mapping[str, str] | None = None) -> RoutedRequest:
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) != 3:
        raise InvalidPathError("Invalid path format")

    device_type, number_text, action = segments
    if not _DEVICE_NUMBER_RE.fullmatch(number_text):
        raise InvalidDeviceNumberError("Invalid device number")

    return RoutedRequest(
        device_type=device_type,
        device_number=int(number_text),
        action=action,
        timeout_ms=_timeout_ms(query or {}),
    )


def resolve_action(name: str) -> Action:
    action = _ACTIONS.get(name.lower())
    if action is None:
        raise UnknownActionError("Unknown action")
    return action


def invoke(device: AlpacaDevice, action: Action, timeout_ms: int) -> bool:
    if action is Action.TURN_ON:
        return device.turn_on(timeout_ms)
    if action is Action.TURN_OFF:
        return device.turn_off(timeout_ms)
    if action is Action.INITIALIZE:
        return device.initialize(timeout_ms)
    raise UnknownActionError("Unknown action")


def _timeout_ms(query: Mapping[str, str]) -> int:
    raw = query.get("timeout")
    if raw is None:
        return DEFAULT_TIMEOUT_MS
    try:
        value = int(raw)
    except ValueError:
        LOGGER.debug("Ignoring unparsable timeout %r", raw)
        return DEFAULT_TIMEOUT_MS
    if value < 0:
        LOGGER.debug("Ignoring negative timeout %d", value)
        return DEFAULT_TIMEOUT_MS
    return value


class Router:
    def __init__(self, registry: DeviceRegistry) -> None:
        self.registry = registry

    def route(self, path: str, query: Mapping[str, str] | None = None) -> RouteResult:
        try:
            request = parse_request(path, query)
            device = self.registry.get(request.device_type, request.device_number)
            if device is None:
                raise DeviceNotFoundError("Device not found")
            action = resolve_action(request.action)
        except RoutingError as exc:
            LOGGER.debug("Rejected %s: %s", path, exc)
            return RouteResult.error(exc.status_code, str(exc))

        try:
            value = invoke(device, action, request.timeout_ms)
        except Exception as exc:
            LOGGER.exception("Exception routing %s", path)
            return RouteResult.error(500, str(exc) or exc.__class__.__name__)
        return RouteResult.value(bool(value))
