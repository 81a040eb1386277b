"""Core data models used across the controller, router, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_TIMEOUT_MS = 1000


class Action(Enum):
    INITIALIZE = "init"
    TURN_ON = "on"
    TURN_OFF = "off"


@dataclass(frozen=True)
class DeviceKey:
    device_type: str
    device_number: int

    @classmethod
    def of(cls, device_type: str, device_number: int) -> DeviceKey:
        return cls(device_type=device_type.lower(), device_number=device_number)

    def __str__(self) -> str:
        return f"{self.device_type}:{self.device_number}"


@dataclass(frozen=True)
class Command:
    """One newline-terminated ASCII line sent to the box."""

    text: str

    def encode(self) -> bytes:
        return (self.text + "\n").encode("ascii")

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class RoutedRequest:
    device_type: str
    device_number: int
    action: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def key(self) -> DeviceKey:
        return DeviceKey.of(self.device_type, self.device_number)


@dataclass(frozen=True)
class RouteResult:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def value(cls, value: bool) -> RouteResult:
        return cls(status_code=200, body={"Value": value})

    @classmethod
    def error(cls, status_code: int, message: str) -> RouteResult:
        return cls(status_code=status_code, body={"Error": message})
