from __future__ import annotations

import http.client
import json

import pytest

from ppba_alpaca.core.errors import HandshakeError, TransportConnectError
from ppba_alpaca.core.service import Gateway
from ppba_alpaca.core.settings import Settings
from ppba_alpaca.transports import serial_link


class FakeLink:
    def __init__(self, replies: dict[str, str] | None = None) -> None:
        self.replies = dict(replies or {})
        self.writes: list[bytes] = []
        self.closed = False
        self._pending = ""

    def write_line(self, data: bytes, *, timeout_s: float) -> None:
        self.writes.append(data)
        self._pending = data.decode("ascii").strip()

    def read_line(self, *, timeout_s: float) -> str:
        return self.replies.get(self._pending, "PPBA_OK\n")

    def discard_input(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


class FakeAdvertiser:
    def __init__(self) -> None:
        self.started: list[tuple[str, int, str | None]] = []
        self.stopped = 0

    def start(self, name: str, port: int, address: str | None = None) -> bool:
        self.started.append((name, port, address))
        return True

    def stop(self) -> None:
        self.stopped += 1


def _settings(**overrides) -> Settings:
    values = {"server_address": "127.0.0.1", "server_port": 0}
    values.update(overrides)
    return Settings(**values)


def _get(port: int, path: str) -> tuple[int, dict]:
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request("GET", path)
        response = conn.getresponse()
        return response.status, json.loads(response.read().decode("utf-8"))
    finally:
        conn.close()


def test_gateway_serves_every_configured_switch() -> None:
    link = FakeLink({"F1#": "NOPE\n"})
    advertiser = FakeAdvertiser()
    gateway = Gateway(_settings(device_numbers=(0, 1)), link=link, advertiser=advertiser)

    with gateway:
        port = gateway.server.port
        assert [d.device_number for d in gateway.registry.devices()] == [0, 1]
        assert all(d.initialized for d in gateway.registry.devices())
        assert advertiser.started == [("PPBA Switch", port, "127.0.0.1")]

        assert _get(port, "/switch/1/on") == (200, {"Value": True})
        assert _get(port, "/switch/1/off") == (200, {"Value": False})
        assert _get(port, "/switch/2/on") == (404, {"Error": "Device not found"})

    assert link.writes == [b"P#\n", b"P#\n", b"O1#\n", b"F1#\n"]
    assert link.closed is True
    assert advertiser.stopped == 1
    assert gateway.server is None


def test_gateway_without_advertising() -> None:
    advertiser = FakeAdvertiser()
    with Gateway(_settings(advertise=False), link=FakeLink(), advertiser=advertiser):
        pass
    assert advertiser.started == []


def test_failed_handshake_aborts_startup() -> None:
    link = FakeLink({"P#": "BUSY\n"})
    advertiser = FakeAdvertiser()
    gateway = Gateway(_settings(), link=link, advertiser=advertiser)

    with pytest.raises(HandshakeError) as exc:
        gateway.start()

    assert "Switch #0" in str(exc.value)
    assert "BUSY" in str(exc.value)
    assert link.closed is True
    assert gateway.server is None
    assert advertiser.started == []


def test_gateway_can_be_restarted_after_stop() -> None:
    link = FakeLink()
    gateway = Gateway(_settings(), link=link, advertiser=FakeAdvertiser())

    gateway.start()
    first = gateway.registry.get("switch", 0)
    gateway.stop()
    assert len(gateway.registry) == 0

    with gateway:
        assert gateway.registry.get("switch", 0) is not first
        assert _get(gateway.server.port, "/switch/0/on") == (200, {"Value": True})

    assert link.writes == [b"P#\n", b"P#\n", b"O0#\n"]


def test_unopenable_serial_port_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(cls, port_name, baud_rate=9600, **kwargs):
        raise TransportConnectError(f"Could not open serial port {port_name}")

    monkeypatch.setattr(serial_link.SerialLink, "open", classmethod(refuse))
    gateway = Gateway(_settings(serial_port="/dev/ttyUSB9"), advertiser=FakeAdvertiser())

    with pytest.raises(TransportConnectError):
        gateway.start()
    assert gateway.server is None


def test_gateway_opens_serial_link_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    opened: list[tuple] = []
    link = FakeLink()

    def fake_open(cls, port_name, baud_rate=9600, *, read_timeout_s=1.0, write_timeout_s=1.0):
        opened.append((port_name, baud_rate, read_timeout_s, write_timeout_s))
        return link

    monkeypatch.setattr(serial_link.SerialLink, "open", classmethod(fake_open))
    settings = _settings(serial_port="/dev/ttyACM0", baud_rate=19200, read_timeout_ms=500, write_timeout_ms=250)

    with Gateway(settings, advertiser=FakeAdvertiser()):
        pass
    assert opened == [("/dev/ttyACM0", 19200, 0.5, 0.25)]
    assert link.closed is True
