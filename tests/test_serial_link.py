from __future__ import annotations

import pytest

from ppba_alpaca.core.controller import PPBAController, relay_on_command
from ppba_alpaca.core.errors import TransportConnectError, TransportTimeoutError
from ppba_alpaca.transports.serial_link import SerialLink


@pytest.fixture
def loop_link():
    link = SerialLink.open("loop://", 9600, read_timeout_s=0.1, write_timeout_s=0.1)
    yield link
    link.close()


def test_loopback_line_round_trip(loop_link: SerialLink) -> None:
    loop_link.write_line(b"P#\n", timeout_s=0.1)
    assert loop_link.read_line(timeout_s=0.1) == "P#\n"


def test_read_without_data_times_out(loop_link: SerialLink) -> None:
    with pytest.raises(TransportTimeoutError):
        loop_link.read_line(timeout_s=0.05)


def test_partial_line_times_out(loop_link: SerialLink) -> None:
    loop_link.write_line(b"PPBA", timeout_s=0.1)
    with pytest.raises(TransportTimeoutError) as exc:
        loop_link.read_line(timeout_s=0.05)
    assert "PPBA" in str(exc.value)


def test_discard_input_drops_stale_reply(loop_link: SerialLink) -> None:
    loop_link.write_line(b"PPBA_OK\n", timeout_s=0.1)
    loop_link.discard_input()
    with pytest.raises(TransportTimeoutError):
        loop_link.read_line(timeout_s=0.05)


def test_controller_over_loopback_sees_its_own_command(loop_link: SerialLink) -> None:
    controller = PPBAController(loop_link, write_timeout_ms=100)
    assert controller.send_command(relay_on_command(1), 100) == "O1#\n"
    # The echoed "P#" is not PPBA_OK, so the handshake must fail cleanly.
    assert controller.handshake(100) is False


@pytest.mark.parametrize("port", ["/dev/ppba-does-not-exist", "bogus://nowhere"])
def test_open_failure_raises_connect_error(port: str) -> None:
    with pytest.raises(TransportConnectError):
        SerialLink.open(port)


def test_close_is_idempotent() -> None:
    link = SerialLink.open("loop://")
    link.close()
    link.close()
