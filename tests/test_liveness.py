"""Tests for the Valkey liveness probe."""

import socket
import threading
import time

import pytest

from failover.models import LivenessStatus
from failover.probe import LivenessProbe


@pytest.fixture
def fake_server():
    """Start a one-shot TCP server answering with the given bytes."""
    servers = []

    def _start(reply, delay=0.0):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        received = []

        def serve():
            conn, _ = listener.accept()
            with conn:
                received.append(conn.recv(64))
                if delay:
                    time.sleep(delay)
                if reply:
                    conn.sendall(reply)

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        servers.append(listener)
        return listener.getsockname()[1], received, thread

    yield _start

    for listener in servers:
        listener.close()


def _closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


class TestLivenessProbe:
    def test_ok_reply_is_reachable(self, fake_server):
        port, received, thread = fake_server(b"+OK\r\n")

        assert LivenessProbe("127.0.0.1", port, timeout=2).check() == LivenessStatus.REACHABLE

        thread.join(2)
        assert received == [b"quit\n"]

    def test_error_reply_is_unreachable(self, fake_server):
        port, _, _ = fake_server(b"-ERR unknown command\r\n")
        assert LivenessProbe("127.0.0.1", port, timeout=2).check() == LivenessStatus.UNREACHABLE

    def test_short_read_is_unreachable(self, fake_server):
        port, _, _ = fake_server(b"+O")
        assert LivenessProbe("127.0.0.1", port, timeout=2).check() == LivenessStatus.UNREACHABLE

    def test_silent_server_times_out(self, fake_server):
        port, _, _ = fake_server(b"", delay=1.0)

        started = time.monotonic()
        status = LivenessProbe("127.0.0.1", port, timeout=0.2).check()

        assert status == LivenessStatus.UNREACHABLE
        assert time.monotonic() - started < 1.0

    def test_closed_port_is_unreachable_within_timeout(self):
        started = time.monotonic()
        status = LivenessProbe("127.0.0.1", _closed_port(), timeout=1).check()

        assert status == LivenessStatus.UNREACHABLE
        assert time.monotonic() - started < 2

    def test_unresolvable_host_is_unreachable(self):
        assert LivenessProbe("host.invalid", 6379, timeout=1).check() == LivenessStatus.UNREACHABLE

    @pytest.mark.parametrize("host", ["a" * 64 + ".example", "cache\x00host"])
    def test_malformed_host_is_unreachable(self, host):
        assert LivenessProbe(host, 6379, timeout=1).check() == LivenessStatus.UNREACHABLE
