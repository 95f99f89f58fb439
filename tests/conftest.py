"""Shared fixtures: sample orders and a local TCP listener standing in for a printer."""

import socket
import threading
from decimal import Decimal

import pytest

from printing.models import LineItem, Order


class FakePrinterServer:
    """Accepts one connection at a time on 127.0.0.1 and stores the bytes received."""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(5)
        self.sock.settimeout(5)
        self.host, self.port = self.sock.getsockname()
        self.jobs: list[bytes] = []
        self.received = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._running = True
        self._thread.start()

    def _serve(self):
        while self._running:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            buf = bytearray()
            with conn:
                while True:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    buf.extend(chunk)
            self.jobs.append(bytes(buf))
            self.received.set()

    def close(self):
        self._running = False
        self.sock.close()


@pytest.fixture
def printer_server():
    server = FakePrinterServer()
    yield server
    server.close()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def tea_bun_order() -> Order:
    return Order(
        order_no="101",
        date_time="19/10/2026 10:30",
        items=(
            LineItem("Tea", Decimal("2"), Decimal("10.00")),
            LineItem("Bun", Decimal("1"), Decimal("15.00")),
        ),
    )


@pytest.fixture
def tea_bun_request() -> dict:
    return {
        "orderNo": "101",
        "dateTime": "19/10/2026 10:30",
        "items": [
            {"name": "Tea", "qty": 2, "price": 10.00},
            {"name": "Bun", "qty": 1, "price": 15.00},
        ],
    }
