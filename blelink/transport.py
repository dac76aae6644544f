"""HCI transports: byte streams between the host stack and a controller."""

from __future__ import annotations

import abc
import threading
import time
from typing import Callable, Optional

import serial

DEFAULT_RX_CAPACITY = 256
DEFAULT_QUEUE_CAPACITY = 258
DEFAULT_BAUDRATE = 912600

_MAX_PACKET_PAYLOAD = 0xFF
_POLL_INTERVAL = 0.001

PacketSink = Callable[[int, bytes], int]


class Transport(abc.ABC):
    """A byte stream to an HCI controller.

    Timeouts are in seconds. ``peek`` and ``read`` return ``None`` when no
    byte is available.
    """

    @abc.abstractmethod
    def begin(self) -> None:
        """Start the transport."""

    @abc.abstractmethod
    def end(self) -> None:
        """Stop the transport."""

    @abc.abstractmethod
    def wait(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for input; return whether any is available."""

    @abc.abstractmethod
    def available(self) -> int:
        """Number of bytes ready to be read."""

    @abc.abstractmethod
    def peek(self) -> Optional[int]:
        """The next byte without consuming it."""

    @abc.abstractmethod
    def read(self) -> Optional[int]:
        """Consume and return the next byte."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Send an HCI packet; return the number of bytes accepted."""

    def __enter__(self) -> "Transport":
        self.begin()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.end()


class BufferedTransport(Transport):
    """Transport that hands packets to a driver and buffers what the driver delivers.

    Outgoing packets are split into their packet type (first byte) and
    payload and passed to ``sink(packet_type, payload)``, whose return value
    is the result of ``write``. Incoming data arrives through ``receive``
    and is dropped whole when it does not fit in the receive buffer.
    """

    def __init__(self, sink: PacketSink, capacity: int = DEFAULT_RX_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._sink = sink
        self._capacity = capacity
        self._rx = bytearray()
        self._cond = threading.Condition()
        self._begun = False

    def begin(self) -> None:
        with self._cond:
            self._rx.clear()
            self._begun = True

    def end(self) -> None:
        self._begun = False

    def wait(self, timeout: float) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self._rx) > 0, timeout)

    def available(self) -> int:
        with self._cond:
            return len(self._rx)

    def peek(self) -> Optional[int]:
        with self._cond:
            return self._rx[0] if self._rx else None

    def read(self) -> Optional[int]:
        with self._cond:
            if not self._rx:
                return None
            return self._rx.pop(0)

    def write(self, data: bytes) -> int:
        if not self._begun:
            return 0
        data = bytes(data)
        if not data:
            raise ValueError("an HCI packet needs at least its type byte")
        payload = data[1:]
        if len(payload) > _MAX_PACKET_PAYLOAD:
            raise ValueError(f"packet payload too long: {len(payload)} bytes")
        return self._sink(data[0], payload)

    def receive(self, data: bytes) -> bool:
        """Store data from the driver; return False if it was dropped for lack of room."""
        data = bytes(data)
        with self._cond:
            if self._capacity - len(self._rx) < len(data):
                return False
            self._rx.extend(data)
            self._cond.notify_all()
            return True


class _StreamBuffer:
    """Bounded byte stream shared between a producer and a consumer thread."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._data = bytearray()
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._data)

    def send(self, data: bytes) -> int:
        """Append all of ``data``, blocking while the buffer is full."""
        data = bytes(data)
        sent = 0
        with self._cond:
            while sent < len(data):
                self._cond.wait_for(lambda: len(self._data) < self._capacity)
                room = self._capacity - len(self._data)
                chunk = data[sent:sent + room]
                self._data.extend(chunk)
                sent += len(chunk)
                self._cond.notify_all()
        return sent

    def receive(self, max_length: int, timeout: Optional[float] = None) -> bytes:
        """Take up to ``max_length`` bytes, waiting for at least one."""
        with self._cond:
            if not self._cond.wait_for(lambda: len(self._data) > 0, timeout):
                return b""
            chunk = bytes(self._data[:max_length])
            del self._data[:max_length]
            self._cond.notify_all()
            return chunk

    def wait(self, timeout: Optional[float]) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self._data) > 0, timeout)


class QueueTransport(Transport):
    """Transport over a pair of bounded byte streams to an in-process controller.

    The controller side calls ``deliver`` with data for the host and
    ``take_outgoing`` to collect what the host wrote. Both directions block
    while the stream is full, and ``read`` blocks until a byte arrives.
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._incoming: Optional[_StreamBuffer] = None
        self._outgoing: Optional[_StreamBuffer] = None

    def _streams(self) -> tuple[_StreamBuffer, _StreamBuffer]:
        if self._incoming is None or self._outgoing is None:
            raise RuntimeError("transport not started")
        return self._incoming, self._outgoing

    def begin(self) -> None:
        self._incoming = _StreamBuffer(self._capacity)
        self._outgoing = _StreamBuffer(self._capacity)

    def end(self) -> None:
        self._incoming = None
        self._outgoing = None

    def wait(self, timeout: float) -> bool:
        incoming, _ = self._streams()
        return incoming.wait(timeout)

    def available(self) -> int:
        incoming, _ = self._streams()
        return len(incoming)

    def peek(self) -> Optional[int]:
        # Stream buffers offer no lookahead.
        return None

    def read(self) -> Optional[int]:
        incoming, _ = self._streams()
        chunk = incoming.receive(1)
        return chunk[0] if chunk else None

    def write(self, data: bytes) -> int:
        _, outgoing = self._streams()
        return outgoing.send(data)

    def deliver(self, data: bytes) -> None:
        """Pass data from the controller to the host, blocking while the stream is full."""
        incoming, _ = self._streams()
        incoming.send(data)

    def take_outgoing(self, timeout: Optional[float] = None) -> bytes:
        """Collect up to one buffer's worth of host output; empty bytes on timeout."""
        _, outgoing = self._streams()
        return outgoing.receive(self._capacity, timeout)


class UartTransport(Transport):
    """Transport over a serial port; ``port`` is a device name or a pyserial URL."""

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE) -> None:
        self._port = port
        self._baudrate = baudrate
        self._serial: Optional[serial.SerialBase] = None
        self._lookahead = bytearray()

    @property
    def baudrate(self) -> int:
        return self._baudrate

    def _uart(self) -> serial.SerialBase:
        if self._serial is None:
            raise RuntimeError("transport not started")
        return self._serial

    def begin(self) -> None:
        self._serial = serial.serial_for_url(
            self._port, baudrate=self._baudrate, timeout=0
        )
        self._lookahead.clear()

    def end(self) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None
        self._lookahead.clear()

    def wait(self, timeout: float) -> bool:
        deadline = time.monotonic() + timeout
        while True:
            if self.available():
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(_POLL_INTERVAL)

    def available(self) -> int:
        return len(self._lookahead) + self._uart().in_waiting

    def peek(self) -> Optional[int]:
        if not self._lookahead:
            self._lookahead.extend(self._uart().read(1))
        return self._lookahead[0] if self._lookahead else None

    def read(self) -> Optional[int]:
        if self._lookahead:
            return self._lookahead.pop(0)
        chunk = self._uart().read(1)
        return chunk[0] if chunk else None

    def write(self, data: bytes) -> int:
        uart = self._uart()
        written = uart.write(bytes(data))
        uart.flush()
        return written or 0