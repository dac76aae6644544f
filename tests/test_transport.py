import threading

import pytest

from blelink.transport import BufferedTransport, QueueTransport, UartTransport


class _Sink:
    def __init__(self):
        self.packets = []

    def __call__(self, packet_type, payload):
        self.packets.append((packet_type, payload))
        return len(payload) + 1


# BufferedTransport


def test_buffered_write_before_begin_is_refused():
    sink = _Sink()
    transport = BufferedTransport(sink)
    assert transport.write(b"\x01\x03\x0c\x00") == 0
    assert sink.packets == []


def test_buffered_write_splits_type_and_payload():
    sink = _Sink()
    transport = BufferedTransport(sink)
    transport.begin()
    result = transport.write(b"\x01\x03\x0c\x00")
    assert sink.packets == [(0x01, b"\x03\x0c\x00")]
    assert result == 4


def test_buffered_write_empty_packet_raises():
    transport = BufferedTransport(_Sink())
    transport.begin()
    with pytest.raises(ValueError):
        transport.write(b"")


def test_buffered_write_payload_too_long_raises():
    transport = BufferedTransport(_Sink())
    transport.begin()
    with pytest.raises(ValueError):
        transport.write(bytes(257))


def test_buffered_receive_then_read_in_order():
    transport = BufferedTransport(_Sink())
    transport.begin()
    assert transport.receive(b"\x04\x0e\x01")
    assert transport.available() == 3
    assert transport.peek() == 0x04
    assert transport.available() == 3
    assert [transport.read() for _ in range(3)] == [0x04, 0x0E, 0x01]
    assert transport.read() is None
    assert transport.peek() is None


def test_buffered_receive_dropped_when_full():
    transport = BufferedTransport(_Sink(), capacity=4)
    transport.begin()
    assert transport.receive(b"abc")
    assert transport.receive(b"de") is False
    assert transport.available() == 3
    assert transport.receive(b"d")
    assert transport.available() == 4


def test_buffered_begin_clears_buffer():
    transport = BufferedTransport(_Sink())
    transport.begin()
    transport.receive(b"xyz")
    transport.begin()
    assert transport.available() == 0


def test_buffered_wait_times_out_when_empty():
    transport = BufferedTransport(_Sink())
    transport.begin()
    assert transport.wait(0.01) is False


def test_buffered_wait_wakes_on_receive():
    transport = BufferedTransport(_Sink())
    transport.begin()
    timer = threading.Timer(0.05, transport.receive, args=(b"\x04",))
    timer.start()
    try:
        assert transport.wait(5.0) is True
    finally:
        timer.join()
    assert transport.read() == 0x04


def test_buffered_context_manager_starts_and_stops():
    sink = _Sink()
    transport = BufferedTransport(sink)
    with transport:
        assert transport.write(b"\x02\xaa") == 2
    assert transport.write(b"\x02\xaa") == 0
    assert sink.packets == [(0x02, b"\xaa")]


def test_buffered_invalid_capacity():
    with pytest.raises(ValueError):
        BufferedTransport(_Sink(), capacity=0)


# QueueTransport


def test_queue_requires_begin():
    transport = QueueTransport()
    with pytest.raises(RuntimeError):
        transport.available()
    with pytest.raises(RuntimeError):
        transport.write(b"\x01")


def test_queue_deliver_then_read():
    transport = QueueTransport()
    transport.begin()
    transport.deliver(b"\x04\x0e")
    assert transport.available() == 2
    assert transport.read() == 0x04
    assert transport.read() == 0x0E
    assert transport.available() == 0


def test_queue_write_then_take_outgoing():
    transport = QueueTransport()
    transport.begin()
    assert transport.write(b"\x01\x03\x0c\x00") == 4
    assert transport.take_outgoing(timeout=1.0) == b"\x01\x03\x0c\x00"


def test_queue_take_outgoing_times_out_empty():
    transport = QueueTransport()
    transport.begin()
    assert transport.take_outgoing(timeout=0.01) == b""


def test_queue_peek_never_sees_data():
    transport = QueueTransport()
    transport.begin()
    transport.deliver(b"\x04")
    assert transport.peek() is None
    assert transport.available() == 1


def test_queue_deliver_larger_than_capacity_blocks_until_read():
    transport = QueueTransport(capacity=4)
    transport.begin()
    payload = bytes(range(10))
    producer = threading.Thread(target=transport.deliver, args=(payload,))
    producer.start()
    received = bytes(transport.read() for _ in range(len(payload)))
    producer.join(timeout=5.0)
    assert received == payload
    assert not producer.is_alive()


def test_queue_wait():
    transport = QueueTransport()
    transport.begin()
    assert transport.wait(0.01) is False
    transport.deliver(b"\x01")
    assert transport.wait(0.01) is True


def test_queue_end_releases_streams():
    transport = QueueTransport()
    transport.begin()
    transport.end()
    with pytest.raises(RuntimeError):
        transport.deliver(b"\x01")


# UartTransport


def test_uart_requires_begin():
    transport = UartTransport("loop://")
    with pytest.raises(RuntimeError):
        transport.read()


def test_uart_loopback_round_trip():
    with UartTransport("loop://") as transport:
        assert transport.write(b"\x01\x03\x0c\x00") == 4
        assert transport.wait(1.0) is True
        assert transport.available() == 4
        received = bytes(transport.read() for _ in range(4))
        assert received == b"\x01\x03\x0c\x00"
        assert transport.read() is None


def test_uart_peek_does_not_consume():
    with UartTransport("loop://") as transport:
        transport.write(b"\x04\x0e")
        transport.wait(1.0)
        assert transport.peek() == 0x04
        assert transport.available() == 2
        assert transport.read() == 0x04
        assert transport.read() == 0x0E


def test_uart_wait_times_out():
    with UartTransport("loop://") as transport:
        assert transport.wait(0.01) is False
        assert transport.peek() is None


def test_uart_keeps_requested_baudrate():
    transport = UartTransport("loop://", 115200)
    transport.begin()
    try:
        assert transport.baudrate == 115200
        assert transport._uart().baudrate == 115200
    finally:
        transport.end()