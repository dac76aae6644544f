"""L2CAP LE signaling channel: connection parameter updates and pairing policy."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Callable, Optional

SIGNALING_CID = 0x0005
SECURITY_CID = 0x0006

LOCAL_AUTHREQ = 0b00101101

_HEADER = struct.Struct("<BBH")
_PARAMETERS = struct.Struct("<HHHH")
_RESULT = struct.Struct("<H")

_ACCEPTED = 0x0000
_REJECTED = 0x0001
_MASTER_ROLE = 1

SendAcl = Callable[[int, int, bytes], None]
ConnUpdate = Callable[[int, "ConnectionParameterUpdate"], None]


class SignalingCode(enum.IntEnum):
    """Command codes handled on the LE signaling channel."""

    CONNECTION_PARAMETER_UPDATE_REQUEST = 0x12
    CONNECTION_PARAMETER_UPDATE_RESPONSE = 0x13


@dataclass(frozen=True)
class ConnectionParameterUpdate:
    """Connection parameters carried by an update request."""

    min_interval: int
    max_interval: int
    latency: int
    supervision_timeout: int


def _check_u16(name: str, value: int) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _pack_command(code: int, identifier: int, payload: bytes) -> bytes:
    return _HEADER.pack(code, identifier, len(payload)) + payload


class L2CAPSignaling:
    """Peripheral side of the LE signaling channel.

    ``send_acl(handle, cid, payload)`` transmits an ACL packet and
    ``conn_update(handle, parameters)`` asks the controller to apply
    accepted connection parameters.
    """

    def __init__(self, send_acl: SendAcl, conn_update: Optional[ConnUpdate] = None) -> None:
        self._send_acl = send_acl
        self._conn_update = conn_update
        self._min_interval = 0
        self._max_interval = 0
        self._supervision_timeout = 0
        self._pairing_enabled = 1

    def add_connection(
        self, handle: int, role: int, interval: int, supervision_timeout: int
    ) -> None:
        """Request preferred parameters from a central that connected to us."""
        if role != _MASTER_ROLE:
            return

        update = False
        min_interval = max_interval = interval
        timeout = supervision_timeout

        if self._min_interval and self._max_interval:
            if not self._min_interval <= interval <= self._max_interval:
                min_interval = self._min_interval
                max_interval = self._max_interval
                update = True

        if self._supervision_timeout and supervision_timeout != self._supervision_timeout:
            timeout = self._supervision_timeout
            update = True

        if update:
            payload = _PARAMETERS.pack(min_interval, max_interval, 0x0000, timeout)
            request = _pack_command(
                SignalingCode.CONNECTION_PARAMETER_UPDATE_REQUEST, 0x01, payload
            )
            self._send_acl(handle, SIGNALING_CID, request)

    def handle_data(self, connection_handle: int, data: bytes) -> None:
        """Process one signaling packet; malformed packets are ignored."""
        data = bytes(data)
        if len(data) < _HEADER.size:
            return
        code, identifier, length = _HEADER.unpack_from(data)
        if len(data) != _HEADER.size + length:
            return
        payload = data[_HEADER.size:]

        if code == SignalingCode.CONNECTION_PARAMETER_UPDATE_REQUEST:
            self._parameter_update_request(connection_handle, identifier, payload)
        # Responses to our own requests need no action.

    def _parameter_update_request(self, handle: int, identifier: int, payload: bytes) -> None:
        if len(payload) < _PARAMETERS.size:
            return
        request = ConnectionParameterUpdate(*_PARAMETERS.unpack_from(payload))

        result = _ACCEPTED
        if self._min_interval and self._max_interval:
            if (
                request.min_interval < self._min_interval
                or request.max_interval > self._max_interval
            ):
                result = _REJECTED
        if self._supervision_timeout:
            if request.supervision_timeout != self._supervision_timeout:
                result = _REJECTED

        response = _pack_command(
            SignalingCode.CONNECTION_PARAMETER_UPDATE_RESPONSE,
            identifier,
            _RESULT.pack(result),
        )
        self._send_acl(handle, SIGNALING_CID, response)

        if result == _ACCEPTED and self._conn_update is not None:
            self._conn_update(handle, request)

    def remove_connection(self, handle: int, reason: int) -> None:
        """Forget a connection; no per-connection state is kept here."""

    def set_connection_interval(self, min_interval: int, max_interval: int) -> None:
        """Set the preferred interval range; zero means no preference."""
        self._min_interval = _check_u16("min_interval", min_interval)
        self._max_interval = _check_u16("max_interval", max_interval)

    def set_supervision_timeout(self, supervision_timeout: int) -> None:
        """Set the required supervision timeout; zero means no preference."""
        self._supervision_timeout = _check_u16("supervision_timeout", supervision_timeout)

    def set_pairing_enabled(self, enabled: int) -> None:
        """0 disables pairing, 1 enables it, 2 allows a single pairing."""
        enabled = int(enabled)
        if not 0 <= enabled <= 0xFF:
            raise ValueError(f"pairing mode out of range: {enabled}")
        self._pairing_enabled = enabled

    def is_pairing_enabled(self) -> bool:
        """Whether an incoming pairing request would be accepted."""
        return self._pairing_enabled > 0

    def consume_pairing_request(self) -> bool:
        """Decide on an incoming pairing request, spending a one-shot permission."""
        if not self.is_pairing_enabled():
            return False
        if self._pairing_enabled >= 2:
            self._pairing_enabled = 0
        return True