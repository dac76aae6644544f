"""Bit fields of the Security Manager pairing request and response."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_BONDING = 0b00000001
_MITM = 0b00000100
_SC = 0b00001000
_KEYPRESS = 0b00010000
_CT2 = 0b00100000

_ENC_KEY = 0b00000001
_ID_KEY = 0b00000010
_SIGN_KEY = 0b00000100
_LINK_KEY = 0b00001000


class IOCap(enum.IntEnum):
    """Input/output capability of a device."""

    DISPLAY_ONLY = 0
    DISPLAY_YES_NO = 1
    KEYBOARD_ONLY = 2
    NO_INPUT_NO_OUTPUT = 3
    KEYBOARD_DISPLAY = 4


def _check_octet(octet: int) -> int:
    if not 0 <= octet <= 0xFF:
        raise ValueError(f"octet out of range: {octet}")
    return octet


def _with_bit(octet: int, mask: int, state: bool) -> int:
    return octet | mask if state else octet & ~mask & 0xFF


@dataclass
class AuthReq:
    """The AuthReq octet of a pairing request or response."""

    octet: int = 0

    def __post_init__(self) -> None:
        _check_octet(self.octet)

    @property
    def bonding(self) -> bool:
        """Bonding is requested."""
        return bool(self.octet & _BONDING)

    @bonding.setter
    def bonding(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _BONDING, state)

    @property
    def mitm(self) -> bool:
        """MITM protection is requested."""
        return bool(self.octet & _MITM)

    @mitm.setter
    def mitm(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _MITM, state)

    @property
    def sc(self) -> bool:
        """LE Secure Connections pairing is supported."""
        return bool(self.octet & _SC)

    @sc.setter
    def sc(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _SC, state)

    @property
    def keypress(self) -> bool:
        """Keypress notifications are used (Passkey Entry only)."""
        return bool(self.octet & _KEYPRESS)

    @keypress.setter
    def keypress(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _KEYPRESS, state)

    @property
    def ct2(self) -> bool:
        """The h7 function is supported."""
        return bool(self.octet & _CT2)

    @ct2.setter
    def ct2(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _CT2, state)

    def __int__(self) -> int:
        return self.octet


@dataclass
class KeyDistribution:
    """The initiator or responder key distribution octet."""

    octet: int = 0

    def __post_init__(self) -> None:
        _check_octet(self.octet)

    @property
    def enc_key(self) -> bool:
        """LTK distribution (ignored when SMP runs on LE transport)."""
        return bool(self.octet & _ENC_KEY)

    @enc_key.setter
    def enc_key(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _ENC_KEY, state)

    @property
    def id_key(self) -> bool:
        """IRK and identity address distribution."""
        return bool(self.octet & _ID_KEY)

    @id_key.setter
    def id_key(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _ID_KEY, state)

    @property
    def sign_key(self) -> bool:
        """CSRK distribution."""
        return bool(self.octet & _SIGN_KEY)

    @sign_key.setter
    def sign_key(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _SIGN_KEY, state)

    @property
    def link_key(self) -> bool:
        """Derive a BR/EDR link key from the LTK."""
        return bool(self.octet & _LINK_KEY)

    @link_key.setter
    def link_key(self, state: bool) -> None:
        self.octet = _with_bit(self.octet, _LINK_KEY, state)

    def __int__(self) -> int:
        return self.octet