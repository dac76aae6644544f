"""LE Secure Connections cryptographic toolbox: AES-CMAC, f5, f6, g2 and ah."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

BLOCK_SIZE = 16
_RB = bytes(15) + b"\x87"
_F5_SALT = bytes.fromhex("6C888391AAF5A53860370BDB5A6083BE")
_F5_KEY_ID = bytes.fromhex("62746c65")
_F5_LENGTH = b"\x01\x00"


def _require(name: str, value: bytes, size: int) -> bytes:
    value = bytes(value)
    if len(value) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(value)}")
    return value


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _double(block: bytes) -> bytes:
    shifted = ((int.from_bytes(block, "big") << 1) & ((1 << 128) - 1)).to_bytes(
        BLOCK_SIZE, "big"
    )
    return _xor(shifted, _RB) if block[0] & 0x80 else shifted


def aes_128(key: bytes, block: bytes) -> bytes:
    """Encrypt one 16-byte block with AES-128."""
    key = _require("key", key, BLOCK_SIZE)
    block = _require("block", block, BLOCK_SIZE)
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    return encryptor.update(block) + encryptor.finalize()


def generate_subkeys(key: bytes) -> tuple[bytes, bytes]:
    """Return the CMAC subkeys (K1, K2) for ``key``."""
    k1 = _double(aes_128(key, bytes(BLOCK_SIZE)))
    return k1, _double(k1)


def aes_cmac(key: bytes, message: bytes) -> bytes:
    """Return the 16-byte AES-CMAC of ``message`` under ``key``."""
    key = _require("key", key, BLOCK_SIZE)
    message = bytes(message)
    k1, k2 = generate_subkeys(key)
    blocks = max(1, -(-len(message) // BLOCK_SIZE))
    last_start = BLOCK_SIZE * (blocks - 1)
    last = message[last_start:]
    if message and len(message) % BLOCK_SIZE == 0:
        m_last = _xor(last, k1)
    else:
        padded = last + b"\x80" + bytes(BLOCK_SIZE - len(last) - 1)
        m_last = _xor(padded, k2)

    x = bytes(BLOCK_SIZE)
    for start in range(0, last_start, BLOCK_SIZE):
        x = aes_128(key, _xor(x, message[start:start + BLOCK_SIZE]))
    return aes_128(key, _xor(x, m_last))


def f5(
    dhkey: bytes,
    n_master: bytes,
    n_slave: bytes,
    addr_master: bytes,
    addr_slave: bytes,
) -> tuple[bytes, bytes]:
    """Derive (MacKey, LTK) from the DH key, nonces and 7-byte typed addresses."""
    dhkey = _require("dhkey", dhkey, 32)
    body = (
        _F5_KEY_ID
        + _require("n_master", n_master, 16)
        + _require("n_slave", n_slave, 16)
        + _require("addr_master", addr_master, 7)
        + _require("addr_slave", addr_slave, 7)
        + _F5_LENGTH
    )
    t = aes_cmac(_F5_SALT, dhkey)
    mac_key = aes_cmac(t, b"\x00" + body)
    ltk = aes_cmac(t, b"\x01" + body)
    return mac_key, ltk


def f6(
    w: bytes,
    n1: bytes,
    n2: bytes,
    r: bytes,
    io_cap: bytes,
    a1: bytes,
    a2: bytes,
) -> bytes:
    """Compute the 16-byte DHKey check value."""
    message = (
        _require("n1", n1, 16)
        + _require("n2", n2, 16)
        + _require("r", r, 16)
        + _require("io_cap", io_cap, 3)
        + _require("a1", a1, 7)
        + _require("a2", a2, 7)
    )
    return aes_cmac(_require("w", w, 16), message)


def g2(u: bytes, v: bytes, x: bytes, y: bytes) -> bytes:
    """Compute the 4-byte numeric comparison value (most significant byte first)."""
    message = _require("u", u, 32) + _require("v", v, 32) + _require("y", y, 16)
    return aes_cmac(_require("x", x, 16), message)[12:]


def ah(k: bytes, r: bytes) -> bytes:
    """Compute the 3-byte random address hash of ``r`` under IRK ``k``."""
    r = _require("r", r, 3)
    return aes_128(k, bytes(13) + r)[13:]


def format_bytes(data: bytes) -> str:
    """Render bytes as comma separated upper-case hex values."""
    return ", ".join(f"0x{byte:X}" for byte in data)