# blelink

Building blocks for the host side of a Bluetooth Low Energy link.

## Modules

- `blelink.crypto` is the LE Secure Connections toolbox.
  - `aes_128(key, block)` encrypts a single 16-byte block.
  - `generate_subkeys(key)` returns the CMAC subkeys `(K1, K2)`.
  - `aes_cmac(key, message)` returns a 16-byte MAC.
  - `f5(dhkey, n_master, n_slave, addr_master, addr_slave)` returns `(mac_key, ltk)`. Its addresses are 7 bytes each: the address type followed by the address.
  - `f6(w, n1, n2, r, io_cap, a1, a2)` returns the 16-byte DHKey check value.
  - `g2(u, v, x, y)` returns the 4-byte numeric comparison value, most significant byte first.
  - `ah(k, r)` returns the 3-byte random address hash.
  - `format_bytes(data)` renders bytes as `0x..` hex values separated by commas.

  Every function checks the length of its inputs and raises `ValueError` when a length is wrong.
- `blelink.flags` provides the `AuthReq` and `KeyDistribution` bit fields, which are built from one octet.
  - `AuthReq` has the boolean properties `bonding`, `mitm`, `sc`, `keypress` and `ct2`.
  - `KeyDistribution` has the boolean properties `enc_key`, `id_key`, `sign_key` and `link_key`.
  - Each of these properties can be read and set. `int()` gives the octet back.
  - The `IOCap` enumeration lists the input/output capabilities.
- `blelink.signaling` provides `L2CAPSignaling`, the peripheral side of the LE signaling channel.
  - It answers connection parameter update requests. Each request is accepted or rejected against the preferences set with `set_connection_interval` and `set_supervision_timeout`.
  - When a central connects with parameters outside those preferences, `add_connection` asks it to change them.
  - The pairing policy is set with `set_pairing_enabled`: 0 means off, 1 means on, and 2 allows a single pairing. `is_pairing_enabled` reports the current setting. `consume_pairing_request` decides on one incoming request and uses up the single permission if that is the mode.
- `blelink.transport` provides HCI byte streams that share the `Transport` interface: `begin`, `end`, `wait`, `available`, `peek`, `read` and `write`.
  - A transport can also be used as a context manager.
  - Timeouts are given in seconds.
  - `peek` and `read` return `None` when no byte is available.

  The implementations are:
  - `BufferedTransport(sink, capacity)` passes each written packet to `sink(packet_type, payload)`. Data delivered through `receive` goes into a bounded buffer, and data that does not fit is dropped whole.
  - `QueueTransport(capacity)` is a pair of bounded in-memory streams to an in-process controller. The controller uses `deliver` and `take_outgoing`.
  - `UartTransport(port, baudrate)` works over a serial port or a pyserial URL.
- `blelink.linked_list` provides `LinkedList`, a small singly linked container. It supports `add`, `get`, `remove`, `clear`, `len()` and iteration. `get` and `remove` return `None` for an index that is out of range.

## Installation

```
pip install blelink
```

## Examples

Compute an AES-CMAC and the six-digit numeric comparison code used during pairing:

```python
from blelink.crypto import aes_cmac, format_bytes, g2

mac = aes_cmac(bytes(16), b"message")
print(format_bytes(mac))

value = g2(bytes(32), bytes(32), bytes(16), bytes(16))
print(int.from_bytes(value, "big") % 1_000_000)
```

Inspect and change pairing flags:

```python
from blelink.flags import AuthReq, KeyDistribution

req = AuthReq(0b00101101)
print(req.bonding, req.mitm, req.sc, req.ct2)

keys = KeyDistribution()
keys.id_key = True
print(int(keys))  # 2
```

Answer connection parameter update requests:

```python
from blelink.signaling import SIGNALING_CID, L2CAPSignaling

sent = []
signaling = L2CAPSignaling(
    send_acl=lambda handle, cid, payload: sent.append((handle, cid, payload)),
    conn_update=lambda handle, params: print("update", handle, params),
)
signaling.set_connection_interval(6, 12)

# code 0x12, identifier 1, length 8; min 6, max 12, latency 0, timeout 400
request = bytes.fromhex("12010800" "0600" "0c00" "0000" "9001")
signaling.handle_data(0x40, request)
print(sent)  # one response on SIGNALING_CID with result 0 (accepted)
```

Exchange HCI bytes through an in-memory transport:

```python
from blelink.transport import QueueTransport

with QueueTransport(258) as transport:
    transport.deliver(b"\x04\x0e")
    print(transport.available(), transport.read())  # 2 4
```

## What this package does not do

This package is not a complete Bluetooth host stack. It does not include:

- an HCI command and event layer;
- ATT or GATT;
- GAP advertising or scanning;
- a Security Manager that processes pairing packets.

`L2CAPSignaling` handles only connection parameter updates and the decision on whether a pairing request is allowed. The crypto functions compute the pairing values, but nothing here runs the pairing exchange. No command-line program is provided.

## Running the tests

```
pip install -e ".[test]"
pytest
```