"""Bluetooth Low Energy host helpers: LE Secure Connections crypto, pairing flags, L2CAP signaling, HCI transports and a linked list."""

__version__ = "0.1.0"
__all__ = ["crypto", "flags", "linked_list", "signaling", "transport"]