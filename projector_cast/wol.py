"""Wake-on-LAN magic packets."""

import binascii
import logging
import socket

from projector_cast.const import GLOBAL_BROADCAST_ADDR, WOL_MAC_REPEAT, WOL_PORT, WOL_SYNC_BYTES
from projector_cast.exceptions import InvalidMacFormat

_LOG = logging.getLogger(__name__)


def parse_mac(mac_address: str) -> bytes:
    """
    Decode 'AA:BB:CC:DD:EE:FF', 'AA-BB-...' or 'AABBCCDDEEFF' into six bytes.

    Raises:
        InvalidMacFormat: If the input is not hex or not six bytes long.
    """
    cleaned = mac_address.strip().replace(':', '').replace('-', '')
    try:
        mac = binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError) as e:
        raise InvalidMacFormat(f"Invalid MAC address format: {mac_address!r}") from e
    if len(mac) != 6:
        raise InvalidMacFormat(f"MAC address must be 6 bytes, got {len(mac)}: {mac_address!r}")
    return mac


def build_magic_packet(mac_address: str) -> bytes:
    """Return the 102-byte packet: six 0xFF bytes, then the MAC sixteen times."""
    return WOL_SYNC_BYTES + parse_mac(mac_address) * WOL_MAC_REPEAT


def wake_on_lan(mac_address: str, broadcast: str = GLOBAL_BROADCAST_ADDR, port: int = WOL_PORT) -> bytes:
    """
    Broadcast a magic packet for mac_address.

    Delivery cannot be confirmed; returning means the OS accepted the datagram.

    Returns:
        The packet that was sent.

    Raises:
        InvalidMacFormat: If mac_address is malformed.
        OSError: If the datagram cannot be sent.
    """
    packet = build_magic_packet(mac_address)
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.sendto(packet, (broadcast, port))
    finally:
        sock.close()
    _LOG.info("Sent Wake-on-LAN packet for %s to %s:%d", mac_address, broadcast, port)
    return packet
