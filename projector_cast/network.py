"""
Local network inspection.

Finds a LAN-facing IPv4 address to join the SSDP multicast group on. Picking
"the" local address is heuristic: VPN clients and proxies routinely install
default routes through tunnel interfaces, so each candidate is classified with
an AddressFilter and tunnel-looking ranges are skipped.
"""

import ipaddress
import logging
import socket
from typing import Iterator, List, Optional

import netifaces

from projector_cast.config import AddressFilter
from projector_cast.const import BROADCAST_PROBES, GATEWAY_PROBES, PROBE_PORT, PUBLIC_PROBE

_LOG = logging.getLogger(__name__)


def is_valid_lan_ip(ip: str, address_filter: Optional[AddressFilter] = None) -> bool:
    """
    Decide whether an address looks like a usable LAN address.

    Args:
        ip: Dotted-quad IPv4 address.
        address_filter: Deny/allow lists; defaults to AddressFilter.default().

    Returns:
        True for private, non-tunnel addresses; False for anything else,
        including strings that are not IPv4 addresses.
    """
    if address_filter is None:
        address_filter = AddressFilter.default()
    try:
        addr = ipaddress.IPv4Address(ip)
    except ValueError:
        return False

    if addr.is_loopback or addr.is_unspecified or addr.is_link_local:
        return False
    if address_filter.is_denied(addr):
        return False
    return address_filter.is_allowed(addr)


def _probe_local_address(target: str, broadcast: bool = False) -> Optional[str]:
    """Return the local address the kernel would route to target from. No packet is sent."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        if broadcast:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.connect((target, PROBE_PORT))
        return sock.getsockname()[0]
    except OSError as e:
        _LOG.debug("Route probe via %s failed: %s", target, e)
        return None
    finally:
        sock.close()


def _interface_addresses() -> List[str]:
    """List IPv4 addresses bound to local interfaces."""
    addresses = []
    try:
        interfaces = netifaces.interfaces()
    except Exception as e:
        _LOG.debug("Could not enumerate interfaces: %s", e)
        return addresses

    for iface in interfaces:
        try:
            iface_addresses = netifaces.ifaddresses(iface)
        except ValueError as e:
            # Interface went away since interfaces() was called.
            _LOG.debug("Skipping interface %s: %s", iface, e)
            continue
        for info in iface_addresses.get(netifaces.AF_INET, []):
            addr = info.get('addr')
            if addr:
                addresses.append(addr)
    return addresses


def _candidates() -> Iterator[str]:
    for gateway in GATEWAY_PROBES:
        ip = _probe_local_address(gateway)
        if ip:
            yield ip

    ip = _probe_local_address(PUBLIC_PROBE)
    if ip:
        yield ip

    for bcast in BROADCAST_PROBES:
        ip = _probe_local_address(bcast, broadcast=True)
        if ip:
            yield ip

    yield from _interface_addresses()


def detect_lan_ipv4(address_filter: Optional[AddressFilter] = None) -> Optional[str]:
    """
    Find the first local IPv4 address that passes is_valid_lan_ip.

    Candidates come from, in order: routing probes towards conventional
    gateway addresses, a probe towards a public address, probes towards
    conventional subnet broadcast addresses, and finally the addresses
    reported by the interface table.

    Returns:
        The address, or None if no candidate qualifies.
    """
    for ip in _candidates():
        if is_valid_lan_ip(ip, address_filter):
            _LOG.debug("Using local address %s", ip)
            return ip
        _LOG.debug("Skipping local address candidate %s", ip)
    _LOG.warning("No usable LAN address found")
    return None


def subnet_broadcast(ip: str) -> str:
    """Return the /24 broadcast address for ip, e.g. 192.168.1.20 -> 192.168.1.255."""
    network = ipaddress.IPv4Network(f"{ip}/24", strict=False)
    return str(network.broadcast_address)
