"""
SSDP discovery of UPnP media renderers.

Discovery runs an ordered list of strategies. Multicast goes first; when it
fails or finds nothing, the M-SEARCH is repeated as a UDP broadcast, which
still works in sandboxes that refuse multicast group membership. Results of
every attempted strategy are merged, keyed by device IP.
"""

import logging
import socket
import time
from typing import Callable, Dict, List, Optional, Set, Tuple

from projector_cast.config import DiscoveryConfig
from projector_cast.const import (
    GLOBAL_BROADCAST_ADDR,
    SSDP_ADDR,
    SSDP_MULTICAST_TTL,
    SSDP_POLL_INTERVAL,
    SSDP_PORT,
    SSDP_RECV_BUFFER,
)
from projector_cast.device import DeviceRecord, resolve
from projector_cast.exceptions import DescriptorError, DiscoveryError
from projector_cast.network import detect_lan_ipv4, subnet_broadcast

_LOG = logging.getLogger(__name__)

Address = Tuple[str, int]
Resolver = Callable[[str], DeviceRecord]


def build_msearch(mx: int, search_target: str) -> bytes:
    """Build the M-SEARCH request datagram."""
    return (
        f'M-SEARCH * HTTP/1.1\r\n'
        f'HOST: {SSDP_ADDR}:{SSDP_PORT}\r\n'
        f'MAN: "ssdp:discover"\r\n'
        f'MX: {mx}\r\n'
        f'ST: {search_target}\r\n\r\n'
    ).encode('utf-8')


def parse_location(data: bytes) -> Optional[str]:
    """
    Pull the LOCATION header out of an SSDP response.

    The header name is matched case-insensitively and only the first colon
    splits name from value, so the URL keeps its own colons. Undecodable
    datagrams and responses without the header yield None.
    """
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError:
        return None

    for line in text.splitlines()[1:]:
        name, sep, value = line.partition(':')
        if sep and name.strip().lower() == 'location':
            return value.strip() or None
    return None


class DiscoveryStrategy:
    """One way of sending an M-SEARCH and listening for the answers."""

    name = ''

    def open_socket(self, local_ip: Optional[str]) -> socket.socket:
        raise NotImplementedError

    def destinations(self, local_ip: Optional[str]) -> List[Address]:
        raise NotImplementedError

    def search(self, payload: bytes, local_ip: Optional[str], timeout: float) -> List[str]:
        """
        Send payload and collect LOCATION URLs until timeout elapses.

        Raises:
            OSError: If the socket cannot be set up, nothing could be sent,
                or receiving fails for a reason other than a timeout.
        """
        sock = self.open_socket(local_ip)
        try:
            sent = 0
            last_error: Optional[OSError] = None
            for dest in self.destinations(local_ip):
                try:
                    sock.sendto(payload, dest)
                    sent += 1
                except OSError as e:
                    _LOG.debug("%s: sending to %s:%d failed: %s", self.name, dest[0], dest[1], e)
                    last_error = e
            if not sent and last_error is not None:
                raise last_error
            return _receive_locations(sock, time.monotonic() + timeout)
        finally:
            sock.close()


class MulticastStrategy(DiscoveryStrategy):

    name = 'multicast'

    def open_socket(self, local_ip: Optional[str]) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(('', 0))
            iface = socket.inet_aton(local_ip or '0.0.0.0')
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, socket.inet_aton(SSDP_ADDR) + iface)
            if local_ip:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, iface)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, SSDP_MULTICAST_TTL)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    def destinations(self, local_ip: Optional[str]) -> List[Address]:
        return [(SSDP_ADDR, SSDP_PORT)]


class BroadcastStrategy(DiscoveryStrategy):

    name = 'broadcast'

    def open_socket(self, local_ip: Optional[str]) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(('', 0))
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    def destinations(self, local_ip: Optional[str]) -> List[Address]:
        dests = []
        if local_ip:
            dests.append((subnet_broadcast(local_ip), SSDP_PORT))
        dests.append((GLOBAL_BROADCAST_ADDR, SSDP_PORT))
        return dests


STRATEGIES: Dict[str, Callable[[], DiscoveryStrategy]] = {
    MulticastStrategy.name: MulticastStrategy,
    BroadcastStrategy.name: BroadcastStrategy,
}


def _receive_locations(sock: socket.socket, deadline: float) -> List[str]:
    """Read datagrams until deadline; a socket timeout ends the loop early."""
    locations = []
    while time.monotonic() < deadline:
        try:
            data, addr = sock.recvfrom(SSDP_RECV_BUFFER)
        except BlockingIOError:
            time.sleep(SSDP_POLL_INTERVAL)
            continue
        except socket.timeout:
            break

        location = parse_location(data)
        if location is None:
            _LOG.debug("Ignoring SSDP datagram from %s without LOCATION", addr[0])
            continue
        if location not in locations:
            locations.append(location)
    return locations


def _merge(
    locations: List[str],
    devices: List[DeviceRecord],
    seen_locations: Set[str],
    resolver: Resolver,
) -> None:
    for location in locations:
        if location in seen_locations:
            continue
        seen_locations.add(location)
        try:
            record = resolver(location)
        except DescriptorError as e:
            _LOG.debug("Dropping candidate: %s", e)
            continue
        if any(d.ip == record.ip for d in devices):
            continue
        _LOG.info("Found %s at %s", record.friendly_name, record.ip)
        devices.append(record)


def scan(
    timeout: Optional[float] = None,
    config: Optional[DiscoveryConfig] = None,
    resolver: Resolver = resolve,
    search_target: Optional[str] = None,
) -> List[DeviceRecord]:
    """
    Discover media renderers on the local network.

    Strategies from config.strategies are tried in order. The next one runs
    only while nothing has been found yet or every earlier one failed.

    Args:
        timeout: Listen window per strategy in seconds; overrides config.timeout.
        config: Discovery settings; defaults to DiscoveryConfig().
        resolver: Turns a LOCATION URL into a DeviceRecord.
        search_target: ST header of the M-SEARCH; overrides config.search_target.

    Returns:
        One DeviceRecord per device IP, in discovery order.

    Raises:
        DiscoveryError: If every attempted strategy failed.
        ValueError: If config.strategies names an unknown strategy.
    """
    if config is None:
        config = DiscoveryConfig()
    if timeout is None:
        timeout = config.timeout
    if search_target is None:
        search_target = config.search_target

    unknown = [name for name in config.strategies if name not in STRATEGIES]
    if unknown:
        raise ValueError(
            f"Unknown discovery strategies: {', '.join(unknown)} (known: {', '.join(STRATEGIES)})"
        )

    local_ip = config.local_ip or detect_lan_ipv4(config.address_filter)
    payload = build_msearch(max(1, int(timeout)), search_target)

    devices: List[DeviceRecord] = []
    seen_locations: Set[str] = set()
    errors: List[Exception] = []
    attempted = 0

    for name in config.strategies:
        if devices:
            break
        strategy = STRATEGIES[name]()
        attempted += 1
        try:
            locations = strategy.search(payload, local_ip, timeout)
        except OSError as e:
            _LOG.warning("SSDP %s discovery failed: %s", strategy.name, e)
            errors.append(e)
            continue
        _LOG.debug("SSDP %s discovery returned %d locations", strategy.name, len(locations))
        _merge(locations, devices, seen_locations, resolver)

    if attempted and len(errors) == attempted:
        raise DiscoveryError(
            f"All discovery strategies failed ({', '.join(config.strategies)})", errors
        ) from errors[-1]
    return devices
