"""
Runtime configuration for discovery.

Address classification is a best-effort heuristic: the deny list holds ranges
commonly handed out by VPN clients and proxies, the allow list holds the
private LAN ranges. Both can be extended from the command line or from the
environment without touching the defaults.
"""

import ipaddress
import os
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from projector_cast.const import SSDP_DEFAULT_TIMEOUT, SSDP_SEARCH_TARGET

DENY_ENV = 'PROJECTOR_CAST_DENY_NETWORKS'
ALLOW_ENV = 'PROJECTOR_CAST_ALLOW_NETWORKS'

DEFAULT_DENIED = (
    '198.18.0.0/15',   # benchmark range, used by proxy "fake-ip" modes
    '100.64.0.0/10',   # CGNAT, Tailscale and friends
    '10.8.0.0/24',     # OpenVPN default
    '10.9.0.0/24',
)
DEFAULT_ALLOWED = (
    '192.168.0.0/16',
    '10.0.0.0/8',
    '172.16.0.0/12',
)

Networks = Tuple[ipaddress.IPv4Network, ...]


def _parse_networks(values: Iterable[str]) -> Networks:
    networks = []
    for value in values:
        value = value.strip()
        if value:
            networks.append(ipaddress.IPv4Network(value, strict=False))
    return tuple(networks)


@dataclass(frozen=True)
class AddressFilter:
    """Deny/allow lists used to pick a LAN-facing IPv4 address."""

    denied: Networks
    allowed: Networks

    @classmethod
    def default(cls) -> 'AddressFilter':
        return cls(denied=_parse_networks(DEFAULT_DENIED), allowed=_parse_networks(DEFAULT_ALLOWED))

    @classmethod
    def from_strings(cls, deny: Iterable[str] = (), allow: Iterable[str] = ()) -> 'AddressFilter':
        """
        Build a filter from the defaults extended with extra CIDR strings.

        Raises:
            ValueError: If one of the strings is not an IPv4 network.
        """
        base = cls.default()
        return cls(
            denied=base.denied + _parse_networks(deny),
            allowed=base.allowed + _parse_networks(allow),
        )

    @classmethod
    def from_env(cls, deny: Iterable[str] = (), allow: Iterable[str] = ()) -> 'AddressFilter':
        """Like from_strings, also reading comma separated CIDRs from the environment."""
        env_deny = os.environ.get(DENY_ENV, '').split(',')
        env_allow = os.environ.get(ALLOW_ENV, '').split(',')
        return cls.from_strings(deny=list(deny) + env_deny, allow=list(allow) + env_allow)

    def is_denied(self, ip: ipaddress.IPv4Address) -> bool:
        return any(ip in net for net in self.denied)

    def is_allowed(self, ip: ipaddress.IPv4Address) -> bool:
        return any(ip in net for net in self.allowed)


@dataclass
class DiscoveryConfig:
    """Knobs for a single scan."""

    timeout: float = SSDP_DEFAULT_TIMEOUT
    search_target: str = SSDP_SEARCH_TARGET
    address_filter: AddressFilter = field(default_factory=AddressFilter.default)
    # Skips interface detection when set.
    local_ip: Optional[str] = None
    strategies: Tuple[str, ...] = ('multicast', 'broadcast')
