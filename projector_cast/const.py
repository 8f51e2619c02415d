"""Process-wide constants for SSDP discovery, UPnP control and Wake-on-LAN."""

from typing import Tuple

# --- SSDP ---
SSDP_ADDR = '239.255.255.250'
SSDP_PORT = 1900
SSDP_DEFAULT_TIMEOUT = 3.0
SSDP_SEARCH_TARGET = 'upnp:rootdevice'
SSDP_MULTICAST_TTL = 2
SSDP_RECV_BUFFER = 2048
SSDP_POLL_INTERVAL = 0.05
GLOBAL_BROADCAST_ADDR = '255.255.255.255'

# --- Local address probing ---
GATEWAY_PROBES: Tuple[str, ...] = ('192.168.1.1', '192.168.0.1', '10.0.0.1', '172.16.0.1')
PUBLIC_PROBE = '8.8.8.8'
BROADCAST_PROBES: Tuple[str, ...] = ('192.168.1.255', '192.168.0.255', '10.0.0.255')
PROBE_PORT = 80

# --- UPnP services ---
AV_TRANSPORT_SERVICE = 'urn:schemas-upnp-org:service:AVTransport:1'
RENDERING_CONTROL_SERVICE = 'urn:schemas-upnp-org:service:RenderingControl:1'
SOAP_ENVELOPE_NS = 'http://schemas.xmlsoap.org/soap/envelope/'
SOAP_ENCODING_STYLE = 'http://schemas.xmlsoap.org/soap/encoding/'
UNKNOWN_DEVICE_NAME = 'unknown device'

# --- HTTP timeouts (seconds) ---
DESCRIPTION_TIMEOUT = 2
SOAP_TIMEOUT = 5

# --- Wake-on-LAN ---
WOL_PORT = 9
WOL_SYNC_BYTES = b'\xff' * 6
WOL_MAC_REPEAT = 16
