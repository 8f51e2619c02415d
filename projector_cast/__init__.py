"""
projector_cast: a UPnP/DLNA control point.

Discovers media renderers with SSDP, resolves their AVTransport and
RenderingControl endpoints and drives playback over SOAP. Also sends
Wake-on-LAN packets.

Example usage:
    from projector_cast import scan, control

    for device in scan(timeout=3):
        print(device.friendly_name, device.ip)
        control.cast_video(device, 'http://example.com/video.mp4')
"""

__version__ = '1.0.0'

from projector_cast import control
from projector_cast.config import AddressFilter, DiscoveryConfig
from projector_cast.device import DeviceRecord, resolve
from projector_cast.exceptions import (
    ControlError,
    ControlUrlUnavailable,
    DescriptorError,
    DiscoveryError,
    InvalidMacFormat,
    ProjectorCastError,
)
from projector_cast.network import detect_lan_ipv4, is_valid_lan_ip
from projector_cast.ssdp import scan
from projector_cast.transport import TransportState, format_time, parse_time
from projector_cast.wol import wake_on_lan

__all__ = [
    'control',
    'scan',
    'resolve',
    'DeviceRecord',
    'DiscoveryConfig',
    'AddressFilter',
    'TransportState',
    'parse_time',
    'format_time',
    'detect_lan_ipv4',
    'is_valid_lan_ip',
    'wake_on_lan',
    'ProjectorCastError',
    'DiscoveryError',
    'DescriptorError',
    'ControlUrlUnavailable',
    'ControlError',
    'InvalidMacFormat',
]
