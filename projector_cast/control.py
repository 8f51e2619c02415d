"""
Playback control for a resolved DeviceRecord.

Every operation looks up the control URL it needs first and raises
ControlUrlUnavailable before touching the network when the device does not
expose that service. Query operations never fail on odd response XML; they
fall back to 0, '00:00:00' or TransportState.UNKNOWN.
"""

import logging
from typing import Tuple
from xml.sax.saxutils import escape

from projector_cast.const import AV_TRANSPORT_SERVICE, RENDERING_CONTROL_SERVICE
from projector_cast.device import DeviceRecord
from projector_cast.exceptions import ControlUrlUnavailable
from projector_cast.soap import invoke
from projector_cast.transport import TransportState, parse_time
from projector_cast.xmlscrape import extract_tag

_LOG = logging.getLogger(__name__)

INSTANCE = '<InstanceID>0</InstanceID>'
MASTER = INSTANCE + '<Channel>Master</Channel>'
ZERO_TIME = '00:00:00'
MAX_VOLUME = 255


def _av_url(device: DeviceRecord) -> str:
    if not device.av_transport_control_url:
        raise ControlUrlUnavailable('AVTransport')
    return device.av_transport_control_url


def _rc_url(device: DeviceRecord) -> str:
    if not device.rendering_control_url:
        raise ControlUrlUnavailable('RenderingControl')
    return device.rendering_control_url


def _av_action(device: DeviceRecord, action: str, arguments: str = INSTANCE) -> str:
    return invoke(_av_url(device), AV_TRANSPORT_SERVICE, action, arguments)


def _rc_action(device: DeviceRecord, action: str, arguments: str = MASTER) -> str:
    return invoke(_rc_url(device), RENDERING_CONTROL_SERVICE, action, arguments)


# --- AVTransport ---
def cast_video(device: DeviceRecord, url: str) -> None:
    """Sets the media URI and then sends the play command."""
    _LOG.info("Casting %s to %s", url, device.friendly_name)
    _av_action(
        device,
        'SetAVTransportURI',
        f"{INSTANCE}<CurrentURI>{escape(url)}</CurrentURI><CurrentURIMetaData></CurrentURIMetaData>",
    )
    play(device)


def play(device: DeviceRecord) -> None:
    _av_action(device, 'Play', f"{INSTANCE}<Speed>1</Speed>")


def pause(device: DeviceRecord) -> None:
    _av_action(device, 'Pause')


def stop(device: DeviceRecord) -> None:
    _av_action(device, 'Stop')


def seek(device: DeviceRecord, target: str) -> None:
    """Seek to a relative position given as HH:MM:SS."""
    _av_action(device, 'Seek', f"{INSTANCE}<Unit>REL_TIME</Unit><Target>{escape(target)}</Target>")


def get_position_info(device: DeviceRecord) -> Tuple[str, str]:
    """Return (RelTime, TrackDuration) as HH:MM:SS strings."""
    xml = _av_action(device, 'GetPositionInfo')
    current = extract_tag(xml, 'RelTime') or ZERO_TIME
    total = extract_tag(xml, 'TrackDuration') or ZERO_TIME
    return current, total


def get_position_info_seconds(device: DeviceRecord) -> Tuple[int, int]:
    """Return (elapsed, duration) in seconds, tolerating prefixed or attributed tags."""
    xml = _av_action(device, 'GetPositionInfo')
    current = extract_tag(xml, 'RelTime', lenient=True) or ZERO_TIME
    total = extract_tag(xml, 'TrackDuration', lenient=True) or ZERO_TIME
    return parse_time(current), parse_time(total)


def get_transport_info(device: DeviceRecord) -> TransportState:
    xml = _av_action(device, 'GetTransportInfo')
    return TransportState.from_upnp(extract_tag(xml, 'CurrentTransportState', lenient=True))


# --- RenderingControl ---
def set_volume(device: DeviceRecord, volume: int) -> None:
    """Sets the master volume. The value is passed through unclamped."""
    _rc_action(device, 'SetVolume', f"{MASTER}<DesiredVolume>{int(volume)}</DesiredVolume>")


def get_volume(device: DeviceRecord) -> int:
    xml = _rc_action(device, 'GetVolume')
    value = extract_tag(xml, 'CurrentVolume', lenient=True) or ''
    if value.isdigit() and value.isascii() and int(value) <= MAX_VOLUME:
        return int(value)
    _LOG.debug("Unparsable CurrentVolume %r from %s", value, device.ip)
    return 0


def set_mute(device: DeviceRecord, mute: bool) -> None:
    _rc_action(device, 'SetMute', f"{MASTER}<DesiredMute>{'1' if mute else '0'}</DesiredMute>")


def get_mute(device: DeviceRecord) -> bool:
    xml = _rc_action(device, 'GetMute')
    value = extract_tag(xml, 'CurrentMute', lenient=True) or ''
    return value.lower() in ('1', 'true', 'yes')
