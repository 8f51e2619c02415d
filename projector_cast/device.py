"""
Device records and description-document resolution.

A DeviceRecord is what a scan hands back for each renderer: its name, its
address and the absolute control URLs of the two services playback needs.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from projector_cast.const import (
    AV_TRANSPORT_SERVICE,
    DESCRIPTION_TIMEOUT,
    RENDERING_CONTROL_SERVICE,
    UNKNOWN_DEVICE_NAME,
)
from projector_cast.exceptions import DescriptorError
from projector_cast.xmlscrape import extract_control_url, extract_tag

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceRecord:
    friendly_name: str
    ip: str
    description_url: str
    av_transport_control_url: Optional[str] = None
    rendering_control_url: Optional[str] = None

    @property
    def supports_playback(self) -> bool:
        return self.av_transport_control_url is not None

    @property
    def supports_rendering(self) -> bool:
        return self.rendering_control_url is not None


def host_from_url(url: str) -> str:
    """Return the host part of url: everything between '://' and the next ':' or '/'."""
    _, sep, rest = url.partition('://')
    if not sep:
        rest = url
    for delim in (':', '/'):
        rest = rest.split(delim, 1)[0]
    return rest


def resolve_control_url(location_url: str, control_path: str) -> str:
    """
    Make a controlURL absolute.

    URLs that already carry a scheme are returned as-is. Anything else is
    joined onto the directory of the description document, i.e. everything
    before its last '/'.
    """
    if control_path.startswith(('http://', 'https://')):
        return control_path
    base = location_url.rsplit('/', 1)[0] if '/' in location_url else location_url
    return f"{base}/{control_path.lstrip('/')}"


def parse_description(location_url: str, doc: str) -> DeviceRecord:
    """Build a DeviceRecord from an already fetched description document."""
    friendly_name = extract_tag(doc, 'friendlyName') or UNKNOWN_DEVICE_NAME

    av_path = extract_control_url(doc, AV_TRANSPORT_SERVICE)
    rc_path = extract_control_url(doc, RENDERING_CONTROL_SERVICE)

    return DeviceRecord(
        friendly_name=friendly_name,
        ip=host_from_url(location_url),
        description_url=location_url,
        av_transport_control_url=resolve_control_url(location_url, av_path) if av_path else None,
        rendering_control_url=resolve_control_url(location_url, rc_path) if rc_path else None,
    )


def resolve(location_url: str, timeout: float = DESCRIPTION_TIMEOUT) -> DeviceRecord:
    """
    Fetch a device description and turn it into a DeviceRecord.

    Args:
        location_url: The LOCATION advertised in the SSDP response.
        timeout: Seconds to wait for the description document.

    Returns:
        The resolved record. Missing services leave their control URL as None.

    Raises:
        DescriptorError: If the document cannot be fetched.
    """
    try:
        response = requests.get(location_url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise DescriptorError(location_url, str(e)) from e

    doc = response.content.decode('utf-8', errors='replace')
    record = parse_description(location_url, doc)
    _LOG.debug("Resolved %s -> %r", location_url, record)
    return record
