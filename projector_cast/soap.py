"""SOAP 1.1 framing and transport for UPnP control actions."""

import logging

import requests

from projector_cast.const import SOAP_ENCODING_STYLE, SOAP_ENVELOPE_NS, SOAP_TIMEOUT
from projector_cast.exceptions import ControlError

_LOG = logging.getLogger(__name__)


def build_envelope(service_type: str, action: str, arguments: str) -> str:
    """Wrap action arguments (already XML) in a SOAP envelope."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="{SOAP_ENVELOPE_NS}" s:encodingStyle="{SOAP_ENCODING_STYLE}">
    <s:Body>
        <u:{action} xmlns:u="{service_type}">
            {arguments}
        </u:{action}>
    </s:Body>
</s:Envelope>"""


def build_headers(service_type: str, action: str) -> dict:
    return {
        'Content-Type': 'text/xml; charset="utf-8"',
        'SOAPACTION': f'"{service_type}#{action}"',
    }


def invoke(
    control_url: str,
    service_type: str,
    action: str,
    arguments: str,
    timeout: float = SOAP_TIMEOUT,
) -> str:
    """
    Sends a SOAP action to a service control URL.

    Args:
        control_url: Absolute control URL of the service.
        service_type: The URN for the service type.
        action: The action to perform (e.g., 'SetVolume').
        arguments: The XML arguments for the action, inserted verbatim.
        timeout: Seconds to wait for the device.

    Returns:
        The raw response body.

    Raises:
        ControlError: On transport failure or a non-2xx status.
    """
    body = build_envelope(service_type, action, arguments)
    _LOG.debug("POST %s %s#%s", control_url, service_type, action)

    try:
        response = requests.post(
            control_url,
            data=body.encode('utf-8'),
            headers=build_headers(service_type, action),
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise ControlError(action, str(e)) from e

    if not 200 <= response.status_code < 300:
        raise ControlError(action, f"HTTP {response.status_code}", status_code=response.status_code)
    return response.content.decode('utf-8', errors='replace')
