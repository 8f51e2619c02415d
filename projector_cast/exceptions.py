"""Error types raised by projector_cast."""

from typing import List, Optional


class ProjectorCastError(Exception):
    """Base class for every error raised by this package."""


class DiscoveryError(ProjectorCastError):
    """Every discovery strategy failed; nothing could be collected."""

    def __init__(self, message: str, errors: Optional[List[Exception]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class DescriptorError(ProjectorCastError):
    """The device description document could not be fetched."""

    def __init__(self, location: str, message: str):
        super().__init__(f"{location}: {message}")
        self.location = location


class ControlUrlUnavailable(ProjectorCastError):
    """The device does not expose the control URL an action needs."""

    def __init__(self, service: str):
        super().__init__(f"{service} URL not available for this device")
        self.service = service


class ControlError(ProjectorCastError):
    """A SOAP action failed in transport or returned a non-2xx status."""

    def __init__(self, action: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"SOAP action '{action}' failed: {message}")
        self.action = action
        self.status_code = status_code


class InvalidMacFormat(ProjectorCastError, ValueError):
    """A MAC address could not be decoded into exactly six bytes."""
