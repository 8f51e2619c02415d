"""Transport state mapping and HH:MM:SS helpers."""

from enum import Enum
from typing import Optional


class TransportState(Enum):
    STOPPED = 'Stopped'
    PLAYING = 'Playing'
    PAUSED = 'Paused'
    TRANSITIONING = 'Transitioning'
    NO_MEDIA = 'NoMedia'
    UNKNOWN = 'Unknown'

    @classmethod
    def from_upnp(cls, value: Optional[str]) -> 'TransportState':
        """Map a CurrentTransportState token; unrecognised or missing tokens give UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        return _UPNP_STATES.get(value.strip().upper(), cls.UNKNOWN)


_UPNP_STATES = {
    'PLAYING': TransportState.PLAYING,
    'PAUSED_PLAYBACK': TransportState.PAUSED,
    'PAUSED': TransportState.PAUSED,
    'STOPPED': TransportState.STOPPED,
    'TRANSITIONING': TransportState.TRANSITIONING,
    'NO_MEDIA_PRESENT': TransportState.NO_MEDIA,
}


def parse_time(value: Optional[str]) -> int:
    """
    Convert 'H:MM:SS' to seconds.

    Components that are not plain unsigned integers count as 0; anything
    that is not three colon-separated components gives 0.
    """
    if not value:
        return 0
    parts = value.strip().split(':')
    if len(parts) != 3:
        return 0

    total = 0
    for part, factor in zip(parts, (3600, 60, 1)):
        if part.isdigit() and part.isascii():
            total += int(part) * factor
    return total


def format_time(seconds: int) -> str:
    """Convert seconds to 'HH:MM:SS' as used by Seek targets."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
