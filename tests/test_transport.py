import pytest

from projector_cast.transport import TransportState, format_time, parse_time


@pytest.mark.parametrize('token, expected', [
    ('PLAYING', TransportState.PLAYING),
    ('playing', TransportState.PLAYING),
    ('paused_playback', TransportState.PAUSED),
    ('PAUSED', TransportState.PAUSED),
    ('Paused', TransportState.PAUSED),
    ('STOPPED', TransportState.STOPPED),
    ('TRANSITIONING', TransportState.TRANSITIONING),
    ('NO_MEDIA_PRESENT', TransportState.NO_MEDIA),
    (' stopped ', TransportState.STOPPED),
    ('RECORDING', TransportState.UNKNOWN),
    ('', TransportState.UNKNOWN),
    (None, TransportState.UNKNOWN),
])
def test_from_upnp(token, expected):
    assert TransportState.from_upnp(token) is expected


def test_parse_time():
    assert parse_time('01:02:03') == 3723
    assert parse_time('00:00:00') == 0
    assert parse_time('bad') == 0
    assert parse_time('1:2') == 0
    assert parse_time('1:2:3:4') == 0
    assert parse_time('') == 0
    assert parse_time(None) == 0


def test_parse_time_treats_bad_components_as_zero():
    assert parse_time('xx:02:03') == 123
    assert parse_time('01::03') == 3603
    assert parse_time('10:00:NOT_IMPLEMENTED') == 36000


def test_format_time():
    assert format_time(3723) == '01:02:03'
    assert format_time(0) == '00:00:00'
    assert format_time(-5) == '00:00:00'
    assert parse_time(format_time(45296)) == 45296


def test_parse_time_rejects_signed_and_underscored_components():
    assert parse_time('-1:00:00') == 0
    assert parse_time('00:-1:30') == 30
    assert parse_time('1_0:00:00') == 0
    assert parse_time('00:00:+5') == 0
