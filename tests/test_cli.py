from unittest import mock

import pytest

from projector_cast import cli
from projector_cast.device import DeviceRecord
from projector_cast.exceptions import DiscoveryError

DEVICE = DeviceRecord('Projector', '10.0.0.5', 'http://10.0.0.5:80/desc.xml', 'http://10.0.0.5/av', 'http://10.0.0.5/rc')
OTHER = DeviceRecord('Kitchen TV', '10.0.0.6', 'http://10.0.0.6:80/desc.xml', 'http://10.0.0.6/av', None)


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_parser_device_options():
    args = cli.build_parser().parse_args(['-t', '5', 'volume', '--ip', '10.0.0.5', '30'])
    assert args.timeout == 5.0
    assert args.ip == '10.0.0.5'
    assert args.level == 30


@mock.patch('projector_cast.cli.wake_on_lan')
def test_wake(mock_wake):
    assert cli.main(['wake', 'AA:BB:CC:DD:EE:FF']) == 0
    mock_wake.assert_called_once_with('AA:BB:CC:DD:EE:FF')


def test_wake_bad_mac_exits_nonzero():
    assert cli.main(['wake', 'AABBCC']) == 1


@mock.patch('projector_cast.cli.scan', return_value=[DEVICE, OTHER])
def test_scan_command(mock_scan):
    assert cli.main(['--local-ip', '192.168.1.20', 'scan']) == 0
    config = mock_scan.call_args.kwargs['config']
    assert config.local_ip == '192.168.1.20'


@mock.patch('projector_cast.cli.scan', side_effect=DiscoveryError('All discovery strategies failed'))
def test_scan_failure_exits_nonzero(mock_scan):
    assert cli.main(['scan']) == 1


@mock.patch('projector_cast.cli.control')
@mock.patch('projector_cast.cli.scan', return_value=[DEVICE, OTHER])
def test_device_selected_by_name(mock_scan, mock_control):
    assert cli.main(['pause', '--name', 'kitchen']) == 0
    mock_control.pause.assert_called_once_with(OTHER)


@mock.patch('projector_cast.cli.control')
@mock.patch('projector_cast.cli.resolve', return_value=DEVICE)
def test_seek_by_seconds_with_location(mock_resolve, mock_control):
    assert cli.main(['seek', '--location', DEVICE.description_url, '90']) == 0
    mock_resolve.assert_called_once_with(DEVICE.description_url)
    mock_control.seek.assert_called_once_with(DEVICE, '00:01:30')


@mock.patch('projector_cast.cli.scan', return_value=[])
def test_no_matching_device(mock_scan):
    assert cli.main(['play', '--ip', '10.0.0.99']) == 1
