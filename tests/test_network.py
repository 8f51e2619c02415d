import pytest

from projector_cast import network
from projector_cast.config import AddressFilter


@pytest.mark.parametrize('ip, expected', [
    ('192.168.1.20', True),
    ('10.1.2.3', True),
    ('172.16.5.4', True),
    ('172.31.255.254', True),
    ('127.0.0.1', False),
    ('0.0.0.0', False),
    ('169.254.10.1', False),
    ('198.18.0.1', False),
    ('198.19.3.3', False),
    ('100.64.0.7', False),
    ('100.127.1.1', False),
    ('10.8.0.2', False),
    ('10.9.0.14', False),
    ('8.8.8.8', False),
    ('172.32.0.1', False),
    ('not-an-ip', False),
    ('', False),
])
def test_is_valid_lan_ip(ip, expected):
    assert network.is_valid_lan_ip(ip) is expected


def test_is_valid_lan_ip_honours_custom_filter():
    flt = AddressFilter.from_strings(deny=['192.168.7.0/24'])
    assert not network.is_valid_lan_ip('192.168.7.3', flt)
    assert network.is_valid_lan_ip('192.168.8.3', flt)


def _patch_probes(monkeypatch, routes, interfaces=()):
    def probe(target, broadcast=False):
        return routes.get(target)

    monkeypatch.setattr(network, '_probe_local_address', probe)
    monkeypatch.setattr(network, '_interface_addresses', lambda: list(interfaces))


def test_detect_prefers_gateway_probe(monkeypatch):
    _patch_probes(monkeypatch, {'192.168.1.1': '192.168.1.20', '8.8.8.8': '10.0.0.5'})
    assert network.detect_lan_ipv4() == '192.168.1.20'


def test_detect_skips_vpn_addresses(monkeypatch):
    _patch_probes(monkeypatch, {
        '192.168.1.1': '198.18.0.1',
        '192.168.0.1': '100.64.0.2',
        '8.8.8.8': '192.168.0.33',
    })
    assert network.detect_lan_ipv4() == '192.168.0.33'


def test_detect_falls_back_to_broadcast_probe(monkeypatch):
    _patch_probes(monkeypatch, {'192.168.1.255': '192.168.1.77'})
    assert network.detect_lan_ipv4() == '192.168.1.77'


def test_detect_falls_back_to_interface_table(monkeypatch):
    _patch_probes(monkeypatch, {'8.8.8.8': '10.8.0.6'}, interfaces=['127.0.0.1', '172.20.1.9'])
    assert network.detect_lan_ipv4() == '172.20.1.9'


def test_detect_returns_none_when_nothing_qualifies(monkeypatch):
    _patch_probes(monkeypatch, {'8.8.8.8': '100.100.1.1'}, interfaces=['127.0.0.1'])
    assert network.detect_lan_ipv4() is None


def test_subnet_broadcast():
    assert network.subnet_broadcast('192.168.1.20') == '192.168.1.255'
    assert network.subnet_broadcast('10.20.30.40') == '10.20.30.255'


def _patch_interfaces(monkeypatch, table):
    def ifaddresses(iface):
        if iface not in table:
            raise ValueError('You must specify a valid interface name.')
        return table[iface]

    monkeypatch.setattr(network, '_probe_local_address', lambda target, broadcast=False: None)
    monkeypatch.setattr(network.netifaces, 'interfaces', lambda: ['lo', 'tun0', 'eth0'])
    monkeypatch.setattr(network.netifaces, 'ifaddresses', ifaddresses)


def test_detect_skips_interfaces_that_vanish(monkeypatch):
    _patch_interfaces(monkeypatch, {
        'lo': {network.netifaces.AF_INET: [{'addr': '127.0.0.1'}]},
        'eth0': {network.netifaces.AF_INET: [{'addr': '192.168.1.30'}]},
    })
    assert network.detect_lan_ipv4() == '192.168.1.30'


def test_detect_returns_none_when_every_interface_vanishes(monkeypatch):
    _patch_interfaces(monkeypatch, {})
    assert network.detect_lan_ipv4() is None
