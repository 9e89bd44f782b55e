import socket
from collections import namedtuple
from unittest import mock

from meatbags.interfaces import InterfaceSelector, NetworkInterface

Addr = namedtuple("Addr", "family address")

FAKE = {
    "eth0": [Addr(socket.AF_INET, "192.168.0.10"), Addr(socket.AF_INET6, "fe80::1")],
    "lo": [Addr(socket.AF_INET, "127.0.0.1")],
}


@mock.patch("psutil.net_if_addrs", return_value=FAKE)
def test_lists_only_ipv4(_patched):
    selector = InterfaceSelector()
    result = selector.list_interfaces()
    assert result == [
        NetworkInterface("eth0", "192.168.0.10"),
        NetworkInterface("lo", "127.0.0.1"),
    ]
    assert selector.labels == ["eth0: 192.168.0.10", "lo: 127.0.0.1"]


@mock.patch("psutil.net_if_addrs", return_value=FAKE)
def test_lookup_by_label(_patched):
    selector = InterfaceSelector()
    selector.list_interfaces()
    assert selector.interface_for("lo: 127.0.0.1") == "lo"
    assert selector.ip_for("eth0: 192.168.0.10") == "192.168.0.10"


@mock.patch("psutil.net_if_addrs", return_value=FAKE)
def test_unknown_label_gives_empty(_patched):
    selector = InterfaceSelector()
    selector.list_interfaces()
    assert selector.interface_for("wlan0: 10.0.0.1") == ""
    assert selector.ip_for("wlan0: 10.0.0.1") == ""


def test_list_replaces_previous_entries():
    selector = InterfaceSelector()
    with mock.patch("psutil.net_if_addrs", return_value=FAKE):
        selector.list_interfaces()
    with mock.patch("psutil.net_if_addrs", return_value={"lo": FAKE["lo"]}):
        selector.list_interfaces()
    assert selector.labels == ["lo: 127.0.0.1"]
    assert selector.ip_for("eth0: 192.168.0.10") == ""