"""Listing the IPv4 addresses of the local network interfaces."""

from __future__ import annotations

import socket
from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class NetworkInterface:
    """A named interface with one IPv4 address."""

    interface: str
    ip: str

    @property
    def label(self) -> str:
        return f"{self.interface}: {self.ip}"


class InterfaceSelector:
    """Keeps the list of local interfaces and looks them up by label."""

    def __init__(self) -> None:
        self.interfaces: list[NetworkInterface] = []

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.interfaces]

    def list_interfaces(self) -> list[NetworkInterface]:
        """Refresh and return every IPv4 address of every interface."""
        self.interfaces = [
            NetworkInterface(name, address.address)
            for name, addresses in psutil.net_if_addrs().items()
            for address in addresses
            if address.family == socket.AF_INET
        ]
        return list(self.interfaces)

    def _lookup(self, label: str) -> NetworkInterface | None:
        found = None
        for entry in self.interfaces:
            if entry.label == label:
                found = entry
        return found

    def interface_for(self, label: str) -> str:
        """Interface name for a label, or an empty string if unknown."""
        entry = self._lookup(label)
        return entry.interface if entry else ""

    def ip_for(self, label: str) -> str:
        """IPv4 address for a label, or an empty string if unknown."""
        entry = self._lookup(label)
        return entry.ip if entry else ""