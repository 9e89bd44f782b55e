"""Sending blobs, filters and sensor status as OSC messages over UDP."""

from __future__ import annotations

import socket
import struct
from collections.abc import Iterable, Sequence

from .blob import Blob
from .filter import Filters
from .sensors import Sensors

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 5322

Message = tuple[str, list]


def _padded(data: bytes) -> bytes:
    return data + b"\x00" * (4 - len(data) % 4)


def encode_message(address: str, args: Iterable[int | float | str | bool]) -> bytes:
    """Encode an OSC 1.0 message with int32, float32 and string arguments."""
    tags = ","
    payload = b""
    for arg in args:
        if isinstance(arg, bool):
            tags += "i"
            payload += struct.pack(">i", int(arg))
        elif isinstance(arg, int):
            tags += "i"
            payload += struct.pack(">i", arg)
        elif isinstance(arg, float):
            tags += "f"
            payload += struct.pack(">f", arg)
        elif isinstance(arg, str):
            tags += "s"
            payload += _padded(arg.encode("utf-8"))
        else:
            raise TypeError(f"unsupported OSC argument: {arg!r}")
    return _padded(address.encode("ascii")) + _padded(tags.encode("ascii")) + payload


class OscSender:
    """One OSC destination and what to send to it."""

    def __init__(self, address: str = DEFAULT_ADDRESS, port: int = DEFAULT_PORT) -> None:
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._address = address
        self._port = port
        self._target = (address, port)
        self.send_blobs_active = False
        self.send_filters_active = False
        self.send_logs_active = False
        self.last_connection_status = ""
        self.last_laser_status = ""
        self.last_general_status = ""

    def __enter__(self) -> "OscSender":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # A value of zero keeps the previous destination.
    @property
    def address(self) -> str:
        return self._address

    @address.setter
    def address(self, value: str) -> None:
        self._address = value
        if self._port != 0:
            self._target = (value, self._port)

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        self._port = value
        if value != 0:
            self._target = (self._address, value)

    @property
    def target(self) -> tuple[str, int]:
        return self._target

    def send_message(self, address: str, args: Sequence[int | float | str | bool]) -> bytes:
        """Send one message and return its encoded bytes."""
        data = encode_message(address, args)
        self._socket.sendto(data, self._target)
        return data

    def _send(self, sent: list[Message], address: str, args: list) -> None:
        self.send_message(address, args)
        sent.append((address, args))

    def send_blobs(self, blobs: Iterable[Blob], filters: Filters) -> list[Message]:
        """Send one /blob per blob, then /blobsActive with all indices."""
        sent: list[Message] = []
        active: list[int] = []
        for blob in blobs:
            active.append(blob.index)
            x = blob.centroid[0] * 0.001
            y = blob.centroid[1] * 0.001
            args: list[int | float] = [
                blob.index,
                float(x),
                float(y),
                float(blob.bounds.width),
                float(blob.bounds.height),
                float(blob.intensity),
            ]
            args.extend(
                f.index for f in filters.filters if f.contains(x, y) and not f.mask
            )
            self._send(sent, "/blob", args)
        self._send(sent, "/blobsActive", active)
        return sent

    def send_filters(self, filters: Filters) -> list[Message]:
        """Send one /filter per filter with its blob presence."""
        sent: list[Message] = []
        for f in filters.filters:
            args: list[int | float] = [f.index, int(f.is_blob_inside)]
            if f.is_blob_inside:
                args.append(float(f.distance_of_closest_blob))
            self._send(sent, "/filter", args)
        return sent

    def send_logs(self, sensors: Sensors) -> list[Message]:
        """Send sensor statuses that changed since they were last sent."""
        sent: list[Message] = []
        for hokuyo in sensors.hokuyos:
            if self.last_connection_status != hokuyo.connection_status:
                self.last_connection_status = hokuyo.connection_status
                self._send(
                    sent, "/connectionStatus", [hokuyo.index, hokuyo.connection_status]
                )
            if self.last_general_status != hokuyo.status:
                self.last_general_status = hokuyo.status
                self._send(sent, "/generalStatus", [hokuyo.index, hokuyo.status])
            if self.last_laser_status != hokuyo.laser_state:
                self.last_laser_status = hokuyo.laser_state
                self._send(sent, "/laserStatus", [hokuyo.index, hokuyo.laser_state])
        return sent

    def close(self) -> None:
        self._socket.close()


class OscSenders:
    """All OSC destinations."""

    def __init__(self) -> None:
        self.osc_senders: list[OscSender] = []

    def __iter__(self):
        return iter(self.osc_senders)

    def __len__(self) -> int:
        return len(self.osc_senders)

    def add_osc_sender(self, sender: OscSender) -> None:
        self.osc_senders.append(sender)

    def remove_osc_sender(self) -> OscSender:
        """Remove and return the most recently added sender."""
        if not self.osc_senders:
            raise IndexError("no OSC sender to remove")
        return self.osc_senders.pop()

    def send(self, blobs: Sequence[Blob], sensors: Sensors, filters: Filters) -> None:
        for sender in self.osc_senders:
            if sender.send_blobs_active:
                sender.send_blobs(blobs, filters)
            if sender.send_filters_active:
                sender.send_filters(filters)
            if sender.send_logs_active:
                sender.send_logs(sensors)