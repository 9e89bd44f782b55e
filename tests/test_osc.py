import socket
import struct

import pytest

from meatbags.blob import Blob, Bounds
from meatbags.filter import Filter, Filters
from meatbags.hokuyo import Hokuyo
from meatbags.osc import OscSender, OscSenders, encode_message
from meatbags.sensors import Sensors


def _decode(data):
    def read_str(pos):
        end = data.index(b"\x00", pos)
        return data[pos:end].decode(), (end + 4) & ~3

    address, pos = read_str(0)
    tags, pos = read_str(pos)
    args = []
    for tag in tags[1:]:
        if tag == "i":
            args.append(struct.unpack(">i", data[pos : pos + 4])[0])
            pos += 4
        elif tag == "f":
            args.append(struct.unpack(">f", data[pos : pos + 4])[0])
            pos += 4
        else:
            value, pos = read_str(pos)
            args.append(value)
    return address, args


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def sender(receiver):
    with OscSender("127.0.0.1", receiver.getsockname()[1]) as s:
        yield s


def _receive(sock, count):
    return [_decode(sock.recvfrom(65536)[0]) for _ in range(count)]


def _square_filter(index):
    f = Filter(index, 4)
    f.points = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    f.update()
    return f


def test_encode_empty_message_bytes():
    assert encode_message("/a", []) == b"/a\x00\x00,\x00\x00\x00"


def test_encode_int_bytes():
    assert encode_message("/blob", [1]) == (
        b"/blob\x00\x00\x00,i\x00\x00\x00\x00\x00\x01"
    )


def test_encode_round_trip():
    address, args = _decode(encode_message("/x", [3, 0.5, "hello", True]))
    assert address == "/x"
    assert args == [3, 0.5, "hello", 1]


def test_encode_rejects_unknown_type():
    with pytest.raises(TypeError):
        encode_message("/x", [object()])


def test_send_message_returns_encoded_bytes(sender, receiver):
    data = sender.send_message("/a", [1])
    assert data == encode_message("/a", [1])
    assert _receive(receiver, 1) == [("/a", [1])]


def test_port_zero_keeps_target(sender, receiver):
    port = receiver.getsockname()[1]
    sender.port = 0
    assert sender.target == ("127.0.0.1", port)


def test_send_blobs(sender, receiver):
    filters = Filters()
    filters.add_filter(_square_filter(4))
    blob = Blob(centroid=(500.0, 250.0), bounds=Bounds(0, 0, 100.0, 50.0), intensity=8.0)
    blob.index = 2
    outside = Blob(centroid=(5000.0, 5000.0))
    outside.index = 3
    sent = sender.send_blobs([blob, outside], filters)
    assert [address for address, _ in sent] == ["/blob", "/blob", "/blobsActive"]
    assert sent[0][1] == pytest.approx([2, 0.5, 0.25, 100.0, 50.0, 8.0, 4])
    assert sent[2] == ("/blobsActive", [2, 3])
    first, second, active = _receive(receiver, 3)
    assert first[0] == "/blob"
    assert first[1] == pytest.approx([2, 0.5, 0.25, 100.0, 50.0, 8.0, 4])
    assert second[1][0] == 3
    assert len(second[1]) == 6
    assert active == ("/blobsActive", [2, 3])


def test_send_filters(sender, receiver):
    filters = Filters()
    f = _square_filter(1)
    blob = Blob(centroid=(500.0, 500.0))
    f.check_blobs([blob])
    filters.add_filter(f)
    sent = sender.send_filters(filters)
    assert len(sent) == 1
    assert sent[0][1][:2] == [1, 1]
    address, args = _receive(receiver, 1)[0]
    assert address == "/filter"
    assert args[:2] == [1, 1]
    assert args[2] == pytest.approx(f.distance_of_closest_blob, abs=1e-6)


def test_send_logs_only_changes(sender, receiver):
    sensors = Sensors()
    hokuyo = Hokuyo()
    hokuyo.index = 5
    hokuyo.status = "Disconnected"
    hokuyo.laser_state = "OFF"
    sensors.add_sensor(hokuyo)
    expected = [
        ("/connectionStatus", [5, "DISCONNECTED"]),
        ("/generalStatus", [5, "Disconnected"]),
        ("/laserStatus", [5, "OFF"]),
    ]
    assert sender.send_logs(sensors) == expected
    assert _receive(receiver, 3) == expected
    hokuyo.laser_state = "ON"
    assert sender.send_logs(sensors) == [("/laserStatus", [5, "ON"])]
    assert _receive(receiver, 1) == [("/laserStatus", [5, "ON"])]
    assert sender.send_logs(sensors) == []


def test_senders_respect_flags(sender, receiver):
    senders = OscSenders()
    senders.add_osc_sender(sender)
    sender.send_filters_active = True
    filters = Filters()
    filters.add_filter(_square_filter(7))
    senders.send([], Sensors(), filters)
    assert _receive(receiver, 1) == [("/filter", [7, 0])]
    assert senders.remove_osc_sender() is sender
    with pytest.raises(IndexError):
        senders.remove_osc_sender()