"""A laser range finder reached over TCP and its scan coordinates."""

from __future__ import annotations

import math
import select
import socket
import threading
from collections.abc import Callable, Sequence

from .draggable import DraggablePoint
from .scip import (
    check_sum,
    decode_6bit,
    format_distance_command,
    format_motor_speed_command,
    split_lines,
)

ANGULAR_RESOLUTION = 1440
DEFAULT_PORT = 10940
UNSET_IP = "0.0.0.0"

_DELIMITER = b"\n\n"
_CONNECT_TIMEOUT = 2.0


class _TcpClient:
    """A TCP connection that hands out messages ended by a blank line."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._buffer = bytearray()
        self._lock = threading.Lock()
        self.ip = ""
        self.port = 0

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def open(self, ip: str, port: int, local_ip: str = UNSET_IP) -> bool:
        self.close()
        source = None if local_ip in ("", UNSET_IP) else (local_ip, 0)
        try:
            sock = socket.create_connection(
                (ip, port), timeout=_CONNECT_TIMEOUT, source_address=source
            )
        except OSError:
            return False
        with self._lock:
            self._sock = sock
            self._buffer.clear()
            self.ip = ip
            self.port = port
        return True

    def _drop(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
        self._sock = None

    def send(self, text: str) -> bool:
        with self._lock:
            if self._sock is None:
                return False
            try:
                self._sock.sendall(text.encode("ascii"))
            except OSError:
                self._drop()
                return False
            return True

    def receive(self) -> str:
        with self._lock:
            while self._sock is not None:
                try:
                    readable, _, _ = select.select([self._sock], [], [], 0)
                    if not readable:
                        break
                    chunk = self._sock.recv(4096)
                except OSError:
                    self._drop()
                    break
                if not chunk:
                    self._drop()
                    break
                self._buffer += chunk
            end = self._buffer.find(_DELIMITER)
            if end < 0:
                return ""
            message = bytes(self._buffer[:end])
            del self._buffer[: end + len(_DELIMITER)]
            return message.decode("ascii", errors="replace")

    def close(self) -> None:
        with self._lock:
            self._drop()


class Hokuyo:
    """One range finder: connection, protocol state and scan coordinates."""

    def __init__(self, ip_address: str = UNSET_IP, port: int = DEFAULT_PORT) -> None:
        self._ip_address = ip_address
        self.port = port
        self.client = _TcpClient()
        self._connect_thread: threading.Thread | None = None
        self.index = 0

        self.reconnection_timeout = 5.0
        self.reconnection_timer = 0.0
        self.status_interval = 3.0
        self.status_timer = 0.0
        self.polling_interval = 1.0 / 30
        self.polling_timer = 0.0
        self.last_frame_time = 0.0

        self.is_connected = False
        self.laser_active = True
        self.auto_reconnect_active = True
        self.call_intensities_active = True
        self.new_coordinates_available = False
        self.align_requested = False
        self.show_sensor_information = False

        self.start_step = 0
        self.end_step = 1079
        self.cluster_count = 0
        self.angular_resolution = ANGULAR_RESOLUTION

        self.status = ""
        self.connection_status = "DISCONNECTED"
        self.laser_state = ""
        self.model = ""
        self.timestamp = 0
        self.measurement_mode = ""
        self.bit_rate = ""
        self.sensor_diagnostic = ""
        self.vendor_info = ""
        self.product_info = ""
        self.firmware_version = ""
        self.protocol_version = ""
        self.serial_number = ""
        self.minimum_measurable_distance = ""
        self.maximum_measurable_distance = ""
        self.angular_resolution_info = ""
        self.starting_step = ""
        self.ending_step = ""
        self.step_number_of_front_direction = ""
        self.scanning_speed = ""

        self.netmask = "255.255.255.0"
        self.gateway = "192.168.0.1"
        self.local_ip_address = UNSET_IP
        self.interface = ""

        self.angles = [0.0] * ANGULAR_RESOLUTION
        self.coordinates: list[tuple[float, float]] = [(0.0, 0.0)] * ANGULAR_RESOLUTION
        self.intensities = [0] * ANGULAR_RESOLUTION

        self.position = DraggablePoint()
        self.position.set_size(15.0)
        self.nose_position = DraggablePoint()
        self.nose_position.set_size(12.0)
        self.nose_radius = self.position.size + self.position.half_size

        self._sensor_rotation_deg = 0.0
        self.sensor_rotation_rad = 0.0
        self.mirror_angles = False
        self.set_mirror_angles(False)

    # settings that act when changed

    @property
    def ip_address(self) -> str:
        return self._ip_address

    @ip_address.setter
    def ip_address(self, value: str) -> None:
        self._ip_address = value
        self.client.close()
        self.connect()

    @property
    def position_x(self) -> float:
        """Sensor x position in meters."""
        return self.position.x * 0.001

    @position_x.setter
    def position_x(self, value: float) -> None:
        self.position.x = value * 1000.0

    @property
    def position_y(self) -> float:
        """Sensor y position in meters."""
        return self.position.y * 0.001

    @position_y.setter
    def position_y(self, value: float) -> None:
        self.position.y = value * 1000.0

    @property
    def sensor_rotation_deg(self) -> float:
        return self._sensor_rotation_deg

    @sensor_rotation_deg.setter
    def sensor_rotation_deg(self, value: float) -> None:
        self._sensor_rotation_deg = value
        self.sensor_rotation_rad = value / 360.0 * math.tau

    def set_mirror_angles(self, mirror: bool) -> None:
        """Rebuild the angle of every step, mirrored or not."""
        self.mirror_angles = mirror
        offset = -math.pi / 4
        if mirror:
            offset = -math.pi / 4 - math.pi / 2
        for step in range(self.angular_resolution):
            theta = step / self.angular_resolution * math.tau
            if mirror:
                theta = -theta
            self.angles[step] = theta + offset

    def set_interface_and_ip(self, interface: str, local_ip: str) -> None:
        self.interface = interface
        self.local_ip_address = local_ip

    # connection

    def connect(self) -> None:
        """Open the connection in the background unless no address is set."""
        if self._ip_address == UNSET_IP:
            return
        thread = threading.Thread(
            target=self.client.open,
            args=(self._ip_address, self.port, self.local_ip_address),
            daemon=True,
        )
        self._connect_thread = thread
        thread.start()

    def reconnect(self) -> None:
        self.reconnection_timer += self.last_frame_time
        if self.reconnection_timer > self.reconnection_timeout:
            self.status = "Attempting to reconnect"
            self.reconnection_timer = 0.0
            self.connect()

    def close(self) -> None:
        self.client.close()

    # commands

    def send(self, msg: str) -> None:
        self.client.send(msg + "\n")

    def send_reboot_command(self) -> None:
        # The sensor only reboots when the command arrives twice.
        self.send("RB")
        self.send("RB")

    def send_reset_status_command(self) -> None:
        self.send("RS")

    def send_set_motor_speed_command(self, motor_speed: int) -> None:
        self.send(format_motor_speed_command(motor_speed))

    def send_status_info_command(self) -> None:
        self.send("II")

    def send_version_info_command(self) -> None:
        self.send("VV")

    def send_parameter_info_command(self) -> None:
        self.send("PP")

    def send_measurement_mode_on_command(self) -> None:
        self.send("BM")

    def send_measurement_mode_off_command(self) -> None:
        self.send("QT")

    def send_get_distances_command(self) -> None:
        self.send(
            format_distance_command(
                "GD", self.start_step, self.end_step, self.cluster_count
            )
        )

    def send_get_distances_and_intensities_command(self) -> None:
        self.send(
            format_distance_command(
                "GE", self.start_step, self.end_step, self.cluster_count
            )
        )

    # frame update

    def update(self, elapsed: float) -> None:
        """Advance by ``elapsed`` seconds: talk to the sensor or reconnect."""
        self.last_frame_time = elapsed

        if self.client.is_connected:
            if not self.is_connected:
                self.connection_status = "CONNECTED"
                self.status = f"Connected at {self.client.ip} {self.client.port}"
                self.is_connected = True
                self.send_status_info_command()
                self.send_version_info_command()

            response = self.client.receive()
            if response:
                self.parse_response(response)

            self.check_status()

            if self.laser_state == "ON":
                self.polling_timer += elapsed
                if self.polling_timer > self.polling_interval:
                    if self.call_intensities_active:
                        self.send_get_distances_and_intensities_command()
                    else:
                        self.send_get_distances_command()
                    self.polling_timer = 0.0
        else:
            self.coordinates = [(0.0, 0.0)] * self.angular_resolution
            self.intensities = [0] * self.angular_resolution

            if self.is_connected:
                self.connection_status = "DISCONNECTED"
                self.status = "Disconnected"
                self.is_connected = False

            if self.auto_reconnect_active:
                self.reconnect()

    def check_status(self) -> None:
        """Poll sensor information now and then and keep the laser as wanted."""
        self.status_timer += self.last_frame_time
        if self.status_timer > self.status_interval:
            self.send_status_info_command()
            self.send_version_info_command()
            self.send_parameter_info_command()
            self.status_timer = 0.0

        if self.laser_active and self.laser_state == "OFF":
            self.send_measurement_mode_on_command()
        if not self.laser_active and self.laser_state == "ON":
            self.send_measurement_mode_off_command()

    # responses

    def parse_response(self, text: str) -> None:
        """Dispatch a response on the command echoed in its first line."""
        lines = split_lines(text)
        if not lines:
            return
        # Motor speed replies ("CR") carry nothing that is kept.
        parsers: dict[str, Callable[[Sequence[str]], None]] = {
            "GD": self.parse_distances,
            "GE": self.parse_distances_and_intensities,
            "BM": self.parse_activate,
            "QT": self.parse_quiet,
            "II": self.parse_status_info,
            "VV": self.parse_version_info,
            "PP": self.parse_parameter_info,
        }
        parser = parsers.get(lines[0][:2])
        if parser is not None:
            parser(lines)

    def _scan_data(self, packet: Sequence[str]) -> tuple[int, int, str] | None:
        header = packet[0]
        start_step = int(header[2:6])
        end_step = int(header[6:10])
        int(header[10:12])
        check_sum(packet[1], 1)
        decode_6bit(check_sum(packet[2], 1))
        data = "".join(check_sum(line, 1) for line in packet[3:])
        if len(data) % 6 != 0:
            return None
        if len(data) // 6 != end_step - start_step + 1:
            return None
        return start_step, end_step, data

    def parse_distances(self, packet: Sequence[str]) -> None:
        if len(packet) <= 2:
            return
        scan = self._scan_data(packet)
        if scan is None:
            return
        start_step, _, data = scan
        for offset, i in enumerate(range(0, len(data), 3)):
            self.create_coordinate(start_step + offset, decode_6bit(data[i : i + 3]))
        self.new_coordinates_available = True

    def parse_distances_and_intensities(self, packet: Sequence[str]) -> None:
        if len(packet) <= 2:
            return
        scan = self._scan_data(packet)
        if scan is None:
            return
        start_step, _, data = scan
        for offset, i in enumerate(range(0, len(data), 6)):
            step = start_step + offset
            self.create_coordinate(step, decode_6bit(data[i : i + 3]))
            self.intensities[step] = decode_6bit(data[i + 3 : i + 6])
        self.new_coordinates_available = True

    def create_coordinate(self, step: int, distance: float) -> None:
        """Place the point measured at ``step`` in world millimeters."""
        theta = self.angles[step] + self.sensor_rotation_rad
        self.coordinates[step] = (
            math.cos(theta) * distance + self.position.x,
            math.sin(theta) * distance + self.position.y,
        )

    @staticmethod
    def _fields(packet: Sequence[str]):
        for line in packet[1:]:
            checked = check_sum(line, 2)
            if len(checked) > 5:
                yield checked[:4], checked[5:]

    def parse_status_info(self, packet: Sequence[str]) -> None:
        for name, info in self._fields(packet):
            if name == "MODL":
                self.model = info
            elif name == "LASR":
                self.laser_state = info
            elif name == "MESM":
                self.measurement_mode = info
            elif name == "SBPS":
                self.bit_rate = info
            elif name == "TIME":
                self.timestamp = decode_6bit(info)
            elif name == "STAT":
                self.sensor_diagnostic = info

    def parse_version_info(self, packet: Sequence[str]) -> None:
        for name, info in self._fields(packet):
            if name == "VEND":
                self.vendor_info = info
            elif name == "PROD":
                self.product_info = info
            elif name == "FIRM":
                self.firmware_version = info
            elif name == "PROT":
                self.protocol_version = info
            elif name == "SERI":
                self.serial_number = info

    def parse_parameter_info(self, packet: Sequence[str]) -> None:
        for name, info in self._fields(packet):
            if name == "MODL":
                self.model = info
            elif name == "DMIN":
                self.minimum_measurable_distance = info
            elif name == "DMAX":
                self.maximum_measurable_distance = info
            elif name == "ARES":
                self.angular_resolution_info = info
            elif name == "AMIN":
                self.starting_step = info
            elif name == "AMAX":
                self.ending_step = info
            elif name == "AFRT":
                self.step_number_of_front_direction = info
            elif name == "SCAN":
                self.scanning_speed = info

    def parse_activate(self, packet: Sequence[str]) -> None:
        for line in packet[1:]:
            checked = check_sum(line, 1)
            if checked == "00":
                self.laser_state = "SWITCHING ON"
                self.status = "Laser command recieved without any Error"
            elif checked == "01":
                self.status = "Unable to control due to laser malfunction"
            elif checked == "02":
                self.laser_state = "ON"
                self.status = "Laser is already on."

    def parse_quiet(self, packet: Sequence[str]) -> None:
        for line in packet[1:]:
            if check_sum(line, 1) == "00":
                self.laser_state = "SWITCHING OFF"

    def info_lines(self) -> list[str]:
        """The lines of the sensor information panel."""
        return [
            "version: " + self.vendor_info,
            "model: " + self.model,
            "firmware: " + self.firmware_version,
            "protocol: " + self.protocol_version,
            "serial: " + self.serial_number,
            "laser state: " + self.laser_state,
            f"polling start step: {self.start_step}",
            f"polling end step: {self.end_step}",
            "measurement mode: " + self.measurement_mode,
            "bitrate: " + self.bit_rate,
            f"timestamp: {self.timestamp}",
            "sensor diagnostic: " + self.sensor_diagnostic,
            "IP Address: " + self.client.ip,
            f"port: {self.port}",
            "connection status: " + self.connection_status,
            "status: " + self.status,
            "min measurable dist: " + self.minimum_measurable_distance,
            "max measurable dist: " + self.maximum_measurable_distance,
            "angular resolution: " + self.angular_resolution_info,
            "starting step: " + self.starting_step,
            "ending step: " + self.ending_step,
            "front direction steps: " + self.step_number_of_front_direction,
            "scanning speed: " + self.scanning_speed,
        ]