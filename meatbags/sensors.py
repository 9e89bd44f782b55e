"""The set of range finders, their combined scan points and mouse handling."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .filter import Filters
from .hokuyo import Hokuyo


class Sensors:
    """Range finders whose points are merged and filtered together."""

    def __init__(self, filters: Filters | None = None) -> None:
        self.filters = filters if filters is not None else Filters()
        self.hokuyos: list[Hokuyo] = []
        self.translation: tuple[float, float] = (0.0, 0.0)
        self.origin: tuple[float, float] = (0.0, 0.0)
        self.scale = 1.0

    def __iter__(self):
        return iter(self.hokuyos)

    def __len__(self) -> int:
        return len(self.hokuyos)

    def update(self, elapsed: float) -> None:
        """Advance every sensor by ``elapsed`` seconds."""
        for hokuyo in self.hokuyos:
            hokuyo.update(elapsed)

    def add_sensor(self, hokuyo: Hokuyo) -> None:
        self.hokuyos.append(hokuyo)

    def remove_sensor(self) -> Hokuyo:
        """Remove and return the most recently added sensor."""
        if not self.hokuyos:
            raise IndexError("no sensor to remove")
        return self.hokuyos.pop()

    def close_sensors(self) -> None:
        for hokuyo in self.hokuyos:
            hokuyo.close()

    def set_space(
        self, width: float, area_size: float, origin: Sequence[float]
    ) -> None:
        """Set the screen space: ``width`` pixels show ``area_size`` meters."""
        self.scale = width / (area_size * 1000.0)
        self.origin = (float(origin[0]), float(origin[1]))

    def set_interface_and_ip(self, interface: str, local_ip: str) -> None:
        for hokuyo in self.hokuyos:
            hokuyo.set_interface_and_ip(interface, local_ip)

    def new_coordinates_available(self) -> bool:
        """Whether any sensor has a new scan; clears every sensor's flag."""
        available = False
        for hokuyo in self.hokuyos:
            if hokuyo.new_coordinates_available:
                available = True
                hokuyo.new_coordinates_available = False
        return available

    def check_within_filters(self, x: float, y: float) -> bool:
        """Whether a point in millimeters is kept by the active filters.

        A point is kept when it lies in an active selecting filter and in
        no active mask.
        """
        mx, my = x * 0.001, y * 0.001
        active = [f for f in self.filters.filters if f.is_active]
        inside = any(not f.mask and f.contains(mx, my) for f in active)
        if inside and any(f.mask and f.contains(mx, my) for f in active):
            return False
        return inside

    def coordinates_and_intensities(
        self,
    ) -> tuple[list[tuple[float, float]], list[int]]:
        """Points of all sensors kept by the filters, with their intensities."""
        coordinates: list[tuple[float, float]] = []
        intensities: list[int] = []
        for hokuyo in self.hokuyos:
            for (x, y), intensity in zip(hokuyo.coordinates, hokuyo.intensities):
                if x != 0 and self.check_within_filters(x, y):
                    coordinates.append((x, y))
                    intensities.append(intensity)
        return coordinates, intensities

    def coordinate_to_screen(self, point: Sequence[float]) -> tuple[float, float]:
        """Screen position of a point given in millimeters."""
        return (
            point[0] * self.scale + self.origin[0] + self.translation[0],
            point[1] * self.scale + self.origin[1] + self.translation[1],
        )

    def screen_to_coordinate(self, point: Sequence[float]) -> tuple[float, float]:
        """Position in meters of a screen point."""
        return (
            (point[0] - self.origin[0] - self.translation[0]) / self.scale * 0.001,
            (point[1] - self.origin[1] - self.translation[1]) / self.scale * 0.001,
        )

    def _screen_position(self, hokuyo: Hokuyo) -> tuple[float, float]:
        return self.coordinate_to_screen((hokuyo.position.x, hokuyo.position.y))

    def on_mouse_moved(self, x: float, y: float) -> None:
        for hokuyo in self.hokuyos:
            sx, sy = self._screen_position(hokuyo)
            hokuyo.position.is_mouse_over = (
                math.hypot(x - sx, y - sy) <= hokuyo.position.half_size
            )
            angle = hokuyo.sensor_rotation_rad - math.pi / 2
            nose_x = sx - math.cos(angle) * hokuyo.nose_radius
            nose_y = sy - math.sin(angle) * hokuyo.nose_radius
            hokuyo.nose_position.is_mouse_over = (
                math.hypot(x - nose_x, y - nose_y) < hokuyo.nose_position.half_size
            )

    def on_mouse_pressed(self, x: float, y: float) -> None:
        for hokuyo in self.hokuyos:
            hokuyo.position.is_mouse_clicked = hokuyo.position.is_mouse_over
            hokuyo.nose_position.is_mouse_clicked = hokuyo.nose_position.is_mouse_over

    def on_mouse_dragged(self, x: float, y: float) -> None:
        for hokuyo in self.hokuyos:
            if hokuyo.position.is_mouse_clicked:
                cx, cy = self.screen_to_coordinate((x, y))
                hokuyo.position_x = cx
                hokuyo.position_y = cy
            if hokuyo.nose_position.is_mouse_clicked:
                sx, sy = self._screen_position(hokuyo)
                angle = math.atan2(sy - y, sx - x)
                hokuyo.sensor_rotation_deg = math.degrees(angle + math.pi / 2)

    def on_mouse_released(self, x: float, y: float) -> None:
        for hokuyo in self.hokuyos:
            hokuyo.position.is_mouse_clicked = False