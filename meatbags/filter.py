"""Polygonal regions that select or mask scan points and blobs."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence

from .blob import Blob
from .draggable import DraggablePoint

_VERTEX_HANDLE_SIZE = 10.0
_CENTROID_HANDLE_SIZE = 12.0

_KEY_TOGGLE_MASK = 102  # 'f'
_KEY_TOGGLE_ACTIVE = 116  # 't'


def polygon_contains(
    vertices: Sequence[Sequence[float]], x: float, y: float
) -> bool:
    """Whether ``(x, y)`` lies inside the closed polygon, by ray crossing."""
    pts = [(float(v[0]), float(v[1])) for v in vertices]
    if not pts:
        return False
    crossings = 0
    for (x1, y1), (x2, y2) in zip(pts, pts[1:] + pts[:1]):
        if min(y1, y2) < y <= max(y1, y2) and x <= max(x1, x2) and y1 != y2:
            x_intersection = (y - y1) * (x2 - x1) / (y2 - y1) + x1
            if x1 == x2 or x <= x_intersection:
                crossings += 1
    return crossings % 2 == 1


def polygon_centroid(vertices: Sequence[Sequence[float]]) -> tuple[float, float]:
    """Area centroid of the closed polygon.

    A polygon without area falls back to the mean of its vertices.
    """
    pts = [(float(v[0]), float(v[1])) for v in vertices]
    if not pts:
        raise ValueError("a polygon needs at least one vertex")
    cx = cy = twice_area = 0.0
    for (x0, y0), (x1, y1) in zip(pts, pts[1:] + pts[:1]):
        cross = x0 * y1 - x1 * y0
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
        twice_area += cross
    if twice_area == 0:
        return (
            sum(p[0] for p in pts) / len(pts),
            sum(p[1] for p in pts) / len(pts),
        )
    return cx / (3.0 * twice_area), cy / (3.0 * twice_area)


class Filter:
    """A draggable polygon, in meters, that selects or masks blobs."""

    def __init__(self, index: int, number_points: int) -> None:
        if number_points < 0:
            raise ValueError("number_points must not be negative")
        self.index = index
        self.points: list[tuple[float, float]] = [(0.0, 0.0)] * number_points
        self.positions: list[DraggablePoint] = []
        for _ in range(number_points):
            handle = DraggablePoint()
            handle.set_size(_VERTEX_HANDLE_SIZE)
            self.positions.append(handle)
        self.centroid = DraggablePoint()
        self.centroid.set_size(_CENTROID_HANDLE_SIZE)
        self.mask = False
        self.is_active = True
        self.is_blob_inside = False
        self.distance_of_closest_blob = math.inf
        self.polyline: list[tuple[float, float]] = []
        self.scale = 1.0
        self.origin: tuple[float, float] = (0.0, 0.0)
        self.translation: tuple[float, float] = (0.0, 0.0)

    @property
    def number_points(self) -> int:
        return len(self.points)

    def update(self) -> None:
        """Rebuild the polygon, its centroid and handles from the points."""
        self.polyline = [(float(x), float(y)) for x, y in self.points]
        if self.polyline:
            self.centroid.x, self.centroid.y = polygon_centroid(self.polyline)
        for handle, (x, y) in zip(self.positions, self.polyline):
            handle.x = x
            handle.y = y

    def contains(self, x: float, y: float) -> bool:
        """Whether the point ``(x, y)`` in meters is inside the polygon."""
        return polygon_contains(self.polyline, x, y)

    def check_blobs(self, blobs: Iterable[Blob]) -> None:
        """Record whether a blob is inside and how close the nearest one is."""
        self.is_blob_inside = False
        self.distance_of_closest_blob = math.inf
        for blob in blobs:
            x = blob.centroid[0] * 0.001
            y = blob.centroid[1] * 0.001
            if self.contains(x, y):
                self.is_blob_inside = True
                distance = self.centroid.distance_to(x, y)
                self.distance_of_closest_blob = min(
                    self.distance_of_closest_blob, distance
                )

    def set_space(
        self, width: float, area_size: float, origin: Sequence[float]
    ) -> None:
        """Set the screen space: ``width`` pixels show ``area_size`` meters."""
        self.scale = width / (area_size * 1000.0)
        self.origin = (float(origin[0]), float(origin[1]))

    def coordinate_to_screen(self, point: Sequence[float]) -> tuple[float, float]:
        """Screen position of a point given in meters."""
        return (
            point[0] * 1000.0 * self.scale + self.origin[0] + self.translation[0],
            point[1] * 1000.0 * self.scale + self.origin[1] + self.translation[1],
        )

    def screen_to_coordinate(self, point: Sequence[float]) -> tuple[float, float]:
        """Position in meters of a screen point."""
        return (
            (point[0] - self.origin[0] - self.translation[0]) / self.scale * 0.001,
            (point[1] - self.origin[1] - self.translation[1]) / self.scale * 0.001,
        )

    def translate_points_by_centroid(self, centroid: Sequence[float]) -> None:
        """Move every point so the centroid lands on ``centroid``."""
        dx = centroid[0] - self.centroid.x
        dy = centroid[1] - self.centroid.y
        self.points = [(x + dx, y + dy) for x, y in self.points]

    def _handle_hit(self, handle: DraggablePoint, x: float, y: float) -> float:
        sx, sy = self.coordinate_to_screen((handle.x, handle.y))
        return math.hypot(x - sx, y - sy)

    def on_mouse_moved(self, x: float, y: float) -> None:
        for handle in self.positions:
            handle.is_mouse_over = self._handle_hit(handle, x, y) <= handle.half_size
        self.centroid.is_mouse_over = (
            self._handle_hit(self.centroid, x, y) < self.centroid.half_size
        )

    def on_mouse_pressed(self, x: float, y: float) -> None:
        for handle in self.positions:
            handle.is_mouse_clicked = (
                self._handle_hit(handle, x, y) <= handle.half_size
            )
        self.centroid.is_mouse_clicked = (
            self._handle_hit(self.centroid, x, y) < self.centroid.half_size
        )

    def on_mouse_dragged(self, x: float, y: float) -> None:
        coordinate = self.screen_to_coordinate((x, y))
        for i, handle in enumerate(self.positions):
            if handle.is_mouse_clicked:
                self.points[i] = coordinate
        if self.centroid.is_mouse_clicked:
            self.translate_points_by_centroid(coordinate)

    def on_mouse_released(self) -> None:
        for handle in self.positions:
            handle.is_mouse_clicked = False
        if self.centroid.is_mouse_clicked:
            self.centroid.is_mouse_clicked = False
            self.centroid.is_mouse_over = False

    def on_key_pressed(self, key: int | str) -> None:
        """While hovering the centroid, 'f' toggles the mask and 't' activity."""
        if isinstance(key, str):
            key = ord(key)
        if not self.centroid.is_mouse_over:
            return
        if key == _KEY_TOGGLE_MASK:
            self.mask = not self.mask
        if key == _KEY_TOGGLE_ACTIVE:
            self.is_active = not self.is_active


class Filters:
    """An ordered collection of filters updated together."""

    def __init__(self) -> None:
        self.filters: list[Filter] = []

    def __iter__(self) -> Iterator[Filter]:
        return iter(self.filters)

    def __len__(self) -> int:
        return len(self.filters)

    def update(self) -> None:
        for filter_ in self.filters:
            filter_.update()

    def check_blobs(self, blobs: Sequence[Blob]) -> None:
        for filter_ in self.filters:
            filter_.check_blobs(blobs)

    def set_space(
        self, width: float, area_size: float, origin: Sequence[float]
    ) -> None:
        for filter_ in self.filters:
            filter_.set_space(width, area_size, origin)

    def set_translation(self, translation: Sequence[float]) -> None:
        for filter_ in self.filters:
            filter_.translation = (float(translation[0]), float(translation[1]))

    def add_filter(self, filter_: Filter) -> None:
        self.filters.append(filter_)

    def remove_filter(self) -> Filter:
        """Remove and return the most recently added filter."""
        if not self.filters:
            raise IndexError("no filter to remove")
        return self.filters.pop()