"""Tracked clusters of scan points."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

# The bounding box search starts from these limits, so boxes never extend
# inward past them.
_BOUNDS_LIMIT = 10000.0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle given by its corner and size."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass
class Blob:
    """A cluster of points with its shape, intensity and tracking state."""

    centroid: tuple[float, float] = (0.0, 0.0)
    center: tuple[float, float] = (0.0, 0.0)
    bounds: Bounds = Bounds()
    intensity: float = 0.0
    distance_from_sensor: float = 0.0
    number_points: int = 0
    lifetime: float = 0.0
    lifetime_length: float = 0.0
    matched: bool = False
    alive: bool = True
    index: int = 0
    potential_match_index: int = 0
    potential_match_score: float = 0.0

    @classmethod
    def from_cluster(
        cls,
        coordinates: Sequence[Sequence[float]],
        intensities: Sequence[int],
        persistence: float,
    ) -> "Blob":
        """Build a blob from the coordinates and intensities of one cluster."""
        if not coordinates:
            raise ValueError("a blob needs at least one coordinate")
        if not intensities:
            raise ValueError("a blob needs at least one intensity")

        xs = [float(c[0]) for c in coordinates]
        ys = [float(c[1]) for c in coordinates]
        centroid = (sum(xs) / len(xs), sum(ys) / len(ys))

        min_x = min(_BOUNDS_LIMIT, *xs)
        max_x = max(-_BOUNDS_LIMIT, *xs)
        min_y = min(_BOUNDS_LIMIT, *ys)
        max_y = max(-_BOUNDS_LIMIT, *ys)
        width = abs(max_x - min_x)
        height = abs(max_y - min_y)

        return cls(
            centroid=centroid,
            center=(min_x + width * 0.5, min_y + height * 0.5),
            bounds=Bounds(min_x, min_y, width, height),
            intensity=sum(intensities) / len(intensities),
            distance_from_sensor=math.hypot(*centroid),
            number_points=len(coordinates),
            lifetime_length=persistence,
        )

    def update_lifetime(self, seconds_lived: float) -> None:
        """Age the blob; it dies once its lifetime exceeds its length."""
        self.lifetime += seconds_lived
        if self.lifetime > self.lifetime_length:
            self.alive = False

    def become(self, other: "Blob") -> None:
        """Take over the shape and measurements of another blob."""
        self.centroid = other.centroid
        self.center = other.center
        self.intensity = other.intensity
        self.bounds = other.bounds
        self.distance_from_sensor = other.distance_from_sensor
        self.number_points = other.number_points
        self.lifetime_length = other.lifetime_length