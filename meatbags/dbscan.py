"""Density-based clustering of 2D or 3D points."""

from __future__ import annotations

import itertools
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence


class _RadiusIndex:
    """Grid hash answering "which points lie strictly within eps" queries."""

    def __init__(self, points: list[tuple[float, ...]], eps: float) -> None:
        self._points = points
        self._radius_sq = eps * eps
        self._cell = abs(eps)
        self._grid: dict[tuple[int, ...], list[int]] = defaultdict(list)
        if self._cell > 0:
            for index, point in enumerate(points):
                self._grid[self._key(point)].append(index)
            dims = len(points[0]) if points else 0
            self._offsets = list(itertools.product((-1, 0, 1), repeat=dims))

    def _key(self, point: tuple[float, ...]) -> tuple[int, ...]:
        return tuple(math.floor(c / self._cell) for c in point)

    def query(self, index: int) -> list[int]:
        if self._cell == 0:
            return []
        origin = self._points[index]
        key = self._key(origin)
        found = []
        for offset in self._offsets:
            cell = tuple(k + o for k, o in zip(key, offset))
            for candidate in self._grid.get(cell, ()):
                other = self._points[candidate]
                dist_sq = sum((a - b) ** 2 for a, b in zip(origin, other))
                if dist_sq < self._radius_sq:
                    found.append(candidate)
        return found


def dbscan(
    points: Iterable[Sequence[float]], eps: float, min_pts: int
) -> list[list[int]]:
    """Cluster points; return clusters as sorted lists of point indices.

    A point is a core point when at least ``min_pts`` points (itself
    included) lie strictly closer than ``eps``. Noise is left out.
    """
    pts = [tuple(float(c) for c in p) for p in points]
    if not pts:
        return []
    dims = len(pts[0])
    if dims not in (2, 3):
        raise ValueError(f"points must have 2 or 3 coordinates, not {dims}")
    if any(len(p) != dims for p in pts):
        raise ValueError("all points must have the same number of coordinates")

    index = _RadiusIndex(pts, eps)
    visited = [False] * len(pts)
    clusters: list[list[int]] = []

    for seed in range(len(pts)):
        if visited[seed]:
            continue
        matches = index.query(seed)
        if len(matches) < min_pts:
            continue
        visited[seed] = True
        cluster = [seed]
        pending = list(matches)
        while pending:
            neighbour = pending.pop()
            if visited[neighbour]:
                continue
            visited[neighbour] = True
            sub_matches = index.query(neighbour)
            if len(sub_matches) >= min_pts:
                pending.extend(sub_matches)
            cluster.append(neighbour)
        clusters.append(sorted(cluster))

    return clusters