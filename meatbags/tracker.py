"""Clustering scan points into blobs and following them across frames."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from .blob import Blob
from .dbscan import dbscan


def compare_blobs(new_blob: Blob, old_blob: Blob) -> float:
    """Similarity score of two blobs: higher when their centroids are closer."""
    epsilon = 1.0
    (nx, ny), (ox, oy) = new_blob.centroid, old_blob.centroid
    square_distance = (nx - ox) ** 2 + (ny - oy) ** 2
    return 1.0 / (square_distance + epsilon)


class BlobTracker:
    """Turns scan coordinates into blobs with indices stable across frames."""

    def __init__(
        self,
        blob_persistence: float,
        epsilon: float,
        min_points: int,
        max_coordinates: int = 1440,
    ) -> None:
        self._blob_persistence = blob_persistence
        self.epsilon = epsilon
        self.min_points = min_points
        self.max_coordinates = max_coordinates
        self.coordinates: list[tuple[float, float]] = []
        self.intensities: list[int] = []
        self.new_blobs: list[Blob] = []
        self.old_blobs: list[Blob] = []

    @property
    def blob_persistence(self) -> float:
        return self._blob_persistence

    @blob_persistence.setter
    def blob_persistence(self, value: float) -> None:
        self._blob_persistence = value
        for blob in self.old_blobs:
            blob.lifetime_length = value

    @property
    def number_coordinates(self) -> int:
        return len(self.coordinates)

    def set_coordinates(
        self,
        coordinates: Sequence[Sequence[float]],
        intensities: Sequence[int],
    ) -> None:
        """Replace the current frame's coordinates and intensities."""
        if len(coordinates) != len(intensities):
            raise ValueError("coordinates and intensities differ in length")
        if len(coordinates) > self.max_coordinates:
            raise ValueError(
                f"{len(coordinates)} coordinates exceed the maximum of "
                f"{self.max_coordinates}"
            )
        self.coordinates = [(float(c[0]), float(c[1])) for c in coordinates]
        self.intensities = list(intensities)

    def update(self, elapsed: float) -> None:
        """Age tracked blobs by ``elapsed`` seconds and drop the dead ones."""
        for blob in self.old_blobs:
            blob.update_lifetime(elapsed)
        self.old_blobs = [blob for blob in self.old_blobs if blob.alive]

    def update_blobs(self) -> None:
        """Cluster the current coordinates and match them to tracked blobs."""
        if not self.coordinates:
            return
        self.cluster_blobs()
        self.match_blobs()
        self.renew_blobs()
        self.add_blobs()

    def cluster_blobs(self) -> None:
        clusters = dbscan(self.coordinates, self.epsilon, self.min_points)

        self.new_blobs = []
        for index, cluster in enumerate(clusters):
            blob = Blob.from_cluster(
                [self.coordinates[i] for i in cluster],
                [self.intensities[i] for i in cluster],
                self._blob_persistence,
            )
            blob.index = index
            self.new_blobs.append(blob)

        if not self.old_blobs:
            for index, new_blob in enumerate(self.new_blobs):
                blob = Blob()
                blob.become(new_blob)
                blob.index = index
                self.old_blobs.append(blob)

        for blob in self.old_blobs:
            blob.matched = False

    def match_blobs(self) -> None:
        for new_blob in self.new_blobs:
            match_index = 0
            highest_score = 0.0
            for old_blob in self.old_blobs:
                score = compare_blobs(new_blob, old_blob)
                if score > highest_score:
                    match_index = old_blob.index
                    highest_score = score
            new_blob.potential_match_index = match_index
            new_blob.potential_match_score = highest_score

        self.new_blobs.sort(key=lambda b: b.potential_match_score, reverse=True)

        for new_blob in self.new_blobs:
            for old_blob in self.old_blobs:
                if (
                    old_blob.index == new_blob.potential_match_index
                    and not new_blob.matched
                    and not old_blob.matched
                ):
                    old_blob.become(new_blob)
                    new_blob.matched = True
                    old_blob.matched = True

    def renew_blobs(self) -> None:
        for blob in self.old_blobs:
            if blob.matched:
                blob.lifetime = 0.0

    def add_blobs(self) -> None:
        for new_blob in self.new_blobs:
            if new_blob.matched:
                continue
            blob = Blob()
            blob.index = self.find_free_blob_index()
            blob.matched = True
            blob.become(new_blob)
            self.old_blobs.append(blob)

    def find_free_blob_index(self) -> int:
        """Lowest non-negative index not used by a tracked blob."""
        used = {blob.index for blob in self.old_blobs}
        free_index = 0
        while free_index in used:
            free_index += 1
        return free_index

    def blobs(self) -> list[Blob]:
        """Copies of the currently tracked blobs."""
        return [dataclasses.replace(blob) for blob in self.old_blobs]