import pytest

from meatbags.blob import Blob
from meatbags.tracker import BlobTracker, compare_blobs


def _cluster(cx, cy, n=6, step=10.0):
    return [(cx + i * step, cy) for i in range(n)]


def _frame(tracker, *centres):
    coords = [p for c in centres for p in _cluster(*c)]
    tracker.set_coordinates(coords, [100] * len(coords))
    tracker.update_blobs()


def _index_near(tracker, x, tolerance=500.0):
    for blob in tracker.blobs():
        if abs(blob.centroid[0] - x) < tolerance:
            return blob.index
    raise AssertionError("no blob near that position")


def test_compare_blobs_same_centroid():
    a = Blob(centroid=(3.0, 4.0))
    b = Blob(centroid=(3.0, 4.0))
    assert compare_blobs(a, b) == 1.0


def test_compare_blobs_decreases_with_distance():
    origin = Blob(centroid=(0.0, 0.0))
    near = Blob(centroid=(10.0, 0.0))
    far = Blob(centroid=(100.0, 0.0))
    assert compare_blobs(near, origin) > compare_blobs(far, origin) > 0
    assert compare_blobs(near, origin) == compare_blobs(origin, near)


def test_no_coordinates_no_blobs():
    tracker = BlobTracker(0.5, 50.0, 3)
    tracker.update_blobs()
    assert tracker.blobs() == []


def test_two_clusters_get_distinct_indices():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0), (5000, 0))
    indices = sorted(b.index for b in tracker.blobs())
    assert indices == [0, 1]
    assert all(b.number_points == 6 for b in tracker.blobs())


def test_indices_follow_moving_blobs():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0), (5000, 0))
    first = _index_near(tracker, 0)
    second = _index_near(tracker, 5000)
    _frame(tracker, (5040, 0), (40, 0))
    assert _index_near(tracker, 40) == first
    assert _index_near(tracker, 5040) == second
    assert len(tracker.blobs()) == 2


def test_unmatched_blob_expires():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0), (5000, 0))
    kept = _index_near(tracker, 5000)
    _frame(tracker, (5000, 0))
    assert len(tracker.blobs()) == 2
    tracker.update(0.3)
    tracker.update(0.3)
    remaining = tracker.blobs()
    assert len(remaining) == 1
    assert remaining[0].index == kept


def test_matched_blob_lifetime_renewed():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0))
    tracker.update(0.3)
    assert tracker.blobs()[0].lifetime > 0
    _frame(tracker, (0, 0))
    assert tracker.blobs()[0].lifetime == 0


def test_blob_survives_without_update_blobs_until_persistence():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0))
    tracker.set_coordinates([], [])
    tracker.update_blobs()
    tracker.update(0.4)
    assert len(tracker.blobs()) == 1
    tracker.update(0.4)
    assert tracker.blobs() == []


def test_new_blob_reuses_freed_index():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0), (5000, 0))
    freed = _index_near(tracker, 0)
    _frame(tracker, (5000, 0))
    tracker.update(1.0)
    _frame(tracker, (5000, 0))
    _frame(tracker, (5000, 0), (-8000, 0))
    assert _index_near(tracker, -8000) == freed


def test_find_free_blob_index_fills_gaps():
    tracker = BlobTracker(0.5, 50.0, 3)
    tracker.old_blobs = [Blob(index=0), Blob(index=2), Blob(index=3)]
    assert tracker.find_free_blob_index() == 1
    tracker.old_blobs.append(Blob(index=1))
    assert tracker.find_free_blob_index() == 4


def test_blob_persistence_updates_tracked_blobs():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0))
    tracker.blob_persistence = 2.0
    assert all(b.lifetime_length == 2.0 for b in tracker.blobs())


def test_blobs_returns_copies():
    tracker = BlobTracker(0.5, 50.0, 3)
    _frame(tracker, (0, 0))
    copy = tracker.blobs()[0]
    assert copy.index == 0
    copy.index = 99
    assert tracker.blobs()[0].index == 0


def test_noise_makes_no_blob():
    tracker = BlobTracker(0.5, 50.0, 3)
    tracker.set_coordinates([(0.0, 0.0), (1000.0, 0.0)], [1, 1])
    tracker.update_blobs()
    assert tracker.blobs() == []


def test_mismatched_lengths_raise():
    tracker = BlobTracker(0.5, 50.0, 3)
    with pytest.raises(ValueError):
        tracker.set_coordinates([(0.0, 0.0)], [])


def test_too_many_coordinates_raise():
    tracker = BlobTracker(0.5, 50.0, 3, max_coordinates=2)
    with pytest.raises(ValueError):
        tracker.set_coordinates([(0.0, 0.0)] * 3, [0] * 3)
    assert tracker.number_coordinates == 0