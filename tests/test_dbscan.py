import pytest

from meatbags.dbscan import dbscan


def _group(cx, cy, n=5, step=1.0):
    return [(cx + i * step, cy) for i in range(n)]


def test_empty_input():
    assert dbscan([], 1.0, 3) == []


def test_two_separate_groups():
    points = _group(0, 0) + _group(100, 100)
    clusters = dbscan(points, 2.0, 3)
    assert clusters == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9]]


def test_noise_is_excluded():
    points = _group(0, 0) + [(500.0, 500.0)]
    clusters = dbscan(points, 2.0, 3)
    assert clusters == [[0, 1, 2, 3, 4]]
    assert all(5 not in c for c in clusters)


def test_radius_is_strict():
    points = [(0.0, 0.0), (1.0, 0.0)]
    assert dbscan(points, 1.0, 2) == []
    assert dbscan(points, 1.01, 2) == [[0, 1]]


def test_min_points_counts_the_point_itself():
    points = [(0.0, 0.0)]
    assert dbscan(points, 1.0, 1) == [[0]]
    assert dbscan(points, 1.0, 2) == []


def test_clusters_sorted_and_disjoint():
    points = [(5.0, 0.0), (0.0, 0.0), (4.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    clusters = dbscan(points, 1.5, 2)
    assert len(clusters) == 1
    assert clusters[0] == sorted(clusters[0])
    assert set(clusters[0]) == set(range(len(points)))


def test_clusters_ordered_by_first_core_point():
    points = _group(100, 0) + _group(0, 0)
    clusters = dbscan(points, 2.0, 3)
    assert clusters[0][0] == 0
    assert clusters[1][0] == 5


def test_every_index_in_at_most_one_cluster():
    points = _group(0, 0, 8) + _group(3, 50, 8) + [(1000.0, 1000.0)]
    clusters = dbscan(points, 1.5, 3)
    flat = [i for c in clusters for i in c]
    assert len(flat) == len(set(flat))


def test_three_dimensional_points():
    points = [(0.0, 0.0, 0.0), (0.0, 0.0, 0.5), (0.0, 0.0, 1.0), (0.0, 0.0, 50.0)]
    assert dbscan(points, 0.6, 2) == [[0, 1, 2]]


def test_zero_eps_finds_no_neighbours():
    points = [(0.0, 0.0), (0.0, 0.0)]
    assert dbscan(points, 0.0, 1) == []


def test_bad_dimension_raises():
    with pytest.raises(ValueError):
        dbscan([(1.0,)], 1.0, 1)


def test_mixed_dimensions_raise():
    with pytest.raises(ValueError):
        dbscan([(0.0, 0.0), (0.0, 0.0, 0.0)], 1.0, 1)