"""
聚类工具函数测试
"""

import numpy as np
import pytest

from dbscan_clusterer.clustering.exceptions import DimensionMismatchError
from dbscan_clusterer.clustering.metrics import haversine_distance, resolve_metric
from dbscan_clusterer.clustering.utils import (
    NOISE,
    as_point_array,
    compute_cluster_stats,
    compute_distance_matrix,
    group_points_by_cluster,
    labels_to_assignment,
    region_query,
)


class TestAsPointArray:

    def test_list_input(self, sample_points):
        array = as_point_array(sample_points)

        assert array.shape == (11, 2)
        assert array.dtype == np.float64

    def test_float_array_is_not_copied(self, blob_points):
        assert as_point_array(blob_points) is blob_points

    def test_empty(self):
        assert as_point_array([]).shape == (0, 0)

    @pytest.mark.parametrize("points", [[[0, 0], [1]], [1, 2, 3], [[], []], [["a", "b"]]])
    def test_malformed(self, points):
        with pytest.raises(DimensionMismatchError):
            as_point_array(points)


class TestDistanceMatrix:

    def test_euclidean_matches_pairwise(self, blob_points):
        matrix = compute_distance_matrix(blob_points)
        distance_fn = resolve_metric(None)

        assert matrix.shape == (len(blob_points), len(blob_points))
        for i in (0, 17, 44):
            for j in (3, 60, 104):
                assert matrix[i, j] == pytest.approx(distance_fn(blob_points[i], blob_points[j]))
        np.testing.assert_allclose(matrix, matrix.T)
        np.testing.assert_array_equal(np.diag(matrix), 0)

    def test_haversine_matches_pairwise(self):
        points = np.array([[39.9, 116.4], [31.2, 121.5], [22.5, 114.1], [39.91, 116.41]])
        matrix = compute_distance_matrix(points, 'haversine')

        for i in range(len(points)):
            for j in range(len(points)):
                assert matrix[i, j] == pytest.approx(haversine_distance(points[i], points[j]))

    def test_custom_function(self):
        def manhattan(a, b):
            return float(np.sum(np.abs(a - b)))

        matrix = compute_distance_matrix([[0, 0], [1, 2], [3, 3]], manhattan)

        np.testing.assert_array_equal(matrix, [[0, 3, 6], [3, 0, 3], [6, 3, 0]])

    def test_euclidean2d_checks_dims(self):
        with pytest.raises(DimensionMismatchError):
            compute_distance_matrix([[0, 0, 0]], 'euclidean2d')

    def test_empty(self):
        assert compute_distance_matrix([]).shape == (0, 0)


class TestRegionQuery:

    def test_includes_self(self, sample_points):
        points = as_point_array(sample_points)

        assert region_query(points, 8, 1.0, resolve_metric(None)) == [8]
        assert region_query(points, 1, 1.0, resolve_metric(None)) == [0, 1, 2]

    def test_default_distance_function(self, sample_points):
        points = as_point_array(sample_points)

        assert region_query(points, 0, 1.0) == [0, 1]

    def test_matrix_matches_function(self, blob_points):
        matrix = compute_distance_matrix(blob_points)
        distance_fn = resolve_metric(None)

        for idx in range(0, len(blob_points), 7):
            assert region_query(blob_points, idx, 0.5, distance_matrix=matrix) == \
                region_query(blob_points, idx, 0.5, distance_fn)

    def test_matrix_always_contains_self(self):
        points = np.array([[0.0, 0.0], [5.0, 0.0]])
        # 自定义函数在相同输入上返回非零值
        matrix = np.array([[0.1, 5.0], [5.0, 0.1]])

        assert region_query(points, 0, 0.01, distance_matrix=matrix) == [0]

    def test_neighbors_are_symmetric(self, blob_points):
        eps = 0.5
        distance_fn = resolve_metric(None)
        neighborhoods = [set(region_query(blob_points, i, eps, distance_fn))
                         for i in range(len(blob_points))]

        for i, neighbors in enumerate(neighborhoods):
            for j in neighbors:
                assert i in neighborhoods[j]


class TestResultShaping:

    def test_labels_to_assignment(self):
        assignment = labels_to_assignment(np.array([1, 0, 2], dtype=np.int32))

        assert assignment == {0: 1, 1: NOISE, 2: 2}
        assert all(type(k) is int and type(v) is int for k, v in assignment.items())

    def test_group_points_by_cluster(self, sample_points):
        labels = [1, 1, 1, 2, 2, 3, 0, 3, 0, 4, 4]
        groups = group_points_by_cluster(sample_points, labels)

        assert list(groups) == [1, 2, 3, NOISE, 4]
        assert groups[1] == [(0.0, 10.0), (0.0, 11.0), (0.0, 12.0)]
        assert groups[NOISE] == [(58.0, 79.0), (300.0, 70.0)]
        assert sum(len(members) for members in groups.values()) == len(sample_points)

    def test_group_length_mismatch(self, sample_points):
        with pytest.raises(DimensionMismatchError):
            group_points_by_cluster(sample_points, [1, 2])

    def test_compute_cluster_stats(self):
        labels = np.array([1, 1, 0, 2, 2, 2, 0])
        stats = compute_cluster_stats(labels, np.array([0, 3, 4]), 0.5)

        assert stats == {
            'n_clusters': 2,
            'n_noise': 2,
            'n_core_points': 3,
            'execution_time': 0.5,
            'cluster_sizes': {1: 2, 2: 3}
        }

    def test_compute_cluster_stats_all_noise(self):
        stats = compute_cluster_stats(np.zeros(4, dtype=np.int32), np.array([]))

        assert stats['n_clusters'] == 0
        assert stats['n_noise'] == 4
        assert stats['cluster_sizes'] == {}
