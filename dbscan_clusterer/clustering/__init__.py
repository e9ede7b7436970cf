"""
聚类算法模块
包含串行DBSCAN算法、距离度量注册表和结果整理工具
"""

from .dbscan_sequential import DBSCANSequential, dbscan
from .exceptions import (
    ClusteringError,
    InvalidArgumentError,
    UnsupportedMetricError,
    DimensionMismatchError
)
from .metrics import (
    DistanceMetric,
    available_metrics,
    resolve_metric,
    euclidean_distance,
    euclidean_2d_distance,
    haversine_distance
)
from .utils import (
    NOISE,
    compute_distance_matrix,
    region_query,
    group_points_by_cluster
)

__all__ = [
    'DBSCANSequential',
    'dbscan',
    'ClusteringError',
    'InvalidArgumentError',
    'UnsupportedMetricError',
    'DimensionMismatchError',
    'DistanceMetric',
    'available_metrics',
    'resolve_metric',
    'euclidean_distance',
    'euclidean_2d_distance',
    'haversine_distance',
    'NOISE',
    'compute_distance_matrix',
    'region_query',
    'group_points_by_cluster'
]
