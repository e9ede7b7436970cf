"""
基于密度的空间聚类（DBSCAN），支持可插拔的距离度量
"""

from .clustering import (
    DBSCANSequential,
    dbscan,
    NOISE,
    DistanceMetric,
    group_points_by_cluster,
    ClusteringError,
    InvalidArgumentError,
    UnsupportedMetricError,
    DimensionMismatchError
)

__version__ = '0.1.0'

__all__ = [
    'DBSCANSequential',
    'dbscan',
    'NOISE',
    'DistanceMetric',
    'group_points_by_cluster',
    'ClusteringError',
    'InvalidArgumentError',
    'UnsupportedMetricError',
    'DimensionMismatchError'
]
