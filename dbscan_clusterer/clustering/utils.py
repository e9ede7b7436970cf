"""
聚类工具函数
提供DBSCAN算法中的通用函数：输入规整、距离矩阵、邻域查询和结果整理
"""

import numpy as np
from typing import Dict, List, Optional, Sequence
import math
from numba import jit, prange

from .exceptions import DimensionMismatchError
from .metrics import (
    DistanceFunction,
    DistanceMetric,
    MetricSelector,
    EARTH_RADIUS_M,
    normalize_metric,
    resolve_metric,
)

# 噪声点标签
NOISE = 0
# 运行期间未分类点的标签，不会出现在结果中
UNCLASSIFIED = -1


def as_point_array(points: Sequence) -> np.ndarray:
    """
    将输入点集转换为形状为(n, d)的float64数组（不复制已符合要求的数组，也不修改输入）

    Args:
        points: 点序列或numpy数组

    Returns:
        形状为(n, d)的数组，空输入返回形状为(0, 0)的数组
    """
    if len(points) == 0:
        return np.empty((0, 0), dtype=np.float64)

    try:
        array = np.asarray(points, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise DimensionMismatchError(f"点数据必须是等长的数值序列: {e}") from e

    if array.ndim != 2 or array.shape[1] == 0:
        raise DimensionMismatchError(
            f"点数据的形状必须为(n_samples, n_dims)，得到: {array.shape}"
        )

    return array


def compute_distance_matrix(points: np.ndarray, metric: MetricSelector = None) -> np.ndarray:
    """
    计算距离矩阵

    Args:
        points: 形状为(n_samples, n_dims)的numpy数组
        metric: 距离度量（名称、DistanceMetric或自定义函数）

    Returns:
        距离矩阵，形状为(n_samples, n_samples)
    """
    points = as_point_array(points)
    n_samples = points.shape[0]
    normalized = normalize_metric(metric)

    if n_samples == 0:
        return np.zeros((0, 0))

    if normalized in (DistanceMetric.DEFAULT, DistanceMetric.EUCLIDEAN,
                      DistanceMetric.EUCLIDEAN_2D):
        resolve_metric(normalized, points.shape[1])
        # 使用向量化计算欧氏距离
        diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
        return np.sqrt(np.sum(diff ** 2, axis=2))

    elif normalized == DistanceMetric.HAVERSINE:
        resolve_metric(normalized, points.shape[1])
        return _haversine_distance_matrix(np.ascontiguousarray(points))

    # 自定义函数：逐对计算，利用对称性只算上三角
    distance_fn = normalized
    distance_matrix = np.zeros((n_samples, n_samples))
    for i in range(n_samples):
        for j in range(i + 1, n_samples):
            distance = distance_fn(points[i], points[j])
            distance_matrix[i, j] = distance
            distance_matrix[j, i] = distance

    return distance_matrix


@jit(nopython=True, parallel=True)
def _haversine_distance_matrix(points: np.ndarray) -> np.ndarray:
    """
    使用Numba加速的Haversine距离矩阵计算

    Args:
        points: 形状为(n_samples, 2)的numpy数组，[latitude, longitude]

    Returns:
        Haversine距离矩阵（米）
    """
    n_samples = points.shape[0]
    distance_matrix = np.zeros((n_samples, n_samples))
    R = EARTH_RADIUS_M

    # 转换为弧度
    lat_rad = np.radians(points[:, 0])
    lon_rad = np.radians(points[:, 1])

    for i in prange(n_samples):
        for j in range(i + 1, n_samples):
            dlon = lon_rad[j] - lon_rad[i]
            dlat = lat_rad[j] - lat_rad[i]

            a = math.sin(dlat / 2) ** 2 + math.cos(lat_rad[i]) * math.cos(lat_rad[j]) * math.sin(dlon / 2) ** 2
            a = min(a, 1.0)
            c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
            distance = R * c

            distance_matrix[i, j] = distance
            distance_matrix[j, i] = distance

    return distance_matrix


def region_query(points: np.ndarray, point_idx: int, eps: float,
                 distance_fn: Optional[DistanceFunction] = None,
                 distance_matrix: Optional[np.ndarray] = None) -> List[int]:
    """
    查找指定点eps邻域内的所有点（包含该点自身）

    Args:
        points: 所有点的数组
        point_idx: 目标点的索引
        eps: 邻域半径（闭区间，distance <= eps）
        distance_fn: 距离函数（未提供距离矩阵时使用）
        distance_matrix: 预计算的距离矩阵（可选）

    Returns:
        邻域内点的索引列表，按索引升序
    """
    if distance_matrix is not None:
        neighbors = np.flatnonzero(distance_matrix[point_idx] <= eps).tolist()
        if point_idx not in neighbors:
            # 自定义函数对相同输入可能不返回精确的0
            neighbors.append(point_idx)
            neighbors.sort()
        return neighbors

    if distance_fn is None:
        distance_fn = resolve_metric(None)

    neighbors = []
    point = points[point_idx]

    for i in range(points.shape[0]):
        if i == point_idx or distance_fn(point, points[i]) <= eps:
            neighbors.append(i)

    return neighbors


def labels_to_assignment(labels: np.ndarray) -> Dict[int, int]:
    """
    将标签数组转换为 点索引 -> 聚类ID（或NOISE）的映射

    Args:
        labels: 聚类标签数组

    Returns:
        点索引到聚类ID的字典
    """
    return {int(i): int(label) for i, label in enumerate(labels)}


def group_points_by_cluster(points: Sequence, labels: Sequence[int]) -> Dict[int, List[tuple]]:
    """
    按聚类整理点：聚类ID -> 点列表，噪声点位于键NOISE下

    Args:
        points: 原始点数据
        labels: 与points等长的聚类标签

    Returns:
        按首次出现顺序排列的分组字典，组内保持数据集顺序
    """
    if len(points) != len(labels):
        raise DimensionMismatchError(
            f"点数量({len(points)})与标签数量({len(labels)})不一致"
        )

    groups: Dict[int, List[tuple]] = {}
    for point, label in zip(points, labels):
        coords = tuple(float(c) for c in point)
        groups.setdefault(int(label), []).append(coords)

    return groups


def compute_cluster_stats(labels: np.ndarray, core_sample_indices: np.ndarray,
                          execution_time: float = 0.0) -> dict:
    """
    计算聚类统计信息

    Args:
        labels: 聚类标签
        core_sample_indices: 核心点索引
        execution_time: 聚类耗时（秒）

    Returns:
        包含聚类统计信息的字典
    """
    labels = np.asarray(labels)
    unique_labels = np.unique(labels)

    stats = {
        'n_clusters': int(np.sum(unique_labels != NOISE)),
        'n_noise': int(np.sum(labels == NOISE)),
        'n_core_points': len(core_sample_indices),
        'execution_time': execution_time,
        'cluster_sizes': {}
    }

    for label in unique_labels:
        if label != NOISE:  # 跳过噪声点
            stats['cluster_sizes'][int(label)] = int(np.sum(labels == label))

    return stats
