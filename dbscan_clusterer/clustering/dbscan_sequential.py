"""
串行DBSCAN实现
经典的密度聚类算法，距离度量可插拔
"""

import numpy as np
from collections import deque
from numbers import Integral, Real
from typing import Dict, List, Optional, Sequence
import math
import time

from .exceptions import InvalidArgumentError
from .metrics import DistanceFunction, MetricSelector, normalize_metric, resolve_metric
from .utils import (
    NOISE,
    UNCLASSIFIED,
    as_point_array,
    compute_cluster_stats,
    compute_distance_matrix,
    labels_to_assignment,
    region_query,
)

DEFAULT_EPS = 1.0
DEFAULT_MIN_SAMPLES = 4


def validate_parameters(eps: float, min_samples: int) -> None:
    """
    校验DBSCAN参数

    Args:
        eps: 邻域半径，必须为有限正数
        min_samples: 核心点的最小邻居数（含自身），必须为 >= 1 的整数
    """
    if isinstance(min_samples, bool) or not isinstance(min_samples, Integral):
        raise InvalidArgumentError(f"min_samples必须是整数，得到: {min_samples!r}")
    if min_samples < 1:
        raise InvalidArgumentError(f"min_samples必须 >= 1，得到: {min_samples}")

    if isinstance(eps, bool) or not isinstance(eps, Real):
        raise InvalidArgumentError(f"eps必须是实数，得到: {eps!r}")
    if not math.isfinite(eps) or eps <= 0:
        raise InvalidArgumentError(f"eps必须是有限正数，得到: {eps}")


class DBSCANSequential:
    """串行版本的DBSCAN聚类算法"""

    def __init__(self, eps: float = DEFAULT_EPS, min_samples: int = DEFAULT_MIN_SAMPLES,
                 metric: MetricSelector = None, precompute_distances: bool = False,
                 verbose: bool = False):
        """
        初始化DBSCAN参数

        Args:
            eps: 邻域半径
            min_samples: 核心点的最小邻居数（包含点自身）
            metric: 距离度量，支持'default'、'euclidean'、'euclidean2d'、'haversine'
                或自定义函数 f(point1, point2) -> float
            precompute_distances: 是否预先计算完整距离矩阵
            verbose: 是否打印聚类摘要
        """
        self.eps = eps
        self.min_samples = min_samples
        self.metric = metric
        self.precompute_distances = precompute_distances
        self.verbose = verbose

        self.labels_ = None
        self.core_sample_indices_ = None
        self.components_ = None
        self.n_clusters_ = 0
        self.execution_time = 0

    def fit(self, points: Sequence) -> 'DBSCANSequential':
        """
        执行DBSCAN聚类

        Args:
            points: 形状为(n_samples, n_dims)的点数据，不会被修改

        Returns:
            self: 返回聚类器实例
        """
        # 所有校验都在聚类开始前完成
        validate_parameters(self.eps, self.min_samples)
        normalize_metric(self.metric)
        points = as_point_array(points)
        n_samples = points.shape[0]

        start_time = time.time()

        if n_samples == 0:
            self._store_result(points, np.empty(0, dtype=np.int32), [], start_time)
            return self

        distance_fn = resolve_metric(self.metric, points.shape[1])
        distance_matrix = None
        if self.precompute_distances:
            distance_matrix = compute_distance_matrix(points, self.metric)

        labels, core_indices = self._run(points, distance_fn, distance_matrix)
        self._store_result(points, labels, core_indices, start_time)

        if self.verbose:
            print(f"DBSCAN完成: {n_samples} 个点, {self.n_clusters_} 个聚类, "
                  f"{int(np.sum(labels == NOISE))} 个噪声点, 耗时 {self.execution_time:.4f} 秒")

        return self

    def fit_predict(self, points: Sequence) -> np.ndarray:
        """执行聚类并返回标签数组"""
        return self.fit(points).labels_

    def _run(self, points: np.ndarray, distance_fn: DistanceFunction,
             distance_matrix: Optional[np.ndarray]):
        n_samples = points.shape[0]

        # 标签：-1表示未分类，0表示噪声，聚类ID从1开始
        labels = np.full(n_samples, UNCLASSIFIED, dtype=np.int32)
        visited = np.zeros(n_samples, dtype=bool)
        core_indices = []
        cluster_id = 0

        def neighbors_of(idx: int) -> List[int]:
            return region_query(points, idx, self.eps, distance_fn, distance_matrix)

        for i in range(n_samples):
            if visited[i]:
                continue
            visited[i] = True

            neighbors = neighbors_of(i)

            if len(neighbors) < self.min_samples:
                # 暂时标记为噪声，之后可能成为边界点
                labels[i] = NOISE
                continue

            # 发现核心点，开始新的聚类
            cluster_id += 1
            core_indices.append(i)
            labels[i] = cluster_id

            self._expand_cluster(labels, visited, neighbors, cluster_id,
                                 core_indices, neighbors_of)

        return labels, core_indices

    def _expand_cluster(self, labels: np.ndarray, visited: np.ndarray,
                        seeds: List[int], cluster_id: int,
                        core_indices: List[int], neighbors_of) -> None:
        """
        从种子点广度优先扩展聚类

        Args:
            labels: 标签数组
            visited: 访问标记数组
            seeds: 核心点的邻域
            cluster_id: 当前聚类ID
            core_indices: 核心点索引列表（原地追加）
            neighbors_of: 邻域查询函数
        """
        queue = deque()
        self._claim(labels, visited, seeds, cluster_id, queue)

        while queue:
            point_idx = queue.popleft()
            visited[point_idx] = True

            neighbors = neighbors_of(point_idx)
            if len(neighbors) >= self.min_samples:
                core_indices.append(point_idx)
                self._claim(labels, visited, neighbors, cluster_id, queue)

    @staticmethod
    def _claim(labels: np.ndarray, visited: np.ndarray, candidates: List[int],
               cluster_id: int, queue: deque) -> None:
        # 已属于其他聚类的点不会被重新分配
        for idx in candidates:
            if labels[idx] == UNCLASSIFIED:
                labels[idx] = cluster_id
                if not visited[idx]:
                    queue.append(idx)
            elif labels[idx] == NOISE:  # 之前标记为噪声，重新标记为边界点
                labels[idx] = cluster_id

    def _store_result(self, points: np.ndarray, labels: np.ndarray,
                      core_indices: List[int], start_time: float) -> None:
        self.labels_ = labels
        self.core_sample_indices_ = np.array(sorted(core_indices), dtype=np.int32)
        self.components_ = points[self.core_sample_indices_]
        self.n_clusters_ = int(labels.max()) if len(labels) and labels.max() > 0 else 0
        self.execution_time = time.time() - start_time

    def get_assignment(self) -> Dict[int, int]:
        """
        获取聚类分配结果

        Returns:
            点索引 -> 聚类ID（噪声为NOISE）的字典
        """
        if self.labels_ is None:
            return {}
        return labels_to_assignment(self.labels_)

    def get_cluster_stats(self) -> dict:
        """
        获取聚类统计信息

        Returns:
            包含聚类统计信息的字典
        """
        if self.labels_ is None:
            return {}

        return compute_cluster_stats(self.labels_, self.core_sample_indices_,
                                     self.execution_time)


def dbscan(points: Sequence, min_points: int, epsilon: float,
           metric: MetricSelector = None) -> Dict[int, int]:
    """
    对点集执行DBSCAN聚类

    Args:
        points: 点序列，每个点是等长的数值序列
        min_points: 核心点的最小邻居数（包含点自身）
        epsilon: 邻域半径
        metric: None/'default'、内置度量名称或自定义距离函数

    Returns:
        点索引 -> 聚类ID的字典，聚类ID按发现顺序从1编号，噪声为NOISE(0)
    """
    return DBSCANSequential(eps=epsilon, min_samples=min_points,
                            metric=metric).fit(points).get_assignment()
