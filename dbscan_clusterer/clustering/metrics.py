"""
距离度量注册表
将度量名称或自定义函数解析为可调用的距离函数
"""

import numpy as np
from enum import Enum
from math import radians, sin, cos, sqrt, atan2
from typing import Callable, List, Optional, Union

from .exceptions import UnsupportedMetricError, DimensionMismatchError

DistanceFunction = Callable[[np.ndarray, np.ndarray], float]

# 地球平均半径（米）
EARTH_RADIUS_M = 6371000.0


class DistanceMetric(str, Enum):
    """内置距离度量"""
    DEFAULT = 'default'
    EUCLIDEAN = 'euclidean'
    EUCLIDEAN_2D = 'euclidean2d'
    HAVERSINE = 'haversine'


MetricSelector = Union[None, str, DistanceMetric, DistanceFunction]


def euclidean_distance(point1: np.ndarray, point2: np.ndarray) -> float:
    """
    通用欧氏距离，适用于任意维度

    Args:
        point1: 第一个点
        point2: 第二个点

    Returns:
        两点之间的欧氏距离
    """
    diff = np.asarray(point1, dtype=np.float64) - np.asarray(point2, dtype=np.float64)
    return float(np.sqrt(np.sum(diff ** 2)))


def euclidean_2d_distance(point1: np.ndarray, point2: np.ndarray) -> float:
    """二维欧氏距离"""
    dx = float(point1[0]) - float(point2[0])
    dy = float(point1[1]) - float(point2[1])
    return sqrt(dx * dx + dy * dy)


def haversine_distance(point1: np.ndarray, point2: np.ndarray) -> float:
    """
    Haversine距离，适用于地理坐标

    Args:
        point1: 第一个点 [lat, lon]（度）
        point2: 第二个点 [lat, lon]（度）

    Returns:
        两点之间的球面距离（米）
    """
    lat1, lon1 = radians(point1[0]), radians(point1[1])
    lat2, lon2 = radians(point2[0]), radians(point2[1])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # 浮点误差可能使a略大于1
    a = min(a, 1.0)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


_REGISTRY = {
    DistanceMetric.DEFAULT: euclidean_distance,
    DistanceMetric.EUCLIDEAN: euclidean_distance,
    DistanceMetric.EUCLIDEAN_2D: euclidean_2d_distance,
    DistanceMetric.HAVERSINE: haversine_distance,
}

# 只能用于二维点的度量
_TWO_DIMENSIONAL = {DistanceMetric.EUCLIDEAN_2D, DistanceMetric.HAVERSINE}


def available_metrics() -> List[str]:
    """返回所有内置度量名称"""
    return [metric.value for metric in DistanceMetric]


def normalize_metric(metric: MetricSelector) -> Union[DistanceMetric, DistanceFunction]:
    """
    将度量选择器规范化为DistanceMetric成员或自定义函数

    Args:
        metric: None、度量名称、DistanceMetric成员或可调用对象

    Returns:
        DistanceMetric成员，或原样返回的自定义距离函数
    """
    if metric is None:
        return DistanceMetric.DEFAULT

    if isinstance(metric, DistanceMetric):
        return metric

    if isinstance(metric, str):
        try:
            return DistanceMetric(metric.strip().lower())
        except ValueError:
            raise UnsupportedMetricError(
                f"不支持的度量方式: {metric!r}（可用: {', '.join(available_metrics())}）"
            ) from None

    if callable(metric):
        return metric

    raise UnsupportedMetricError(f"度量必须是名称或可调用对象，得到: {type(metric).__name__}")


def resolve_metric(metric: MetricSelector, n_dims: Optional[int] = None) -> DistanceFunction:
    """
    解析距离函数，每次聚类调用只执行一次

    Args:
        metric: 度量选择器
        n_dims: 点的维度，已知时用于检查二维度量

    Returns:
        距离函数
    """
    normalized = normalize_metric(metric)

    if not isinstance(normalized, DistanceMetric):
        return normalized

    if n_dims is not None and normalized in _TWO_DIMENSIONAL and n_dims != 2:
        raise DimensionMismatchError(
            f"度量 '{normalized.value}' 只支持二维点，输入点为 {n_dims} 维"
        )

    return _REGISTRY[normalized]
