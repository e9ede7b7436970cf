"""
聚类异常定义
参数校验、距离度量解析和维度检查失败时抛出
"""


class ClusteringError(ValueError):
    """聚类相关错误的基类"""


class InvalidArgumentError(ClusteringError):
    """eps或min_samples参数非法"""


class UnsupportedMetricError(ClusteringError):
    """请求了未注册的距离度量"""


class DimensionMismatchError(ClusteringError):
    """点的维度与距离度量不匹配，或点数据不是规则的(n, d)表"""
