"""
可视化模块
聚类结果的可视化
"""

from .plot_clusters import ClusterVisualizer, plot_clusters

__all__ = [
    'ClusterVisualizer',
    'plot_clusters'
]
