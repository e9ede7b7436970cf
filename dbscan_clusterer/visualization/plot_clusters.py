"""
聚类结果可视化
二维点聚类结果的散点图
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Sequence, Tuple
import warnings
from scipy.spatial import ConvexHull, QhullError

from ..clustering.exceptions import DimensionMismatchError
from ..clustering.utils import NOISE, as_point_array


class ClusterVisualizer:
    """聚类可视化器"""

    def __init__(self, figsize: Tuple[int, int] = (12, 10),
                 colormap: str = 'tab20'):
        """
        初始化可视化器

        Args:
            figsize: 图形大小
            colormap: 颜色映射
        """
        self.figsize = figsize
        self.colormap = colormap
        self.cmap = plt.get_cmap(colormap)

    def plot_clusters_2d(self, points: Sequence, labels: Sequence[int],
                         title: str = "DBSCAN聚类结果",
                         save_path: Optional[str] = None,
                         show_noise: bool = True,
                         alpha: float = 0.6,
                         s: float = 30.0) -> plt.Figure:
        """
        绘制2D聚类结果

        Args:
            points: 点数据，形状为(n, 2)
            labels: 聚类标签，形状为(n,)
            title: 图表标题
            save_path: 保存路径
            show_noise: 是否显示噪声点
            alpha: 透明度
            s: 点的大小

        Returns:
            matplotlib图形对象
        """
        points = as_point_array(points)
        labels = np.asarray(labels)

        if len(points) and points.shape[1] != 2:
            raise DimensionMismatchError(f"只能绘制二维点，输入点为 {points.shape[1]} 维")
        if len(points) != len(labels):
            raise DimensionMismatchError(
                f"点数量({len(points)})与标签数量({len(labels)})不一致"
            )

        fig, ax = plt.subplots(figsize=self.figsize)

        if len(points) == 0:
            warnings.warn("没有可绘制的点")

        unique_labels = np.unique(labels)
        cluster_labels = [label for label in unique_labels if label != NOISE]

        # 为每个聚类分配颜色
        colors = self.cmap(np.linspace(0, 1, max(len(cluster_labels), 1)))

        for label in unique_labels:
            if label == NOISE and not show_noise:
                continue

            cluster_points = points[labels == label]

            if label == NOISE:
                color = 'gray'
                label_text = '噪声点'
                marker = 'x'
                size = s * 0.5
                alpha_cluster = alpha * 0.5
            else:
                color = colors[cluster_labels.index(label)]
                label_text = f'聚类 {label}'
                marker = 'o'
                size = s
                alpha_cluster = alpha

            ax.scatter(cluster_points[:, 0], cluster_points[:, 1],
                       c=[color], label=label_text,
                       marker=marker, s=size, alpha=alpha_cluster, linewidths=0.5)

            # 绘制凸包（对于较大的聚类）
            if label != NOISE and len(cluster_points) > 3:
                self._plot_hull(ax, cluster_points, color)

        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('X坐标')
        ax.set_ylabel('Y坐标')
        ax.grid(True, alpha=0.3)

        # 图例只显示前15项以避免过于拥挤
        handles, labels_legend = ax.get_legend_handles_labels()
        if handles:
            ax.legend(handles[:15], labels_legend[:15], loc='upper right', fontsize=8)

        n_clusters = len(cluster_labels)
        n_noise = int(np.sum(labels == NOISE))
        stats_text = f'聚类数: {n_clusters}\n噪声点: {n_noise}\n总点数: {len(points)}'
        ax.text(0.02, 0.98, stats_text, transform=ax.transAxes,
                fontsize=10, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8))

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"聚类图已保存到: {save_path}")

        return fig

    @staticmethod
    def _plot_hull(ax, cluster_points: np.ndarray, color) -> None:
        try:
            hull = ConvexHull(cluster_points)
        except (QhullError, ValueError) as e:
            # 共线或重复点无法构成凸包
            warnings.warn(f"无法绘制凸包: {e}")
            return

        hull_points = cluster_points[hull.vertices]
        hull_points = np.vstack([hull_points, hull_points[0]])  # 闭合多边形
        ax.plot(hull_points[:, 0], hull_points[:, 1],
                color=color, alpha=0.3, linewidth=1, linestyle='--')


def plot_clusters(points: Sequence, labels: Sequence[int],
                  title: str = "DBSCAN聚类结果",
                  save_path: Optional[str] = None) -> plt.Figure:
    """
    绘制二维聚类结果的便捷函数

    Args:
        points: 点数据
        labels: 聚类标签
        title: 图表标题
        save_path: 保存路径

    Returns:
        matplotlib图形对象
    """
    visualizer = ClusterVisualizer()
    return visualizer.plot_clusters_2d(points, labels, title=title, save_path=save_path)
