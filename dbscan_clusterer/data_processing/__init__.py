"""
数据处理模块
点数据的加载与聚类结果的保存
"""

from .loader import load_points_csv, save_labels_csv

__all__ = [
    'load_points_csv',
    'save_labels_csv'
]
