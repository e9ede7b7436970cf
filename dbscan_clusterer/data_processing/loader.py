"""
点数据加载器
从CSV加载点坐标，并保存带聚类标签的结果
"""

import pandas as pd
import numpy as np
from typing import List, Optional, Sequence, Union
from pathlib import Path

from ..clustering.utils import as_point_array


def load_points_csv(file_path: Union[str, Path],
                    columns: Optional[List[str]] = None,
                    nrows: Optional[int] = None) -> np.ndarray:
    """
    从CSV文件加载点数据

    Args:
        file_path: CSV文件路径（第一行为表头）
        columns: 作为坐标使用的列名，None表示使用所有数值列
        nrows: 限制加载的行数

    Returns:
        形状为(n_samples, n_dims)的float64数组
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"数据文件不存在: {file_path}")

    df = pd.read_csv(file_path, nrows=nrows)

    if columns is not None:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(f"CSV中缺少列: {missing}")
        df = df[columns]
    else:
        df = df.select_dtypes(include='number')
        if df.shape[1] == 0:
            raise ValueError(f"CSV中没有数值列: {file_path}")

    # 丢弃坐标不完整的行
    df = df.dropna()

    return as_point_array(df.to_numpy(dtype=np.float64))


def save_labels_csv(points: Sequence, labels: Sequence[int],
                    output_path: Union[str, Path],
                    columns: Optional[List[str]] = None) -> Path:
    """
    保存点坐标与聚类标签

    Args:
        points: 点数据
        labels: 聚类标签
        output_path: 输出文件路径
        columns: 坐标列名，默认为x0, x1, ...

    Returns:
        写入的文件路径
    """
    points = as_point_array(points)
    if len(points) != len(labels):
        raise ValueError(f"点数量({len(points)})与标签数量({len(labels)})不一致")

    if columns is None:
        columns = [f'x{i}' for i in range(points.shape[1])]

    df = pd.DataFrame(points, columns=columns)
    df['cluster'] = np.asarray(labels, dtype=np.int64)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)

    return output_path
