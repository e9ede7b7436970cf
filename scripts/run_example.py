#!/usr/bin/env python3
"""
运行DBSCAN聚类示例
对同一数据集分别使用默认度量、euclidean2d和自定义距离函数进行聚类
"""

import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import argparse
import json
import math
from typing import Dict, List, Optional

from dbscan_clusterer.clustering import (
    DBSCANSequential,
    NOISE,
    available_metrics,
    group_points_by_cluster
)
from dbscan_clusterer.clustering.dbscan_sequential import DEFAULT_EPS, DEFAULT_MIN_SAMPLES
from dbscan_clusterer.data_processing.loader import load_points_csv, save_labels_csv

# 示例数据集：三个紧密的小组、一对孤立点和一个单独的点
SAMPLE_POINTS = [
    [0, 10],
    [0, 11],
    [0, 12],
    [20, 33],
    [21, 32],
    [59, 77],
    [58, 79],
    [58, 76],
    [300, 70],
    [500, 300],
    [500, 302],
]


def custom_distance(point1, point2) -> float:
    """自定义距离函数：与euclidean2d数值相同"""
    return math.sqrt((point1[0] - point2[0]) ** 2 + (point1[1] - point2[1]) ** 2)


def run_dbscan(points: np.ndarray, eps: float, min_samples: int,
               metric, metric_name: str) -> Dict[str, any]:
    """
    运行一次DBSCAN并打印分组结果

    Args:
        points: 点数据
        eps: 邻域半径
        min_samples: 最小样本数
        metric: 距离度量（名称或函数）
        metric_name: 用于显示的度量名称

    Returns:
        聚类结果
    """
    print("\n" + "=" * 60)
    print(f"DBSCAN聚类 (metric={metric_name})")
    print("=" * 60)

    dbscan = DBSCANSequential(eps=eps, min_samples=min_samples, metric=metric)
    dbscan.fit(points)
    stats = dbscan.get_cluster_stats()

    groups = group_points_by_cluster(points, dbscan.labels_)
    for label, members in groups.items():
        name = '噪声' if label == NOISE else f'聚类 {label}'
        print(f"  {name}: {[list(p) for p in members]}")

    print(f"  聚类数量: {stats['n_clusters']}, 噪声点数量: {stats['n_noise']}, "
          f"耗时: {stats['execution_time']:.4f} 秒")

    return {
        'metric': metric_name,
        'parameters': {'eps': eps, 'min_samples': min_samples, 'n_points': len(points)},
        'results': {
            'n_clusters': stats['n_clusters'],
            'n_core_points': stats['n_core_points'],
            'n_noise': stats['n_noise'],
            'cluster_sizes': stats['cluster_sizes'],
            'labels': dbscan.labels_.tolist()
        }
    }


def save_results(results: List[Dict[str, any]], points: np.ndarray,
                 output_dir: str) -> None:
    """
    保存聚类结果

    Args:
        results: 各度量的聚类结果
        points: 点数据
        output_dir: 输出目录
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    result_file = output_path / "dbscan_results.json"
    with open(result_file, 'w') as f:
        json.dump(results, f, indent=2, default=str)

    for result in results:
        save_labels_csv(points, result['results']['labels'],
                        output_path / f"labels_{result['metric']}.csv")

    print(f"结果已保存到: {output_path}")


def main(argv: Optional[List[str]] = None) -> List[Dict[str, any]]:
    """主函数"""
    parser = argparse.ArgumentParser(description='运行DBSCAN聚类示例')
    parser.add_argument('--data', type=str,
                        help='CSV点数据路径（默认使用内置示例数据）')
    parser.add_argument('--columns', type=str, nargs='+',
                        help='作为坐标的列名（默认: 所有数值列）')
    parser.add_argument('--eps', type=float, default=DEFAULT_EPS,
                        help=f'DBSCAN邻域半径（默认: {DEFAULT_EPS}）')
    parser.add_argument('--min-points', type=int, default=DEFAULT_MIN_SAMPLES,
                        help=f'核心点最小邻居数，含自身（默认: {DEFAULT_MIN_SAMPLES}）')
    parser.add_argument('--metric', type=str, default='default',
                        choices=available_metrics(),
                        help='距离度量方式（默认: default）')
    parser.add_argument('--compare-metrics', action='store_true',
                        help='依次使用default、euclidean2d和自定义函数聚类')
    parser.add_argument('--output-dir', type=str,
                        help='输出目录（不指定则不保存）')
    parser.add_argument('--plot', action='store_true',
                        help='生成二维聚类图（需要--output-dir）')

    args = parser.parse_args(argv)

    try:
        if args.data:
            points = load_points_csv(args.data, columns=args.columns)
        else:
            points = np.array(SAMPLE_POINTS, dtype=np.float64)

        print(f"数据点数量: {len(points)}")

        if args.compare_metrics:
            variants = [
                ('default', 'default'),
                ('euclidean2d', 'euclidean2d'),
                (custom_distance, 'custom'),
            ]
        else:
            variants = [(args.metric, args.metric)]

        results = [run_dbscan(points, args.eps, args.min_points, metric, name)
                   for metric, name in variants]

        if args.output_dir:
            save_results(results, points, args.output_dir)

            if args.plot:
                from dbscan_clusterer.visualization.plot_clusters import ClusterVisualizer

                visualizer = ClusterVisualizer(figsize=(10, 8))
                for result in results:
                    visualizer.plot_clusters_2d(
                        points, np.array(result['results']['labels']),
                        title=f"DBSCAN聚类结果 (eps={args.eps}, min_points={args.min_points}, "
                              f"metric={result['metric']})",
                        save_path=str(Path(args.output_dir) / f"clusters_{result['metric']}.png")
                    )

        return results

    except Exception as e:
        print(f"错误: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
