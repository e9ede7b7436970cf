"""
测试共享fixture
"""

import math

import matplotlib

matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np
import pytest


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


@pytest.fixture
def sample_points():
    """示例数据集（列表形式）"""
    return [list(p) for p in SAMPLE_POINTS]


@pytest.fixture
def blob_points():
    """三个高斯团簇加均匀分布的噪声点"""
    rng = np.random.RandomState(42)
    centers = np.array([[0.0, 0.0], [5.0, 5.0], [-5.0, 5.0]])
    blobs = [center + rng.normal(scale=0.3, size=(30, 2)) for center in centers]
    noise = rng.uniform(-10, 10, size=(15, 2))
    return np.vstack(blobs + [noise])


@pytest.fixture
def euclidean_2d():
    """与euclidean2d数值相同的自定义距离函数"""
    def distance(a, b):
        return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)
    return distance


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')
