"""
示例脚本测试
"""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "run_example.py"


@pytest.fixture(scope="module")
def run_example():
    spec = importlib.util.spec_from_file_location("run_example", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRunExample:

    def test_compare_metrics_on_sample(self, run_example, capsys):
        results = run_example.main(['--compare-metrics'])

        assert [r['metric'] for r in results] == ['default', 'euclidean2d', 'custom']
        # eps=1, min_points=4：示例数据全部为噪声
        for result in results:
            assert result['results']['labels'] == [0] * 11
        assert "噪声" in capsys.readouterr().out

    def test_custom_distance_matches_builtin(self, run_example, sample_points):
        from dbscan_clusterer import dbscan

        assert dbscan(sample_points, 2, 2, run_example.custom_distance) == \
            dbscan(sample_points, 2, 2, 'euclidean2d')

    def test_output_files(self, run_example, tmp_path):
        results = run_example.main(['--eps', '2', '--min-points', '2',
                                    '--metric', 'euclidean2d',
                                    '--output-dir', str(tmp_path), '--plot'])

        assert results[0]['results']['labels'] == [1, 1, 1, 2, 2, 3, 0, 3, 0, 4, 4]
        saved = json.loads((tmp_path / "dbscan_results.json").read_text())
        assert saved[0]['results']['n_clusters'] == 4
        assert (tmp_path / "labels_euclidean2d.csv").exists()
        assert (tmp_path / "clusters_euclidean2d.png").exists()

    def test_csv_input(self, run_example, tmp_path):
        data = tmp_path / "points.csv"
        data.write_text("x,y\n0,0\n0,1\n0,2\n9,9\n")

        results = run_example.main(['--data', str(data), '--min-points', '3'])

        assert results[0]['results']['labels'] == [1, 1, 1, 0]

    def test_invalid_arguments_exit(self, run_example):
        with pytest.raises(SystemExit) as exc_info:
            run_example.main(['--eps', '-1'])

        assert exc_info.value.code == 1
