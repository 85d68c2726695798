"""
End-to-end test of the workflow script on the five-scanner fixture.
"""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "run_mapping.py"
SAMPLE_DATA = Path(__file__).parent / "sample_data"


@pytest.fixture(scope="module")
def run_mapping():
    spec = importlib.util.spec_from_file_location("run_mapping", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_workflow_exports_results(run_mapping, tmp_path):
    code = run_mapping.main([
        "--input", str(SAMPLE_DATA / "five_scanners.txt"),
        "--output-dir", str(tmp_path),
    ])

    assert code == 0
    document = json.loads((tmp_path / "scanners.json").read_text())
    assert document["beacon_count"] == 79
    assert document["max_scanner_distance"] == 3621
    assert (tmp_path / "beacons.csv").exists()


def test_workflow_reports_unresolved_scanners(run_mapping, tmp_path):
    path = tmp_path / "two.txt"
    path.write_text("--- scanner 0 ---\n1,2,3\n\n--- scanner 1 ---\n4,5,6\n")

    assert run_mapping.main(["--input", str(path), "--output-dir", str(tmp_path)]) == 1


def test_workflow_reports_malformed_input(run_mapping, tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("--- scanner 0 ---\n1,2\n")

    assert run_mapping.main(["--input", str(path)]) == 1


def test_workflow_requires_input(run_mapping):
    assert run_mapping.main([]) == 2


def test_workflow_reports_ambiguous_overlap_in_parallel_mode(run_mapping, tmp_path):
    path = tmp_path / "ambiguous.txt"
    path.write_text(
        "--- scanner 0 ---\n0,0,0\n1,0,0\n5,5,5\n\n"
        "--- scanner 1 ---\n0,0,0\n1,0,0\n9,9,9\n\n"
        "--- scanner 2 ---\n100,100,100\n"
    )
    config = tmp_path / "config.yaml"
    config.write_text("alignment:\n  require_unique: true\n")

    code = run_mapping.main([
        "--input", str(path),
        "--config", str(config),
        "--threshold", "2",
        "--workers", "2",
        "--output-dir", str(tmp_path),
    ])

    assert code == 1
