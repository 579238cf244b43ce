"""Tests for the CLI interface."""
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wayfinder.__main__ import app

CLI = [sys.executable, "-m", "wayfinder"]
ROOT = Path(__file__).parent.parent
ENV = {**os.environ, "PYTHONPATH": str(ROOT / "src")}

LOT_30 = "33.9735,-117.3281"
ROOM_201 = "33.97516,-117.3265"


def run_cli(*args: str) -> dict:
    """Run CLI command and return parsed JSON output."""
    result = subprocess.run(
        [*CLI, *args],
        capture_output=True, text=True, cwd=str(ROOT), env=ENV,
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}\n{result.stdout}"
    return json.loads(result.stdout)


def run_cli_expect_fail(*args: str) -> dict:
    """Run CLI command expecting failure, return parsed JSON output."""
    result = subprocess.run(
        [*CLI, *args],
        capture_output=True, text=True, cwd=str(ROOT), env=ENV,
    )
    assert result.returncode == 1
    return json.loads(result.stdout)


@pytest.fixture(scope="module")
def campus_file(tmp_path_factory) -> str:
    path = tmp_path_factory.mktemp("cli") / "campus.json"
    data = run_cli("sample", str(path))
    assert data["ok"] is True
    assert data["buildings"] == 1
    assert data["intersections"] == 16
    return str(path)


class TestBasics:
    def test_version(self):
        data = run_cli("version")
        assert data["ok"] is True
        assert data["version"] == "0.1.0"

    def test_sample_writes_file(self, campus_file):
        assert Path(campus_file).exists()
        assert json.loads(Path(campus_file).read_text())["id"] == "sample-campus"

    def test_stats(self, campus_file):
        data = run_cli("stats", campus_file)
        assert data["campus"] == "Sample Campus"
        assert data["statistics"]["intersection_nodes"] == 21
        assert data["degraded"] == []


class TestValidate:
    def test_sample_is_valid(self, campus_file):
        data = run_cli("validate", campus_file)
        assert data["ok"] is True
        assert data["validation"]["is_valid"] is True
        assert data["validation"]["error_count"] == 0
        assert data["validation"]["statistics"]["connected_components"] == 1

    def test_settings_file(self, campus_file, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"landmark_connection_radius_m": 5.0}))
        data = run_cli("--settings", str(settings), "validate", campus_file)
        codes = {issue["code"] for issue in data["validation"]["issues"]}
        assert "W010" in codes

    def test_invalid_settings_file(self, campus_file, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"no_such_option": 1}))
        data = run_cli_expect_fail("--settings", str(settings), "validate", campus_file)
        assert data["ok"] is False

    def test_missing_file(self):
        data = run_cli_expect_fail("validate", "no-such-campus.json")
        assert data["ok"] is False
        assert "not found" in data["error"]


class TestRoute:
    def test_route_to_upper_floor(self, campus_file):
        data = run_cli(
            "route", campus_file, "--from", LOT_30, "--to", ROOM_201, "--to-floor", "library-1"
        )
        route = data["route"]
        assert route["success"] is True
        assert route["nodes"][0] == "lot-30"
        assert route["nodes"][-1] == "library-1-room-201"
        assert [t["via"] for t in route["floor_transitions"]] == ["elevator"]
        assert route["instructions"][0]["maneuver"] == "depart"
        assert route["instructions"][-1]["maneuver"] == "arrive"
        assert route["distance_m"] > 0
        assert route["duration_s"] > 0

    def test_unreachable_position(self, campus_file):
        data = run_cli("route", campus_file, "--from", LOT_30, "--to", "0,0")
        assert data["ok"] is True
        assert data["route"]["success"] is False
        assert data["route"]["failure"] == "no-nearby-node"

    def test_bad_coordinate(self, campus_file):
        data = run_cli_expect_fail("route", campus_file, "--from", "north", "--to", ROOM_201)
        assert data["ok"] is False
        assert "LAT,LON" in data["error"]


class TestNearest:
    def test_nearest_node(self, campus_file):
        data = run_cli("nearest", campus_file, "33.9737,-117.3281")
        assert data["node"]["id"] == "grid-0-0"
        assert data["node"]["distance_m"] == 0.0

    def test_nearest_landmark_by_kind(self, campus_file):
        data = run_cli(
            "nearest", campus_file, ROOM_201, "--kind", "restroom", "--floor", "library-1"
        )
        assert data["landmark"]["id"] == "library-1-restroom"

    def test_unknown_kind(self, campus_file):
        data = run_cli_expect_fail("nearest", campus_file, LOT_30, "--kind", "fountain")
        assert "Unknown landmark kind" in data["error"]


class TestInProcess:
    """Several invocations of one app object, as an embedding application would."""

    def test_settings_do_not_carry_over(self, campus_file, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"search_radius_m": 1.0}))
        near_corner = "33.9738,-117.3281"  # ~11 m north of grid-0-0
        runner = CliRunner()

        narrow = runner.invoke(app, ["--settings", str(settings), "nearest", campus_file, near_corner])
        assert narrow.exit_code == 0, narrow.output
        assert json.loads(narrow.stdout)["node"] is None

        default = runner.invoke(app, ["nearest", campus_file, near_corner])
        assert default.exit_code == 0, default.output
        assert json.loads(default.stdout)["node"]["id"] == "grid-0-0"
