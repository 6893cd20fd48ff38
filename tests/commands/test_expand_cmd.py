"""Tests for ``magiccube expand``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from magiccube.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestExpandCount:
    def test_default_sink(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["expand", "-d", "2"])
        assert result.exit_code == 0
        assert "leaf_count: 16" in result.stdout
        assert "leaf_scale: 1.0" in result.stdout
        assert "sink: count" in result.stdout

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "expand", "-d", "3"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "64"

    def test_jagged_matrix_warns(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "expand", "-m", "1,0,1|0", "-d", "1"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "4"
        assert "jagged" in result.stderr

    def test_collect_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "expand", "-d", "1", "--sink", "collect"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["leaf_count"] == 4
        assert data["placements"][0] == {"scale": 2.0, "position": [0.0, 0.0, 2.0]}

    def test_scale_override(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "expand", "-d", "1", "--scale", "1"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["min_scale"] == 0.5

    def test_verbose_shows_span_tree(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "expand", "-d", "1"])
        assert result.exit_code == 0
        assert "FractalService.expand" in result.stdout
        assert "emit" in result.stdout


@pytest.mark.usefixtures("_isolated_project")
class TestExpandStreaming:
    def test_jsonl_to_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "expand", "-d", "1", "--sink", "jsonl"])
        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 4
        assert json.loads(lines[-1]) == {"scale": 2.0, "position": [2.0, 2.0, 2.0]}
        assert result.stderr.strip() == "4"

    def test_obj_to_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "cube.obj"
        result = cli_runner.invoke(cli, ["expand", "-d", "1", "--sink", "obj", "-o", str(out)])
        assert result.exit_code == 0
        assert "leaf_count: 4" in result.stdout
        text = out.read_text(encoding="utf-8")
        assert text.count("o cube_") == 4
        assert sum(1 for line in text.splitlines() if line.startswith("v ")) == 32
        assert sum(1 for line in text.splitlines() if line.startswith("f ")) == 24


@pytest.mark.usefixtures("_isolated_project")
class TestExpandErrors:
    def test_too_large(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["expand", "-m", "1,1,1,1|1,1,1,1|1,1,1,1|1,1,1,1", "-d", "8"]
        )
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Lower the depth" in result.stderr

    def test_unknown_sink(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "expand", "--sink", "nope"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "UNKNOWN_SINK"

    def test_blank_matrix(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "expand", "-m", " "])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_MATRIX"

    def test_non_positive_scale(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["expand", "--scale", "0"])
        assert result.exit_code == 2
        assert "--scale" in result.stderr

    def test_infinite_scale(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["expand", "--scale", "inf"])
        assert result.exit_code == 2

    def test_entry_too_large_to_place(self, cli_runner: CliRunner) -> None:
        huge = "1" + "0" * 400
        result = cli_runner.invoke(cli, ["--json", "expand", "-d", "1", "-m", huge])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_MATRIX"

    def test_deep_single_cell_expansion(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "magiccube.toml").write_text("[limits]\nmax_depth = 5000\n", encoding="utf-8")
        result = cli_runner.invoke(cli, ["-q", "expand", "-m", "0", "-d", "5000"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "1"

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["expand", "--examples"])
        assert result.exit_code == 0
        assert "--sink obj" in result.stdout
