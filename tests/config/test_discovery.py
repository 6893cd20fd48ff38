"""Tests for config file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from magiccube.config.discovery import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    find_config,
    load_config,
    read_config_data,
)


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        cfg = tmp_path / CONFIG_FILENAME
        cfg.write_text("")
        assert find_config(tmp_path) == cfg

    def test_walks_up(self, tmp_path: Path) -> None:
        cfg = tmp_path / CONFIG_FILENAME
        cfg.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == cfg

    def test_pyproject_with_tool_table(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.magiccube.fractal]\ndepth = 2\n")
        assert find_config(tmp_path) == pyproject

    def test_pyproject_without_table_ignored(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / "pyproject.toml").write_text('[project]\nname = "x"\n')
        cfg = tmp_path / CONFIG_FILENAME
        cfg.write_text("")
        assert find_config(project) == cfg

    def test_dedicated_file_wins_in_same_dir(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.magiccube]\n")
        cfg = tmp_path / CONFIG_FILENAME
        cfg.write_text("")
        assert find_config(tmp_path) == cfg

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "elsewhere.toml"
        custom.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        assert find_config(tmp_path / "nowhere") == custom

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_when_no_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        cfg = load_config(cwd=tmp_path)
        assert cfg.fractal.matrix == "1,0|0,1"

    def test_loads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[fractal]\nmatrix = "1,0,2|0,2,1|2,1,0"\ndepth = 2\n')
        cfg = load_config(path)
        assert cfg.fractal.matrix == "1,0,2|0,2,1|2,1,0"
        assert cfg.fractal.depth == 2

    def test_reads_tool_table_from_pyproject(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.magiccube.limits]\nmax_leaves = 10\n")
        assert read_config_data(path) == {"limits": {"max_leaves": 10}}
        assert load_config(path).limits.max_leaves == 10
