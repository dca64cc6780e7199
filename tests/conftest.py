"""Shared pytest fixtures for test isolation helpers."""

from pathlib import Path

import pytest

import shellmate.config as config_module


@pytest.fixture()
def shellmate_config_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Redirect shellmate config paths to a temp directory."""
    config_dir = tmp_path / ".shellmate"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    return config_dir, config_file


@pytest.fixture()
def config_dir(shellmate_config_paths: tuple[Path, Path]) -> Path:
    return shellmate_config_paths[0]


@pytest.fixture()
def config_file(shellmate_config_paths: tuple[Path, Path]) -> Path:
    return shellmate_config_paths[1]
