from __future__ import annotations

from pathlib import Path

import pytest

from wt_tool.config import DATA_DIR_ENV, WtConfig, default_data_dir


def test_default_data_dir_under_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: Path("/home/someone")))
    assert default_data_dir() == Path("/home/someone/.local/share/wt")


def test_env_var_overrides_default(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "wt-data"))
    config = WtConfig.resolve()
    assert config.data_dir == (tmp_path / "wt-data").resolve()
    assert config.history_file == config.data_dir / "weight_history.csv"


def test_explicit_values_win(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "ignored"))
    config = WtConfig.resolve(
        data_dir=str(tmp_path / "data"),
        history_file=str(tmp_path / "elsewhere" / "log.csv"),
    )
    assert config.data_dir == (tmp_path / "data").resolve()
    assert config.history_file == (tmp_path / "elsewhere" / "log.csv").resolve()
