from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from archsetup.pipeline import StepContext
from archsetup.settings import Settings

from .fakes import make_toolbox


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    d = tmp_path / "config"
    d.mkdir()
    return d


@pytest.fixture
def settings(config_dir: Path, tmp_path: Path) -> Settings:
    return Settings(
        config_dir=str(config_dir),
        themes_dir=str(tmp_path / "themes"),
        cache_dir=str(tmp_path / "cache"),
        zsh_custom=str(tmp_path / "zsh"),
        pacman_conf=str(tmp_path / "pacman.conf"),
    )


@pytest.fixture
def tools():
    return make_toolbox()


@pytest.fixture
def make_ctx(settings, tools):
    def _make(**changes) -> StepContext:
        s = dataclasses.replace(settings, **changes) if changes else settings
        return StepContext(settings=s, tools=tools)

    return _make


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep handler setup out of the root logger; caplog still sees records."""
    monkeypatch.setattr("archsetup.main.configure_logging", lambda **kw: kw.get("log_path", ""))
