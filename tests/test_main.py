from __future__ import annotations

import pytest

from archsetup import main as main_mod
from archsetup.main import main, selected_steps, _build_parser
from archsetup.pipeline import StepReport

from .fakes import FakeSelector, make_toolbox


@pytest.fixture
def ran(monkeypatch):
    """Record which steps would run instead of running them."""
    calls = []

    class _Recorder:
        def __init__(self, step_id):
            self.step_id = step_id

        def run(self, ctx):
            calls.append(self.step_id)
            return StepReport(step_id=self.step_id)

    monkeypatch.setattr(main_mod, "build_steps", lambda ids: [_Recorder(i) for i in ids])
    monkeypatch.delenv("MENU", raising=False)
    return calls


def _argv(tmp_path, *flags):
    return [*flags, "--config-dir", str(tmp_path), "--log", str(tmp_path / "log")]


def test_unknown_flag_exits_non_zero_and_runs_nothing(ran, tmp_path, capsys):
    assert main(_argv(tmp_path, "--packages", "--bogus"), tools=make_toolbox()) == 1
    assert ran == []
    err = capsys.readouterr().err
    assert "Usage:" in err
    assert "Error:" in err


def test_abbreviated_flag_is_rejected(ran, tmp_path):
    assert main(_argv(tmp_path, "--pack"), tools=make_toolbox()) == 1
    assert ran == []


def test_help_runs_nothing(ran, tmp_path, capsys):
    tools = make_toolbox()
    assert main(_argv(tmp_path, "--help", "--all"), tools=tools) == 0
    assert ran == []
    assert "--update-lists" in capsys.readouterr().out
    assert tools.pacman.calls == []


def test_no_flags_prints_usage(ran, tmp_path, capsys):
    assert main(_argv(tmp_path), tools=make_toolbox()) == 0
    assert ran == []
    assert "Usage:" in capsys.readouterr().out


def test_steps_run_in_dependency_order(ran, tmp_path):
    assert main(_argv(tmp_path, "--services", "--packages", "--repos"), tools=make_toolbox()) == 0
    assert ran == ["repos", "packages", "services"]


def test_all_excludes_update_lists(ran, tmp_path):
    main(_argv(tmp_path, "--all"), tools=make_toolbox())
    assert ran == ["repos", "packages", "themes", "dotfiles", "zsh_plugins", "services"]


def test_all_with_update_lists_runs_snapshot_last(tmp_path):
    args = _build_parser().parse_args(["--update-lists", "--all"])
    assert selected_steps(args)[-1] == "update_lists"


def test_menu_env_launches_menu(ran, tmp_path, monkeypatch):
    monkeypatch.setenv("MENU", "true")
    tools = make_toolbox(selector=FakeSelector("Themes"))
    assert main(_argv(tmp_path), tools=tools) == 0
    assert ran == ["themes"]
    assert "Quit" in tools.selector.offered


def test_menu_cancel_is_a_no_op(ran, tmp_path):
    assert main(_argv(tmp_path, "--menu"), tools=make_toolbox(selector=FakeSelector(None))) == 0
    assert ran == []


def test_menu_quit_is_a_no_op(ran, tmp_path):
    assert main(_argv(tmp_path, "--menu"), tools=make_toolbox(selector=FakeSelector("Quit"))) == 0
    assert ran == []


def test_menu_with_step_flags_is_a_usage_error(ran, tmp_path, capsys):
    tools = make_toolbox(selector=FakeSelector("Themes"))
    assert main(_argv(tmp_path, "--menu", "--packages"), tools=tools) == 1
    assert ran == []
    assert tools.selector.offered == []
    assert "--menu cannot be combined" in capsys.readouterr().err


def test_malformed_settings_exit_non_zero(ran, tmp_path):
    (tmp_path / "settings.yaml").write_text("services: [unclosed\n", encoding="utf-8")
    assert main(_argv(tmp_path, "--packages"), tools=make_toolbox()) == 1
    assert ran == []


def test_end_to_end_packages_already_installed(tmp_path, monkeypatch):
    monkeypatch.delenv("MENU", raising=False)
    (tmp_path / "pacman.txt").write_text("git\njq\n", encoding="utf-8")
    (tmp_path / "aur.txt").write_text("", encoding="utf-8")
    (tmp_path / "flatpak.txt").write_text("", encoding="utf-8")
    tools = make_toolbox()
    tools.pacman.native.update(["git", "jq"])

    assert main(_argv(tmp_path, "--packages"), tools=tools) == 0
    assert tools.pacman.calls == []
    assert tools.aur.installed == []
    assert tools.flatpak.installs == []


def test_step_error_exits_one(tmp_path, monkeypatch):
    monkeypatch.delenv("MENU", raising=False)
    (tmp_path / "pacman.txt").write_text("nope\n", encoding="utf-8")
    tools = make_toolbox()
    tools.pacman.fail_on.add("nope")
    assert main(_argv(tmp_path, "--packages"), tools=tools) == 1


def test_bad_theme_manifest_exits_one(tmp_path, monkeypatch):
    monkeypatch.delenv("MENU", raising=False)
    (tmp_path / "themes.json").write_text('{"themes": [{"name": "x"}]}', encoding="utf-8")
    tools = make_toolbox()
    assert main(_argv(tmp_path, "--themes"), tools=tools) == 1
    assert tools.git.clones == []
