from __future__ import annotations

import dataclasses

import pytest

from archsetup.errors import CommandError
from archsetup.settings import StepPolicy
from archsetup.steps import InstallPackagesStep

from .fakes import FakeAur, FakeFlatpak, FakePacman


def _lists(config_dir, pacman="", aur="", flatpak=""):
    (config_dir / "pacman.txt").write_text(pacman, encoding="utf-8")
    (config_dir / "aur.txt").write_text(aur, encoding="utf-8")
    (config_dir / "flatpak.txt").write_text(flatpak, encoding="utf-8")


def test_already_installed_packages_issue_no_install_commands(make_ctx, tools, config_dir):
    _lists(config_dir, pacman="git\njq\n")
    tools.pacman = FakePacman(installed=["git", "jq", "base"])
    ctx = make_ctx()

    report = InstallPackagesStep().run(ctx)

    assert tools.pacman.calls == []
    assert tools.aur.installed == []
    assert tools.flatpak.installs == []
    assert report.failed == []
    assert report.done == ["pacman"]


def test_installs_only_missing_entries(make_ctx, tools, config_dir):
    _lists(config_dir, pacman="git\nhtop\n", aur="paru-bin\nvisual-studio-code-bin\n", flatpak="org.gimp.GIMP\n")
    tools.pacman = FakePacman(installed=["git"], foreign=["paru-bin"])
    tools.flatpak = FakeFlatpak(apps=[])

    InstallPackagesStep().run(make_ctx())

    assert tools.pacman.calls == [("sync",), ("install", ["htop"])]
    assert tools.aur.installed == [["visual-studio-code-bin"]]
    assert tools.flatpak.installs == [("flathub", ["org.gimp.GIMP"])]


def test_empty_lists_are_skipped(make_ctx, tools, config_dir):
    _lists(config_dir, pacman="# nothing yet\n")
    report = InstallPackagesStep().run(make_ctx())
    assert report.done == []
    assert tools.pacman.calls == []


def test_missing_flathub_remote_is_registered(make_ctx, tools, config_dir):
    _lists(config_dir, flatpak="com.spotify.Client\n")
    tools.flatpak = FakeFlatpak(remotes=[])
    InstallPackagesStep().run(make_ctx())
    assert tools.flatpak.added == [("flathub", "https://flathub.org/repo/flathub.flatpakrepo")]
    assert tools.flatpak.installs == [("flathub", ["com.spotify.Client"])]


def test_missing_aur_helper_is_bootstrapped(make_ctx, tools, config_dir):
    _lists(config_dir, aur="yay-bin\n")
    tools.aur = FakeAur(present=False)
    InstallPackagesStep().run(make_ctx())
    assert tools.aur.bootstrapped == 1
    assert tools.aur.installed == [["yay-bin"]]


def test_failure_aborts_by_default(make_ctx, tools, config_dir):
    _lists(config_dir, pacman="no-such-pkg\n", flatpak="org.gimp.GIMP\n")
    tools.pacman = FakePacman(fail_on=["no-such-pkg"])

    with pytest.raises(CommandError):
        InstallPackagesStep().run(make_ctx())
    assert tools.flatpak.installs == []


def test_failure_continues_when_policy_allows(make_ctx, tools, config_dir, settings):
    _lists(config_dir, pacman="no-such-pkg\n", flatpak="org.gimp.GIMP\n")
    tools.pacman = FakePacman(fail_on=["no-such-pkg"])
    policies = dict(settings.step_policies, packages=StepPolicy(continue_on_entry_failure=True))

    report = InstallPackagesStep().run(make_ctx(step_policies=policies))

    assert report.failed == ["pacman"]
    assert report.done == ["flatpak"]
    assert tools.flatpak.installs == [("flathub", ["org.gimp.GIMP"])]
