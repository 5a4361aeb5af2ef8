from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from archsetup.errors import CommandError, PrerequisiteError, PrivilegeError
from archsetup.lib import command, privilege
from archsetup.lib.command import run_cmd


@pytest.fixture
def fake_run(monkeypatch):
    calls = []
    result = SimpleNamespace(returncode=0, stdout="a\n\nb\n", stderr="")

    def _run(argv, **kw):
        calls.append((argv, kw))
        return result

    monkeypatch.setattr(subprocess, "run", _run)
    return SimpleNamespace(calls=calls, result=result)


def test_captures_output(fake_run):
    r = run_cmd(["pacman", "-Qq"])
    assert r.lines == ["a", "b"]
    assert fake_run.calls[0][1]["stdout"] is subprocess.PIPE


def test_streams_when_not_capturing(fake_run):
    fake_run.result.stdout = None
    r = run_cmd(["pacman", "-S", "git"], capture=False)
    assert fake_run.calls[0][1]["stdout"] is None
    assert r.stdout == ""


def test_dry_run_executes_nothing(fake_run):
    r = run_cmd(["pacman", "-S", "git"], dry_run=True)
    assert r.returncode == 0
    assert fake_run.calls == []


def test_non_zero_exit_raises(fake_run):
    fake_run.result.returncode = 1
    fake_run.result.stderr = "error: target not found: nope"
    with pytest.raises(CommandError) as exc:
        run_cmd(["pacman", "-S", "nope"])
    assert exc.value.returncode == 1
    assert "target not found" in str(exc.value)


def test_non_zero_exit_tolerated_without_check(fake_run):
    fake_run.result.returncode = 1
    assert run_cmd(["pacman", "-Qqem"], check=False).returncode == 1


def test_missing_binary(monkeypatch):
    def _run(argv, **kw):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(subprocess, "run", _run)
    with pytest.raises(PrerequisiteError):
        run_cmd(["paru", "-S", "x"])


def test_as_root_prefixes_sudo(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(privilege, "which", lambda cmd: True)
    assert privilege.as_root(["pacman", "-Sy"]) == ["sudo", "pacman", "-Sy"]


def test_as_root_when_already_root(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 0)
    assert privilege.as_root(["pacman", "-Sy"]) == ["pacman", "-Sy"]


def test_as_root_without_sudo(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(privilege, "which", lambda cmd: False)
    with pytest.raises(PrivilegeError):
        privilege.as_root(["pacman", "-Sy"])


def test_makepkg_refuses_root(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 0)
    with pytest.raises(PrivilegeError):
        privilege.require_unprivileged("makepkg")


def test_which(monkeypatch):
    monkeypatch.setattr(command.shutil, "which", lambda cmd: "/usr/bin/git" if cmd == "git" else None)
    assert command.which("git")
    assert not command.which("paru")
