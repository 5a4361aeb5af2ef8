from __future__ import annotations

import pytest

from archsetup.errors import PrerequisiteError
from archsetup.lists import read_dotfiles_repo, read_package_list, write_package_list


def test_read_ignores_comments_and_blank_lines(tmp_path):
    p = tmp_path / "pacman.txt"
    p.write_text("# header\n\ngit\n  jq  \nvim # editor\ngit\n", encoding="utf-8")
    assert read_package_list(str(p)) == ["git", "jq", "vim"]


def test_read_missing_file_is_empty(tmp_path):
    assert read_package_list(str(tmp_path / "nope.txt")) == []


def test_write_sorts_and_dedups(tmp_path):
    p = tmp_path / "sub" / "aur.txt"
    assert write_package_list(str(p), ["zoxide", "bat", "zoxide", " "]) == 2
    assert p.read_text(encoding="utf-8") == "bat\nzoxide\n"


def test_write_empty_list_gives_empty_file(tmp_path):
    p = tmp_path / "flatpak.txt"
    write_package_list(str(p), [])
    assert p.read_bytes() == b""


def test_write_is_byte_identical_when_repeated(tmp_path):
    p = tmp_path / "pacman.txt"
    write_package_list(str(p), ["jq", "git", "base"])
    first = p.read_bytes()
    write_package_list(str(p), ["base", "jq", "git"])
    assert p.read_bytes() == first


def test_written_list_reads_back_in_order(tmp_path):
    p = tmp_path / "pacman.txt"
    write_package_list(str(p), ["jq", "git"])
    assert read_package_list(str(p)) == ["git", "jq"]


def test_dotfiles_repo_first_entry(tmp_path):
    p = tmp_path / "dotfiles_repo.txt"
    p.write_text("# chezmoi source\nhttps://example.com/dots.git\n", encoding="utf-8")
    assert read_dotfiles_repo(str(p)) == "https://example.com/dots.git"


def test_dotfiles_repo_missing(tmp_path):
    with pytest.raises(PrerequisiteError):
        read_dotfiles_repo(str(tmp_path / "dotfiles_repo.txt"))
