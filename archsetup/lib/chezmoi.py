from __future__ import annotations

from typing import Protocol

from .command import run_cmd


class DotfileManager(Protocol):
    def init_apply(self, repo_url: str) -> None:
        ...


class Chezmoi:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def init_apply(self, repo_url: str) -> None:
        """Clone the source repo and materialize it over $HOME in one go."""
        run_cmd(["chezmoi", "init", "--apply", repo_url], dry_run=self.dry_run, capture=False)
