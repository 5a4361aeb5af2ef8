from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    def is_checkout(self, path: str) -> bool:
        ...

    def clone(self, url: str, dest: str) -> None:
        ...

    def pull(self, path: str) -> None:
        ...

    def commit_and_push(self, repo: str, paths: Sequence[str], message: str) -> bool:
        ...


class Git:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def is_checkout(self, path: str) -> bool:
        return (Path(path) / ".git").is_dir()

    def clone(self, url: str, dest: str) -> None:
        if not self.dry_run:
            Path(dest).parent.mkdir(parents=True, exist_ok=True)
        run_cmd(["git", "clone", "--depth=1", url, dest], dry_run=self.dry_run, capture=False)

    def pull(self, path: str) -> None:
        run_cmd(["git", "-C", path, "pull", "--ff-only"], dry_run=self.dry_run, capture=False)

    def commit_and_push(self, repo: str, paths: Sequence[str], message: str) -> bool:
        """Stage paths, commit and push. Returns False when nothing changed."""
        run_cmd(["git", "-C", repo, "add", "--", *paths], dry_run=self.dry_run)
        staged = run_cmd(
            ["git", "-C", repo, "diff", "--cached", "--quiet", "--", *paths],
            check=False,
            dry_run=self.dry_run,
        )
        if staged.returncode == 0 and not self.dry_run:
            logger.info("Package lists unchanged; nothing to commit")
            return False
        run_cmd(["git", "-C", repo, "commit", "-m", message, "--", *paths], dry_run=self.dry_run)
        run_cmd(["git", "-C", repo, "push"], dry_run=self.dry_run, capture=False)
        return True


def sync_checkout(git: VersionControl, url: str, dest: str) -> str:
    """Pull dest if it is already a checkout, clone it otherwise."""
    if git.is_checkout(dest):
        logger.info("   already exists, pulling updates")
        git.pull(dest)
        return "pulled"
    git.clone(url, dest)
    return "cloned"
