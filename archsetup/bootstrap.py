"""Clone (or update) the configuration repository, then hand over to archsetup.

Meant for a fresh machine: ``archsetup-bootstrap --all`` installs git if
needed, fetches the repo holding ``config/`` into ``~/.arch-bootstrap`` and
runs the dispatcher against it.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from .errors import ArchSetupError
from .lib.command import which
from .lib.git import Git, sync_checkout
from .lib.pacman import Pacman
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .main import main as archsetup_main

logger = logging.getLogger(__name__)

DEFAULT_REPO_URL = "https://github.com/Conava/arch-bootstrap.git"
DEFAULT_TARGET = "~/.arch-bootstrap"


def bootstrap(*, repo_url: str, target: str, git: Optional[Git] = None, pacman: Optional[Pacman] = None) -> str:
    """Make sure target holds an up-to-date checkout of repo_url. Returns the config dir."""

    git = git or Git()
    pacman = pacman or Pacman()

    if not which("git"):
        logger.info("git not found - installing via pacman")
        pacman.install(["git"])

    logger.info("Using target directory: %s", target)
    how = sync_checkout(git, repo_url, target)
    logger.info("Repository %s", how)
    return os.path.join(target, "config")


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="archsetup-bootstrap",
        allow_abbrev=False,
        description="Fetch the archsetup config repository and run archsetup with the remaining flags.",
    )
    p.add_argument("--repo", default=os.environ.get("ARCHSETUP_REPO", DEFAULT_REPO_URL))
    p.add_argument("--target", default=DEFAULT_TARGET)
    p.add_argument("--log", default=DEFAULT_LOG_PATH)

    args, rest = p.parse_known_args(argv)
    configure_logging(log_path=args.log)

    try:
        config_dir = bootstrap(repo_url=args.repo, target=os.path.expanduser(args.target))
    except ArchSetupError as e:
        logger.error("%s", e)
        return 1

    logger.info("Launching archsetup")
    return archsetup_main(["--config-dir", config_dir, "--log", args.log, *rest])


if __name__ == "__main__":
    raise SystemExit(main())
