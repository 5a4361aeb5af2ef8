from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Protocol, Sequence, Set

from ..errors import CommandError
from .command import run_cmd
from .privilege import as_root

logger = logging.getLogger(__name__)


class PackageManager(Protocol):
    def installed(self) -> Set[str]:
        ...

    def sync(self) -> None:
        ...

    def install(self, packages: Sequence[str]) -> None:
        ...

    def install_urls(self, urls: Sequence[str]) -> None:
        ...

    def explicit_native(self) -> List[str]:
        ...

    def explicit_foreign(self) -> List[str]:
        ...


class KeyManager(Protocol):
    def recv_key(self, key: str, keyserver: str) -> None:
        ...

    def lsign_key(self, key: str) -> None:
        ...


class Pacman:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    # Queries are read-only and run even in dry-run mode.
    def installed(self) -> Set[str]:
        return set(run_cmd(["pacman", "-Qq"]).lines)

    def explicit_native(self) -> List[str]:
        return sorted(run_cmd(["pacman", "-Qqen"]).lines)

    def explicit_foreign(self) -> List[str]:
        # pacman -Qm exits 1 with nothing on stderr when there are no foreign packages.
        r = run_cmd(["pacman", "-Qqem"], check=False)
        if r.returncode == 0:
            return sorted(r.lines)
        if r.returncode == 1 and not r.stderr.strip():
            return []
        raise CommandError(r.argv, r.returncode, r.stderr)

    def sync(self) -> None:
        run_cmd(as_root(["pacman", "-Sy"]), dry_run=self.dry_run, capture=False)

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        run_cmd(
            as_root(["pacman", "-S", "--needed", "--noconfirm", *packages]),
            dry_run=self.dry_run,
            capture=False,
        )

    def install_urls(self, urls: Sequence[str]) -> None:
        if not urls:
            return
        run_cmd(as_root(["pacman", "-U", "--noconfirm", *urls]), dry_run=self.dry_run, capture=False)


class PacmanKey:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def recv_key(self, key: str, keyserver: str) -> None:
        run_cmd(as_root(["pacman-key", "--recv-key", key, "--keyserver", keyserver]), dry_run=self.dry_run)

    def lsign_key(self, key: str) -> None:
        run_cmd(as_root(["pacman-key", "--lsign-key", key]), dry_run=self.dry_run)


def has_repo(pacman_conf: str, name: str) -> bool:
    """Return True if pacman.conf already carries a ``[name]`` section."""
    p = Path(pacman_conf)
    if not p.exists():
        return False
    pattern = re.compile(rf"^\[{re.escape(name)}\]", re.MULTILINE)
    return bool(pattern.search(p.read_text(encoding="utf-8")))


def append_repo(pacman_conf: str, name: str, include: str, *, dry_run: bool = False) -> None:
    block = f"\n[{name}]\nInclude = {include}\n"
    run_cmd(as_root(["tee", "-a", pacman_conf]), input_text=block, dry_run=dry_run)
    logger.info("Added [%s] to %s", name, pacman_conf)
