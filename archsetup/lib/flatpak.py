from __future__ import annotations

from typing import List, Protocol, Sequence, Set

from .command import run_cmd


class AppInstaller(Protocol):
    def remotes(self) -> Set[str]:
        ...

    def add_remote(self, name: str, url: str) -> None:
        ...

    def installed_apps(self) -> List[str]:
        ...

    def install(self, remote: str, apps: Sequence[str]) -> None:
        ...


class Flatpak:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def remotes(self) -> Set[str]:
        return set(run_cmd(["flatpak", "remotes", "--columns=name"]).lines)

    def add_remote(self, name: str, url: str) -> None:
        run_cmd(["flatpak", "remote-add", "--if-not-exists", name, url], dry_run=self.dry_run)

    def installed_apps(self) -> List[str]:
        # --app skips runtimes and extensions.
        return sorted(run_cmd(["flatpak", "list", "--app", "--columns=application"]).lines)

    def install(self, remote: str, apps: Sequence[str]) -> None:
        if not apps:
            return
        run_cmd(
            ["flatpak", "install", "-y", "--noninteractive", remote, *apps],
            dry_run=self.dry_run,
            capture=False,
        )
