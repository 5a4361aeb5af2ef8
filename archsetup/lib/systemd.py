from __future__ import annotations

from typing import Protocol, Sequence

from .command import run_cmd
from .privilege import as_root


class ServiceManager(Protocol):
    def enable_now(self, units: Sequence[str]) -> None:
        ...

    def enable_now_user(self, units: Sequence[str]) -> None:
        ...


class Systemctl:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def enable_now(self, units: Sequence[str]) -> None:
        if not units:
            return
        run_cmd(as_root(["systemctl", "enable", "--now", *units]), dry_run=self.dry_run)

    def enable_now_user(self, units: Sequence[str]) -> None:
        if not units:
            return
        run_cmd(["systemctl", "--user", "enable", "--now", *units], dry_run=self.dry_run)
