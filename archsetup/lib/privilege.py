from __future__ import annotations

import os
from typing import List, Sequence

from ..errors import PrivilegeError
from .command import which


def is_root() -> bool:
    return os.geteuid() == 0


def as_root(argv: Sequence[str]) -> List[str]:
    """Prefix argv with sudo unless we already run as root."""

    if is_root():
        return list(argv)
    if not which("sudo"):
        raise PrivilegeError(f"{argv[0]} needs root: re-run with sudo/root for this step.")
    return ["sudo", *argv]


def require_unprivileged(action: str) -> None:
    if is_root():
        raise PrivilegeError(f"{action} must not run as root; re-run as a regular user.")
