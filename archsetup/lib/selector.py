from __future__ import annotations

import logging
import subprocess
from typing import Optional, Protocol, Sequence

from ..errors import PrerequisiteError
from .command import run_cmd, which

logger = logging.getLogger(__name__)


class Selector(Protocol):
    def choose(self, labels: Sequence[str], *, title: str) -> Optional[str]:
        ...


class TerminalSelector:
    """Pick one label with fzf, or whiptail when fzf is not installed.

    Returns None when the user cancels.
    """

    def choose(self, labels: Sequence[str], *, title: str = "Select action") -> Optional[str]:
        if which("fzf"):
            return self._fzf(labels, title)
        if which("whiptail"):
            return self._whiptail(labels, title)
        raise PrerequisiteError("interactive menu needs fzf or whiptail")

    def _fzf(self, labels: Sequence[str], title: str) -> Optional[str]:
        # fzf draws on /dev/tty, so stdout carries only the selection.
        r = run_cmd(["fzf", f"--prompt={title}> "], input_text="\n".join(labels) + "\n", check=False)
        choice = r.stdout.strip()
        return choice if r.returncode == 0 and choice else None

    def _whiptail(self, labels: Sequence[str], title: str) -> Optional[str]:
        argv = ["whiptail", "--notags", "--menu", title, "20", "70", str(len(labels))]
        for label in labels:
            argv += [label, label]
        logger.debug("CMD %s", " ".join(argv))
        # whiptail draws on stdout and reports the chosen tag on stderr.
        p = subprocess.run(argv, stderr=subprocess.PIPE, text=True)
        choice = (p.stderr or "").strip()
        return choice if p.returncode == 0 and choice else None
