from __future__ import annotations

from typing import List, Sequence


class ArchSetupError(RuntimeError):
    """Base class for failures reported as ``Error: ...`` with exit code 1."""


class UsageError(ArchSetupError):
    pass


class PrivilegeError(ArchSetupError):
    pass


class PrerequisiteError(ArchSetupError):
    pass


class CommandError(ArchSetupError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class ManifestError(ArchSetupError):
    """Raised once per manifest with every problem that was found."""

    def __init__(self, path: str, problems: List[str]) -> None:
        self.path = path
        self.problems = list(problems)
        lines = "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(f"Invalid theme manifest {path}:\n{lines}")
