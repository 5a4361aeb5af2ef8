from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .errors import PrerequisiteError


def _entries(text: str) -> List[str]:
    out: List[str] = []
    seen = set()
    for line in text.splitlines():
        entry = line.split("#", 1)[0].strip()
        if not entry or entry in seen:
            continue
        seen.add(entry)
        out.append(entry)
    return out


def read_package_list(path: str) -> List[str]:
    """Entries of a list file; blank lines and ``#`` comments are ignored.

    A missing file reads as an empty list.
    """
    p = Path(path)
    if not p.exists():
        return []
    return _entries(p.read_text(encoding="utf-8"))


def write_package_list(path: str, names: Iterable[str]) -> int:
    """Overwrite a list file with the sorted, de-duplicated names."""
    entries = sorted({n.strip() for n in names if n.strip()})
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("".join(f"{e}\n" for e in entries), encoding="utf-8")
    return len(entries)


def read_dotfiles_repo(path: str) -> str:
    entries = read_package_list(path)
    if not entries:
        raise PrerequisiteError(f"No dotfile repository configured in {path}")
    return entries[0]
