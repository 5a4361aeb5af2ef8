from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def _clear(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def copy_tree(src: str, dst: str, *, dry_run: bool = False, ignore: Iterable[str] = (".git",)) -> int:
    """Copy src over dst, overwriting files that already exist.

    Symlinks are recreated as symlinks, never followed. Top-level path
    components listed in ``ignore`` are skipped. Returns the number of files
    and links copied.
    """

    s = Path(src)
    d = Path(dst)
    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return 0

    if not s.is_dir():
        raise FileNotFoundError(src)

    skip = set(ignore)
    copied = 0
    d.mkdir(parents=True, exist_ok=True)
    # os.walk does not descend into symlinked directories.
    for root, dirs, files in os.walk(s):
        rel_root = Path(root).relative_to(s)
        if rel_root == Path("."):
            dirs[:] = [x for x in dirs if x not in skip]
            files = [x for x in files if x not in skip]
        dirs.sort()
        for name in dirs + sorted(files):
            item = Path(root) / name
            out = d / rel_root / name
            if item.is_symlink():
                if out.is_symlink() or out.exists():
                    _clear(out)
                out.symlink_to(os.readlink(item))
                copied += 1
            elif item.is_dir():
                if out.is_symlink() or out.is_file():
                    out.unlink()
                out.mkdir(parents=True, exist_ok=True)
            else:
                if out.is_symlink() or out.is_dir():
                    _clear(out)
                shutil.copy2(item, out)
                copied += 1
    return copied
