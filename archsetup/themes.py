from __future__ import annotations

import json
import logging
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ManifestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemeEntry:
    name: str
    git: str
    dest: str
    category: str
    subdir: Optional[str] = None


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to JSON for unknown extensions.
    return "json"


def _read_raw(path: Path) -> Any:
    if _detect_format(path) == "yaml":
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("PyYAML is required to read a YAML theme manifest") from e
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(str(e)) from e
    return json.loads(path.read_text(encoding="utf-8"))


def name_from_url(url: str) -> str:
    base = posixpath.basename(url.rstrip("/"))
    return base[: -len(".git")] if base.endswith(".git") else base


def _str_field(item: Dict[str, Any], key: str) -> Optional[str]:
    v = item.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise TypeError(f"'{key}' must be a string")
    return v.strip() or None


def _validate(idx: int, item: Any, themes_dir: str, problems: List[str]) -> Optional[ThemeEntry]:
    where = f"themes[{idx}]"
    if not isinstance(item, dict):
        problems.append(f"{where}: expected an object, got {type(item).__name__}")
        return None

    before = len(problems)
    fields: Dict[str, Optional[str]] = {}
    for key in ("name", "git", "dest", "subdir", "category"):
        try:
            fields[key] = _str_field(item, key)
        except TypeError as e:
            problems.append(f"{where}: {e}")
            fields[key] = None

    unknown = sorted(set(item) - {"name", "git", "dest", "subdir", "category"})
    if unknown:
        problems.append(f"{where}: unknown key(s) {', '.join(unknown)}")

    git = fields["git"]
    category = fields["category"]
    if not git:
        problems.append(f"{where}: 'git' is required")
    if not category:
        problems.append(f"{where}: 'category' is required")
    elif "/" in category or category in {".", ".."}:
        problems.append(f"{where}: 'category' must be a single path component")

    name = fields["name"] or (name_from_url(git) if git else None)
    if git and not name:
        problems.append(f"{where}: cannot derive a name from {git!r}")
    elif name and ("/" in name or name in {".", ".."}):
        problems.append(f"{where}: 'name' must be a single path component")

    subdir = fields["subdir"]
    if subdir:
        norm = posixpath.normpath(subdir)
        if posixpath.isabs(norm) or norm == ".." or norm.startswith("../"):
            problems.append(f"{where}: 'subdir' must stay inside the repository")
        subdir = None if norm == "." else norm

    if len(problems) != before or not (git and category and name):
        return None

    dest = fields["dest"] or os.path.join(themes_dir, category, name)
    return ThemeEntry(
        name=name,
        git=git,
        dest=os.path.expandvars(os.path.expanduser(dest)),
        category=category,
        subdir=subdir,
    )


def load_theme_manifest(path: str, *, themes_dir: str) -> List[ThemeEntry]:
    """Load and validate every theme entry before anything is cloned.

    All problems are collected and raised together as one ManifestError.
    """

    p = Path(path)
    if not p.exists():
        raise ManifestError(path, ["file not found"])

    try:
        raw = _read_raw(p)
    except ValueError as e:
        raise ManifestError(path, [f"cannot parse: {e}"]) from e

    items = raw.get("themes") if isinstance(raw, dict) else raw
    if items is None:
        items = []
    if not isinstance(items, list):
        raise ManifestError(path, ["expected a list of themes or an object with a 'themes' list"])

    problems: List[str] = []
    entries: List[ThemeEntry] = []
    seen: Dict[str, int] = {}
    for idx, item in enumerate(items):
        entry = _validate(idx, item, themes_dir, problems)
        if entry is None:
            continue
        if entry.name in seen:
            problems.append(f"themes[{idx}]: duplicate name {entry.name!r} (first at themes[{seen[entry.name]}])")
            continue
        seen[entry.name] = idx
        entries.append(entry)

    if problems:
        raise ManifestError(path, problems)

    logger.debug("Loaded %d theme(s) from %s", len(entries), path)
    return entries


def cache_path(entry: ThemeEntry, cache_dir: str) -> str:
    return os.path.join(cache_dir, entry.category, entry.name)
