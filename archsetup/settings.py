from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ArchSetupError, PrerequisiteError

DEFAULT_CONFIG_DIR = "config"
SETTINGS_FILE = "settings.yaml"

DEFAULT_SYSTEM_UNITS = (
    "grub-btrfs-snapper.path",
    "sddm.service",
    "NetworkManager.service",
    "snapper-boot.timer",
    "snapper-cleanup.timer",
    "snapper-timeline.timer",
)

DEFAULT_ZSH_PLUGINS = (
    "zsh-users/zsh-autosuggestions",
    "zsh-users/zsh-syntax-highlighting",
)

FILE_KEYS = {
    "aur_helper",
    "menu",
    "push",
    "themes_dir",
    "cache_dir",
    "zsh_custom",
    "pacman_conf",
    "chaotic",
    "flathub_url",
    "zsh_plugins",
    "services",
    "policies",
}


@dataclass(frozen=True)
class StepPolicy:
    continue_on_entry_failure: bool = False


DEFAULT_STEP_POLICIES: Dict[str, StepPolicy] = {
    "packages": StepPolicy(continue_on_entry_failure=False),
    "themes": StepPolicy(continue_on_entry_failure=True),
    "zsh_plugins": StepPolicy(continue_on_entry_failure=True),
    "services": StepPolicy(continue_on_entry_failure=False),
}


@dataclass(frozen=True)
class UserService:
    unit: str
    package: Optional[str] = None
    command: Optional[str] = None

    @property
    def binary(self) -> str:
        return self.command or self.unit


@dataclass(frozen=True)
class ChaoticRepo:
    name: str = "chaotic-aur"
    key: str = "3056513887B78AEB"
    keyserver: str = "keyserver.ubuntu.com"
    keyring_url: str = "https://cdn-mirror.chaotic.cx/chaotic-aur/chaotic-keyring.pkg.tar.zst"
    mirrorlist_url: str = "https://cdn-mirror.chaotic.cx/chaotic-aur/chaotic-mirrorlist.pkg.tar.zst"
    include: str = "/etc/pacman.d/chaotic-mirrorlist"


@dataclass(frozen=True)
class Settings:
    config_dir: str = DEFAULT_CONFIG_DIR
    aur_helper: str = "paru"
    menu: bool = False
    dry_run: bool = False
    push: bool = False
    themes_dir: str = "~/.themes"
    cache_dir: str = "~/.cache/archsetup/themes"
    zsh_custom: str = "~/.oh-my-zsh/custom"
    pacman_conf: str = "/etc/pacman.conf"
    chaotic: ChaoticRepo = field(default_factory=ChaoticRepo)
    flathub_url: str = "https://flathub.org/repo/flathub.flatpakrepo"
    system_units: Tuple[str, ...] = DEFAULT_SYSTEM_UNITS
    user_services: Tuple[UserService, ...] = (
        UserService(unit="onedrive", package="onedrive-abraunegg"),
    )
    zsh_plugins: Tuple[str, ...] = DEFAULT_ZSH_PLUGINS
    step_policies: Mapping[str, StepPolicy] = field(default_factory=lambda: dict(DEFAULT_STEP_POLICIES))

    @property
    def pacman_list(self) -> str:
        return os.path.join(self.config_dir, "pacman.txt")

    @property
    def aur_list(self) -> str:
        return os.path.join(self.config_dir, "aur.txt")

    @property
    def flatpak_list(self) -> str:
        return os.path.join(self.config_dir, "flatpak.txt")

    @property
    def dotfiles_repo_file(self) -> str:
        return os.path.join(self.config_dir, "dotfiles_repo.txt")

    @property
    def themes_manifest(self) -> str:
        for name in ("themes.json", "themes.yaml", "themes.yml"):
            p = os.path.join(self.config_dir, name)
            if os.path.exists(p):
                return p
        return os.path.join(self.config_dir, "themes.json")

    def policy(self, step: str) -> StepPolicy:
        return self.step_policies.get(step) or StepPolicy()

    def expand(self, path: str) -> str:
        return os.path.expandvars(os.path.expanduser(path))


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read settings.yaml") from e

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ArchSetupError(f"Could not parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ArchSetupError(f"{path} must contain a mapping/object")
    return raw


def _str_list(value: Any, where: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ArchSetupError(f"settings: {where} must be a list of strings")
    return tuple(value)


def _from_raw(raw: Dict[str, Any], base: Settings) -> Settings:
    unknown = sorted(set(raw) - FILE_KEYS)
    if unknown:
        raise ArchSetupError(f"Unknown settings key(s): {', '.join(unknown)}")

    updates: Dict[str, Any] = {}
    for key in ("aur_helper", "themes_dir", "cache_dir", "zsh_custom", "pacman_conf", "flathub_url"):
        if key in raw:
            updates[key] = str(raw[key])
    for key in ("menu", "push"):
        if key in raw:
            updates[key] = bool(raw[key])

    if "chaotic" in raw:
        chaotic = raw["chaotic"] or {}
        if not isinstance(chaotic, dict):
            raise ArchSetupError("settings: chaotic must be a mapping")
        bad = sorted(set(chaotic) - {f.name for f in dataclasses.fields(ChaoticRepo)})
        if bad:
            raise ArchSetupError(f"settings: unknown chaotic key(s): {', '.join(bad)}")
        updates["chaotic"] = dataclasses.replace(base.chaotic, **{k: str(v) for k, v in chaotic.items()})

    if "zsh_plugins" in raw:
        updates["zsh_plugins"] = _str_list(raw["zsh_plugins"], "zsh_plugins")

    services = raw.get("services") or {}
    if not isinstance(services, dict):
        raise ArchSetupError("settings: services must be a mapping with 'system' and 'user' lists")
    if "system" in services:
        updates["system_units"] = _str_list(services["system"], "services.system")
    if "user" in services:
        entries = services["user"] or []
        if not isinstance(entries, list):
            raise ArchSetupError("settings: services.user must be a list")
        user: List[UserService] = []
        for item in entries:
            if isinstance(item, str):
                user.append(UserService(unit=item))
            elif isinstance(item, dict) and item.get("unit"):
                user.append(UserService(unit=str(item["unit"]), package=item.get("package"), command=item.get("command")))
            else:
                raise ArchSetupError(f"settings: bad user service entry {item!r}")
        updates["user_services"] = tuple(user)

    policies = raw.get("policies") or {}
    if not isinstance(policies, dict):
        raise ArchSetupError("settings: policies must be a mapping of step -> options")
    if policies:
        merged = dict(base.step_policies)
        for step, opts in policies.items():
            opts = opts or {}
            if not isinstance(opts, dict):
                raise ArchSetupError(f"settings: policies.{step} must be a mapping of options")
            merged[str(step)] = StepPolicy(
                continue_on_entry_failure=bool(opts.get("continue_on_entry_failure", False))
            )
        updates["step_policies"] = merged

    return dataclasses.replace(base, **updates)


def load_settings(
    *,
    config_dir: str = DEFAULT_CONFIG_DIR,
    settings_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> Settings:
    """Build Settings from defaults, settings.yaml, the environment and CLI overrides."""

    env = os.environ if environ is None else environ
    settings = Settings(config_dir=config_dir)

    path = Path(settings_path) if settings_path else Path(config_dir) / SETTINGS_FILE
    if path.exists():
        settings = _from_raw(_load_yaml(path), settings)
    elif settings_path:
        raise PrerequisiteError(f"Settings file not found: {settings_path}")

    env_updates: Dict[str, Any] = {}
    if env.get("AUR_HELPER"):
        env_updates["aur_helper"] = env["AUR_HELPER"]
    if "MENU" in env:
        env_updates["menu"] = env["MENU"].strip().lower() == "true"
    if env.get("ZSH_CUSTOM"):
        env_updates["zsh_custom"] = env["ZSH_CUSTOM"]

    cli = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(settings, **env_updates, **cli)
