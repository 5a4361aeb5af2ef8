from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .errors import ArchSetupError, UsageError
from .lib.toolbox import Toolbox, default_toolbox
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .menu import choose_flag
from .pipeline import PipelineResult, Step, StepContext, run_pipeline
from .settings import DEFAULT_CONFIG_DIR, Settings, load_settings
from .steps import (
    ApplyDotfilesStep,
    EnableServicesStep,
    InstallPackagesStep,
    InstallThemesStep,
    InstallZshPluginsStep,
    RepoSetupStep,
    UpdateListsStep,
)

logger = logging.getLogger(__name__)

# Repos come first: packages may live in the repositories that step adds.
STEP_ORDER = ["repos", "packages", "themes", "dotfiles", "zsh_plugins", "services", "update_lists"]
ALL_STEPS = [s for s in STEP_ORDER if s != "update_lists"]

USAGE = """\
Usage: archsetup [flags]
  --all            Run every step (except --update-lists)
  --repos          Setup AUR helper, Chaotic-AUR, Flatpak
  --packages       Install packages (pacman/AUR/Flatpak)
  --themes         Sync themes
  --dotfiles       Apply dotfiles
  --zsh-plugins    Install Oh-My-Zsh plugins
  --services       Enable background services
  --update-lists   Refresh package-list files (--push to commit & push)
  --menu           Interactive menu (fzf or whiptail)
  -h,--help        Show this help

Options:
  --config-dir DIR Directory holding pacman.txt, aur.txt, flatpak.txt, themes.json
  --settings FILE  Settings file (default: <config-dir>/settings.yaml)
  --log FILE       Log file
  --dry-run        Log commands without running them
  --push           Commit and push refreshed package lists
  -v,--verbose     Debug output

Environment:
  AUR_HELPER       AUR helper binary (default: paru)
  MENU=true        Launch the menu when no flags are given
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="archsetup", add_help=False, allow_abbrev=False, usage=argparse.SUPPRESS)
    p.add_argument("-h", "--help", action="store_true")
    p.add_argument("--all", action="store_true")
    p.add_argument("--repos", action="store_true")
    p.add_argument("--packages", action="store_true")
    p.add_argument("--themes", action="store_true")
    p.add_argument("--dotfiles", action="store_true")
    p.add_argument("--zsh-plugins", dest="zsh_plugins", action="store_true")
    p.add_argument("--services", action="store_true")
    p.add_argument("--update-lists", dest="update_lists", action="store_true")
    p.add_argument("--menu", action="store_true")
    p.add_argument("--config-dir", default=DEFAULT_CONFIG_DIR)
    p.add_argument("--settings", default=None)
    p.add_argument("--log", default=DEFAULT_LOG_PATH)
    p.add_argument("--dry-run", dest="dry_run", action="store_true")
    p.add_argument("--push", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def selected_steps(args: argparse.Namespace) -> List[str]:
    """Requested step ids in execution order, whatever order the flags came in."""
    wanted = {s for s in STEP_ORDER if getattr(args, s)}
    if args.all:
        wanted.update(ALL_STEPS)
    return [s for s in STEP_ORDER if s in wanted]


def build_steps(step_ids: Sequence[str]) -> List[Step]:
    factories = {
        "repos": RepoSetupStep,
        "packages": InstallPackagesStep,
        "themes": InstallThemesStep,
        "dotfiles": ApplyDotfilesStep,
        "zsh_plugins": InstallZshPluginsStep,
        "services": EnableServicesStep,
        "update_lists": UpdateListsStep,
    }
    return [factories[s]() for s in step_ids]


def _ambient_argv(args: argparse.Namespace) -> List[str]:
    argv = ["--config-dir", args.config_dir, "--log", args.log]
    if args.settings:
        argv += ["--settings", args.settings]
    for flag in ("dry_run", "push", "verbose"):
        if getattr(args, flag):
            argv.append("--" + flag.replace("_", "-"))
    return argv


def run(*, settings: Settings, step_ids: Sequence[str], tools: Optional[Toolbox] = None) -> PipelineResult:
    """Run the selected steps against the live system (or the given toolbox)."""

    if tools is None:
        tools = default_toolbox(aur_helper=settings.aur_helper, dry_run=settings.dry_run)
    ctx = StepContext(settings=settings, tools=tools)

    if settings.dry_run:
        logger.info("Dry run: commands are logged, not executed")

    result = run_pipeline(ctx=ctx, steps=build_steps(step_ids))
    for failure in result.failures:
        logger.warning("Not completed: %s", failure)
    logger.info("Done: %s", ", ".join(result.ran_steps))
    return result


def main(argv: Optional[list[str]] = None, *, tools: Optional[Toolbox] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        args = _build_parser().parse_args(argv)
    except UsageError as e:
        sys.stderr.write(USAGE)
        sys.stderr.write(f"Error: {e}\n")
        return 1

    if args.help:
        sys.stdout.write(USAGE)
        return 0

    if args.menu and selected_steps(args):
        sys.stderr.write(USAGE)
        sys.stderr.write("Error: --menu cannot be combined with step flags\n")
        return 1

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings(
            config_dir=args.config_dir,
            settings_path=args.settings,
            dry_run=True if args.dry_run else None,
            push=True if args.push else None,
        )

        step_ids = selected_steps(args)
        if args.menu or (not step_ids and settings.menu):
            if tools is None:
                tools = default_toolbox(aur_helper=settings.aur_helper, dry_run=settings.dry_run)
            flag = choose_flag(tools.selector)
            if flag is None:
                return 0
            return main([flag, *_ambient_argv(args)], tools=tools)

        if not step_ids:
            sys.stdout.write(USAGE)
            return 0

        run(settings=settings, step_ids=step_ids, tools=tools)
    except ArchSetupError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
