from __future__ import annotations

import logging
from typing import Optional

from .lib.selector import Selector

logger = logging.getLogger(__name__)

QUIT = "Quit"

MENU_ITEMS = [
    ("All", "--all"),
    ("Repos", "--repos"),
    ("Packages", "--packages"),
    ("Themes", "--themes"),
    ("Dotfiles", "--dotfiles"),
    ("Zsh-plugins", "--zsh-plugins"),
    ("Services", "--services"),
    ("Update-lists", "--update-lists"),
    (QUIT, None),
]


def flag_for(label: str) -> Optional[str]:
    for item_label, flag in MENU_ITEMS:
        if item_label == label:
            return flag
    return None


def choose_flag(selector: Selector) -> Optional[str]:
    """Ask the user for one action. None means quit or cancel."""

    choice = selector.choose([label for label, _ in MENU_ITEMS], title="Select action")
    if not choice:
        logger.info("Menu cancelled")
        return None
    flag = flag_for(choice)
    if flag is None and choice != QUIT:
        logger.warning("Unknown menu choice %r", choice)
    return flag
