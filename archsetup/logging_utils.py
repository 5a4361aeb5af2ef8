from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = os.path.join(
    os.environ.get("XDG_STATE_HOME") or os.path.expanduser("~/.local/state"),
    "archsetup",
    "archsetup.log",
)

_PREFIXES = {
    logging.DEBUG: ("[DEBUG]", "\033[2m"),
    logging.INFO: ("[INFO]", "\033[1;34m"),
    logging.WARNING: ("[WARN]", "\033[1;33m"),
    logging.ERROR: ("Error:", "\033[1;31m"),
    logging.CRITICAL: ("Error:", "\033[1;31m"),
}


class ConsoleFormatter(logging.Formatter):
    """Renders ``[INFO] message`` lines, coloured when writing to a terminal."""

    def __init__(self, color: bool) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        prefix, code = _PREFIXES.get(record.levelno, _PREFIXES[logging.INFO])
        if self.color:
            prefix = f"{code}{prefix}\033[0m"
        return f"{prefix} {super().format(record)}"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Console output carries the uniform ``[INFO]``/``Error:`` prefixes; the
    log file gets timestamps and logger names. If the requested log file
    cannot be opened we fall back to ``./archsetup.log``.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers when the menu re-enters the dispatcher.
    if getattr(logger, "_archsetup_configured", False):
        return getattr(logger, "_archsetup_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        chosen_path = str(Path.cwd() / "archsetup.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ConsoleFormatter(color=sys.stderr.isatty()))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    # The file always receives the DEBUG stream (captured command output).
    logger.setLevel(min(level, logging.DEBUG))

    setattr(logger, "_archsetup_configured", True)
    setattr(logger, "_archsetup_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
