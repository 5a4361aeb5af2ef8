from __future__ import annotations

import logging

from archsetup.logging_utils import ConsoleFormatter


def _record(level, msg):
    return logging.LogRecord("archsetup", level, __file__, 1, msg, None, None)


def test_plain_prefixes():
    f = ConsoleFormatter(color=False)
    assert f.format(_record(logging.INFO, "Adding Chaotic-AUR repo")) == "[INFO] Adding Chaotic-AUR repo"
    assert f.format(_record(logging.WARNING, "skipped")) == "[WARN] skipped"
    assert f.format(_record(logging.ERROR, "boom")) == "Error: boom"


def test_colour_prefix():
    out = ConsoleFormatter(color=True).format(_record(logging.INFO, "hi"))
    assert out.startswith("\033[1;34m[INFO]\033[0m")
    assert out.endswith(" hi")
