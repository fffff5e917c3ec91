# logger_utils.py -  logging setup and timing helpers
#
# stdout carries the protocol while the server runs, so console output
# goes to stderr only.

import logging
import os
import sys
import time
from typing import Optional

DEFAULT_LOG_PATH = os.path.join("logs", "abbrev_completer.log")

LINE_FORMAT = "[%(asctime)s] %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColorFormatter(logging.Formatter):
    """Colours the whole line by level, for terminals."""
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "CRITICAL": "\033[91m",
        "RESET": "\033[0m",
    }

    def format(self, record):
        line = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color is None:
            return line
        return f"{color}{line}{self.COLORS['RESET']}"


def setup_logging(
    path: Optional[str] = DEFAULT_LOG_PATH,
    level: str = "INFO",
    use_color: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the `abbrev_completer` logger: a file handler at `path`
    (skipped when path is None) plus a stderr handler.
    Calling it again replaces the handlers from the previous call.
    """
    root = logging.getLogger("abbrev_completer")
    root.setLevel(level.upper())
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    if path:
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LINE_FORMAT, DATE_FORMAT))
        root.addHandler(fh)

    if use_color is None:
        use_color = sys.stderr.isatty()
    sh = logging.StreamHandler(sys.stderr)
    fmt_cls = ColorFormatter if use_color else logging.Formatter
    sh.setFormatter(fmt_cls(LINE_FORMAT, DATE_FORMAT))
    root.addHandler(sh)
    return root


def time_block(label, logger: Optional[logging.Logger] = None):
    """
    Helper for measuring execution time of a code block.
    To use:
        with time_block("keymap load"):
            load_keymap(path)
    It logs how long the block took.
    """
    return _Timer(label, logger or logging.getLogger("abbrev_completer"))


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, label, logger):
        self.label = label
        self.logger = logger
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = round(time.perf_counter() - self.start, 3)
        self.logger.info("%s done: %ss", self.label, self.elapsed)
